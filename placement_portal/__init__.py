"""
Placement Portal
Campus placement management for placement officers, students and alumni.

Architecture:
- services/: eligibility, applications, mentorship, referrals, bot, analytics
- db/: repository interfaces with an in-process and a SQLAlchemy store
- api/: FastAPI routers, one module per role or area
"""

__version__ = "1.0.0"
