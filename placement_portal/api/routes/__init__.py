"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from placement_portal.api.routes.auth_routes import router as auth_router
from placement_portal.api.routes.dashboard_routes import router as dashboard_router
from placement_portal.api.routes.student_routes import router as student_router
from placement_portal.api.routes.tpo_routes import router as tpo_router
from placement_portal.api.routes.alumni_routes import router as alumni_router
from placement_portal.api.routes.job_routes import router as job_router
from placement_portal.api.routes.mentorship_routes import router as mentorship_router
from placement_portal.api.routes.bot_routes import router as bot_router
from placement_portal.api.routes.analytics_routes import router as analytics_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(dashboard_router)
api_router.include_router(student_router)
api_router.include_router(tpo_router)
api_router.include_router(alumni_router)
api_router.include_router(job_router)
api_router.include_router(mentorship_router)
api_router.include_router(bot_router)
api_router.include_router(analytics_router)
