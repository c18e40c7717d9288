"""
Seed data.

FAQ_CORPUS is the static PlacementBot knowledge base (read-only at runtime).
seed_demo_students() fills an empty store with dummy students so the
"eligible students" and "notify" screens have something to show.
"""

import random
from typing import Optional

from loguru import logger

from placement_portal.models.entities import FAQ, Role, StudentProfile, User
from placement_portal.utils.timestamp import utcnow


FAQ_CORPUS = [
    FAQ(
        id=1,
        question="What is the minimum CGPA requirement?",
        answer=(
            "The minimum CGPA requirement varies by company. Most companies require a minimum "
            "of 7.0 CGPA, but some may accept lower. Check individual drive details for "
            "specific requirements."
        ),
        tags=["cgpa", "requirement", "eligibility"],
        category="eligibility",
    ),
    FAQ(
        id=2,
        question="Can I apply with backlogs?",
        answer=(
            "Some companies allow applications with backlogs, typically up to 2-3 active "
            "backlogs. Check the drive details for the maximum allowed backlogs."
        ),
        tags=["backlogs", "eligibility"],
        category="eligibility",
    ),
    FAQ(
        id=3,
        question="When is the interview scheduled?",
        answer=(
            "Interview dates are typically communicated via email/SMS after you apply. Check "
            "your Application Tracker for the latest status and interview schedule."
        ),
        tags=["interview", "schedule", "date"],
        category="application",
    ),
    FAQ(
        id=4,
        question="Where will the interview be conducted?",
        answer=(
            "Interview venues are usually communicated along with the interview schedule. "
            "Most interviews are conducted on campus, but some companies may conduct online "
            "interviews. Check your application details for venue information."
        ),
        tags=["venue", "location", "interview"],
        category="application",
    ),
    FAQ(
        id=5,
        question="How do I check my application status?",
        answer=(
            "You can check your application status in the Application Tracker section of your "
            "dashboard. It will show whether your application is Applied, Interview "
            "Scheduled, Selected, or Rejected."
        ),
        tags=["status", "application", "tracker"],
        category="application",
    ),
]


def seed_demo_students(store, count: int, rng: Optional[random.Random] = None) -> int:
    """
    Create `count` demo students with profiles.

    Every third student is in Electronics, the rest in Computer Science;
    CGPA is uniform in [7.5, 10.0]; every tenth student has one backlog.
    Demo accounts cannot log in (their password hash is not a bcrypt hash).

    Returns:
        Number of students created
    """
    rng = rng or random.Random()
    now = utcnow()

    for i in range(1, count + 1):
        user = store.users.add(User(
            name=f"Test Student {i}",
            email=f"student{i}@example.com",
            phone="9876543210",
            role=Role.student,
            password_hash="dummy",
        ))
        store.profiles.save(StudentProfile(
            user_id=user.id,
            branch="Electronics" if i % 3 == 0 else "Computer Science",
            cgpa=round(7.5 + rng.random() * 2.5, 2),
            current_backlogs=1 if i % 10 == 0 else 0,
            skills=["JavaScript", "React"],
            experience="Academic projects",
            projects="Built a demo application",
            created_at=now,
            updated_at=now,
        ))

    logger.info(f"Seeded {count} demo students")
    return count
