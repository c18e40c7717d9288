"""
Profile Service - one eligibility profile per student.

Profiles are created lazily: the first read (or write) by a student
persists an empty profile, so every later operation can rely on it.
"""

from typing import List, Optional

from loguru import logger

from placement_portal.core.errors import ValidationError
from placement_portal.db.repositories import Store
from placement_portal.models.entities import EducationEntry, PersonalInfo, StudentProfile
from placement_portal.utils.timestamp import utcnow


def normalize_skills(skills: Optional[List[str]]) -> List[str]:
    """Strip blanks and drop case-insensitive duplicates, keeping first spelling."""
    seen = set()
    result = []
    for skill in skills or []:
        name = str(skill).strip()
        if name and name.lower() not in seen:
            seen.add(name.lower())
            result.append(name)
    return result


class ProfileService:

    def __init__(self, store: Store):
        self.store = store

    def get_or_create(self, student_id: int) -> StudentProfile:
        profile = self.store.profiles.get(student_id)
        if profile is not None:
            return profile

        now = utcnow()
        profile = self.store.profiles.save(
            StudentProfile(user_id=student_id, created_at=now, updated_at=now)
        )
        logger.info(f"Created empty profile for student {student_id}")
        return profile

    def update_profile(
        self,
        student_id: int,
        branch: Optional[str] = None,
        cgpa: Optional[float] = None,
        current_backlogs: Optional[int] = None,
        skills: Optional[List[str]] = None,
        experience: Optional[str] = None,
        projects: Optional[str] = None,
        education: Optional[List[EducationEntry]] = None,
        personal_info: Optional[PersonalInfo] = None,
    ) -> StudentProfile:
        """
        Replace the student's editable profile fields.

        Missing values fall back to empty defaults (this is a full replacement,
        not a patch). createdAt of an existing profile is preserved.

        Raises:
            ValidationError: cgpa outside [0, 10] or negative backlogs
        """
        cgpa = 0.0 if cgpa is None else float(cgpa)
        current_backlogs = 0 if current_backlogs is None else int(current_backlogs)

        if not 0 <= cgpa <= 10:
            raise ValidationError("CGPA must be between 0 and 10")
        if current_backlogs < 0:
            raise ValidationError("Current backlogs cannot be negative")

        existing = self.store.profiles.get(student_id)
        now = utcnow()

        profile = StudentProfile(
            user_id=student_id,
            branch=(branch or "").strip(),
            cgpa=cgpa,
            current_backlogs=current_backlogs,
            skills=normalize_skills(skills),
            experience=experience or "",
            projects=projects or "",
            education=education or [],
            personal_info=personal_info or PersonalInfo(),
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )
        saved = self.store.profiles.save(profile)
        logger.info(f"Profile updated for student {student_id} (branch={saved.branch!r}, cgpa={saved.cgpa})")
        return saved
