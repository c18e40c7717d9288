"""
Eligibility Engine

A student is eligible for a drive when:
    cgpa >= drive.min_cgpa
    AND current_backlogs <= drive.max_backlogs
    AND (drive allows every branch OR the student's branch is listed)

Branch membership is an exact string match.

Two read-only listings are built on the predicate:
- eligible_drives_for(student)   - what a student can see / apply to
- eligible_students_for(drive)   - who the TPO can notify

Both are O(drives x students) scans, fine at campus scale.
"""

from typing import List

from placement_portal.db.repositories import Store
from placement_portal.models.entities import Drive, DriveStatus, StudentProfile
from placement_portal.services.drive_service import DriveService

INCOMPLETE_PROFILE_MESSAGE = "Please complete your profile first"


def is_eligible(profile: StudentProfile, drive: Drive) -> bool:
    if profile.cgpa < drive.min_cgpa:
        return False
    if profile.current_backlogs > drive.max_backlogs:
        return False
    if drive.allowed_branches and profile.branch not in drive.allowed_branches:
        return False
    return True


class EligibilityService:

    def __init__(self, store: Store):
        self.store = store

    def eligible_drives_for(self, student_id: int) -> dict:
        """
        ACTIVE drives the student qualifies for, with their application state.

        Returns:
            {"drives": [...]} where each entry holds the drive plus
            "has_applied" and "application_status" (None when not applied).
            With no profile or an empty branch:
            {"drives": [], "message": "Please complete your profile first"}
        """
        profile = self.store.profiles.get(student_id)
        if profile is None or not profile.branch:
            return {"drives": [], "message": INCOMPLETE_PROFILE_MESSAGE}

        applications = {a.drive_id: a for a in self.store.applications.list_for_student(student_id)}

        drives = []
        for drive in self.store.drives.list_all():
            if drive.status != DriveStatus.active or not is_eligible(profile, drive):
                continue
            application = applications.get(drive.id)
            drives.append({
                "drive": drive,
                "has_applied": application is not None,
                "application_status": application.status if application else None,
            })

        return {"drives": drives}

    def eligible_students_for(self, drive_id: int) -> dict:
        """
        Students whose profile satisfies the drive's criteria.

        Raises:
            NotFoundError: unknown drive
        """
        drive = DriveService(self.store).get_drive(drive_id)

        eligible: List[dict] = []
        for profile in self.store.profiles.list_all():
            if not is_eligible(profile, drive):
                continue
            user = self.store.users.get(profile.user_id)
            eligible.append({
                "user_id": profile.user_id,
                "name": user.name if user else "",
                "email": user.email if user else "",
                "branch": profile.branch,
                "cgpa": profile.cgpa,
                "current_backlogs": profile.current_backlogs,
            })

        return {
            "drive_id": drive.id,
            "company_name": drive.company_name,
            "eligible_count": len(eligible),
            "eligible_students": eligible,
        }
