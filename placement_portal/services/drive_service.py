"""
Drive Registry - placement drives created by the TPO.

Drives are immutable once created except for status. The ACTIVE <-> CLOSED
transition is reserved: the registry supports it, no endpoint exposes it.
"""

from typing import Any, List, Optional

from loguru import logger

from placement_portal.core.errors import NotFoundError, ValidationError
from placement_portal.db.repositories import Store
from placement_portal.models.entities import Drive, DriveStatus, NotificationKind
from placement_portal.services.notification_service import NotificationService
from placement_portal.utils.timestamp import utcnow

DRIVE_NOT_FOUND = "Drive not found"


def _as_float(value: Any, field: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")


def _as_int(value: Any, field: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a whole number")


def _parse_status(value) -> DriveStatus:
    try:
        return DriveStatus(value)
    except ValueError:
        raise ValidationError("Status must be ACTIVE or CLOSED")


class DriveService:

    def __init__(self, store: Store):
        self.store = store

    def create_drive(
        self,
        tpo_id: int,
        company_name: Optional[str],
        min_cgpa: Any,
        max_backlogs: Any = None,
        role_title: Optional[str] = None,
        description: Optional[str] = None,
        allowed_branches: Optional[List[str]] = None,
        location: Optional[str] = None,
        ctc: Optional[str] = None,
        application_deadline: Optional[str] = None,
    ) -> Drive:
        """
        Create an ACTIVE drive.

        Raises:
            ValidationError: missing company name / minimum CGPA, minimum CGPA
                outside [0, 10], or negative max backlogs
        """
        if not company_name or not str(company_name).strip() or min_cgpa is None:
            raise ValidationError("Company name and minimum CGPA are required")

        min_cgpa = _as_float(min_cgpa, "Minimum CGPA")
        if not 0 <= min_cgpa <= 10:
            raise ValidationError("Minimum CGPA must be between 0 and 10")

        max_backlogs = 0 if max_backlogs in (None, "") else _as_int(max_backlogs, "Maximum backlogs")
        if max_backlogs < 0:
            raise ValidationError("Maximum backlogs cannot be negative")

        branches = [str(b).strip() for b in (allowed_branches or []) if str(b).strip()]

        drive = self.store.drives.add(Drive(
            company_name=str(company_name).strip(),
            role_title=role_title or "",
            description=description or "",
            min_cgpa=min_cgpa,
            max_backlogs=max_backlogs,
            allowed_branches=branches,
            location=location or "",
            ctc=ctc or "",
            application_deadline=application_deadline or None,
            created_by=tpo_id,
            created_at=utcnow(),
            status=DriveStatus.active,
        ))
        logger.info(f"Drive {drive.id} created by TPO {tpo_id}: {drive.company_name} (min CGPA {drive.min_cgpa})")
        return drive

    def get_drive(self, drive_id: int) -> Drive:
        drive = self.store.drives.get(drive_id)
        if drive is None:
            raise NotFoundError(DRIVE_NOT_FOUND)
        return drive

    def list_drives(self) -> List[Drive]:
        return self.store.drives.list_all()

    def set_status(self, drive_id: int, status: DriveStatus) -> Drive:
        drive = self.store.drives.set_status(drive_id, _parse_status(status))
        if drive is None:
            raise NotFoundError(DRIVE_NOT_FOUND)
        logger.info(f"Drive {drive_id} status set to {drive.status.value}")
        return drive

    def notify_eligible(self, tpo_id: int, drive_id: int, student_ids: Any) -> dict:
        """
        Record a drive alert for the given students.

        The TPO picks the recipients from the eligible-students list; nothing
        is re-validated or delivered here.
        """
        drive = self.get_drive(drive_id)

        if not isinstance(student_ids, list):
            raise ValidationError("List of student IDs required")

        NotificationService(self.store).record(
            NotificationKind.drive_alert,
            recipients=student_ids,
            subject=f"New drive: {drive.company_name}",
            payload={"driveId": drive.id, "companyName": drive.company_name, "roleTitle": drive.role_title},
            created_by=tpo_id,
        )

        return {
            "message": (
                f"Successfully notified {len(student_ids)} eligible students "
                f"about the {drive.company_name} drive."
            ),
            "notified_count": len(student_ids),
        }
