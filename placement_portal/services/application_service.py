"""
Application Lifecycle - a student applying to a drive, and the TPO moving it along.

Applying is not gated on eligibility or drive status; the student-facing
list only shows eligible ACTIVE drives, and that is the gate.
"""

from typing import Optional

from loguru import logger

from placement_portal.core.errors import ConflictError, NotFoundError, ValidationError
from placement_portal.db.repositories import Store
from placement_portal.models.entities import Application, ApplicationStatus
from placement_portal.services.drive_service import DriveService
from placement_portal.utils.timestamp import utcnow


def _parse_status(value) -> ApplicationStatus:
    try:
        return ApplicationStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in ApplicationStatus)
        raise ValidationError(f"Status must be one of: {allowed}")


class ApplicationService:

    def __init__(self, store: Store):
        self.store = store

    def apply(self, student_id: int, drive_id: int) -> Application:
        """
        Raises:
            NotFoundError: unknown drive
            ConflictError: the student already applied to this drive
        """
        DriveService(self.store).get_drive(drive_id)

        now = utcnow()
        try:
            application = self.store.applications.add(Application(
                drive_id=drive_id,
                student_id=student_id,
                status=ApplicationStatus.applied,
                applied_at=now,
                updated_at=now,
            ))
        except ConflictError:
            logger.warning(f"Student {student_id} already applied to drive {drive_id}")
            raise
        logger.info(f"Student {student_id} applied to drive {drive_id} (application {application.id})")
        return application

    def applications_for(self, student_id: int) -> dict:
        applications = []
        for application in self.store.applications.list_for_student(student_id):
            drive = self.store.drives.get(application.drive_id)
            applications.append({"application": application, "drive": drive})
        return {"applications": applications}

    def set_status(self, application_id: int, status: Optional[str]) -> Application:
        if status is None:
            raise ValidationError("Status is required")
        new_status = _parse_status(status)

        application = self.store.applications.set_status(application_id, new_status, utcnow())
        if application is None:
            raise NotFoundError("Application not found")

        logger.info(f"Application {application_id} moved to {new_status.value}")
        return application
