"""
TPO Routes

POST /tpo/drives - Create a placement drive
GET /tpo/drives - List all drives
GET /tpo/drives/{drive_id}/eligible-students - Students who qualify for a drive
POST /tpo/drives/{drive_id}/notify - Record a drive alert for selected students
PUT /tpo/applications/{application_id}/status - Move an application along
"""

from typing import List

from fastapi import APIRouter, Depends

from placement_portal.core.auth import get_current_tpo
from placement_portal.db import get_store
from placement_portal.db.repositories import Store
from placement_portal.models.entities import Application, Drive, User
from placement_portal.schemas.schemas import (
    ApplicationStatusUpdate, DriveCreateRequest, EligibleStudentsResponse,
    NotifyRequest, NotifyResponse
)
from placement_portal.services.application_service import ApplicationService
from placement_portal.services.drive_service import DriveService
from placement_portal.services.eligibility_service import EligibilityService

router = APIRouter(prefix="/tpo", tags=["TPO"])


# ============ DRIVES ============

@router.post("/drives", response_model=Drive, status_code=201)
async def create_drive(data: DriveCreateRequest, tpo: User = Depends(get_current_tpo), store: Store = Depends(get_store)):
    return DriveService(store).create_drive(
        tpo.id,
        company_name=data.company_name,
        min_cgpa=data.min_cgpa,
        max_backlogs=data.max_backlogs,
        role_title=data.role_title,
        description=data.description,
        allowed_branches=data.allowed_branches,
        location=data.location,
        ctc=data.ctc,
        application_deadline=data.application_deadline,
    )


@router.get("/drives", response_model=List[Drive])
async def list_drives(tpo: User = Depends(get_current_tpo), store: Store = Depends(get_store)):
    return DriveService(store).list_drives()


@router.get("/drives/{drive_id}/eligible-students", response_model=EligibleStudentsResponse)
async def eligible_students(drive_id: int, tpo: User = Depends(get_current_tpo), store: Store = Depends(get_store)):
    return EligibleStudentsResponse(**EligibilityService(store).eligible_students_for(drive_id))


@router.post("/drives/{drive_id}/notify", response_model=NotifyResponse)
async def notify_students(
    drive_id: int,
    data: NotifyRequest,
    tpo: User = Depends(get_current_tpo),
    store: Store = Depends(get_store),
):
    """Record a notification intent. Nothing is actually delivered."""
    return NotifyResponse(**DriveService(store).notify_eligible(tpo.id, drive_id, data.student_ids))


# ============ APPLICATIONS ============

@router.put("/applications/{application_id}/status", response_model=Application)
async def update_application_status(
    application_id: int,
    data: ApplicationStatusUpdate,
    tpo: User = Depends(get_current_tpo),
    store: Store = Depends(get_store),
):
    return ApplicationService(store).set_status(application_id, data.status)
