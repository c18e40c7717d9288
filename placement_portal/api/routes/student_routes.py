"""
Student Routes

GET /students/profile - Get own profile (created empty on first access)
PUT /students/profile - Replace profile
GET /students/eligible-drives - Active drives the student qualifies for
POST /students/drives/{drive_id}/apply - Apply to a drive
GET /students/applications - Get my applications
"""

from fastapi import APIRouter, Depends

from placement_portal.core.auth import get_current_student
from placement_portal.db import get_store
from placement_portal.db.repositories import Store
from placement_portal.models.entities import Application, StudentProfile, User
from placement_portal.schemas.schemas import (
    ApplicationsResponse, ApplicationWithDrive, DriveSummary, EligibleDrive,
    EligibleDrivesResponse, ProfileUpdateRequest
)
from placement_portal.services.application_service import ApplicationService
from placement_portal.services.eligibility_service import EligibilityService
from placement_portal.services.profile_service import ProfileService

router = APIRouter(prefix="/students", tags=["Students"])


# ============ PROFILE ============

@router.get("/profile", response_model=StudentProfile)
async def get_profile(student: User = Depends(get_current_student), store: Store = Depends(get_store)):
    """Get current student's profile."""
    return ProfileService(store).get_or_create(student.id)


@router.put("/profile", response_model=StudentProfile)
async def update_profile(
    data: ProfileUpdateRequest,
    student: User = Depends(get_current_student),
    store: Store = Depends(get_store),
):
    """Replace the profile. Fields left out are reset to their empty value."""
    projects = data.projects
    if isinstance(projects, list):
        projects = "\n".join(projects)

    return ProfileService(store).update_profile(
        student.id,
        branch=data.branch,
        cgpa=data.cgpa,
        current_backlogs=data.current_backlogs,
        skills=data.skills,
        experience=data.experience,
        projects=projects,
        education=data.education,
        personal_info=data.personal_info,
    )


# ============ DRIVES & APPLICATIONS ============

@router.get("/eligible-drives", response_model=EligibleDrivesResponse, response_model_exclude_unset=True)
async def eligible_drives(student: User = Depends(get_current_student), store: Store = Depends(get_store)):
    result = EligibilityService(store).eligible_drives_for(student.id)
    drives = [
        EligibleDrive(
            **entry["drive"].model_dump(),
            has_applied=entry["has_applied"],
            application_status=entry["application_status"],
        )
        for entry in result["drives"]
    ]
    if "message" in result:
        return EligibleDrivesResponse(drives=drives, message=result["message"])
    return EligibleDrivesResponse(drives=drives)


@router.post("/drives/{drive_id}/apply", response_model=Application, status_code=201)
async def apply_to_drive(drive_id: int, student: User = Depends(get_current_student), store: Store = Depends(get_store)):
    return ApplicationService(store).apply(student.id, drive_id)


@router.get("/applications", response_model=ApplicationsResponse)
async def my_applications(student: User = Depends(get_current_student), store: Store = Depends(get_store)):
    """Get all my applications, each with a summary of its drive."""
    result = ApplicationService(store).applications_for(student.id)

    applications = []
    for entry in result["applications"]:
        drive = entry["drive"]
        applications.append(ApplicationWithDrive(
            **entry["application"].model_dump(),
            drive=DriveSummary(**drive.model_dump()) if drive else None,
        ))
    return ApplicationsResponse(applications=applications)
