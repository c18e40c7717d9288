"""
Dashboard Routes - one greeting per role, used to prove role gating.

GET /tpo/dashboard
GET /student/dashboard
GET /alumni/dashboard
"""

from fastapi import APIRouter, Depends

from placement_portal.core.auth import get_current_alumni, get_current_student, get_current_tpo
from placement_portal.models.entities import Role, User
from placement_portal.schemas.schemas import RoleMessageResponse

router = APIRouter(tags=["Dashboards"])


@router.get("/tpo/dashboard", response_model=RoleMessageResponse)
async def tpo_dashboard(user: User = Depends(get_current_tpo)):
    return RoleMessageResponse(role=Role.tpo, message="Welcome to the TPO Admin Dashboard.")


@router.get("/student/dashboard", response_model=RoleMessageResponse)
async def student_dashboard(user: User = Depends(get_current_student)):
    return RoleMessageResponse(role=Role.student, message="Welcome to the Student Dashboard.")


@router.get("/alumni/dashboard", response_model=RoleMessageResponse)
async def alumni_dashboard(user: User = Depends(get_current_alumni)):
    return RoleMessageResponse(role=Role.alumni, message="Welcome to the Alumni Dashboard.")
