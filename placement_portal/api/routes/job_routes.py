"""
Job Board Routes

GET /jobs - Active alumni job referrals, visible to every signed-in role
"""

from fastapi import APIRouter, Depends

from placement_portal.core.auth import get_current_user
from placement_portal.db import get_store
from placement_portal.db.repositories import Store
from placement_portal.models.entities import User
from placement_portal.schemas.schemas import JobBoardResponse, JobWithAlumni
from placement_portal.services.referral_service import ReferralService

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.get("", response_model=JobBoardResponse)
async def list_jobs(user: User = Depends(get_current_user), store: Store = Depends(get_store)):
    """No eligibility gating; every ACTIVE referral is listed."""
    jobs = [
        JobWithAlumni(**entry["job"].model_dump(), alumni_name=entry["alumni_name"])
        for entry in ReferralService(store).list_active_jobs()
    ]
    return JobBoardResponse(jobs=jobs)
