"""
Analytics Routes

GET /analytics/stats - Placement rate and branch breakdown (any role)
GET /analytics/skill-gap - Skills common among placed students that I lack
"""

from fastapi import APIRouter, Depends

from placement_portal.core.auth import get_current_student, get_current_user
from placement_portal.db import get_store
from placement_portal.db.repositories import Store
from placement_portal.models.entities import User
from placement_portal.schemas.schemas import SkillGapResponse, StatsResponse
from placement_portal.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/stats", response_model=StatsResponse)
async def stats(user: User = Depends(get_current_user), store: Store = Depends(get_store)):
    return StatsResponse(**AnalyticsService(store).stats())


@router.get("/skill-gap", response_model=SkillGapResponse)
async def skill_gap(student: User = Depends(get_current_student), store: Store = Depends(get_store)):
    return SkillGapResponse(recommendations=AnalyticsService(store).skill_gap(student.id))
