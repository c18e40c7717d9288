"""
Mentorship Routes (student side)

GET /mentorship/available-slots - Slots with a free seat
POST /mentorship/slots/{slot_id}/book - Book one seat
"""

from fastapi import APIRouter, Depends

from placement_portal.core.auth import get_current_student
from placement_portal.db import get_store
from placement_portal.db.repositories import Store
from placement_portal.models.entities import MentorshipBooking, User
from placement_portal.schemas.schemas import AvailableSlotsResponse, SlotWithAlumni
from placement_portal.services.mentorship_service import MentorshipService

router = APIRouter(prefix="/mentorship", tags=["Mentorship"])


@router.get("/available-slots", response_model=AvailableSlotsResponse)
async def available_slots(student: User = Depends(get_current_student), store: Store = Depends(get_store)):
    slots = [
        SlotWithAlumni(**entry["slot"].model_dump(), alumni_name=entry["alumni_name"])
        for entry in MentorshipService(store).available_slots_for(student.id)
    ]
    return AvailableSlotsResponse(slots=slots)


@router.post("/slots/{slot_id}/book", response_model=MentorshipBooking, status_code=201)
async def book_slot(slot_id: int, student: User = Depends(get_current_student), store: Store = Depends(get_store)):
    return MentorshipService(store).book(student.id, slot_id)
