"""
Alumni Routes

POST /alumni/jobs - Post a job referral
GET /alumni/jobs - My job referrals (any status)
PATCH /alumni/jobs/{job_id} - Open / close one of my referrals
POST /alumni/mentorship-slots - Publish a mentorship slot
GET /alumni/mentorship-slots - My slots with their bookings
"""

from fastapi import APIRouter, Depends

from placement_portal.core.auth import get_current_alumni
from placement_portal.db import get_store
from placement_portal.db.repositories import Store
from placement_portal.models.entities import AlumniJob, MentorshipSlot, User
from placement_portal.schemas.schemas import (
    BookingWithStudent, JobCreateRequest, JobStatusUpdate, MyJobsResponse,
    MySlotsResponse, SlotCreateRequest, SlotWithBookings
)
from placement_portal.services.mentorship_service import MentorshipService
from placement_portal.services.referral_service import ReferralService

router = APIRouter(prefix="/alumni", tags=["Alumni"])


# ============ JOB REFERRALS ============

@router.post("/jobs", response_model=AlumniJob, status_code=201)
async def post_job(data: JobCreateRequest, alumni: User = Depends(get_current_alumni), store: Store = Depends(get_store)):
    return ReferralService(store).post_job(
        alumni.id,
        company_name=data.company_name,
        job_title=data.job_title,
        description=data.description,
        location=data.location,
        ctc=data.ctc,
        apply_link=data.apply_link,
        expiry_date=data.expiry_date,
    )


@router.get("/jobs", response_model=MyJobsResponse)
async def my_jobs(alumni: User = Depends(get_current_alumni), store: Store = Depends(get_store)):
    return MyJobsResponse(jobs=ReferralService(store).my_jobs(alumni.id))


@router.patch("/jobs/{job_id}", response_model=AlumniJob)
async def update_job_status(
    job_id: int,
    data: JobStatusUpdate,
    alumni: User = Depends(get_current_alumni),
    store: Store = Depends(get_store),
):
    return ReferralService(store).set_job_status(alumni.id, job_id, data.status)


# ============ MENTORSHIP ============

@router.post("/mentorship-slots", response_model=MentorshipSlot, status_code=201)
async def create_slot(data: SlotCreateRequest, alumni: User = Depends(get_current_alumni), store: Store = Depends(get_store)):
    return MentorshipService(store).create_slot(
        alumni.id,
        slot_start=data.slot_start,
        slot_end=data.slot_end,
        max_students=data.max_students,
        description=data.description,
    )


@router.get("/mentorship-slots", response_model=MySlotsResponse)
async def my_slots(alumni: User = Depends(get_current_alumni), store: Store = Depends(get_store)):
    slots = []
    for entry in MentorshipService(store).my_slots(alumni.id):
        bookings = [
            BookingWithStudent(
                **b["booking"].model_dump(),
                student_name=b["student_name"],
                student_email=b["student_email"],
            )
            for b in entry["bookings"]
        ]
        slots.append(SlotWithBookings(**entry["slot"].model_dump(), bookings=bookings))
    return MySlotsResponse(slots=slots)
