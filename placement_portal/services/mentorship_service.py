"""
Mentorship Scheduler

Alumni publish time slots with a seat capacity; students book seats.

Booking order of checks (first failure wins, nothing is written on failure):
1. slot exists                                   -> 404
2. slot is AVAILABLE and has a free seat         -> 400 "Slot is no longer available"
3. student has not booked this slot already      -> 409
4. insert CONFIRMED booking, increment, flip to FULL at capacity

Steps 1-4 run inside SlotRepository.reserve_seat so they are atomic per slot.
"""

from datetime import datetime
from typing import Any, List, Optional, Union

from loguru import logger

from placement_portal.core.errors import PlacementError, ValidationError
from placement_portal.db.repositories import Store
from placement_portal.models.entities import MentorshipBooking, MentorshipSlot, SlotStatus
from placement_portal.utils.timestamp import as_utc, utcnow

DEFAULT_ALUMNI_NAME = "Alumni"
DEFAULT_STUDENT_NAME = "Student"


def _parse_time(value: Union[datetime, str]) -> datetime:
    if isinstance(value, datetime):
        return as_utc(value)
    try:
        return as_utc(datetime.fromisoformat(str(value).replace("Z", "+00:00")))
    except ValueError:
        raise ValidationError(f"Invalid slot time: {value}")


def _seat_count(value: Any) -> int:
    """Capacity falls back to 1 when missing, non-numeric or below 1."""
    try:
        seats = int(value)
    except (TypeError, ValueError):
        return 1
    return seats if seats >= 1 else 1


class MentorshipService:

    def __init__(self, store: Store):
        self.store = store

    def create_slot(
        self,
        alumni_id: int,
        slot_start: Optional[Union[datetime, str]],
        slot_end: Optional[Union[datetime, str]],
        max_students: Any = None,
        description: Optional[str] = None,
    ) -> MentorshipSlot:
        if not slot_start or not slot_end:
            raise ValidationError("Slot start and end times are required")

        start, end = _parse_time(slot_start), _parse_time(slot_end)
        if end <= start:
            raise ValidationError("Slot end time must be after start time")

        slot = self.store.slots.add(MentorshipSlot(
            alumni_user_id=alumni_id,
            slot_start=start,
            slot_end=end,
            max_students=_seat_count(max_students),
            current_bookings=0,
            description=description or "",
            created_at=utcnow(),
            status=SlotStatus.available,
        ))
        logger.info(f"Alumni {alumni_id} opened mentorship slot {slot.id} ({slot.max_students} seat(s))")
        return slot

    def available_slots_for(self, student_id: int) -> List[dict]:
        slots = []
        for slot in self.store.slots.list_available():
            alumnus = self.store.users.get(slot.alumni_user_id)
            slots.append({
                "slot": slot,
                "alumni_name": alumnus.name if alumnus and alumnus.name else DEFAULT_ALUMNI_NAME,
            })
        return slots

    def book(self, student_id: int, slot_id: int) -> MentorshipBooking:
        try:
            booking = self.store.slots.reserve_seat(slot_id, student_id, utcnow())
        except PlacementError as e:
            logger.warning(f"Booking of slot {slot_id} by student {student_id} rejected: {e.message}")
            raise
        logger.info(f"Student {student_id} booked mentorship slot {slot_id} (booking {booking.id})")
        return booking

    def my_slots(self, alumni_id: int) -> List[dict]:
        """The alumnus' slots with who booked each one."""
        result = []
        for slot in self.store.slots.list_for_alumni(alumni_id):
            bookings = []
            for booking in self.store.slots.list_bookings(slot.id):
                student = self.store.users.get(booking.student_id)
                bookings.append({
                    "booking": booking,
                    "student_name": student.name if student and student.name else DEFAULT_STUDENT_NAME,
                    "student_email": student.email if student else "",
                })
            result.append({"slot": slot, "bookings": bookings})
        return result
