"""Unit tests for MentorshipService, including seat-capacity races."""

import threading
from datetime import datetime, timedelta, timezone

import pytest

from placement_portal.core.errors import ConflictError, NotFoundError, ValidationError
from placement_portal.models.entities import BookingStatus, Role, SlotStatus
from placement_portal.services.mentorship_service import MentorshipService

START = datetime(2026, 11, 2, 10, 0, tzinfo=timezone.utc)


def _slot(store, alumni_id, seats=1):
    return MentorshipService(store).create_slot(
        alumni_id, START, START + timedelta(hours=1), max_students=seats, description="Resume review"
    )


@pytest.mark.unit
def test_create_slot_defaults(store, make_user):
    alumnus = make_user(store, Role.alumni, "Karan")

    slot = _slot(store, alumnus.id, seats=None)

    assert slot.max_students == 1
    assert slot.current_bookings == 0
    assert slot.status == SlotStatus.available
    assert slot.slot_start == START


@pytest.mark.unit
@pytest.mark.parametrize("seats", [0, -3, "lots", None])
def test_create_slot_bad_capacity_falls_back_to_one(store, make_user, seats):
    alumnus = make_user(store, Role.alumni)
    assert _slot(store, alumnus.id, seats=seats).max_students == 1


@pytest.mark.unit
def test_create_slot_accepts_iso_strings(store, make_user):
    alumnus = make_user(store, Role.alumni)
    slot = MentorshipService(store).create_slot(alumnus.id, "2026-11-02T10:00:00Z", "2026-11-02T11:00:00Z", 2)
    assert slot.slot_start == START
    assert slot.max_students == 2


@pytest.mark.unit
def test_create_slot_validation(store, make_user):
    alumnus = make_user(store, Role.alumni)
    service = MentorshipService(store)

    with pytest.raises(ValidationError):
        service.create_slot(alumnus.id, None, START)
    with pytest.raises(ValidationError):
        service.create_slot(alumnus.id, START, START)
    with pytest.raises(ValidationError):
        service.create_slot(alumnus.id, START, START - timedelta(minutes=5))
    with pytest.raises(ValidationError):
        service.create_slot(alumnus.id, "next tuesday", "later")


@pytest.mark.unit
def test_single_seat_slot_fills_up(store, make_user):
    alumnus = make_user(store, Role.alumni)
    first = make_user(store, Role.student, "A")
    second = make_user(store, Role.student, "B")
    slot = _slot(store, alumnus.id, seats=1)
    service = MentorshipService(store)

    booking = service.book(first.id, slot.id)
    assert booking.status == BookingStatus.confirmed

    full = store.slots.get(slot.id)
    assert full.status == SlotStatus.full
    assert full.current_bookings == 1

    with pytest.raises(ValidationError) as exc:
        service.book(second.id, slot.id)
    assert exc.value.message == "Slot is no longer available"
    assert store.slots.get(slot.id).current_bookings == 1


@pytest.mark.unit
def test_double_booking_conflicts_without_side_effects(store, make_user):
    alumnus = make_user(store, Role.alumni)
    student = make_user(store, Role.student)
    slot = _slot(store, alumnus.id, seats=3)
    service = MentorshipService(store)
    service.book(student.id, slot.id)

    with pytest.raises(ConflictError):
        service.book(student.id, slot.id)

    after = store.slots.get(slot.id)
    assert after.current_bookings == 1
    assert after.status == SlotStatus.available
    assert len(store.slots.list_bookings(slot.id)) == 1


@pytest.mark.unit
def test_book_unknown_slot(store, make_user):
    student = make_user(store, Role.student)
    with pytest.raises(NotFoundError):
        MentorshipService(store).book(student.id, 777)


@pytest.mark.unit
def test_available_slots_hide_full_ones(store, make_user):
    alumnus = make_user(store, Role.alumni, "Karan")
    student = make_user(store, Role.student)
    full = _slot(store, alumnus.id, seats=1)
    open_slot = _slot(store, alumnus.id, seats=2)
    service = MentorshipService(store)
    service.book(student.id, full.id)

    available = service.available_slots_for(student.id)

    assert [entry["slot"].id for entry in available] == [open_slot.id]
    assert available[0]["alumni_name"] == "Karan"


@pytest.mark.unit
def test_available_slots_default_alumni_name(store, make_user):
    alumnus = make_user(store, Role.alumni, "")
    _slot(store, alumnus.id)
    assert MentorshipService(store).available_slots_for(1)[0]["alumni_name"] == "Alumni"


@pytest.mark.unit
def test_my_slots_lists_bookings_with_students(store, make_user):
    alumnus = make_user(store, Role.alumni)
    other = make_user(store, Role.alumni)
    student = make_user(store, Role.student, "Riya")
    mine = _slot(store, alumnus.id, seats=2)
    _slot(store, other.id)
    service = MentorshipService(store)
    service.book(student.id, mine.id)

    slots = service.my_slots(alumnus.id)

    assert len(slots) == 1
    assert slots[0]["slot"].id == mine.id
    booking = slots[0]["bookings"][0]
    assert booking["student_name"] == "Riya"
    assert booking["student_email"] == student.email


@pytest.mark.unit
@pytest.mark.parametrize("seats", [1, 3])
def test_concurrent_booking_never_oversells(threaded_store, make_user, seats):
    alumnus = make_user(threaded_store, Role.alumni)
    students = [make_user(threaded_store, Role.student, f"S{i}") for i in range(12)]
    slot = _slot(threaded_store, alumnus.id, seats=seats)
    service = MentorshipService(threaded_store)
    barrier = threading.Barrier(len(students))
    booked, rejected = [], []

    def attempt(student_id):
        barrier.wait()
        try:
            booked.append(service.book(student_id, slot.id))
        except ValidationError:
            rejected.append(student_id)

    threads = [threading.Thread(target=attempt, args=(s.id,)) for s in students]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    final = threaded_store.slots.get(slot.id)
    assert len(booked) == seats
    assert len(rejected) == len(students) - seats
    assert final.current_bookings == seats
    assert final.status == SlotStatus.full
    assert len(threaded_store.slots.list_bookings(slot.id)) == seats
