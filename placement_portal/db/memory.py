"""
In-process store - the default backend.

Each repository keeps its rows in a dict guarded by a table lock. Writes
that must check-then-act (applications per drive, bookings per slot,
accounts per email) additionally hold a per-entity KeyedLock, so unrelated
drives and slots never wait on each other.
"""

import threading
from typing import Callable, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel

from placement_portal.core.errors import ConflictError, NotFoundError, ValidationError
from placement_portal.db.repositories import (
    ALREADY_APPLIED, EMAIL_TAKEN, SLOT_ALREADY_BOOKED, SLOT_NOT_FOUND, SLOT_UNAVAILABLE,
    ApplicationRepository, DriveRepository, FAQRepository, JobRepository,
    NotificationRepository, ProfileRepository, SlotRepository, Store, UserRepository
)
from placement_portal.db.seed import FAQ_CORPUS
from placement_portal.models.entities import (
    AlumniJob, Application, ApplicationStatus, Drive, DriveStatus, JobStatus,
    MentorshipBooking, MentorshipSlot, NotificationIntent, StudentProfile, User,
    slot_status_for
)
from placement_portal.utils.locks import KeyedLock

M = TypeVar("M", bound=BaseModel)


class _Table(Generic[M]):
    """Rows keyed by integer id, with a monotonically increasing id counter."""

    def __init__(self):
        self.lock = threading.RLock()
        self.rows: Dict[int, M] = {}
        self._next_id = 1

    def insert(self, entity: M) -> M:
        with self.lock:
            row = entity.model_copy(deep=True, update={"id": self._next_id})
            self.rows[self._next_id] = row
            self._next_id += 1
            return row.model_copy(deep=True)

    def get(self, row_id: int) -> Optional[M]:
        with self.lock:
            row = self.rows.get(row_id)
            return row.model_copy(deep=True) if row is not None else None

    def select(self, predicate: Callable[[M], bool] = lambda row: True) -> List[M]:
        with self.lock:
            return [row.model_copy(deep=True) for row in self.rows.values() if predicate(row)]

    def update(self, row_id: int, **changes) -> Optional[M]:
        with self.lock:
            row = self.rows.get(row_id)
            if row is None:
                return None
            row = row.model_copy(deep=True, update=changes)
            self.rows[row_id] = row
            return row.model_copy(deep=True)


# ============================================================
# REPOSITORIES
# ============================================================

class MemoryUserRepository(UserRepository):

    def __init__(self, locks: KeyedLock):
        self._table: _Table[User] = _Table()
        self._locks = locks

    def add(self, user: User) -> User:
        email = user.email.lower()
        with self._locks.hold(("user-email", email)):
            if self.get_by_email(email):
                raise ConflictError(EMAIL_TAKEN)
            return self._table.insert(user)

    def get(self, user_id: int) -> Optional[User]:
        return self._table.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        matches = self._table.select(lambda u: u.email.lower() == email.lower())
        return matches[0] if matches else None


class MemoryProfileRepository(ProfileRepository):

    def __init__(self):
        self._lock = threading.RLock()
        self._rows: Dict[int, StudentProfile] = {}

    def get(self, user_id: int) -> Optional[StudentProfile]:
        with self._lock:
            profile = self._rows.get(user_id)
            return profile.model_copy(deep=True) if profile is not None else None

    def save(self, profile: StudentProfile) -> StudentProfile:
        with self._lock:
            self._rows[profile.user_id] = profile.model_copy(deep=True)
            return profile.model_copy(deep=True)

    def list_all(self) -> List[StudentProfile]:
        with self._lock:
            return [p.model_copy(deep=True) for p in self._rows.values()]

    def count(self) -> int:
        with self._lock:
            return len(self._rows)


class MemoryDriveRepository(DriveRepository):

    def __init__(self):
        self._table: _Table[Drive] = _Table()

    def add(self, drive: Drive) -> Drive:
        return self._table.insert(drive)

    def get(self, drive_id: int) -> Optional[Drive]:
        return self._table.get(drive_id)

    def list_all(self) -> List[Drive]:
        return self._table.select()

    def set_status(self, drive_id: int, status: DriveStatus) -> Optional[Drive]:
        return self._table.update(drive_id, status=status)

    def count(self) -> int:
        with self._table.lock:
            return len(self._table.rows)


class MemoryApplicationRepository(ApplicationRepository):

    def __init__(self, locks: KeyedLock):
        self._table: _Table[Application] = _Table()
        self._locks = locks

    def add(self, application: Application) -> Application:
        with self._locks.hold(("drive", application.drive_id)):
            if self.find(application.student_id, application.drive_id):
                raise ConflictError(ALREADY_APPLIED)
            return self._table.insert(application)

    def get(self, application_id: int) -> Optional[Application]:
        return self._table.get(application_id)

    def find(self, student_id: int, drive_id: int) -> Optional[Application]:
        matches = self._table.select(
            lambda a: a.student_id == student_id and a.drive_id == drive_id
        )
        return matches[0] if matches else None

    def list_for_student(self, student_id: int) -> List[Application]:
        return self._table.select(lambda a: a.student_id == student_id)

    def list_all(self) -> List[Application]:
        return self._table.select()

    def set_status(self, application_id, status: ApplicationStatus, updated_at) -> Optional[Application]:
        return self._table.update(application_id, status=status, updated_at=updated_at)


class MemoryJobRepository(JobRepository):

    def __init__(self):
        self._table: _Table[AlumniJob] = _Table()

    def add(self, job: AlumniJob) -> AlumniJob:
        return self._table.insert(job)

    def get(self, job_id: int) -> Optional[AlumniJob]:
        return self._table.get(job_id)

    def list_by_status(self, status: JobStatus) -> List[AlumniJob]:
        return self._table.select(lambda j: j.status == status)

    def list_for_alumni(self, alumni_id: int) -> List[AlumniJob]:
        return self._table.select(lambda j: j.alumni_user_id == alumni_id)

    def set_status(self, job_id: int, status: JobStatus) -> Optional[AlumniJob]:
        return self._table.update(job_id, status=status)


class MemorySlotRepository(SlotRepository):

    def __init__(self, locks: KeyedLock):
        self._slots: _Table[MentorshipSlot] = _Table()
        self._bookings: _Table[MentorshipBooking] = _Table()
        self._locks = locks

    def add(self, slot: MentorshipSlot) -> MentorshipSlot:
        return self._slots.insert(slot)

    def get(self, slot_id: int) -> Optional[MentorshipSlot]:
        return self._slots.get(slot_id)

    def list_available(self) -> List[MentorshipSlot]:
        return self._slots.select(lambda s: s.is_bookable)

    def list_for_alumni(self, alumni_id: int) -> List[MentorshipSlot]:
        return self._slots.select(lambda s: s.alumni_user_id == alumni_id)

    def reserve_seat(self, slot_id, student_id, booked_at) -> MentorshipBooking:
        with self._locks.hold(("slot", slot_id)):
            slot = self._slots.get(slot_id)
            if slot is None:
                raise NotFoundError(SLOT_NOT_FOUND)
            if not slot.is_bookable:
                raise ValidationError(SLOT_UNAVAILABLE)
            if self._bookings.select(lambda b: b.slot_id == slot_id and b.student_id == student_id):
                raise ConflictError(SLOT_ALREADY_BOOKED)

            booking = self._bookings.insert(
                MentorshipBooking(slot_id=slot_id, student_id=student_id, booked_at=booked_at)
            )
            current = slot.current_bookings + 1
            self._slots.update(
                slot_id,
                current_bookings=current,
                status=slot_status_for(current, slot.max_students)
            )
            return booking

    def list_bookings(self, slot_id: int) -> List[MentorshipBooking]:
        return self._bookings.select(lambda b: b.slot_id == slot_id)


class MemoryNotificationRepository(NotificationRepository):

    def __init__(self):
        self._table: _Table[NotificationIntent] = _Table()

    def add(self, intent: NotificationIntent) -> NotificationIntent:
        return self._table.insert(intent)

    def list_all(self) -> List[NotificationIntent]:
        return self._table.select()


# ============================================================
# STORE
# ============================================================

class MemoryStore(Store):
    """Everything lives in this process and is lost on restart."""

    backend = "memory"

    def __init__(self):
        locks = KeyedLock()
        self.users = MemoryUserRepository(locks)
        self.profiles = MemoryProfileRepository()
        self.drives = MemoryDriveRepository()
        self.applications = MemoryApplicationRepository(locks)
        self.jobs = MemoryJobRepository()
        self.slots = MemorySlotRepository(locks)
        self.notifications = MemoryNotificationRepository()
        self.faqs = FAQRepository(FAQ_CORPUS)
