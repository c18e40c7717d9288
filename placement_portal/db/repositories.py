"""
Repository interfaces - one per entity type, bundled into a Store.

The services only ever talk to these interfaces, so the in-process store
(db/memory.py) and the SQLAlchemy store (db/sql.py) are interchangeable.

Contract shared by every implementation:
- ids are integers assigned by the store on `add`
- every read returns a fresh copy, never an object another caller holds
- a write either fully commits or raises with no state change
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from placement_portal.models.entities import (
    FAQ, AlumniJob, Application, ApplicationStatus, Drive, DriveStatus,
    JobStatus, MentorshipBooking, MentorshipSlot, NotificationIntent,
    StudentProfile, User
)

# Messages shared by every store implementation
EMAIL_TAKEN = "User with this email already exists"
ALREADY_APPLIED = "You have already applied to this drive"
SLOT_NOT_FOUND = "Mentorship slot not found"
SLOT_UNAVAILABLE = "Slot is no longer available"
SLOT_ALREADY_BOOKED = "You have already booked this slot"


class UserRepository(ABC):

    @abstractmethod
    def add(self, user: User) -> User:
        """Insert a user. Raises ConflictError if the email is taken (case-insensitive)."""

    @abstractmethod
    def get(self, user_id: int) -> Optional[User]:
        ...

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        ...


class ProfileRepository(ABC):

    @abstractmethod
    def get(self, user_id: int) -> Optional[StudentProfile]:
        ...

    @abstractmethod
    def save(self, profile: StudentProfile) -> StudentProfile:
        """Insert or replace the single profile for profile.user_id."""

    @abstractmethod
    def list_all(self) -> List[StudentProfile]:
        ...

    @abstractmethod
    def count(self) -> int:
        ...


class DriveRepository(ABC):

    @abstractmethod
    def add(self, drive: Drive) -> Drive:
        ...

    @abstractmethod
    def get(self, drive_id: int) -> Optional[Drive]:
        ...

    @abstractmethod
    def list_all(self) -> List[Drive]:
        ...

    @abstractmethod
    def set_status(self, drive_id: int, status: DriveStatus) -> Optional[Drive]:
        ...

    @abstractmethod
    def count(self) -> int:
        ...


class ApplicationRepository(ABC):

    @abstractmethod
    def add(self, application: Application) -> Application:
        """
        Insert an application.
        Raises ConflictError if (drive_id, student_id) already exists; the
        check and the insert are atomic per drive.
        """

    @abstractmethod
    def get(self, application_id: int) -> Optional[Application]:
        ...

    @abstractmethod
    def find(self, student_id: int, drive_id: int) -> Optional[Application]:
        ...

    @abstractmethod
    def list_for_student(self, student_id: int) -> List[Application]:
        ...

    @abstractmethod
    def list_all(self) -> List[Application]:
        ...

    @abstractmethod
    def set_status(
        self, application_id: int, status: ApplicationStatus, updated_at: datetime
    ) -> Optional[Application]:
        ...


class JobRepository(ABC):

    @abstractmethod
    def add(self, job: AlumniJob) -> AlumniJob:
        ...

    @abstractmethod
    def get(self, job_id: int) -> Optional[AlumniJob]:
        ...

    @abstractmethod
    def list_by_status(self, status: JobStatus) -> List[AlumniJob]:
        ...

    @abstractmethod
    def list_for_alumni(self, alumni_id: int) -> List[AlumniJob]:
        ...

    @abstractmethod
    def set_status(self, job_id: int, status: JobStatus) -> Optional[AlumniJob]:
        ...


class SlotRepository(ABC):

    @abstractmethod
    def add(self, slot: MentorshipSlot) -> MentorshipSlot:
        ...

    @abstractmethod
    def get(self, slot_id: int) -> Optional[MentorshipSlot]:
        ...

    @abstractmethod
    def list_available(self) -> List[MentorshipSlot]:
        """Slots with status AVAILABLE and a free seat."""

    @abstractmethod
    def list_for_alumni(self, alumni_id: int) -> List[MentorshipSlot]:
        ...

    @abstractmethod
    def reserve_seat(self, slot_id: int, student_id: int, booked_at: datetime) -> MentorshipBooking:
        """
        Book one seat as a single atomic unit per slot:
        1. NotFoundError if the slot does not exist
        2. ValidationError if it is not bookable (not AVAILABLE or full)
        3. ConflictError if the student already holds a booking on it
        4. insert a CONFIRMED booking, increment current_bookings and flip the
           status to FULL when the last seat goes
        """

    @abstractmethod
    def list_bookings(self, slot_id: int) -> List[MentorshipBooking]:
        ...


class NotificationRepository(ABC):

    @abstractmethod
    def add(self, intent: NotificationIntent) -> NotificationIntent:
        ...

    @abstractmethod
    def list_all(self) -> List[NotificationIntent]:
        ...


class FAQRepository:
    """Read-only FAQ corpus. Shared by every store; order is corpus order."""

    def __init__(self, faqs: List[FAQ]):
        self._faqs = [faq.model_copy(deep=True) for faq in faqs]

    def list_all(self) -> List[FAQ]:
        return [faq.model_copy(deep=True) for faq in self._faqs]


class Store:
    """Bundle of repositories handed to the services."""

    backend = "abstract"

    users: UserRepository
    profiles: ProfileRepository
    drives: DriveRepository
    applications: ApplicationRepository
    jobs: JobRepository
    slots: SlotRepository
    notifications: NotificationRepository
    faqs: FAQRepository

    def ping(self) -> bool:
        """Check that the underlying storage is reachable."""
        return True

    def close(self) -> None:
        pass
