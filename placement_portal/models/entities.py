"""
Domain entities - the data contracts shared by services and repositories.

Attributes are snake_case in Python and camelCase on the wire
(`current_backlogs` <-> `currentBacklogs`).
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# ENUMS
# ============================================================

class Role(str, Enum):
    tpo = "TPO"
    student = "STUDENT"
    alumni = "ALUMNI"


class DriveStatus(str, Enum):
    active = "ACTIVE"
    closed = "CLOSED"


class ApplicationStatus(str, Enum):
    applied = "APPLIED"
    interview_scheduled = "INTERVIEW_SCHEDULED"
    selected = "SELECTED"
    rejected = "REJECTED"


class JobStatus(str, Enum):
    active = "ACTIVE"
    closed = "CLOSED"


class SlotStatus(str, Enum):
    available = "AVAILABLE"
    full = "FULL"


class BookingStatus(str, Enum):
    confirmed = "CONFIRMED"


class NotificationKind(str, Enum):
    drive_alert = "DRIVE_ALERT"
    password_reset = "PASSWORD_RESET"


# ============================================================
# USERS & PROFILES
# ============================================================

class User(CamelModel):
    id: Optional[int] = None
    name: str = ""
    email: str
    phone: str = ""
    role: Role
    password_hash: str = Field("", exclude=True)


class EducationEntry(CamelModel):
    degree: str = ""
    institution: str = ""
    year: Union[int, str, None] = None
    percentage: Union[float, str, None] = None


class PersonalInfo(CamelModel):
    linkedin: str = ""
    github: str = ""
    address: str = ""


class StudentProfile(CamelModel):
    user_id: int
    branch: str = ""
    cgpa: float = 0.0
    current_backlogs: int = 0
    skills: List[str] = []
    experience: str = ""
    projects: str = ""
    education: List[EducationEntry] = []
    personal_info: PersonalInfo = PersonalInfo()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def skill_set(self) -> set:
        """Lower-cased skills, for case-insensitive comparisons."""
        return {s.lower() for s in self.skills}


# ============================================================
# DRIVES & APPLICATIONS
# ============================================================

class Drive(CamelModel):
    id: Optional[int] = None
    company_name: str
    role_title: str = ""
    description: str = ""
    min_cgpa: float = 0.0
    max_backlogs: int = 0
    allowed_branches: List[str] = []
    location: str = ""
    ctc: str = ""
    application_deadline: Optional[str] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    status: DriveStatus = DriveStatus.active


class Application(CamelModel):
    id: Optional[int] = None
    drive_id: int
    student_id: int
    status: ApplicationStatus = ApplicationStatus.applied
    applied_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============================================================
# ALUMNI: REFERRALS & MENTORSHIP
# ============================================================

class AlumniJob(CamelModel):
    id: Optional[int] = None
    alumni_user_id: int
    company_name: str
    job_title: str
    description: str = ""
    location: str = ""
    ctc: str = ""
    apply_link: str = ""
    created_at: Optional[datetime] = None
    expiry_date: Optional[str] = None
    status: JobStatus = JobStatus.active


def slot_status_for(current_bookings: int, max_students: int) -> SlotStatus:
    """FULL exactly when every seat is taken."""
    if current_bookings >= max_students:
        return SlotStatus.full
    return SlotStatus.available


class MentorshipSlot(CamelModel):
    id: Optional[int] = None
    alumni_user_id: int
    slot_start: datetime
    slot_end: datetime
    max_students: int = 1
    current_bookings: int = 0
    description: str = ""
    created_at: Optional[datetime] = None
    status: SlotStatus = SlotStatus.available

    @property
    def is_bookable(self) -> bool:
        return self.status == SlotStatus.available and self.current_bookings < self.max_students


class MentorshipBooking(CamelModel):
    id: Optional[int] = None
    slot_id: int
    student_id: int
    booked_at: Optional[datetime] = None
    status: BookingStatus = BookingStatus.confirmed


# ============================================================
# STATIC CONTENT & INTENTS
# ============================================================

class FAQ(CamelModel):
    id: int
    question: str
    answer: str
    tags: List[str] = []
    category: str = ""


class NotificationIntent(CamelModel):
    id: Optional[int] = None
    kind: NotificationKind
    recipients: List[Union[int, str]] = []
    subject: str = ""
    payload: Dict[str, Any] = {}
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
