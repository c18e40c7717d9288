"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.

Request fields are optional on purpose: "required" checks live in the
services so every caller gets the same 400 message. Everything is
camelCase on the wire (see CamelModel).
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import EmailStr, Field

from placement_portal.models.entities import (
    FAQ, AlumniJob, Application, ApplicationStatus, CamelModel, Drive,
    EducationEntry, MentorshipBooking, MentorshipSlot, PersonalInfo, Role
)


# ============================================================
# COMMON
# ============================================================

class MessageResponse(CamelModel):
    message: str


class HealthResponse(CamelModel):
    status: str
    storage: str


class RoleMessageResponse(CamelModel):
    role: Role
    message: str


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    role: Optional[str] = None


class UserResponse(CamelModel):
    id: int
    name: str
    email: str
    phone: str
    role: Role


class AuthResponse(CamelModel):
    token: str
    user: UserResponse


class PasswordResetRequest(CamelModel):
    email: Optional[EmailStr] = None


class ResetPasswordRequest(CamelModel):
    token: Optional[str] = None
    new_password: Optional[str] = None


# ============================================================
# STUDENT PROFILE SCHEMAS
# ============================================================

class ProfileUpdateRequest(CamelModel):
    branch: Optional[str] = None
    cgpa: Optional[float] = None
    current_backlogs: Optional[int] = None
    skills: Optional[List[str]] = None
    experience: Optional[str] = None
    projects: Optional[Union[str, List[str]]] = None
    education: Optional[List[EducationEntry]] = None
    personal_info: Optional[PersonalInfo] = None


# ============================================================
# DRIVE & APPLICATION SCHEMAS
# ============================================================

class DriveCreateRequest(CamelModel):
    company_name: Optional[str] = None
    role_title: Optional[str] = None
    description: Optional[str] = None
    min_cgpa: Optional[float] = None
    max_backlogs: Optional[int] = None
    allowed_branches: Optional[List[str]] = None
    location: Optional[str] = None
    ctc: Optional[str] = None
    application_deadline: Optional[str] = None


class EligibleDrive(Drive):
    has_applied: bool = False
    application_status: Optional[ApplicationStatus] = None


class EligibleDrivesResponse(CamelModel):
    drives: List[EligibleDrive] = []
    message: Optional[str] = None


class EligibleStudent(CamelModel):
    user_id: int
    name: str = ""
    email: str = ""
    branch: str = ""
    cgpa: float = 0.0
    current_backlogs: int = 0


class EligibleStudentsResponse(CamelModel):
    drive_id: int
    company_name: str
    eligible_count: int
    eligible_students: List[EligibleStudent] = []


class NotifyRequest(CamelModel):
    # Any, so a non-list reaches the service and gets its 400 message
    student_ids: Any = None


class NotifyResponse(CamelModel):
    message: str
    notified_count: int


class DriveSummary(CamelModel):
    id: int
    company_name: str
    role_title: str = ""
    location: str = ""
    ctc: str = ""


class ApplicationWithDrive(Application):
    drive: Optional[DriveSummary] = None


class ApplicationsResponse(CamelModel):
    applications: List[ApplicationWithDrive] = []


class ApplicationStatusUpdate(CamelModel):
    status: Optional[str] = None


# ============================================================
# ALUMNI: JOB REFERRAL SCHEMAS
# ============================================================

class JobCreateRequest(CamelModel):
    company_name: Optional[str] = None
    job_title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    ctc: Optional[str] = None
    apply_link: Optional[str] = None
    expiry_date: Optional[str] = None


class JobStatusUpdate(CamelModel):
    status: Optional[str] = None


class JobWithAlumni(AlumniJob):
    alumni_name: str = "Alumni"


class JobBoardResponse(CamelModel):
    jobs: List[JobWithAlumni] = []


class MyJobsResponse(CamelModel):
    jobs: List[AlumniJob] = []


# ============================================================
# MENTORSHIP SCHEMAS
# ============================================================

class SlotCreateRequest(CamelModel):
    slot_start: Optional[str] = None
    slot_end: Optional[str] = None
    max_students: Any = None
    description: Optional[str] = None


class SlotWithAlumni(MentorshipSlot):
    alumni_name: str = "Alumni"


class AvailableSlotsResponse(CamelModel):
    slots: List[SlotWithAlumni] = []


class BookingWithStudent(MentorshipBooking):
    student_name: str = "Student"
    student_email: str = ""


class SlotWithBookings(MentorshipSlot):
    bookings: List[BookingWithStudent] = []


class MySlotsResponse(CamelModel):
    slots: List[SlotWithBookings] = []


# ============================================================
# PLACEMENTBOT SCHEMAS
# ============================================================

class AskRequest(CamelModel):
    question: Optional[str] = None


class RelatedFAQ(CamelModel):
    question: str
    answer: str


class AskResponse(CamelModel):
    answer: str
    related_faqs: List[RelatedFAQ] = Field(default=[], alias="relatedFAQs")


class FAQsResponse(CamelModel):
    faqs: List[FAQ] = []


# ============================================================
# ANALYTICS SCHEMAS
# ============================================================

class BranchStat(CamelModel):
    total: int = 0
    placed: int = 0


class StatsResponse(CamelModel):
    total_students: int
    total_drives: int
    total_applications: int
    selected_count: int
    placement_rate: float
    branch_stats: Dict[str, BranchStat] = {}


class SkillRecommendation(CamelModel):
    skill: str
    frequency: int
    percentage: float
    recommendation: str


class SkillGapResponse(CamelModel):
    recommendations: List[SkillRecommendation] = []
