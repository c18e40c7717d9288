"""
SQLAlchemy store - persistent backend (SQLite by default, PostgreSQL works too).

Tables are created on startup from the declarative models below.
Uniqueness rules live in the schema as well as in the code:
- applications (drive_id, student_id)
- mentorship_bookings (slot_id, student_id)
- users.email_key (lower-cased email)

Seat reservation is a single transaction that starts with a guarded
increment (UPDATE ... WHERE status = 'AVAILABLE' AND current_bookings <
max_students). Concurrent bookers queue on that write instead of racing a
read, so a seat is refused only when the slot really is full.
"""

from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

from loguru import logger
from pydantic import BaseModel
from sqlalchemy import (
    JSON, Column, DateTime, Float, Integer, String, Text, UniqueConstraint, case,
    create_engine, func, select, text, update
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from placement_portal.core.errors import ConflictError, NotFoundError, ValidationError
from placement_portal.db.repositories import (
    ALREADY_APPLIED, EMAIL_TAKEN, SLOT_ALREADY_BOOKED, SLOT_NOT_FOUND, SLOT_UNAVAILABLE,
    ApplicationRepository, DriveRepository, FAQRepository, JobRepository,
    NotificationRepository, ProfileRepository, SlotRepository, Store, UserRepository
)
from placement_portal.db.seed import FAQ_CORPUS
from placement_portal.models.entities import (
    AlumniJob, Application, ApplicationStatus, BookingStatus, Drive, DriveStatus, JobStatus,
    MentorshipBooking, MentorshipSlot, NotificationIntent, SlotStatus, StudentProfile,
    User
)
from placement_portal.utils.timestamp import as_utc

Base = declarative_base()

M = TypeVar("M", bound=BaseModel)


# ============================================================
# TABLES
# ============================================================

class UserRow(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False, default="")
    email = Column(String(320), nullable=False)
    email_key = Column(String(320), nullable=False, unique=True)
    phone = Column(String(50), nullable=False, default="")
    role = Column(String(20), nullable=False)
    password_hash = Column(String(200), nullable=False, default="")


class ProfileRow(Base):
    __tablename__ = "student_profiles"

    user_id = Column(Integer, primary_key=True, autoincrement=False)
    branch = Column(String(200), nullable=False, default="")
    cgpa = Column(Float, nullable=False, default=0.0)
    current_backlogs = Column(Integer, nullable=False, default=0)
    skills = Column(JSON, nullable=False, default=list)
    experience = Column(Text, nullable=False, default="")
    projects = Column(Text, nullable=False, default="")
    education = Column(JSON, nullable=False, default=list)
    personal_info = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True))
    updated_at = Column(DateTime(timezone=True))


class DriveRow(Base):
    __tablename__ = "drives"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_name = Column(String(200), nullable=False)
    role_title = Column(String(200), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    min_cgpa = Column(Float, nullable=False, default=0.0)
    max_backlogs = Column(Integer, nullable=False, default=0)
    allowed_branches = Column(JSON, nullable=False, default=list)
    location = Column(String(200), nullable=False, default="")
    ctc = Column(String(100), nullable=False, default="")
    application_deadline = Column(String(50))
    created_by = Column(Integer)
    created_at = Column(DateTime(timezone=True))
    status = Column(String(20), nullable=False, default=DriveStatus.active.value)


class ApplicationRow(Base):
    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("drive_id", "student_id", name="uq_application_drive_student"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    drive_id = Column(Integer, nullable=False, index=True)
    student_id = Column(Integer, nullable=False, index=True)
    status = Column(String(30), nullable=False, default=ApplicationStatus.applied.value)
    applied_at = Column(DateTime(timezone=True))
    updated_at = Column(DateTime(timezone=True))


class AlumniJobRow(Base):
    __tablename__ = "alumni_jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    alumni_user_id = Column(Integer, nullable=False, index=True)
    company_name = Column(String(200), nullable=False)
    job_title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    location = Column(String(200), nullable=False, default="")
    ctc = Column(String(100), nullable=False, default="")
    apply_link = Column(String(500), nullable=False, default="")
    created_at = Column(DateTime(timezone=True))
    expiry_date = Column(String(50))
    status = Column(String(20), nullable=False, default=JobStatus.active.value)


class SlotRow(Base):
    __tablename__ = "mentorship_slots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    alumni_user_id = Column(Integer, nullable=False, index=True)
    slot_start = Column(DateTime(timezone=True), nullable=False)
    slot_end = Column(DateTime(timezone=True), nullable=False)
    max_students = Column(Integer, nullable=False, default=1)
    current_bookings = Column(Integer, nullable=False, default=0)
    description = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True))
    status = Column(String(20), nullable=False, default=SlotStatus.available.value)


class BookingRow(Base):
    __tablename__ = "mentorship_bookings"
    __table_args__ = (UniqueConstraint("slot_id", "student_id", name="uq_booking_slot_student"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    slot_id = Column(Integer, nullable=False, index=True)
    student_id = Column(Integer, nullable=False, index=True)
    booked_at = Column(DateTime(timezone=True))
    status = Column(String(20), nullable=False)


class NotificationRow(Base):
    __tablename__ = "notification_intents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    kind = Column(String(30), nullable=False)
    recipients = Column(JSON, nullable=False, default=list)
    subject = Column(String(300), nullable=False, default="")
    payload = Column(JSON, nullable=False, default=dict)
    created_by = Column(Integer)
    created_at = Column(DateTime(timezone=True))


# ============================================================
# ROW <-> ENTITY HELPERS
# ============================================================

def _to_entity(row: Base, model_cls: Type[M]) -> M:
    """Convert an ORM row to its pydantic entity (naive datetimes are read as UTC)."""
    values = {}
    for column in row.__table__.columns:
        value = getattr(row, column.name)
        if isinstance(value, datetime):
            value = as_utc(value)
        values[column.name] = value
    return model_cls.model_validate(values)


def _to_columns(entity: BaseModel, exclude: set = frozenset({"id"})) -> Dict[str, Any]:
    """Dump an entity into column values (enums stored by value)."""
    values = entity.model_dump(exclude=set(exclude))
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in values.items()}


# ============================================================
# REPOSITORIES
# ============================================================

class _SqlRepository:

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @contextmanager
    def _session(self):
        """
        Context manager for database sessions.
        Usage:
            with self._session() as db:
                db.execute(select(UserRow))
        """
        session: Session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _insert(self, row: Base, model_cls: Type[M]) -> M:
        with self._session() as db:
            db.add(row)
            db.flush()
            return _to_entity(row, model_cls)

    def _get(self, row_cls, row_id: int, model_cls: Type[M]) -> Optional[M]:
        with self._session() as db:
            row = db.get(row_cls, row_id)
            return _to_entity(row, model_cls) if row is not None else None

    def _select(self, stmt, model_cls: Type[M]) -> List[M]:
        with self._session() as db:
            return [_to_entity(row, model_cls) for row in db.execute(stmt).scalars().all()]

    def _update(self, row_cls, row_id: int, model_cls: Type[M], **changes) -> Optional[M]:
        with self._session() as db:
            row = db.get(row_cls, row_id)
            if row is None:
                return None
            for key, value in changes.items():
                setattr(row, key, value.value if isinstance(value, Enum) else value)
            db.flush()
            return _to_entity(row, model_cls)


class SqlUserRepository(_SqlRepository, UserRepository):

    def add(self, user: User) -> User:
        if self.get_by_email(user.email):
            raise ConflictError(EMAIL_TAKEN)
        values = _to_columns(user)
        values["password_hash"] = user.password_hash
        try:
            with self._session() as db:
                row = UserRow(email_key=user.email.lower(), **values)
                db.add(row)
                db.flush()
                return self._user(row)
        except IntegrityError:
            raise ConflictError(EMAIL_TAKEN)

    def get(self, user_id: int) -> Optional[User]:
        with self._session() as db:
            row = db.get(UserRow, user_id)
            return self._user(row) if row is not None else None

    def get_by_email(self, email: str) -> Optional[User]:
        with self._session() as db:
            row = db.execute(
                select(UserRow).where(UserRow.email_key == email.lower())
            ).scalars().first()
            return self._user(row) if row is not None else None

    @staticmethod
    def _user(row: UserRow) -> User:
        user = _to_entity(row, User)
        user.password_hash = row.password_hash
        return user


class SqlProfileRepository(_SqlRepository, ProfileRepository):

    def get(self, user_id: int) -> Optional[StudentProfile]:
        return self._get(ProfileRow, user_id, StudentProfile)

    def save(self, profile: StudentProfile) -> StudentProfile:
        with self._session() as db:
            row = db.merge(ProfileRow(**_to_columns(profile, exclude=set())))
            db.flush()
            return _to_entity(row, StudentProfile)

    def list_all(self) -> List[StudentProfile]:
        return self._select(select(ProfileRow).order_by(ProfileRow.user_id), StudentProfile)

    def count(self) -> int:
        with self._session() as db:
            return db.execute(select(func.count()).select_from(ProfileRow)).scalar_one()


class SqlDriveRepository(_SqlRepository, DriveRepository):

    def add(self, drive: Drive) -> Drive:
        return self._insert(DriveRow(**_to_columns(drive)), Drive)

    def get(self, drive_id: int) -> Optional[Drive]:
        return self._get(DriveRow, drive_id, Drive)

    def list_all(self) -> List[Drive]:
        return self._select(select(DriveRow).order_by(DriveRow.id), Drive)

    def set_status(self, drive_id: int, status: DriveStatus) -> Optional[Drive]:
        return self._update(DriveRow, drive_id, Drive, status=status)

    def count(self) -> int:
        with self._session() as db:
            return db.execute(select(func.count()).select_from(DriveRow)).scalar_one()


class SqlApplicationRepository(_SqlRepository, ApplicationRepository):

    def add(self, application: Application) -> Application:
        if self.find(application.student_id, application.drive_id):
            raise ConflictError(ALREADY_APPLIED)
        try:
            return self._insert(ApplicationRow(**_to_columns(application)), Application)
        except IntegrityError:
            raise ConflictError(ALREADY_APPLIED)

    def get(self, application_id: int) -> Optional[Application]:
        return self._get(ApplicationRow, application_id, Application)

    def find(self, student_id: int, drive_id: int) -> Optional[Application]:
        found = self._select(
            select(ApplicationRow).where(
                ApplicationRow.student_id == student_id,
                ApplicationRow.drive_id == drive_id
            ),
            Application
        )
        return found[0] if found else None

    def list_for_student(self, student_id: int) -> List[Application]:
        return self._select(
            select(ApplicationRow)
            .where(ApplicationRow.student_id == student_id)
            .order_by(ApplicationRow.id),
            Application
        )

    def list_all(self) -> List[Application]:
        return self._select(select(ApplicationRow).order_by(ApplicationRow.id), Application)

    def set_status(self, application_id, status: ApplicationStatus, updated_at) -> Optional[Application]:
        return self._update(
            ApplicationRow, application_id, Application, status=status, updated_at=updated_at
        )


class SqlJobRepository(_SqlRepository, JobRepository):

    def add(self, job: AlumniJob) -> AlumniJob:
        return self._insert(AlumniJobRow(**_to_columns(job)), AlumniJob)

    def get(self, job_id: int) -> Optional[AlumniJob]:
        return self._get(AlumniJobRow, job_id, AlumniJob)

    def list_by_status(self, status: JobStatus) -> List[AlumniJob]:
        return self._select(
            select(AlumniJobRow).where(AlumniJobRow.status == status.value).order_by(AlumniJobRow.id),
            AlumniJob
        )

    def list_for_alumni(self, alumni_id: int) -> List[AlumniJob]:
        return self._select(
            select(AlumniJobRow).where(AlumniJobRow.alumni_user_id == alumni_id).order_by(AlumniJobRow.id),
            AlumniJob
        )

    def set_status(self, job_id: int, status: JobStatus) -> Optional[AlumniJob]:
        return self._update(AlumniJobRow, job_id, AlumniJob, status=status)


class SqlSlotRepository(_SqlRepository, SlotRepository):

    def add(self, slot: MentorshipSlot) -> MentorshipSlot:
        return self._insert(SlotRow(**_to_columns(slot)), MentorshipSlot)

    def get(self, slot_id: int) -> Optional[MentorshipSlot]:
        return self._get(SlotRow, slot_id, MentorshipSlot)

    def list_available(self) -> List[MentorshipSlot]:
        return self._select(
            select(SlotRow).where(
                SlotRow.status == SlotStatus.available.value,
                SlotRow.current_bookings < SlotRow.max_students
            ).order_by(SlotRow.id),
            MentorshipSlot
        )

    def list_for_alumni(self, alumni_id: int) -> List[MentorshipSlot]:
        return self._select(
            select(SlotRow).where(SlotRow.alumni_user_id == alumni_id).order_by(SlotRow.id),
            MentorshipSlot
        )

    def reserve_seat(self, slot_id, student_id, booked_at) -> MentorshipBooking:
        taken = SlotRow.current_bookings + 1
        try:
            with self._session() as db:
                # Guarded increment: the row lock it takes serializes bookers
                result = db.execute(
                    update(SlotRow)
                    .where(
                        SlotRow.id == slot_id,
                        SlotRow.status == SlotStatus.available.value,
                        SlotRow.current_bookings < SlotRow.max_students
                    )
                    .values(
                        current_bookings=taken,
                        status=case(
                            (taken >= SlotRow.max_students, SlotStatus.full.value),
                            else_=SlotStatus.available.value
                        )
                    )
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount != 1:
                    if db.get(SlotRow, slot_id) is None:
                        raise NotFoundError(SLOT_NOT_FOUND)
                    raise ValidationError(SLOT_UNAVAILABLE)

                existing = db.execute(
                    select(BookingRow.id).where(
                        BookingRow.slot_id == slot_id,
                        BookingRow.student_id == student_id
                    )
                ).first()
                if existing:
                    raise ConflictError(SLOT_ALREADY_BOOKED)

                booking = BookingRow(
                    slot_id=slot_id,
                    student_id=student_id,
                    booked_at=booked_at,
                    status=BookingStatus.confirmed.value
                )
                db.add(booking)
                db.flush()
                return _to_entity(booking, MentorshipBooking)
        except IntegrityError:
            raise ConflictError(SLOT_ALREADY_BOOKED)

    def list_bookings(self, slot_id: int) -> List[MentorshipBooking]:
        return self._select(
            select(BookingRow).where(BookingRow.slot_id == slot_id).order_by(BookingRow.id),
            MentorshipBooking
        )


class SqlNotificationRepository(_SqlRepository, NotificationRepository):

    def add(self, intent: NotificationIntent) -> NotificationIntent:
        return self._insert(NotificationRow(**_to_columns(intent)), NotificationIntent)

    def list_all(self) -> List[NotificationIntent]:
        return self._select(select(NotificationRow).order_by(NotificationRow.id), NotificationIntent)


# ============================================================
# STORE
# ============================================================

def create_db_engine(database_url: str, echo: bool = False):
    """
    Create the engine for a database URL.

    SQLite in-memory databases share one connection (StaticPool) so every
    session sees the same data; server databases get a connection pool
    (pool_size=5, max_overflow=10).
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False, "timeout": 30}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **kwargs)

    return create_engine(database_url, pool_size=5, max_overflow=10, echo=echo)


class SqlStore(Store):

    backend = "sql"

    def __init__(self, database_url: str, echo: bool = False):
        self.engine = create_db_engine(database_url, echo=echo)
        Base.metadata.create_all(self.engine)

        session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.users = SqlUserRepository(session_factory)
        self.profiles = SqlProfileRepository(session_factory)
        self.drives = SqlDriveRepository(session_factory)
        self.applications = SqlApplicationRepository(session_factory)
        self.jobs = SqlJobRepository(session_factory)
        self.slots = SqlSlotRepository(session_factory)
        self.notifications = SqlNotificationRepository(session_factory)
        self.faqs = FAQRepository(FAQ_CORPUS)

        logger.info(f"SQL store ready ({self.engine.url.render_as_string(hide_password=True)})")

    def ping(self) -> bool:
        """
        Test if the database is reachable.
        Returns True if connection successful, False otherwise.
        """
        try:
            with self.engine.connect() as conn:
                return conn.execute(text("SELECT 1")).scalar() == 1
        except Exception as e:
            logger.error(f"Database connection failed: {e}")
            return False

    def close(self) -> None:
        self.engine.dispose()
