"""SQLAlchemy ORM models for identity, bootcamps, progress and messaging."""

import uuid
from datetime import datetime

from sqlalchemy import (
    JSON, Boolean, CheckConstraint, Float, ForeignKey, Index, Integer,
    Numeric, String, Text, UniqueConstraint
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mindforge.db.base import Base, TimestampMixin, utcnow
from mindforge.db.enums import (
    DEFAULT_BOOTCAMP_STATUS, DEFAULT_SUBSCRIPTION_STATUS,
    CommunicationStatus, EnrollmentStatus, Role
)


def _uuid_pk() -> Mapped[uuid.UUID]:
    return mapped_column(primary_key=True, default=uuid.uuid4)


# =============================================================================
# Identity & Role Profiles
# =============================================================================

class User(TimestampMixin, Base):
    """
    Account with a fixed role tag.

    The role selects exactly one profile record (student, parent,
    facilitator or admin). Callers read it through `profile`.
    """
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = _uuid_pk()
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    student: Mapped["Student | None"] = relationship(
        back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    parent: Mapped["Parent | None"] = relationship(
        back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    facilitator: Mapped["Facilitator | None"] = relationship(
        back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    admin: Mapped["Admin | None"] = relationship(
        back_populates="user", uselist=False, cascade="all, delete-orphan"
    )

    @property
    def profile(self) -> "Student | Parent | Facilitator | Admin | None":
        """The profile record selected by the role tag."""
        return {
            Role.STUDENT.value: self.student,
            Role.PARENT.value: self.parent,
            Role.FACILITATOR.value: self.facilitator,
            Role.ADMIN.value: self.admin,
        }.get(self.role)


class Parent(Base):
    __tablename__ = "parents"

    id: Mapped[uuid.UUID] = _uuid_pk()
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    subscription_status: Mapped[str] = mapped_column(
        String(50), default=DEFAULT_SUBSCRIPTION_STATUS, nullable=False
    )
    notification_preferences: Mapped[dict] = mapped_column(
        JSON, default=lambda: {"email": True, "sms": False, "push": False}
    )

    user: Mapped["User"] = relationship(back_populates="parent")
    children: Mapped[list["Student"]] = relationship(back_populates="parent")


class Student(Base):
    __tablename__ = "students"

    id: Mapped[uuid.UUID] = _uuid_pk()
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    parent_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("parents.id", ondelete="SET NULL"), nullable=True
    )
    age: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    grade: Mapped[str] = mapped_column(String(50), default="", nullable=False)
    interests: Mapped[list] = mapped_column(JSON, default=list)
    learning_style: Mapped[str] = mapped_column(String(100), default="", nullable=False)

    user: Mapped["User"] = relationship(back_populates="student")
    parent: Mapped["Parent | None"] = relationship(back_populates="children")
    enrollments: Mapped[list["Enrollment"]] = relationship(
        back_populates="student", cascade="all, delete-orphan"
    )
    knowledge_streams: Mapped[list["StudentKnowledgeStream"]] = relationship(
        back_populates="student", cascade="all, delete-orphan"
    )


class Facilitator(Base):
    __tablename__ = "facilitators"

    id: Mapped[uuid.UUID] = _uuid_pk()
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    specialties: Mapped[list] = mapped_column(JSON, default=list)
    bio: Mapped[str] = mapped_column(Text, default="", nullable=False)
    rating: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    availability: Mapped[dict] = mapped_column(
        JSON, default=lambda: {"days": [], "timeSlots": []}
    )

    user: Mapped["User"] = relationship(back_populates="facilitator")
    bootcamps_led: Mapped[list["Bootcamp"]] = relationship(back_populates="facilitator")


class Admin(Base):
    __tablename__ = "admins"

    id: Mapped[uuid.UUID] = _uuid_pk()
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    permissions: Mapped[list] = mapped_column(JSON, default=list)
    department: Mapped[str] = mapped_column(String(100), default="", nullable=False)

    user: Mapped["User"] = relationship(back_populates="admin")


# =============================================================================
# Bootcamps & Enrollment
# =============================================================================

class Bootcamp(TimestampMixin, Base):
    """
    A bootcamp owned by one facilitator.

    enrollment_count only moves through the conditional increment in
    counter_service, so it can never pass capacity.
    """
    __tablename__ = "bootcamps"
    __table_args__ = (
        CheckConstraint("capacity > 0", name="ck_bootcamps_capacity_positive"),
        CheckConstraint(
            "enrollment_count >= 0 AND enrollment_count <= capacity",
            name="ck_bootcamps_enrollment_within_capacity",
        ),
        Index("idx_bootcamps_status_created", "status", "created_at"),
        Index("idx_bootcamps_facilitator", "facilitator_id"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()
    facilitator_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("facilitators.id", ondelete="RESTRICT"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    subtitle: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    duration: Mapped[str] = mapped_column(String(100), nullable=False)
    format: Mapped[list] = mapped_column(JSON, default=list)
    age_range: Mapped[str] = mapped_column(String(50), nullable=False)
    subjects: Mapped[list] = mapped_column(JSON, default=list)
    schedule: Mapped[str] = mapped_column(String(255), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    learning_outcomes: Mapped[list] = mapped_column(JSON, default=list)
    weekly_schedule: Mapped[dict] = mapped_column(JSON, default=dict)
    prerequisites: Mapped[list] = mapped_column(JSON, default=list)
    status: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_BOOTCAMP_STATUS.value, nullable=False
    )
    enrollment_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    facilitator: Mapped["Facilitator"] = relationship(back_populates="bootcamps_led")
    enrollments: Mapped[list["Enrollment"]] = relationship(
        back_populates="bootcamp", cascade="all, delete-orphan"
    )
    sessions: Mapped[list["BootcampSession"]] = relationship(
        back_populates="bootcamp",
        cascade="all, delete-orphan",
        order_by="BootcampSession.day",
    )
    discussion_topics: Mapped[list["DiscussionTopic"]] = relationship(
        back_populates="bootcamp",
        cascade="all, delete-orphan",
        order_by="DiscussionTopic.day",
    )


class Enrollment(Base):
    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("student_id", "bootcamp_id", name="uq_enrollments_student_bootcamp"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()
    student_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"), nullable=False
    )
    bootcamp_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("bootcamps.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20), default=EnrollmentStatus.ACTIVE.value, nullable=False
    )
    enrolled_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    student: Mapped["Student"] = relationship(back_populates="enrollments")
    bootcamp: Mapped["Bootcamp"] = relationship(back_populates="enrollments")


# =============================================================================
# Sessions, Activities & Attendance
# =============================================================================

class BootcampSession(TimestampMixin, Base):
    """One bootcamp day. At most one session per (bootcamp, day)."""
    __tablename__ = "sessions"
    __table_args__ = (
        UniqueConstraint("bootcamp_id", "day", name="uq_sessions_bootcamp_day"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()
    bootcamp_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("bootcamps.id", ondelete="CASCADE"), nullable=False
    )
    day: Mapped[int] = mapped_column(Integer, nullable=False)
    theme: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[datetime] = mapped_column(nullable=False)
    start_time: Mapped[str] = mapped_column(String(20), nullable=False)
    end_time: Mapped[str] = mapped_column(String(20), nullable=False)

    bootcamp: Mapped["Bootcamp"] = relationship(back_populates="sessions")
    activities: Mapped[list["SessionActivity"]] = relationship(
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="SessionActivity.time",
    )
    attendance: Mapped[list["AttendanceRecord"]] = relationship(
        back_populates="session", cascade="all, delete-orphan"
    )


class SessionActivity(Base):
    __tablename__ = "session_activities"

    id: Mapped[uuid.UUID] = _uuid_pk()
    session_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False
    )
    time: Mapped[str] = mapped_column(String(20), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    materials: Mapped[list] = mapped_column(JSON, default=list)
    learning_objectives: Mapped[list] = mapped_column(JSON, default=list)
    facilitator_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    student_deliverables: Mapped[list] = mapped_column(JSON, default=list)

    session: Mapped["BootcampSession"] = relationship(back_populates="activities")


class AttendanceRecord(Base):
    __tablename__ = "attendance_records"
    __table_args__ = (
        UniqueConstraint("session_id", "student_id", name="uq_attendance_session_student"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()
    session_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False
    )
    student_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    join_time: Mapped[datetime | None] = mapped_column(nullable=True)
    leave_time: Mapped[datetime | None] = mapped_column(nullable=True)
    engagement_score: Mapped[int | None] = mapped_column(Integer, nullable=True)

    session: Mapped["BootcampSession"] = relationship(back_populates="attendance")
    student: Mapped["Student"] = relationship()


# =============================================================================
# Discussions
# =============================================================================

class DiscussionTopic(TimestampMixin, Base):
    """Discussion prompt for one bootcamp day. One per (bootcamp, day)."""
    __tablename__ = "discussion_topics"
    __table_args__ = (
        UniqueConstraint("bootcamp_id", "day", name="uq_discussion_topics_bootcamp_day"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()
    bootcamp_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("bootcamps.id", ondelete="CASCADE"), nullable=False
    )
    day: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    guidance: Mapped[str] = mapped_column(Text, nullable=False)
    expected_outcomes: Mapped[list] = mapped_column(JSON, default=list)
    tags: Mapped[list] = mapped_column(JSON, default=list)

    bootcamp: Mapped["Bootcamp"] = relationship(back_populates="discussion_topics")


# =============================================================================
# Progress & Rubrics
# =============================================================================

class ProgressRecord(TimestampMixin, Base):
    """Skill assessment of a student by a facilitator."""
    __tablename__ = "progress_records"
    __table_args__ = (
        Index("idx_progress_student_date", "student_id", "assessment_date"),
        Index("idx_progress_bootcamp", "bootcamp_id"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()
    student_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"), nullable=False
    )
    facilitator_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("facilitators.id", ondelete="RESTRICT"), nullable=False
    )
    bootcamp_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("bootcamps.id", ondelete="SET NULL"), nullable=True
    )
    session_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("sessions.id", ondelete="SET NULL"), nullable=True
    )
    skill: Mapped[str] = mapped_column(String(100), nullable=False)
    level: Mapped[str] = mapped_column(String(50), nullable=False)
    assessment_date: Mapped[datetime] = mapped_column(nullable=False)
    evidence: Mapped[str] = mapped_column(Text, nullable=False)
    next_steps: Mapped[str] = mapped_column(Text, nullable=False)

    student: Mapped["Student"] = relationship()
    facilitator: Mapped["Facilitator"] = relationship()
    bootcamp: Mapped["Bootcamp | None"] = relationship()
    session: Mapped["BootcampSession | None"] = relationship()


class AssessmentRubric(Base):
    __tablename__ = "assessment_rubrics"

    id: Mapped[uuid.UUID] = _uuid_pk()
    skill: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    assessment_activities: Mapped[list] = mapped_column(JSON, default=list)

    levels: Mapped[list["RubricLevel"]] = relationship(
        back_populates="rubric",
        cascade="all, delete-orphan",
        order_by="RubricLevel.level",
    )


class RubricLevel(Base):
    __tablename__ = "rubric_levels"

    id: Mapped[uuid.UUID] = _uuid_pk()
    rubric_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("assessment_rubrics.id", ondelete="CASCADE"), nullable=False
    )
    level: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    criteria: Mapped[list] = mapped_column(JSON, default=list)

    rubric: Mapped["AssessmentRubric"] = relationship(back_populates="levels")


# =============================================================================
# Knowledge Streams
# =============================================================================

class KnowledgeStream(TimestampMixin, Base):
    __tablename__ = "knowledge_streams"

    id: Mapped[uuid.UUID] = _uuid_pk()
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    color: Mapped[str] = mapped_column(String(20), default="", nullable=False)
    icon: Mapped[str] = mapped_column(String(20), default="", nullable=False)

    levels: Mapped[list["StreamLevel"]] = relationship(
        back_populates="knowledge_stream",
        cascade="all, delete-orphan",
        order_by="StreamLevel.level",
    )
    student_streams: Mapped[list["StudentKnowledgeStream"]] = relationship(
        back_populates="knowledge_stream", cascade="all, delete-orphan"
    )


class StreamLevel(Base):
    __tablename__ = "stream_levels"

    id: Mapped[uuid.UUID] = _uuid_pk()
    knowledge_stream_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("knowledge_streams.id", ondelete="CASCADE"), nullable=False
    )
    level: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    skills: Mapped[list] = mapped_column(JSON, default=list)
    prerequisites: Mapped[list] = mapped_column(JSON, default=list)
    next_level: Mapped[int | None] = mapped_column(Integer, nullable=True)
    estimated_completion_time: Mapped[str] = mapped_column(String(50), default="", nullable=False)
    bootcamp_ids: Mapped[list] = mapped_column(JSON, default=list)

    knowledge_stream: Mapped["KnowledgeStream"] = relationship(back_populates="levels")


class StudentKnowledgeStream(Base):
    __tablename__ = "student_knowledge_streams"
    __table_args__ = (
        UniqueConstraint(
            "student_id", "knowledge_stream_id", name="uq_student_knowledge_stream"
        ),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()
    student_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"), nullable=False
    )
    knowledge_stream_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("knowledge_streams.id", ondelete="CASCADE"), nullable=False
    )
    assigned_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    student: Mapped["Student"] = relationship(back_populates="knowledge_streams")
    knowledge_stream: Mapped["KnowledgeStream"] = relationship(back_populates="student_streams")


# =============================================================================
# Communications
# =============================================================================

class Communication(TimestampMixin, Base):
    """
    Internal message from one sender to one or more recipients.

    Once status is SENT the record is frozen and sent_at never changes.
    """
    __tablename__ = "communications"
    __table_args__ = (
        Index("idx_communications_sender", "sender_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()
    sender_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=CommunicationStatus.DRAFT.value, nullable=False
    )
    scheduled_for: Mapped[datetime | None] = mapped_column(nullable=True)
    sent_at: Mapped[datetime | None] = mapped_column(nullable=True)

    sender: Mapped["User"] = relationship()
    recipients: Mapped[list["CommunicationRecipient"]] = relationship(
        back_populates="communication", cascade="all, delete-orphan"
    )
    read_receipts: Mapped[list["ReadReceipt"]] = relationship(
        back_populates="communication", cascade="all, delete-orphan"
    )


class CommunicationRecipient(Base):
    __tablename__ = "communication_recipients"
    __table_args__ = (
        UniqueConstraint(
            "communication_id", "recipient_id", name="uq_communication_recipient"
        ),
        Index("idx_communication_recipients_user", "recipient_id"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()
    communication_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("communications.id", ondelete="CASCADE"), nullable=False
    )
    recipient_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    communication: Mapped["Communication"] = relationship(back_populates="recipients")
    user: Mapped["User"] = relationship()


class ReadReceipt(Base):
    __tablename__ = "read_receipts"
    __table_args__ = (
        UniqueConstraint("communication_id", "user_id", name="uq_read_receipt"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()
    communication_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("communications.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    read_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    communication: Mapped["Communication"] = relationship(back_populates="read_receipts")
    user: Mapped["User"] = relationship()
