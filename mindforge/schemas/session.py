"""Pydantic schemas for bootcamp sessions, activities and attendance."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from mindforge.db.enums import AttendanceStatus
from mindforge.schemas.common import CamelModel, RequestModel
from mindforge.schemas.user import StudentSummary


# =============================================================================
# Requests
# =============================================================================

class SessionCreate(RequestModel):
    day: int = Field(..., gt=0)
    theme: str = Field(..., min_length=1, max_length=255)
    date: datetime
    start_time: str = Field(..., max_length=20)
    end_time: str = Field(..., max_length=20)


class SessionUpdate(RequestModel):
    day: int | None = Field(default=None, gt=0)
    theme: str | None = Field(default=None, min_length=1, max_length=255)
    date: datetime | None = None
    start_time: str | None = Field(default=None, max_length=20)
    end_time: str | None = Field(default=None, max_length=20)


class ActivityCreate(RequestModel):
    time: str = Field(..., max_length=20)
    type: str = Field(..., min_length=1, max_length=50)
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    materials: list[str]
    learning_objectives: list[str]
    facilitator_notes: str | None = None
    student_deliverables: list[str]


class ActivityUpdate(RequestModel):
    time: str | None = Field(default=None, max_length=20)
    type: str | None = Field(default=None, min_length=1, max_length=50)
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1)
    materials: list[str] | None = None
    learning_objectives: list[str] | None = None
    facilitator_notes: str | None = None
    student_deliverables: list[str] | None = None


class AttendanceCreate(RequestModel):
    student_id: UUID
    status: AttendanceStatus
    join_time: datetime | None = None
    leave_time: datetime | None = None
    engagement_score: int | None = Field(default=None, ge=0, le=100)


class AttendanceUpdate(RequestModel):
    status: AttendanceStatus | None = None
    join_time: datetime | None = None
    leave_time: datetime | None = None
    engagement_score: int | None = Field(default=None, ge=0, le=100)


# =============================================================================
# Responses
# =============================================================================

class ActivityRead(CamelModel):
    id: UUID
    session_id: UUID
    time: str
    type: str
    title: str
    description: str
    materials: list[str] = []
    learning_objectives: list[str] = []
    facilitator_notes: str | None = None
    student_deliverables: list[str] = []


class AttendanceRead(CamelModel):
    id: UUID
    session_id: UUID
    student_id: UUID
    status: AttendanceStatus
    join_time: datetime | None = None
    leave_time: datetime | None = None
    engagement_score: int | None = None
    student: StudentSummary | None = None


class BootcampRef(CamelModel):
    """Bootcamp summary embedded in nested resources."""
    id: UUID
    title: str
    facilitator_id: UUID


class SessionRead(CamelModel):
    id: UUID
    bootcamp_id: UUID
    day: int
    theme: str
    date: datetime
    start_time: str
    end_time: str
    created_at: datetime
    updated_at: datetime
    activities: list[ActivityRead] = []


class SessionDetail(SessionRead):
    bootcamp: BootcampRef
    attendance: list[AttendanceRead] = []
