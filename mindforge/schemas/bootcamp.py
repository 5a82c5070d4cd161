"""Pydantic schemas for bootcamps and enrollments."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field

from mindforge.db.enums import BootcampFormat, BootcampStatus, EnrollmentStatus
from mindforge.schemas.common import CamelModel, RequestModel
from mindforge.schemas.discussion import DiscussionRead
from mindforge.schemas.session import SessionRead
from mindforge.schemas.user import FacilitatorSummary


class BootcampCreate(RequestModel):
    title: str = Field(..., min_length=1, max_length=255)
    subtitle: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    duration: str = Field(..., max_length=100)
    format: list[BootcampFormat]
    age_range: str = Field(..., max_length=50)
    subjects: list[str]
    schedule: str = Field(..., max_length=255)
    capacity: int = Field(..., gt=0)
    price: float = Field(..., ge=0)
    learning_outcomes: list[str]
    weekly_schedule: dict[str, Any] = Field(default_factory=dict)
    prerequisites: list[str] = Field(default_factory=list)


class BootcampUpdate(RequestModel):
    """
    Partial update. Only fields present in the body are applied.

    `status` is accepted here so an owner can publish or close a bootcamp.
    """
    title: str | None = Field(default=None, min_length=1, max_length=255)
    subtitle: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1)
    duration: str | None = Field(default=None, max_length=100)
    format: list[BootcampFormat] | None = None
    age_range: str | None = Field(default=None, max_length=50)
    subjects: list[str] | None = None
    schedule: str | None = Field(default=None, max_length=255)
    capacity: int | None = Field(default=None, gt=0)
    price: float | None = Field(default=None, ge=0)
    learning_outcomes: list[str] | None = None
    weekly_schedule: dict[str, Any] | None = None
    prerequisites: list[str] | None = None
    status: BootcampStatus | None = None


class BootcampRead(CamelModel):
    id: UUID
    facilitator_id: UUID
    title: str
    subtitle: str
    description: str
    duration: str
    format: list[BootcampFormat] = []
    age_range: str
    subjects: list[str] = []
    schedule: str
    capacity: int
    price: float
    learning_outcomes: list[str] = []
    weekly_schedule: dict[str, Any] = {}
    prerequisites: list[str] = []
    status: BootcampStatus
    enrollment_count: int
    created_at: datetime
    updated_at: datetime


class BootcampListItem(BootcampRead):
    facilitator: FacilitatorSummary


class BootcampDetail(BootcampRead):
    """Bootcamp with its facilitator, day-ordered sessions and discussion topics."""
    facilitator: FacilitatorSummary
    sessions: list[SessionRead] = []
    discussion_topics: list[DiscussionRead] = []


class EnrollmentRead(CamelModel):
    id: UUID
    student_id: UUID
    bootcamp_id: UUID
    status: EnrollmentStatus
    enrolled_at: datetime


class EnrollmentWithBootcamp(EnrollmentRead):
    bootcamp: BootcampRead
