"""Pydantic schemas for progress records and assessment rubrics."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from mindforge.schemas.common import CamelModel, RequestModel
from mindforge.schemas.session import BootcampRef
from mindforge.schemas.user import FacilitatorSummary, StudentSummary


class ProgressCreate(RequestModel):
    student_id: UUID
    bootcamp_id: UUID | None = None
    session_id: UUID | None = None
    skill: str = Field(..., min_length=1, max_length=100)
    level: str = Field(..., min_length=1, max_length=50)
    assessment_date: datetime
    evidence: str = Field(..., min_length=1)
    next_steps: str = Field(..., min_length=1)


class SessionRef(CamelModel):
    id: UUID
    day: int
    theme: str


class ProgressRead(CamelModel):
    id: UUID
    student_id: UUID
    facilitator_id: UUID
    bootcamp_id: UUID | None = None
    session_id: UUID | None = None
    skill: str
    level: str
    assessment_date: datetime
    evidence: str
    next_steps: str
    created_at: datetime
    student: StudentSummary
    facilitator: FacilitatorSummary
    bootcamp: BootcampRef | None = None
    session: SessionRef | None = None


class RubricLevelRead(CamelModel):
    id: UUID
    level: str
    description: str
    criteria: list[str] = []


class RubricRead(CamelModel):
    id: UUID
    skill: str
    assessment_activities: list[str] = []
    levels: list[RubricLevelRead] = []
