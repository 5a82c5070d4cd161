"""Pydantic schemas for knowledge streams."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from mindforge.schemas.common import CamelModel, RequestModel
from mindforge.schemas.user import StudentSummary


class StreamLevelCreate(RequestModel):
    level: int = Field(..., ge=1)
    title: str = Field(..., min_length=1, max_length=255)
    skills: list[str] = Field(default_factory=list)
    prerequisites: list[str] = Field(default_factory=list)
    next_level: int | None = Field(default=None, ge=1)
    estimated_completion_time: str = Field(default="", max_length=50)
    bootcamp_ids: list[UUID] = Field(default_factory=list)


class KnowledgeStreamCreate(RequestModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    color: str = Field(default="", max_length=20)
    icon: str = Field(default="", max_length=20)
    levels: list[StreamLevelCreate] = Field(default_factory=list)


class AssignStreamRequest(RequestModel):
    knowledge_stream_id: UUID


class StreamLevelRead(CamelModel):
    id: UUID
    level: int
    title: str
    skills: list[str] = []
    prerequisites: list[str] = []
    next_level: int | None = None
    estimated_completion_time: str
    bootcamp_ids: list[str] = []


class KnowledgeStreamRead(CamelModel):
    id: UUID
    name: str
    description: str
    color: str
    icon: str
    created_at: datetime
    levels: list[StreamLevelRead] = []
    student_count: int = 0


class StudentStreamRead(CamelModel):
    """Assignment of a knowledge stream to a student."""
    id: UUID
    student_id: UUID
    knowledge_stream_id: UUID
    assigned_at: datetime
    knowledge_stream: KnowledgeStreamRead


class AssignmentRead(StudentStreamRead):
    student: StudentSummary
