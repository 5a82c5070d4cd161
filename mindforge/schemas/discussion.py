"""Pydantic schemas for discussion topics."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from mindforge.schemas.common import CamelModel, RequestModel
from mindforge.schemas.session import BootcampRef


class DiscussionCreate(RequestModel):
    day: int = Field(..., gt=0)
    title: str = Field(..., min_length=1, max_length=255)
    prompt: str = Field(..., min_length=1)
    guidance: str = Field(..., min_length=1)
    expected_outcomes: list[str]
    tags: list[str]


class DiscussionUpdate(RequestModel):
    day: int | None = Field(default=None, gt=0)
    title: str | None = Field(default=None, min_length=1, max_length=255)
    prompt: str | None = Field(default=None, min_length=1)
    guidance: str | None = Field(default=None, min_length=1)
    expected_outcomes: list[str] | None = None
    tags: list[str] | None = None


class DiscussionRead(CamelModel):
    id: UUID
    bootcamp_id: UUID
    day: int
    title: str
    prompt: str
    guidance: str
    expected_outcomes: list[str] = []
    tags: list[str] = []
    created_at: datetime
    updated_at: datetime


class DiscussionDetail(DiscussionRead):
    bootcamp: BootcampRef
