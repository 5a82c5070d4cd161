"""Pydantic schemas for communications and read receipts."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from mindforge.db.enums import CommunicationStatus, CommunicationType
from mindforge.schemas.common import CamelModel, RequestModel
from mindforge.schemas.user import UserSummary


class CommunicationCreate(RequestModel):
    type: CommunicationType
    recipient_ids: list[UUID] = Field(..., min_length=1)
    subject: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    status: CommunicationStatus | None = None
    scheduled_for: datetime | None = None


class CommunicationUpdate(RequestModel):
    type: CommunicationType | None = None
    recipient_ids: list[UUID] | None = Field(default=None, min_length=1)
    subject: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = Field(default=None, min_length=1)
    status: CommunicationStatus | None = None
    scheduled_for: datetime | None = None


class RecipientRead(CamelModel):
    id: UUID
    recipient_id: UUID
    user: UserSummary


class ReadReceiptRead(CamelModel):
    id: UUID
    communication_id: UUID
    user_id: UUID
    read_at: datetime


class CommunicationRead(CamelModel):
    id: UUID
    sender_id: UUID
    type: CommunicationType
    subject: str
    content: str
    status: CommunicationStatus
    scheduled_for: datetime | None = None
    sent_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    sender: UserSummary
    recipients: list[RecipientRead] = []
    read_receipts: list[ReadReceiptRead] = []
