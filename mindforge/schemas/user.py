"""User and role profile schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from mindforge.db.enums import Role
from mindforge.schemas.common import CamelModel, RequestModel


class UserSummary(CamelModel):
    """Minimal user identity embedded in other resources."""
    id: UUID
    name: str
    email: str


class UserRead(CamelModel):
    id: UUID
    email: str
    name: str
    role: Role
    is_active: bool
    created_at: datetime
    updated_at: datetime


class StudentProfileRead(CamelModel):
    id: UUID
    user_id: UUID
    parent_id: UUID | None = None
    age: int
    grade: str
    interests: list[str] = []
    learning_style: str


class ParentProfileRead(CamelModel):
    id: UUID
    user_id: UUID
    subscription_status: str
    notification_preferences: dict = {}


class FacilitatorProfileRead(CamelModel):
    id: UUID
    user_id: UUID
    specialties: list[str] = []
    bio: str
    rating: float
    availability: dict = {}


class AdminProfileRead(CamelModel):
    id: UUID
    user_id: UUID
    permissions: list[str] = []
    department: str


class UserWithProfileRead(UserRead):
    """User plus the profile selected by its role, under the role's key."""
    student: StudentProfileRead | None = None
    parent: ParentProfileRead | None = None
    facilitator: FacilitatorProfileRead | None = None
    admin: AdminProfileRead | None = None


class UserUpdate(RequestModel):
    """Self-service profile update."""
    name: str | None = Field(default=None, min_length=2, max_length=255)


class StudentSummary(CamelModel):
    """Student reference with the owning user's identity."""
    id: UUID
    user: UserSummary


class FacilitatorSummary(CamelModel):
    id: UUID
    bio: str
    specialties: list[str] = []
    rating: float
    user: UserSummary
