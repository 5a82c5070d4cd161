"""Authentication-related Pydantic schemas."""

from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from mindforge.db.enums import Role
from mindforge.schemas.common import CamelModel, RequestModel


class TokenPayload(BaseModel):
    """Decoded JWT payload structure."""
    sub: UUID  # user_id
    email: str
    role: str


class UserSession(BaseModel):
    """
    Authenticated principal for a request.

    Returned by the get_current_session dependency and passed explicitly
    into every service call that needs the caller.
    """
    user_id: UUID
    role: Role  # Validated enum
    email: str
    name: str


class RegisterRequest(RequestModel):
    """
    Registration body.

    Role-specific fields are optional and only read for the matching role.
    """
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    name: str = Field(..., min_length=2, max_length=255)
    role: Role

    # STUDENT
    age: int | None = Field(default=None, ge=0, le=120)
    grade: str | None = Field(default=None, max_length=50)
    interests: list[str] | None = None
    learning_style: str | None = Field(default=None, max_length=100)
    parent_id: UUID | None = None

    # PARENT
    subscription_status: str | None = Field(default=None, max_length=50)

    # FACILITATOR
    specialties: list[str] | None = None
    bio: str | None = None

    # ADMIN
    permissions: list[str] | None = None
    department: str | None = Field(default=None, max_length=100)


class LoginRequest(RequestModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthUser(CamelModel):
    id: UUID
    email: str
    name: str
    role: Role


class AuthResponse(CamelModel):
    user: AuthUser
    token: str

