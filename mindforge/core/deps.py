"""FastAPI dependencies for authentication, authorization, and database access."""

import logging
from typing import Generator

import jwt
from fastapi import Depends, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from mindforge.core.errors import forbidden, unauthorized
from mindforge.core.security import decode_access_token
from mindforge.db.enums import Role
from mindforge.db.models import User
from mindforge.db.session import SessionLocal
from mindforge.schemas.auth import TokenPayload, UserSession

logger = logging.getLogger(__name__)

AUTH_HEADER = "Authorization"
BEARER_PREFIX = "bearer "


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get(AUTH_HEADER)
    if not header or not header.lower().startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX):].strip()
    return token or None


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """
    Get authenticated user from the bearer token.

    Validates:
    - Authorization header carries a bearer token
    - JWT is valid and not expired
    - User exists and is active

    Raises:
        AppError 401: Authentication failed
    """
    token = _bearer_token(request)
    if not token:
        raise unauthorized("Authentication required")

    try:
        payload = TokenPayload.model_validate(decode_access_token(token))
    except (jwt.InvalidTokenError, ValidationError):
        raise unauthorized("Invalid or expired token")

    user = db.query(User).filter(User.id == payload.sub).first()
    if not user or not user.is_active:
        logger.info("Token rejected for unknown or inactive user %s", payload.sub)
        raise unauthorized("Invalid or expired token")

    return user


def get_current_session(request: Request, db: Session = Depends(get_db)) -> UserSession:
    """
    Get the authenticated principal: user_id, role, email, name.

    This is the PRIMARY auth dependency for most endpoints.

    Raises:
        AppError 401: Not authenticated
        AppError 403: Unknown role
    """
    user = get_current_user(request, db)

    # Validate role is a known enum value - return 403 not 500
    if not Role.has_value(user.role):
        raise forbidden(f"Unknown role '{user.role}'. Contact administrator.")

    return UserSession(
        user_id=user.id,
        role=Role(user.role),
        email=user.email,
        name=user.name,
    )


def require_roles(allowed_roles: list[Role]):
    """
    Dependency factory for role-based authorization.

    Uses enum values (not strings) to prevent drift.

    Usage:
        @router.post("/bootcamps")
        def create(session: UserSession = Depends(require_roles([Role.FACILITATOR, Role.ADMIN]))):
    """
    def dependency(request: Request, db: Session = Depends(get_db)) -> UserSession:
        session = get_current_session(request, db)
        if session.role not in allowed_roles:
            raise forbidden(f"Role '{session.role.value}' not authorized for this action")
        return session
    return dependency

