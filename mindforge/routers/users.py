"""Users router - own profile and admin listing."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mindforge.core.deps import get_current_session, get_db, require_roles
from mindforge.core.responses import success
from mindforge.db.enums import Role
from mindforge.schemas.auth import UserSession
from mindforge.schemas.user import UserUpdate
from mindforge.services import user_service

router = APIRouter()


@router.get("/me")
def get_me(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Current user with role-specific relations (enrollments, streams, bootcamps led)."""
    return success(user=user_service.get_me(db, session.user_id))


@router.patch("/me")
def update_me(
    data: UserUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return success(user=user_service.update_me(db, session.user_id, data))


@router.get("")
def list_users(
    role: str | None = Query(None),
    is_active: str | None = Query(None, alias="isActive"),
    session: UserSession = Depends(require_roles([Role.ADMIN])),
    db: Session = Depends(get_db),
):
    users = user_service.list_users(db, role=role, is_active=is_active)
    return success(results=len(users), users=users)
