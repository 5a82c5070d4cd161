"""Auth router - registration, login and the current principal."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from mindforge.core.deps import get_current_user, get_db
from mindforge.core.rate_limit import AUTH_LIMIT, limiter
from mindforge.core.responses import success
from mindforge.db.models import User
from mindforge.schemas.auth import LoginRequest, RegisterRequest
from mindforge.services import auth_service, user_service

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
@limiter.limit(AUTH_LIMIT)
def register(request: Request, data: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account with its role profile and return a bearer token."""
    result = auth_service.register(db, data)
    return success(user=result.user, token=result.token)


@router.post("/login")
@limiter.limit(AUTH_LIMIT)
def login(request: Request, data: LoginRequest, db: Session = Depends(get_db)):
    result = auth_service.login(db, data.email, data.password)
    return success(user=result.user, token=result.token)


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    """Authenticated user with the role profile under its role key."""
    return success(user=user_service.to_user_with_profile(user))
