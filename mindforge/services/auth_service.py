"""Auth service - registration, login and token issuance."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mindforge.core.errors import bad_request, not_found, unauthorized
from mindforge.core.security import create_access_token, hash_password, verify_password
from mindforge.db.enums import DEFAULT_SUBSCRIPTION_STATUS, Role
from mindforge.db.models import Admin, Facilitator, Parent, Student, User
from mindforge.schemas.auth import AuthResponse, AuthUser, RegisterRequest
from mindforge.utils.normalization import normalize_email, normalize_list, normalize_name

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "User with this email already exists"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def _build_profile(db: Session, data: RegisterRequest) -> Student | Parent | Facilitator | Admin:
    """Create the profile record matching the requested role."""
    if data.role == Role.STUDENT:
        if data.parent_id and not db.query(Parent.id).filter(Parent.id == data.parent_id).first():
            raise not_found("Parent not found")
        return Student(
            age=data.age or 0,
            grade=data.grade or "",
            interests=normalize_list(data.interests),
            learning_style=data.learning_style or "",
            parent_id=data.parent_id,
        )
    if data.role == Role.PARENT:
        return Parent(subscription_status=data.subscription_status or DEFAULT_SUBSCRIPTION_STATUS)
    if data.role == Role.FACILITATOR:
        return Facilitator(
            specialties=normalize_list(data.specialties),
            bio=data.bio or "",
        )
    return Admin(
        permissions=normalize_list(data.permissions),
        department=data.department or "",
    )


def _auth_response(user: User) -> AuthResponse:
    token = create_access_token(user.id, user.email, user.role)
    return AuthResponse(user=AuthUser.model_validate(user), token=token)


def register(db: Session, data: RegisterRequest) -> AuthResponse:
    """
    Create a user and its role profile in one transaction.

    Raises:
        AppError 400: email already registered
    """
    email = normalize_email(data.email)
    if get_user_by_email(db, email):
        raise bad_request(DUPLICATE_EMAIL_MESSAGE)

    user = User(
        email=email,
        name=normalize_name(data.name),
        password_hash=hash_password(data.password),
        role=data.role.value,
        is_active=True,
    )
    profile = _build_profile(db, data)
    setattr(user, data.role.value.lower(), profile)
    db.add(user)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise bad_request(DUPLICATE_EMAIL_MESSAGE)

    db.refresh(user)
    logger.info("User registered: %s (%s)", user.id, user.role)
    return _auth_response(user)


def login(db: Session, email: str, password: str) -> AuthResponse:
    """
    Verify credentials and issue a token.

    Unknown email, wrong password and inactive account share one message.
    """
    user = get_user_by_email(db, email)
    if not user or not user.is_active or not verify_password(password, user.password_hash):
        raise unauthorized(INVALID_CREDENTIALS_MESSAGE)
    return _auth_response(user)
