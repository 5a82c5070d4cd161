"""User service - current user profile and admin user listing."""

from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from mindforge.core.errors import not_found
from mindforge.db.enums import Role
from mindforge.db.models import (
    Enrollment, Facilitator, Parent, Student, StudentKnowledgeStream, User
)
from mindforge.schemas.profile import (
    FacilitatorProfileDetail, MeRead, ParentProfileDetail, StudentProfileDetail
)
from mindforge.schemas.user import (
    AdminProfileRead, FacilitatorProfileRead, ParentProfileRead,
    StudentProfileRead, UserRead, UserUpdate, UserWithProfileRead
)
from mindforge.utils.normalization import normalize_name

PROFILE_SCHEMAS = {
    Role.STUDENT.value: StudentProfileRead,
    Role.PARENT.value: ParentProfileRead,
    Role.FACILITATOR.value: FacilitatorProfileRead,
    Role.ADMIN.value: AdminProfileRead,
}

PROFILE_DETAIL_SCHEMAS = {
    Role.STUDENT.value: StudentProfileDetail,
    Role.PARENT.value: ParentProfileDetail,
    Role.FACILITATOR.value: FacilitatorProfileDetail,
    Role.ADMIN.value: AdminProfileRead,
}


def get_user(db: Session, user_id: UUID) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise not_found("User not found")
    return user


def _with_profile(user: User, schema_cls, profile_schemas: dict):
    """Place the role's profile under its role key (student/parent/facilitator/admin)."""
    data = UserRead.model_validate(user).model_dump()
    profile = user.profile
    if profile is not None:
        data[user.role.lower()] = profile_schemas[user.role].model_validate(profile)
    return schema_cls(**data)


def to_user_with_profile(user: User) -> UserWithProfileRead:
    return _with_profile(user, UserWithProfileRead, PROFILE_SCHEMAS)


def get_me(db: Session, user_id: UUID) -> MeRead:
    """Current user with role-specific relations loaded."""
    user = (
        db.query(User)
        .options(
            selectinload(User.student).selectinload(Student.enrollments).selectinload(Enrollment.bootcamp),
            selectinload(User.student)
            .selectinload(Student.knowledge_streams)
            .selectinload(StudentKnowledgeStream.knowledge_stream),
            selectinload(User.parent)
            .selectinload(Parent.children)
            .selectinload(Student.enrollments)
            .selectinload(Enrollment.bootcamp),
            selectinload(User.facilitator).selectinload(Facilitator.bootcamps_led),
            selectinload(User.admin),
        )
        .filter(User.id == user_id)
        .first()
    )
    if not user:
        raise not_found("User not found")
    return _with_profile(user, MeRead, PROFILE_DETAIL_SCHEMAS)


def update_me(db: Session, user_id: UUID, data: UserUpdate) -> UserRead:
    user = get_user(db, user_id)
    if data.name is not None:
        user.name = normalize_name(data.name)
    db.commit()
    db.refresh(user)
    return UserRead.model_validate(user)


def list_users(db: Session, role: str | None = None, is_active: str | None = None) -> list[UserRead]:
    """All users, newest first. `is_active` is the raw query value ("true" matches active)."""
    query = db.query(User)
    if role:
        query = query.filter(User.role == role.upper())
    if is_active is not None:
        query = query.filter(User.is_active == (is_active.lower() == "true"))
    users = query.order_by(User.created_at.desc()).all()
    return [UserRead.model_validate(u) for u in users]
