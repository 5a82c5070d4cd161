"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, schema created and dropped per test
- Users of every role with bearer tokens
- Bootcamp factory
- HTTPX AsyncClient bound to the ASGI app
"""
import os
import uuid
from dataclasses import dataclass
from typing import AsyncGenerator, Callable, Generator

# Settings are read at import time
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SENTRY_DSN"] = ""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

from mindforge.core.deps import get_db
from mindforge.core.security import create_access_token, hash_password
from mindforge.db.base import Base
from mindforge.db.enums import BootcampFormat, BootcampStatus, Role
from mindforge.db.models import Admin, Bootcamp, Facilitator, Parent, Student, User
from mindforge.db.session import SessionLocal, engine
from mindforge.main import app

TEST_PASSWORD = "password123"


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Fresh schema per test; the session is shared with the app through get_db."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


# =============================================================================
# Auth Fixtures
# =============================================================================

@dataclass
class TestAuth:
    """Test authentication context."""
    __test__ = False

    user: User
    profile: Student | Parent | Facilitator | Admin
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


PROFILE_FACTORIES = {
    Role.STUDENT: lambda: Student(age=12, grade="7", interests=["robotics"], learning_style="visual"),
    Role.PARENT: lambda: Parent(),
    Role.FACILITATOR: lambda: Facilitator(specialties=["STEM"], bio="Teaches things"),
    Role.ADMIN: lambda: Admin(permissions=["all"], department="Ops"),
}


def create_user(db: Session, role: Role, name: str | None = None, email: str | None = None) -> TestAuth:
    """Insert a user with the profile matching its role and mint a token."""
    user = User(
        email=email or f"{role.value.lower()}-{uuid.uuid4().hex[:8]}@test.com",
        name=name or f"Test {role.value.title()}",
        password_hash=hash_password(TEST_PASSWORD),
        role=role.value,
        is_active=True,
    )
    profile = PROFILE_FACTORIES[role]()
    setattr(user, role.value.lower(), profile)
    db.add(user)
    db.commit()
    db.refresh(user)
    db.refresh(profile)
    token = create_access_token(user.id, user.email, user.role)
    return TestAuth(user=user, profile=profile, token=token)


@pytest.fixture
def make_user(db: Session) -> Callable[..., TestAuth]:
    """Factory for additional users: make_user(Role.STUDENT, name="...")."""
    return lambda role, **kwargs: create_user(db, role, **kwargs)


@pytest.fixture
def facilitator(db: Session) -> TestAuth:
    return create_user(db, Role.FACILITATOR, name="Fiona Facilitator")


@pytest.fixture
def other_facilitator(db: Session) -> TestAuth:
    return create_user(db, Role.FACILITATOR, name="Oscar Other")


@pytest.fixture
def admin(db: Session) -> TestAuth:
    return create_user(db, Role.ADMIN, name="Ada Admin")


@pytest.fixture
def student(db: Session) -> TestAuth:
    return create_user(db, Role.STUDENT, name="Sam Student")


@pytest.fixture
def other_student(db: Session) -> TestAuth:
    return create_user(db, Role.STUDENT, name="Tess Student")


@pytest.fixture
def parent(db: Session) -> TestAuth:
    return create_user(db, Role.PARENT, name="Pat Parent")


# =============================================================================
# Domain Factories
# =============================================================================

@pytest.fixture
def make_bootcamp(db: Session) -> Callable[..., Bootcamp]:
    """Factory inserting a bootcamp owned by the given facilitator."""

    def _make(
        owner: TestAuth,
        status: BootcampStatus = BootcampStatus.PUBLISHED,
        capacity: int = 10,
        title: str = "Robotics Bootcamp",
        subjects: list[str] | None = None,
        formats: list[BootcampFormat] | None = None,
    ) -> Bootcamp:
        bootcamp = Bootcamp(
            facilitator_id=owner.profile.id,
            title=title,
            subtitle="Build and program robots",
            description="A week of hands-on robotics.",
            duration="5 days",
            format=[f.value for f in (formats or [BootcampFormat.IN_PERSON])],
            age_range="10-14",
            subjects=subjects if subjects is not None else ["robotics", "coding"],
            schedule="Mon-Fri 9am-3pm",
            capacity=capacity,
            price=299.0,
            learning_outcomes=["Build a robot"],
            weekly_schedule={},
            prerequisites=[],
            status=status.value,
            enrollment_count=0,
        )
        db.add(bootcamp)
        db.commit()
        db.refresh(bootcamp)
        return bootcamp

    return _make


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """
    AsyncClient for the app. Pass `headers=auth.headers` to authenticate.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
