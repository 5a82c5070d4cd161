"""Tests for capability resolution and the bootcamp ownership check."""
import uuid

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from mindforge.core.bootcamp_access import resolve_capabilities, verify_bootcamp_ownership
from mindforge.core.errors import AppError
from mindforge.db.enums import Role
from mindforge.db.models import Admin


def test_capabilities_of_facilitator(db: Session, facilitator):
    caps = resolve_capabilities(db, facilitator.user.id)
    assert caps.facilitator is not None
    assert caps.facilitator.id == facilitator.profile.id
    assert caps.is_admin is False
    assert caps.has_access is True


def test_capabilities_of_student(db: Session, student):
    caps = resolve_capabilities(db, student.user.id)
    assert caps.facilitator is None
    assert caps.is_admin is False
    assert caps.has_access is False


def test_capabilities_of_admin(db: Session, admin):
    caps = resolve_capabilities(db, admin.user.id)
    assert caps.is_admin is True
    assert caps.has_access is True


def test_storage_failure_becomes_503(db: Session, facilitator, monkeypatch):
    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(db, "query", broken_query)
    with pytest.raises(AppError) as exc_info:
        resolve_capabilities(db, facilitator.user.id)
    assert exc_info.value.status_code == 503


def test_owner_passes(db: Session, facilitator, make_bootcamp):
    bootcamp = make_bootcamp(facilitator)
    caps = verify_bootcamp_ownership(db, facilitator.user.id, bootcamp.id)
    assert caps.facilitator.id == facilitator.profile.id


def test_other_facilitator_is_rejected(db: Session, facilitator, other_facilitator, make_bootcamp):
    bootcamp = make_bootcamp(facilitator)
    with pytest.raises(AppError) as exc_info:
        verify_bootcamp_ownership(db, other_facilitator.user.id, bootcamp.id)
    assert exc_info.value.status_code == 403
    assert exc_info.value.message == "You can only manage your own bootcamps"


def test_student_is_rejected(db: Session, student, facilitator, make_bootcamp):
    bootcamp = make_bootcamp(facilitator)
    with pytest.raises(AppError) as exc_info:
        verify_bootcamp_ownership(db, student.user.id, bootcamp.id)
    assert exc_info.value.status_code == 403
    assert exc_info.value.message == "Only facilitators and admins can perform this action"


def test_missing_bootcamp_for_facilitator_is_404(db: Session, facilitator):
    with pytest.raises(AppError) as exc_info:
        verify_bootcamp_ownership(db, facilitator.user.id, uuid.uuid4())
    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Bootcamp not found"


def test_admin_bypasses_ownership(db: Session, admin, facilitator, make_bootcamp):
    bootcamp = make_bootcamp(facilitator)
    caps = verify_bootcamp_ownership(db, admin.user.id, bootcamp.id)
    assert caps.is_admin is True


def test_admin_with_facilitator_profile_still_bypasses(db: Session, facilitator, make_bootcamp, make_user):
    bootcamp = make_bootcamp(facilitator)
    dual = make_user(Role.FACILITATOR, name="Dual Role")
    db.add(Admin(user_id=dual.user.id, permissions=[], department=""))
    db.commit()

    caps = verify_bootcamp_ownership(db, dual.user.id, bootcamp.id)
    assert caps.is_admin is True
    assert caps.facilitator is not None
