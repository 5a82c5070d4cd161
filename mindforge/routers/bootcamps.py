"""Bootcamps router - public catalogue, owner updates and enrollment."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from mindforge.core.deps import get_db, require_roles
from mindforge.core.responses import success
from mindforge.db.enums import ROLES_CAN_MANAGE_BOOTCAMPS, Role
from mindforge.schemas.auth import UserSession
from mindforge.schemas.bootcamp import BootcampCreate, BootcampUpdate
from mindforge.services import bootcamp_service
from mindforge.utils.pagination import create_paginated_response, parse_pagination

router = APIRouter()

MANAGERS = list(ROLES_CAN_MANAGE_BOOTCAMPS)


@router.get("")
def list_bootcamps(
    page: str | None = Query(None),
    limit: str | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    facilitator_id: UUID | None = Query(None, alias="facilitatorId"),
    subject: str | None = Query(None),
    format: str | None = Query(None),
    db: Session = Depends(get_db),
):
    """Paginated catalogue. Only published bootcamps unless `status` is given."""
    pagination = parse_pagination(page, limit)
    items, total = bootcamp_service.list_bootcamps(
        db,
        pagination,
        status=status_filter,
        facilitator_id=facilitator_id,
        subject=subject,
        format=format,
    )
    return create_paginated_response(items, total, pagination.page, pagination.limit, "bootcamps")


@router.get("/{bootcamp_id}")
def get_bootcamp(bootcamp_id: UUID, db: Session = Depends(get_db)):
    return success(bootcamp=bootcamp_service.get_bootcamp_detail(db, bootcamp_id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_bootcamp(
    data: BootcampCreate,
    session: UserSession = Depends(require_roles(MANAGERS)),
    db: Session = Depends(get_db),
):
    return success(bootcamp=bootcamp_service.create_bootcamp(db, session, data))


@router.put("/{bootcamp_id}")
def update_bootcamp(
    bootcamp_id: UUID,
    data: BootcampUpdate,
    session: UserSession = Depends(require_roles(MANAGERS)),
    db: Session = Depends(get_db),
):
    return success(bootcamp=bootcamp_service.update_bootcamp(db, session, bootcamp_id, data))


@router.post("/{bootcamp_id}/enroll", status_code=status.HTTP_201_CREATED)
def enroll(
    bootcamp_id: UUID,
    session: UserSession = Depends(require_roles([Role.STUDENT])),
    db: Session = Depends(get_db),
):
    """Enroll the calling student in a published bootcamp with a free seat."""
    return success(enrollment=bootcamp_service.enroll_student(db, session, bootcamp_id))
