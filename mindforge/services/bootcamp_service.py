"""Bootcamp service - catalogue, ownership-checked updates and enrollment."""

import json
import logging
from uuid import UUID

from sqlalchemy import String, cast
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from mindforge.core.bootcamp_access import resolve_capabilities, verify_bootcamp_ownership
from mindforge.core.errors import bad_request, forbidden, not_found
from mindforge.db.enums import BootcampStatus, DEFAULT_BOOTCAMP_STATUS, EnrollmentStatus
from mindforge.db.models import Bootcamp, BootcampSession, Enrollment, Facilitator, Student
from mindforge.schemas.auth import UserSession
from mindforge.schemas.bootcamp import (
    BootcampCreate, BootcampDetail, BootcampListItem, BootcampRead,
    BootcampUpdate, EnrollmentRead
)
from mindforge.services.counter_service import bounded_increment
from mindforge.utils.normalization import normalize_list
from mindforge.utils.pagination import Pagination, paginate_query

logger = logging.getLogger(__name__)

NOT_AVAILABLE_MESSAGE = "Bootcamp is not available for enrollment"
FULL_MESSAGE = "Bootcamp is full"
ALREADY_ENROLLED_MESSAGE = "Already enrolled in this bootcamp"


def get_bootcamp(db: Session, bootcamp_id: UUID) -> Bootcamp:
    bootcamp = db.query(Bootcamp).filter(Bootcamp.id == bootcamp_id).first()
    if not bootcamp:
        raise not_found("Bootcamp not found")
    return bootcamp


def _json_list_contains(column, value: str):
    """
    Portable membership test on a JSON array of strings.

    The needle is serialized the same way the JSON column stores it, then
    LIKE wildcards in it are escaped so they match literally.
    """
    needle = json.dumps(value)
    needle = needle.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return cast(column, String).like(f"%{needle}%", escape="\\")


def list_bootcamps(
    db: Session,
    pagination: Pagination,
    status: str | None = None,
    facilitator_id: UUID | None = None,
    subject: str | None = None,
    format: str | None = None,
) -> tuple[list[BootcampListItem], int]:
    """Filtered catalogue, newest first. Defaults to published bootcamps."""
    query = db.query(Bootcamp).options(
        joinedload(Bootcamp.facilitator).joinedload(Facilitator.user)
    )
    query = query.filter(Bootcamp.status == (status or BootcampStatus.PUBLISHED.value))
    if facilitator_id:
        query = query.filter(Bootcamp.facilitator_id == facilitator_id)
    if subject:
        query = query.filter(_json_list_contains(Bootcamp.subjects, subject))
    if format:
        query = query.filter(_json_list_contains(Bootcamp.format, format))

    items, total = paginate_query(query.order_by(Bootcamp.created_at.desc()), pagination)
    return [BootcampListItem.model_validate(b) for b in items], total


def get_bootcamp_detail(db: Session, bootcamp_id: UUID) -> BootcampDetail:
    bootcamp = (
        db.query(Bootcamp)
        .options(
            joinedload(Bootcamp.facilitator).joinedload(Facilitator.user),
            selectinload(Bootcamp.sessions).selectinload(BootcampSession.activities),
            selectinload(Bootcamp.discussion_topics),
        )
        .filter(Bootcamp.id == bootcamp_id)
        .first()
    )
    if not bootcamp:
        raise not_found("Bootcamp not found")
    return BootcampDetail.model_validate(bootcamp)


def create_bootcamp(db: Session, session: UserSession, data: BootcampCreate) -> BootcampRead:
    """Create a DRAFT bootcamp led by the caller's facilitator profile."""
    caps = resolve_capabilities(db, session.user_id)
    if not caps.facilitator:
        raise forbidden("Only facilitators can create bootcamps")

    values = data.model_dump()
    values["format"] = [f.value for f in data.format]
    values["subjects"] = normalize_list(data.subjects)
    bootcamp = Bootcamp(
        **values,
        facilitator_id=caps.facilitator.id,
        status=DEFAULT_BOOTCAMP_STATUS.value,
        enrollment_count=0,
    )
    db.add(bootcamp)
    db.commit()
    db.refresh(bootcamp)
    logger.info("Bootcamp created: %s by facilitator %s", bootcamp.id, caps.facilitator.id)
    return BootcampRead.model_validate(bootcamp)


def update_bootcamp(
    db: Session, session: UserSession, bootcamp_id: UUID, data: BootcampUpdate
) -> BootcampRead:
    """Apply a partial update. Capacity may not drop below current enrollment."""
    verify_bootcamp_ownership(db, session.user_id, bootcamp_id)
    bootcamp = get_bootcamp(db, bootcamp_id)

    # Explicit nulls are treated as "leave unchanged"
    updates = data.model_dump(exclude_unset=True, exclude_none=True)
    if "capacity" in updates and updates["capacity"] < bootcamp.enrollment_count:
        raise bad_request("Capacity cannot be less than the current enrollment count")

    if data.format is not None:
        updates["format"] = [f.value for f in data.format]
    if data.subjects is not None:
        updates["subjects"] = normalize_list(data.subjects)
    if data.status is not None:
        updates["status"] = data.status.value

    for field, value in updates.items():
        setattr(bootcamp, field, value)

    db.commit()
    db.refresh(bootcamp)
    return BootcampRead.model_validate(bootcamp)


def enroll_student(db: Session, session: UserSession, bootcamp_id: UUID) -> EnrollmentRead:
    """
    Enroll the calling student.

    Checks run in order: student profile, bootcamp exists, published,
    capacity, duplicate. The seat is then taken with a conditional
    increment and the enrollment inserted in the same transaction, so
    concurrent requests can neither overfill nor double-enroll.
    """
    student = db.query(Student).filter(Student.user_id == session.user_id).first()
    if not student:
        raise forbidden("Only students can enroll in bootcamps")

    bootcamp = get_bootcamp(db, bootcamp_id)
    if bootcamp.status != BootcampStatus.PUBLISHED.value:
        raise bad_request(NOT_AVAILABLE_MESSAGE)
    if bootcamp.enrollment_count >= bootcamp.capacity:
        raise bad_request(FULL_MESSAGE)

    existing = db.query(Enrollment.id).filter(
        Enrollment.student_id == student.id,
        Enrollment.bootcamp_id == bootcamp_id,
    ).first()
    if existing:
        raise bad_request(ALREADY_ENROLLED_MESSAGE)

    took_seat = bounded_increment(
        db, Bootcamp, bootcamp_id, "enrollment_count", "capacity",
        Bootcamp.status == BootcampStatus.PUBLISHED.value,
    )
    if not took_seat:
        db.rollback()
        raise bad_request(FULL_MESSAGE)

    enrollment = Enrollment(
        student_id=student.id,
        bootcamp_id=bootcamp_id,
        status=EnrollmentStatus.ACTIVE.value,
    )
    db.add(enrollment)
    try:
        db.commit()
    except IntegrityError:
        # Lost the race on (student, bootcamp); the seat is released with the rollback
        db.rollback()
        raise bad_request(ALREADY_ENROLLED_MESSAGE)

    db.refresh(enrollment)
    logger.info("Student %s enrolled in bootcamp %s", student.id, bootcamp_id)
    return EnrollmentRead.model_validate(enrollment)
