"""Session service - bootcamp days, their activities and attendance.

Every mutation resolves the owning bootcamp first and goes through
verify_bootcamp_ownership.
"""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, contains_eager, joinedload, selectinload

from mindforge.core.bootcamp_access import verify_bootcamp_ownership
from mindforge.core.errors import bad_request, not_found
from mindforge.db.models import (
    AttendanceRecord, Bootcamp, BootcampSession, SessionActivity, Student, User
)
from mindforge.schemas.auth import UserSession
from mindforge.schemas.session import (
    ActivityCreate, ActivityRead, ActivityUpdate, AttendanceCreate, AttendanceRead,
    AttendanceUpdate, SessionCreate, SessionDetail, SessionRead, SessionUpdate
)
from mindforge.utils.pagination import Pagination, paginate_query

logger = logging.getLogger(__name__)

DUPLICATE_DAY_MESSAGE = "A session for this day already exists"
DUPLICATE_ATTENDANCE_MESSAGE = "Attendance already recorded for this student"


def get_session(db: Session, session_id: UUID) -> BootcampSession:
    bootcamp_session = db.query(BootcampSession).filter(BootcampSession.id == session_id).first()
    if not bootcamp_session:
        raise not_found("Session not found")
    return bootcamp_session


def _day_taken(db: Session, bootcamp_id: UUID, day: int, exclude_id: UUID | None = None) -> bool:
    query = db.query(BootcampSession.id).filter(
        BootcampSession.bootcamp_id == bootcamp_id,
        BootcampSession.day == day,
    )
    if exclude_id:
        query = query.filter(BootcampSession.id != exclude_id)
    return query.first() is not None


def _commit_day(db: Session) -> None:
    """Commit a session write; the (bootcamp, day) constraint maps to the friendly message."""
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise bad_request(DUPLICATE_DAY_MESSAGE)


# =============================================================================
# Sessions
# =============================================================================

def list_sessions(
    db: Session, bootcamp_id: UUID, pagination: Pagination
) -> tuple[list[SessionRead], int]:
    """Sessions of a bootcamp ordered by day, activities ordered by time."""
    if not db.query(Bootcamp.id).filter(Bootcamp.id == bootcamp_id).first():
        raise not_found("Bootcamp not found")

    query = (
        db.query(BootcampSession)
        .options(selectinload(BootcampSession.activities))
        .filter(BootcampSession.bootcamp_id == bootcamp_id)
        .order_by(BootcampSession.day.asc())
    )
    items, total = paginate_query(query, pagination)
    return [SessionRead.model_validate(s) for s in items], total


def get_session_detail(db: Session, session_id: UUID) -> SessionDetail:
    bootcamp_session = (
        db.query(BootcampSession)
        .options(
            selectinload(BootcampSession.activities),
            joinedload(BootcampSession.bootcamp),
            selectinload(BootcampSession.attendance)
            .joinedload(AttendanceRecord.student)
            .joinedload(Student.user),
        )
        .filter(BootcampSession.id == session_id)
        .first()
    )
    if not bootcamp_session:
        raise not_found("Session not found")
    return SessionDetail.model_validate(bootcamp_session)


def create_session(
    db: Session, session: UserSession, bootcamp_id: UUID, data: SessionCreate
) -> SessionRead:
    if not db.query(Bootcamp.id).filter(Bootcamp.id == bootcamp_id).first():
        raise not_found("Bootcamp not found")
    verify_bootcamp_ownership(db, session.user_id, bootcamp_id)

    if _day_taken(db, bootcamp_id, data.day):
        raise bad_request(DUPLICATE_DAY_MESSAGE)

    bootcamp_session = BootcampSession(bootcamp_id=bootcamp_id, **data.model_dump())
    db.add(bootcamp_session)
    _commit_day(db)
    db.refresh(bootcamp_session)
    logger.info("Session created: bootcamp %s day %s", bootcamp_id, data.day)
    return SessionRead.model_validate(bootcamp_session)


def update_session(
    db: Session, session: UserSession, session_id: UUID, data: SessionUpdate
) -> SessionRead:
    bootcamp_session = get_session(db, session_id)
    verify_bootcamp_ownership(db, session.user_id, bootcamp_session.bootcamp_id)

    updates = data.model_dump(exclude_unset=True, exclude_none=True)
    new_day = updates.get("day")
    if new_day is not None and new_day != bootcamp_session.day:
        if _day_taken(db, bootcamp_session.bootcamp_id, new_day, exclude_id=session_id):
            raise bad_request(DUPLICATE_DAY_MESSAGE)

    for field, value in updates.items():
        setattr(bootcamp_session, field, value)
    _commit_day(db)
    db.refresh(bootcamp_session)
    return SessionRead.model_validate(bootcamp_session)


def delete_session(db: Session, session: UserSession, session_id: UUID) -> None:
    """Hard delete; activities and attendance cascade."""
    bootcamp_session = get_session(db, session_id)
    verify_bootcamp_ownership(db, session.user_id, bootcamp_session.bootcamp_id)
    db.delete(bootcamp_session)
    db.commit()
    logger.info("Session deleted: %s", session_id)


# =============================================================================
# Activities
# =============================================================================

def _get_activity(db: Session, session_id: UUID, activity_id: UUID) -> SessionActivity:
    activity = db.query(SessionActivity).filter(
        SessionActivity.id == activity_id,
        SessionActivity.session_id == session_id,
    ).first()
    if not activity:
        raise not_found("Activity not found")
    return activity


def create_activity(
    db: Session, session: UserSession, session_id: UUID, data: ActivityCreate
) -> ActivityRead:
    bootcamp_session = get_session(db, session_id)
    verify_bootcamp_ownership(db, session.user_id, bootcamp_session.bootcamp_id)

    activity = SessionActivity(session_id=session_id, **data.model_dump())
    db.add(activity)
    db.commit()
    db.refresh(activity)
    return ActivityRead.model_validate(activity)


def update_activity(
    db: Session, session: UserSession, session_id: UUID, activity_id: UUID, data: ActivityUpdate
) -> ActivityRead:
    bootcamp_session = get_session(db, session_id)
    activity = _get_activity(db, session_id, activity_id)
    verify_bootcamp_ownership(db, session.user_id, bootcamp_session.bootcamp_id)

    updates = data.model_dump(exclude_unset=True)
    for field, value in updates.items():
        # facilitator_notes is the only nullable column
        if value is None and field != "facilitator_notes":
            continue
        setattr(activity, field, value)
    db.commit()
    db.refresh(activity)
    return ActivityRead.model_validate(activity)


def delete_activity(db: Session, session: UserSession, session_id: UUID, activity_id: UUID) -> None:
    bootcamp_session = get_session(db, session_id)
    activity = _get_activity(db, session_id, activity_id)
    verify_bootcamp_ownership(db, session.user_id, bootcamp_session.bootcamp_id)
    db.delete(activity)
    db.commit()


# =============================================================================
# Attendance
# =============================================================================

def list_attendance(db: Session, session_id: UUID) -> list[AttendanceRead]:
    get_session(db, session_id)
    records = (
        db.query(AttendanceRecord)
        .join(AttendanceRecord.student)
        .join(Student.user)
        .options(contains_eager(AttendanceRecord.student).contains_eager(Student.user))
        .filter(AttendanceRecord.session_id == session_id)
        .order_by(User.name.asc())
        .all()
    )
    return [AttendanceRead.model_validate(r) for r in records]


def record_attendance(
    db: Session, session: UserSession, session_id: UUID, data: AttendanceCreate
) -> AttendanceRead:
    bootcamp_session = get_session(db, session_id)
    verify_bootcamp_ownership(db, session.user_id, bootcamp_session.bootcamp_id)

    if not db.query(Student.id).filter(Student.id == data.student_id).first():
        raise not_found("Student not found")

    duplicate = db.query(AttendanceRecord.id).filter(
        AttendanceRecord.session_id == session_id,
        AttendanceRecord.student_id == data.student_id,
    ).first()
    if duplicate:
        raise bad_request(DUPLICATE_ATTENDANCE_MESSAGE)

    values = data.model_dump()
    values["status"] = data.status.value
    record = AttendanceRecord(session_id=session_id, **values)
    db.add(record)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise bad_request(DUPLICATE_ATTENDANCE_MESSAGE)
    db.refresh(record)
    return AttendanceRead.model_validate(record)


def update_attendance(
    db: Session, session: UserSession, session_id: UUID, attendance_id: UUID, data: AttendanceUpdate
) -> AttendanceRead:
    bootcamp_session = get_session(db, session_id)
    record = db.query(AttendanceRecord).filter(
        AttendanceRecord.id == attendance_id,
        AttendanceRecord.session_id == session_id,
    ).first()
    if not record:
        raise not_found("Attendance record not found")
    verify_bootcamp_ownership(db, session.user_id, bootcamp_session.bootcamp_id)

    updates = data.model_dump(exclude_unset=True, exclude_none=True)
    if data.status is not None:
        updates["status"] = data.status.value
    for field, value in updates.items():
        setattr(record, field, value)
    db.commit()
    db.refresh(record)
    return AttendanceRead.model_validate(record)
