"""Sessions router - bootcamp days, activities and attendance.

Uses mixed paths: /bootcamps/{id}/sessions and /sessions/{id}.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from mindforge.core.deps import get_db, require_roles
from mindforge.core.responses import success
from mindforge.db.enums import ROLES_CAN_MANAGE_BOOTCAMPS
from mindforge.schemas.auth import UserSession
from mindforge.schemas.session import (
    ActivityCreate, ActivityUpdate, AttendanceCreate, AttendanceUpdate,
    SessionCreate, SessionUpdate
)
from mindforge.services import session_service
from mindforge.utils.pagination import create_paginated_response, parse_pagination

router = APIRouter()

MANAGERS = list(ROLES_CAN_MANAGE_BOOTCAMPS)


@router.get("/bootcamps/{bootcamp_id}/sessions")
def list_sessions(
    bootcamp_id: UUID,
    page: str | None = Query(None),
    limit: str | None = Query(None),
    db: Session = Depends(get_db),
):
    pagination = parse_pagination(page, limit)
    items, total = session_service.list_sessions(db, bootcamp_id, pagination)
    return create_paginated_response(items, total, pagination.page, pagination.limit, "sessions")


@router.post("/bootcamps/{bootcamp_id}/sessions", status_code=status.HTTP_201_CREATED)
def create_session(
    bootcamp_id: UUID,
    data: SessionCreate,
    session: UserSession = Depends(require_roles(MANAGERS)),
    db: Session = Depends(get_db),
):
    return success(session=session_service.create_session(db, session, bootcamp_id, data))


@router.get("/sessions/{session_id}")
def get_session(session_id: UUID, db: Session = Depends(get_db)):
    """Session with activities, bootcamp summary and attendance."""
    return success(session=session_service.get_session_detail(db, session_id))


@router.put("/sessions/{session_id}")
def update_session(
    session_id: UUID,
    data: SessionUpdate,
    session: UserSession = Depends(require_roles(MANAGERS)),
    db: Session = Depends(get_db),
):
    return success(session=session_service.update_session(db, session, session_id, data))


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(
    session_id: UUID,
    session: UserSession = Depends(require_roles(MANAGERS)),
    db: Session = Depends(get_db),
):
    session_service.delete_session(db, session, session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Activities
# =============================================================================

@router.post("/sessions/{session_id}/activities", status_code=status.HTTP_201_CREATED)
def create_activity(
    session_id: UUID,
    data: ActivityCreate,
    session: UserSession = Depends(require_roles(MANAGERS)),
    db: Session = Depends(get_db),
):
    return success(activity=session_service.create_activity(db, session, session_id, data))


@router.put("/sessions/{session_id}/activities/{activity_id}")
def update_activity(
    session_id: UUID,
    activity_id: UUID,
    data: ActivityUpdate,
    session: UserSession = Depends(require_roles(MANAGERS)),
    db: Session = Depends(get_db),
):
    activity = session_service.update_activity(db, session, session_id, activity_id, data)
    return success(activity=activity)


@router.delete(
    "/sessions/{session_id}/activities/{activity_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_activity(
    session_id: UUID,
    activity_id: UUID,
    session: UserSession = Depends(require_roles(MANAGERS)),
    db: Session = Depends(get_db),
):
    session_service.delete_activity(db, session, session_id, activity_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Attendance
# =============================================================================

@router.get("/sessions/{session_id}/attendance")
def list_attendance(session_id: UUID, db: Session = Depends(get_db)):
    records = session_service.list_attendance(db, session_id)
    return success(results=len(records), attendance=records)


@router.post("/sessions/{session_id}/attendance", status_code=status.HTTP_201_CREATED)
def record_attendance(
    session_id: UUID,
    data: AttendanceCreate,
    session: UserSession = Depends(require_roles(MANAGERS)),
    db: Session = Depends(get_db),
):
    return success(attendance=session_service.record_attendance(db, session, session_id, data))


@router.put("/sessions/{session_id}/attendance/{attendance_id}")
def update_attendance(
    session_id: UUID,
    attendance_id: UUID,
    data: AttendanceUpdate,
    session: UserSession = Depends(require_roles(MANAGERS)),
    db: Session = Depends(get_db),
):
    record = session_service.update_attendance(db, session, session_id, attendance_id, data)
    return success(attendance=record)
