"""Communications router - internal messaging. Every endpoint requires a session."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from mindforge.core.deps import get_current_session, get_db
from mindforge.core.responses import success
from mindforge.schemas.auth import UserSession
from mindforge.schemas.communication import CommunicationCreate, CommunicationUpdate
from mindforge.services import communication_service
from mindforge.utils.pagination import create_paginated_response, parse_pagination

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_communication(
    data: CommunicationCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    communication = communication_service.create_communication(db, session, data)
    return success(communication=communication)


@router.get("")
def list_communications(
    page: str | None = Query(None),
    limit: str | None = Query(None),
    type: str | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    pagination = parse_pagination(page, limit)
    items, total = communication_service.list_communications(
        db, session, pagination, type=type, status=status_filter
    )
    return create_paginated_response(
        items, total, pagination.page, pagination.limit, "communications"
    )


@router.get("/unread")
def unread_count(
    type: str | None = Query(None),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return success(unreadCount=communication_service.count_unread(db, session, type=type))


@router.get("/{communication_id}")
def get_communication(
    communication_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    communication = communication_service.get_communication(db, session, communication_id)
    return success(communication=communication)


@router.put("/{communication_id}")
def update_communication(
    communication_id: UUID,
    data: CommunicationUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    communication = communication_service.update_communication(db, session, communication_id, data)
    return success(communication=communication)


@router.delete("/{communication_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_communication(
    communication_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    communication_service.delete_communication(db, session, communication_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{communication_id}/read")
def mark_as_read(
    communication_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    receipt, created = communication_service.mark_as_read(db, session, communication_id)
    if not created:
        return success(message="Communication already marked as read", readReceipt=receipt)
    return success(readReceipt=receipt)
