"""Discussions router - daily discussion topics of a bootcamp."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from mindforge.core.deps import get_current_session, get_db, require_roles
from mindforge.core.responses import success
from mindforge.db.enums import ROLES_CAN_MANAGE_BOOTCAMPS
from mindforge.schemas.auth import UserSession
from mindforge.schemas.discussion import DiscussionCreate, DiscussionUpdate
from mindforge.services import discussion_service
from mindforge.utils.pagination import create_paginated_response, parse_pagination

router = APIRouter()

MANAGERS = list(ROLES_CAN_MANAGE_BOOTCAMPS)


@router.get("/bootcamps/{bootcamp_id}/discussions")
def list_discussions(
    bootcamp_id: UUID,
    page: str | None = Query(None),
    limit: str | None = Query(None),
    day: int | None = Query(None, gt=0),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    pagination = parse_pagination(page, limit)
    items, total = discussion_service.list_discussions(db, bootcamp_id, pagination, day=day)
    return create_paginated_response(items, total, pagination.page, pagination.limit, "discussions")


@router.post("/bootcamps/{bootcamp_id}/discussions", status_code=status.HTTP_201_CREATED)
def create_discussion(
    bootcamp_id: UUID,
    data: DiscussionCreate,
    session: UserSession = Depends(require_roles(MANAGERS)),
    db: Session = Depends(get_db),
):
    topic = discussion_service.create_discussion(db, session, bootcamp_id, data)
    return success(discussion=topic)


@router.get("/discussions/{discussion_id}")
def get_discussion(
    discussion_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return success(discussion=discussion_service.get_discussion_detail(db, discussion_id))


@router.put("/discussions/{discussion_id}")
def update_discussion(
    discussion_id: UUID,
    data: DiscussionUpdate,
    session: UserSession = Depends(require_roles(MANAGERS)),
    db: Session = Depends(get_db),
):
    topic = discussion_service.update_discussion(db, session, discussion_id, data)
    return success(discussion=topic)


@router.delete("/discussions/{discussion_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_discussion(
    discussion_id: UUID,
    session: UserSession = Depends(require_roles(MANAGERS)),
    db: Session = Depends(get_db),
):
    discussion_service.delete_discussion(db, session, discussion_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
