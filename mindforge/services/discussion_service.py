"""Discussion service - one discussion topic per bootcamp day."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from mindforge.core.bootcamp_access import verify_bootcamp_ownership
from mindforge.core.errors import bad_request, not_found
from mindforge.db.models import Bootcamp, DiscussionTopic
from mindforge.schemas.auth import UserSession
from mindforge.schemas.discussion import (
    DiscussionCreate, DiscussionDetail, DiscussionRead, DiscussionUpdate
)
from mindforge.utils.normalization import normalize_list
from mindforge.utils.pagination import Pagination, paginate_query

DUPLICATE_DAY_MESSAGE = "A discussion topic for this day already exists"


def get_discussion(db: Session, discussion_id: UUID) -> DiscussionTopic:
    topic = db.query(DiscussionTopic).filter(DiscussionTopic.id == discussion_id).first()
    if not topic:
        raise not_found("Discussion topic not found")
    return topic


def _day_taken(db: Session, bootcamp_id: UUID, day: int, exclude_id: UUID | None = None) -> bool:
    query = db.query(DiscussionTopic.id).filter(
        DiscussionTopic.bootcamp_id == bootcamp_id,
        DiscussionTopic.day == day,
    )
    if exclude_id:
        query = query.filter(DiscussionTopic.id != exclude_id)
    return query.first() is not None


def _commit_day(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise bad_request(DUPLICATE_DAY_MESSAGE)


def list_discussions(
    db: Session, bootcamp_id: UUID, pagination: Pagination, day: int | None = None
) -> tuple[list[DiscussionRead], int]:
    if not db.query(Bootcamp.id).filter(Bootcamp.id == bootcamp_id).first():
        raise not_found("Bootcamp not found")

    query = db.query(DiscussionTopic).filter(DiscussionTopic.bootcamp_id == bootcamp_id)
    if day is not None:
        query = query.filter(DiscussionTopic.day == day)
    items, total = paginate_query(query.order_by(DiscussionTopic.day.asc()), pagination)
    return [DiscussionRead.model_validate(t) for t in items], total


def get_discussion_detail(db: Session, discussion_id: UUID) -> DiscussionDetail:
    topic = (
        db.query(DiscussionTopic)
        .options(joinedload(DiscussionTopic.bootcamp))
        .filter(DiscussionTopic.id == discussion_id)
        .first()
    )
    if not topic:
        raise not_found("Discussion topic not found")
    return DiscussionDetail.model_validate(topic)


def create_discussion(
    db: Session, session: UserSession, bootcamp_id: UUID, data: DiscussionCreate
) -> DiscussionRead:
    verify_bootcamp_ownership(db, session.user_id, bootcamp_id)
    if not db.query(Bootcamp.id).filter(Bootcamp.id == bootcamp_id).first():
        raise not_found("Bootcamp not found")

    if _day_taken(db, bootcamp_id, data.day):
        raise bad_request(DUPLICATE_DAY_MESSAGE)

    values = data.model_dump()
    values["tags"] = normalize_list(data.tags)
    topic = DiscussionTopic(bootcamp_id=bootcamp_id, **values)
    db.add(topic)
    _commit_day(db)
    db.refresh(topic)
    return DiscussionRead.model_validate(topic)


def update_discussion(
    db: Session, session: UserSession, discussion_id: UUID, data: DiscussionUpdate
) -> DiscussionRead:
    topic = get_discussion(db, discussion_id)
    verify_bootcamp_ownership(db, session.user_id, topic.bootcamp_id)

    updates = data.model_dump(exclude_unset=True, exclude_none=True)
    new_day = updates.get("day")
    if new_day is not None and new_day != topic.day:
        if _day_taken(db, topic.bootcamp_id, new_day, exclude_id=discussion_id):
            raise bad_request(DUPLICATE_DAY_MESSAGE)
    if data.tags is not None:
        updates["tags"] = normalize_list(data.tags)

    for field, value in updates.items():
        setattr(topic, field, value)
    _commit_day(db)
    db.refresh(topic)
    return DiscussionRead.model_validate(topic)


def delete_discussion(db: Session, session: UserSession, discussion_id: UUID) -> None:
    topic = get_discussion(db, discussion_id)
    verify_bootcamp_ownership(db, session.user_id, topic.bootcamp_id)
    db.delete(topic)
    db.commit()
