"""Communication service - internal messages, recipients and read receipts.

Lifecycle: DRAFT -> SENT, or DRAFT -> SCHEDULED -> SENT. A SENT
communication is frozen and its sent_at is stamped exactly once.
"""

import logging
from uuid import UUID

import nh3
from sqlalchemy import and_, exists, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from mindforge.core.errors import bad_request, forbidden, not_found
from mindforge.db.base import utcnow
from mindforge.db.enums import CommunicationStatus
from mindforge.db.models import Communication, CommunicationRecipient, ReadReceipt, User
from mindforge.schemas.auth import UserSession
from mindforge.schemas.communication import (
    CommunicationCreate, CommunicationRead, CommunicationUpdate, ReadReceiptRead
)
from mindforge.utils.pagination import Pagination, paginate_query

logger = logging.getLogger(__name__)

# Allowed HTML tags for rich text message bodies
ALLOWED_TAGS = {"p", "br", "strong", "em", "ul", "ol", "li", "a", "blockquote", "h1", "h2", "h3", "code", "pre"}
ALLOWED_ATTRIBUTES = {"a": {"href", "target"}}


def sanitize_html(html: str) -> str:
    """Sanitize HTML to prevent XSS, allowing only safe rich text tags."""
    return nh3.clean(html, tags=ALLOWED_TAGS, attributes=ALLOWED_ATTRIBUTES)


def _with_relations(query):
    return query.options(
        joinedload(Communication.sender),
        selectinload(Communication.recipients).joinedload(CommunicationRecipient.user),
        selectinload(Communication.read_receipts),
    )


def _load(db: Session, communication_id: UUID) -> Communication:
    communication = (
        _with_relations(db.query(Communication))
        .filter(Communication.id == communication_id)
        .first()
    )
    if not communication:
        raise not_found("Communication not found")
    return communication


def _is_recipient(communication: Communication, user_id: UUID) -> bool:
    return any(r.recipient_id == user_id for r in communication.recipients)


def _check_recipients(db: Session, recipient_ids: list[UUID]) -> list[UUID]:
    """Deduplicate and verify that every recipient exists."""
    unique_ids = list(dict.fromkeys(recipient_ids))
    found = db.query(func.count(User.id)).filter(User.id.in_(unique_ids)).scalar()
    if found != len(unique_ids):
        raise not_found("One or more recipients not found")
    return unique_ids


def create_communication(
    db: Session, session: UserSession, data: CommunicationCreate
) -> CommunicationRead:
    """
    Create a communication from the caller.

    Status is SCHEDULED when scheduledFor is given, otherwise the requested
    status (DRAFT when absent). Only SENT stamps sentAt.
    """
    recipient_ids = _check_recipients(db, data.recipient_ids)

    sent_at = None
    if data.scheduled_for is not None:
        status = CommunicationStatus.SCHEDULED
    elif data.status == CommunicationStatus.SENT:
        status = CommunicationStatus.SENT
        sent_at = utcnow()
    elif data.status == CommunicationStatus.SCHEDULED:
        status = CommunicationStatus.SCHEDULED
    else:
        status = CommunicationStatus.DRAFT

    communication = Communication(
        sender_id=session.user_id,
        type=data.type.value,
        subject=data.subject,
        content=sanitize_html(data.content),
        status=status.value,
        scheduled_for=data.scheduled_for,
        sent_at=sent_at,
        recipients=[CommunicationRecipient(recipient_id=rid) for rid in recipient_ids],
    )
    db.add(communication)
    db.commit()
    logger.info(
        "Communication %s created by %s (%s, %d recipients)",
        communication.id, session.user_id, status.value, len(recipient_ids),
    )
    return CommunicationRead.model_validate(_load(db, communication.id))


def list_communications(
    db: Session,
    session: UserSession,
    pagination: Pagination,
    type: str | None = None,
    status: str | None = None,
) -> tuple[list[CommunicationRead], int]:
    """Communications the caller sent or received, newest first."""
    received = exists().where(
        CommunicationRecipient.communication_id == Communication.id,
        CommunicationRecipient.recipient_id == session.user_id,
    )
    query = _with_relations(db.query(Communication)).filter(
        or_(Communication.sender_id == session.user_id, received)
    )
    if type:
        query = query.filter(Communication.type == type)
    if status:
        query = query.filter(Communication.status == status)

    items, total = paginate_query(query.order_by(Communication.created_at.desc()), pagination)
    return [CommunicationRead.model_validate(c) for c in items], total


def count_unread(db: Session, session: UserSession, type: str | None = None) -> int:
    """SENT communications addressed to the caller without a read receipt."""
    has_receipt = exists().where(
        and_(
            ReadReceipt.communication_id == Communication.id,
            ReadReceipt.user_id == session.user_id,
        )
    )
    query = (
        db.query(func.count(Communication.id))
        .join(CommunicationRecipient, CommunicationRecipient.communication_id == Communication.id)
        .filter(
            CommunicationRecipient.recipient_id == session.user_id,
            Communication.status == CommunicationStatus.SENT.value,
            ~has_receipt,
        )
    )
    if type:
        query = query.filter(Communication.type == type)
    return query.scalar() or 0


def get_communication(db: Session, session: UserSession, communication_id: UUID) -> CommunicationRead:
    communication = _load(db, communication_id)
    if communication.sender_id != session.user_id and not _is_recipient(communication, session.user_id):
        raise forbidden("You do not have access to this communication")
    return CommunicationRead.model_validate(communication)


def update_communication(
    db: Session, session: UserSession, communication_id: UUID, data: CommunicationUpdate
) -> CommunicationRead:
    communication = _load(db, communication_id)
    if communication.sender_id != session.user_id:
        raise forbidden("Only the sender can update this communication")
    if communication.status == CommunicationStatus.SENT.value:
        raise bad_request("Cannot update a communication that has already been sent")

    if data.recipient_ids is not None:
        recipient_ids = _check_recipients(db, data.recipient_ids)
        # Flush removals first so re-added recipients do not hit the unique pair
        communication.recipients.clear()
        db.flush()
        communication.recipients.extend(
            CommunicationRecipient(recipient_id=rid) for rid in recipient_ids
        )

    if data.type is not None:
        communication.type = data.type.value
    if data.subject is not None:
        communication.subject = data.subject
    if data.content is not None:
        communication.content = sanitize_html(data.content)
    if data.scheduled_for is not None:
        communication.scheduled_for = data.scheduled_for

    if data.status == CommunicationStatus.SENT:
        communication.status = CommunicationStatus.SENT.value
        if communication.sent_at is None:
            communication.sent_at = utcnow()
    elif data.scheduled_for is not None:
        communication.status = CommunicationStatus.SCHEDULED.value
    elif data.status is not None:
        communication.status = data.status.value

    db.commit()
    return CommunicationRead.model_validate(_load(db, communication_id))


def delete_communication(db: Session, session: UserSession, communication_id: UUID) -> None:
    communication = _load(db, communication_id)
    if communication.sender_id != session.user_id:
        raise forbidden("Only the sender can delete this communication")
    db.delete(communication)
    db.commit()


def mark_as_read(
    db: Session, session: UserSession, communication_id: UUID
) -> tuple[ReadReceiptRead, bool]:
    """
    Get or create the caller's read receipt.

    Returns:
        (receipt, created) - created is False when it already existed
    """
    communication = _load(db, communication_id)
    if not _is_recipient(communication, session.user_id):
        raise forbidden("You are not a recipient of this communication")

    def existing_receipt() -> ReadReceipt | None:
        return db.query(ReadReceipt).filter(
            ReadReceipt.communication_id == communication_id,
            ReadReceipt.user_id == session.user_id,
        ).first()

    receipt = existing_receipt()
    if receipt:
        return ReadReceiptRead.model_validate(receipt), False

    receipt = ReadReceipt(communication_id=communication_id, user_id=session.user_id)
    db.add(receipt)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request inserted the receipt first
        db.rollback()
        receipt = existing_receipt()
        if receipt is None:
            raise
        return ReadReceiptRead.model_validate(receipt), False

    db.refresh(receipt)
    return ReadReceiptRead.model_validate(receipt), True
