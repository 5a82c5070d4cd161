"""Bootcamp access control - centralized ownership checks for bootcamp content.

Access rules for mutating a bootcamp and everything nested under it
(sessions, activities, attendance, discussion topics, progress records):
- Admin profile: always allowed, even when the user also has a facilitator profile
- Facilitator profile: only bootcamps where they are the facilitator
- Anyone else: denied

Nested entities resolve their owning bootcamp id first and then call
verify_bootcamp_ownership, so there is exactly one ownership rule.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from mindforge.core.errors import forbidden, not_found, service_unavailable
from mindforge.db.models import Admin, Bootcamp, Facilitator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Capabilities:
    """Profiles held by a user that matter for bootcamp management."""
    facilitator: Facilitator | None
    is_admin: bool

    @property
    def has_access(self) -> bool:
        return self.facilitator is not None or self.is_admin


def resolve_capabilities(db: Session, user_id: UUID) -> Capabilities:
    """
    Look up the facilitator and admin profiles of a user.

    A missing profile is a legitimate None. A storage transport failure is
    raised as a 503, never reported as "no access".
    """
    try:
        facilitator = db.query(Facilitator).filter(Facilitator.user_id == user_id).first()
        admin_id = db.query(Admin.id).filter(Admin.user_id == user_id).first()
    except OperationalError:
        logger.error("Capability lookup failed for user %s", user_id)
        raise service_unavailable()

    return Capabilities(facilitator=facilitator, is_admin=admin_id is not None)


def verify_bootcamp_ownership(db: Session, user_id: UUID, bootcamp_id: UUID) -> Capabilities:
    """
    Check that the user may manage the bootcamp.

    Raises:
        AppError 403: no facilitator/admin profile, or another facilitator's bootcamp
        AppError 404: bootcamp does not exist (facilitator path only)
    """
    caps = resolve_capabilities(db, user_id)
    if not caps.has_access:
        raise forbidden("Only facilitators and admins can perform this action")

    if caps.is_admin:
        return caps

    bootcamp = db.query(Bootcamp).filter(Bootcamp.id == bootcamp_id).first()
    if not bootcamp:
        raise not_found("Bootcamp not found")

    if bootcamp.facilitator_id != caps.facilitator.id:
        raise forbidden("You can only manage your own bootcamps")

    return caps
