"""Enum definitions for application constants."""

from enum import Enum


class Role(str, Enum):
    """
    User roles. Each user holds exactly one matching profile record.

    - STUDENT: enrolls in bootcamps, is assessed
    - PARENT: follows one or more students
    - FACILITATOR: owns and runs bootcamps
    - ADMIN: bypasses bootcamp ownership checks
    """
    STUDENT = "STUDENT"
    PARENT = "PARENT"
    FACILITATOR = "FACILITATOR"
    ADMIN = "ADMIN"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_


class BootcampStatus(str, Enum):
    """
    Bootcamp lifecycle.

    Only PUBLISHED bootcamps accept enrollments.
    """
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class BootcampFormat(str, Enum):
    IN_PERSON = "IN_PERSON"
    ONLINE = "ONLINE"
    HYBRID = "HYBRID"


class EnrollmentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    DROPPED = "DROPPED"


class AttendanceStatus(str, Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"


class CommunicationType(str, Enum):
    EMAIL = "EMAIL"
    NOTIFICATION = "NOTIFICATION"
    MESSAGE = "MESSAGE"
    ANNOUNCEMENT = "ANNOUNCEMENT"


class CommunicationStatus(str, Enum):
    """
    Communication lifecycle.

    DRAFT → SENT, or DRAFT → SCHEDULED → SENT. SENT is terminal.
    """
    DRAFT = "DRAFT"
    SCHEDULED = "SCHEDULED"
    SENT = "SENT"


# Roles allowed to manage bootcamp content (further narrowed by ownership)
ROLES_CAN_MANAGE_BOOTCAMPS = {Role.FACILITATOR, Role.ADMIN}

DEFAULT_BOOTCAMP_STATUS = BootcampStatus.DRAFT
DEFAULT_SUBSCRIPTION_STATUS = "trial"
