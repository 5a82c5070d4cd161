"""Schemas for the current user's profile with role-specific relations."""

from mindforge.schemas.bootcamp import BootcampRead, EnrollmentWithBootcamp
from mindforge.schemas.knowledge_stream import StudentStreamRead
from mindforge.schemas.user import (
    AdminProfileRead,
    FacilitatorProfileRead,
    ParentProfileRead,
    StudentProfileRead,
    UserRead,
    UserSummary,
)


class StudentProfileDetail(StudentProfileRead):
    enrollments: list[EnrollmentWithBootcamp] = []
    knowledge_streams: list[StudentStreamRead] = []


class ChildRead(StudentProfileRead):
    user: UserSummary
    enrollments: list[EnrollmentWithBootcamp] = []


class ParentProfileDetail(ParentProfileRead):
    children: list[ChildRead] = []


class FacilitatorProfileDetail(FacilitatorProfileRead):
    bootcamps_led: list[BootcampRead] = []


class MeRead(UserRead):
    """Current user with the role profile and its relations under the role's key."""
    student: StudentProfileDetail | None = None
    parent: ParentProfileDetail | None = None
    facilitator: FacilitatorProfileDetail | None = None
    admin: AdminProfileRead | None = None
