"""Progress service - skill assessments and the rubrics they are graded against."""

import logging
from uuid import UUID

from sqlalchemy.orm import Session, joinedload, selectinload

from mindforge.core.bootcamp_access import resolve_capabilities, verify_bootcamp_ownership
from mindforge.core.errors import bad_request, forbidden, not_found
from mindforge.db.models import (
    AssessmentRubric, Bootcamp, BootcampSession, Facilitator, ProgressRecord, Student
)
from mindforge.schemas.auth import UserSession
from mindforge.schemas.progress import ProgressCreate, ProgressRead, RubricRead
from mindforge.utils.pagination import Pagination, paginate_query

logger = logging.getLogger(__name__)


def _with_relations(query):
    return query.options(
        joinedload(ProgressRecord.student).joinedload(Student.user),
        joinedload(ProgressRecord.facilitator).joinedload(Facilitator.user),
        joinedload(ProgressRecord.bootcamp),
        joinedload(ProgressRecord.session),
    )


def list_student_progress(
    db: Session,
    student_id: UUID,
    pagination: Pagination,
    skill: str | None = None,
    bootcamp_id: UUID | None = None,
) -> tuple[list[ProgressRead], int]:
    """A student's progress records, newest assessment first."""
    if not db.query(Student.id).filter(Student.id == student_id).first():
        raise not_found("Student not found")

    query = _with_relations(db.query(ProgressRecord)).filter(ProgressRecord.student_id == student_id)
    if skill:
        query = query.filter(ProgressRecord.skill == skill)
    if bootcamp_id:
        query = query.filter(ProgressRecord.bootcamp_id == bootcamp_id)

    items, total = paginate_query(
        query.order_by(ProgressRecord.assessment_date.desc()), pagination
    )
    return [ProgressRead.model_validate(p) for p in items], total


def list_bootcamp_progress(
    db: Session,
    bootcamp_id: UUID,
    skill: str | None = None,
    student_id: UUID | None = None,
) -> list[ProgressRead]:
    if not db.query(Bootcamp.id).filter(Bootcamp.id == bootcamp_id).first():
        raise not_found("Bootcamp not found")

    query = _with_relations(db.query(ProgressRecord)).filter(ProgressRecord.bootcamp_id == bootcamp_id)
    if skill:
        query = query.filter(ProgressRecord.skill == skill)
    if student_id:
        query = query.filter(ProgressRecord.student_id == student_id)
    records = query.order_by(ProgressRecord.assessment_date.desc()).all()
    return [ProgressRead.model_validate(p) for p in records]


def create_progress(db: Session, session: UserSession, data: ProgressCreate) -> ProgressRead:
    """
    Record an assessment.

    The scoped bootcamp is the given bootcamp, or the session's bootcamp
    when only a session is given; ownership is checked on it. The assessor
    is the caller's facilitator profile. An admin without one assesses on
    behalf of the scoped bootcamp's facilitator, and cannot create an
    unscoped record.
    """
    caps = resolve_capabilities(db, session.user_id)
    if not caps.has_access:
        raise forbidden("Only facilitators and admins can create progress records")

    if not db.query(Student.id).filter(Student.id == data.student_id).first():
        raise not_found("Student not found")

    bootcamp = None
    if data.bootcamp_id:
        bootcamp = db.query(Bootcamp).filter(Bootcamp.id == data.bootcamp_id).first()
        if not bootcamp:
            raise not_found("Bootcamp not found")

    if data.session_id:
        bootcamp_session = db.query(BootcampSession).filter(
            BootcampSession.id == data.session_id
        ).first()
        if not bootcamp_session:
            raise not_found("Session not found")
        if bootcamp and bootcamp_session.bootcamp_id != bootcamp.id:
            raise bad_request("Session does not belong to the specified bootcamp")
        if not bootcamp:
            bootcamp = db.query(Bootcamp).filter(Bootcamp.id == bootcamp_session.bootcamp_id).first()

    if bootcamp:
        verify_bootcamp_ownership(db, session.user_id, bootcamp.id)

    if caps.facilitator:
        assessor_id = caps.facilitator.id
    elif bootcamp:
        assessor_id = bootcamp.facilitator_id
    else:
        raise forbidden("Admins must have facilitator access to create progress records")

    record = ProgressRecord(
        student_id=data.student_id,
        facilitator_id=assessor_id,
        bootcamp_id=bootcamp.id if bootcamp else None,
        session_id=data.session_id,
        skill=data.skill,
        level=data.level,
        assessment_date=data.assessment_date,
        evidence=data.evidence,
        next_steps=data.next_steps,
    )
    db.add(record)
    db.commit()
    logger.info("Progress recorded for student %s (%s)", data.student_id, data.skill)

    record = _with_relations(db.query(ProgressRecord)).filter(ProgressRecord.id == record.id).one()
    return ProgressRead.model_validate(record)


# =============================================================================
# Rubrics
# =============================================================================

def list_rubrics(db: Session) -> list[RubricRead]:
    rubrics = (
        db.query(AssessmentRubric)
        .options(selectinload(AssessmentRubric.levels))
        .order_by(AssessmentRubric.skill.asc())
        .all()
    )
    return [RubricRead.model_validate(r) for r in rubrics]


def get_rubric(db: Session, skill: str) -> RubricRead:
    rubric = (
        db.query(AssessmentRubric)
        .options(selectinload(AssessmentRubric.levels))
        .filter(AssessmentRubric.skill == skill)
        .first()
    )
    if not rubric:
        raise not_found("Rubric not found for this skill")
    return RubricRead.model_validate(rubric)
