"""Knowledge stream service - learning paths and their assignment to students."""

from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from mindforge.core.bootcamp_access import resolve_capabilities
from mindforge.core.errors import bad_request, forbidden, not_found
from mindforge.db.models import KnowledgeStream, StreamLevel, Student, StudentKnowledgeStream
from mindforge.schemas.auth import UserSession
from mindforge.schemas.knowledge_stream import (
    AssignmentRead, KnowledgeStreamCreate, KnowledgeStreamRead, StudentStreamRead
)
from mindforge.utils.normalization import normalize_list, normalize_name

DUPLICATE_ASSIGNMENT_MESSAGE = "Knowledge stream already assigned to this student"
DUPLICATE_NAME_MESSAGE = "Knowledge stream with this name already exists"


def _student_counts(db: Session, stream_ids: list[UUID]) -> dict[UUID, int]:
    if not stream_ids:
        return {}
    rows = (
        db.query(StudentKnowledgeStream.knowledge_stream_id, func.count(StudentKnowledgeStream.id))
        .filter(StudentKnowledgeStream.knowledge_stream_id.in_(stream_ids))
        .group_by(StudentKnowledgeStream.knowledge_stream_id)
        .all()
    )
    return {stream_id: count for stream_id, count in rows}


def _to_read(stream: KnowledgeStream, student_count: int) -> KnowledgeStreamRead:
    read = KnowledgeStreamRead.model_validate(stream)
    return read.model_copy(update={"student_count": student_count})


def list_streams(db: Session) -> list[KnowledgeStreamRead]:
    streams = (
        db.query(KnowledgeStream)
        .options(selectinload(KnowledgeStream.levels))
        .order_by(KnowledgeStream.name.asc())
        .all()
    )
    counts = _student_counts(db, [s.id for s in streams])
    return [_to_read(s, counts.get(s.id, 0)) for s in streams]


def get_stream(db: Session, stream_id: UUID) -> KnowledgeStreamRead:
    stream = (
        db.query(KnowledgeStream)
        .options(selectinload(KnowledgeStream.levels))
        .filter(KnowledgeStream.id == stream_id)
        .first()
    )
    if not stream:
        raise not_found("Knowledge stream not found")
    return _to_read(stream, _student_counts(db, [stream.id]).get(stream.id, 0))


def create_stream(db: Session, session: UserSession, data: KnowledgeStreamCreate) -> KnowledgeStreamRead:
    name = normalize_name(data.name)
    if db.query(KnowledgeStream.id).filter(KnowledgeStream.name == name).first():
        raise bad_request(DUPLICATE_NAME_MESSAGE)

    stream = KnowledgeStream(
        name=name,
        description=data.description,
        color=data.color,
        icon=data.icon,
        levels=[
            StreamLevel(
                level=level.level,
                title=level.title,
                skills=normalize_list(level.skills),
                prerequisites=normalize_list(level.prerequisites),
                next_level=level.next_level,
                estimated_completion_time=level.estimated_completion_time,
                bootcamp_ids=[str(b) for b in level.bootcamp_ids],
            )
            for level in data.levels
        ],
    )
    db.add(stream)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise bad_request(DUPLICATE_NAME_MESSAGE)
    return get_stream(db, stream.id)


def assign_stream(
    db: Session, session: UserSession, student_id: UUID, knowledge_stream_id: UUID
) -> AssignmentRead:
    if not resolve_capabilities(db, session.user_id).has_access:
        raise forbidden("Only facilitators and admins can assign knowledge streams")

    if not db.query(Student.id).filter(Student.id == student_id).first():
        raise not_found("Student not found")
    if not db.query(KnowledgeStream.id).filter(KnowledgeStream.id == knowledge_stream_id).first():
        raise not_found("Knowledge stream not found")

    existing = db.query(StudentKnowledgeStream.id).filter(
        StudentKnowledgeStream.student_id == student_id,
        StudentKnowledgeStream.knowledge_stream_id == knowledge_stream_id,
    ).first()
    if existing:
        raise bad_request(DUPLICATE_ASSIGNMENT_MESSAGE)

    assignment = StudentKnowledgeStream(
        student_id=student_id, knowledge_stream_id=knowledge_stream_id
    )
    db.add(assignment)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise bad_request(DUPLICATE_ASSIGNMENT_MESSAGE)

    assignment = (
        db.query(StudentKnowledgeStream)
        .options(
            joinedload(StudentKnowledgeStream.knowledge_stream).selectinload(KnowledgeStream.levels),
            joinedload(StudentKnowledgeStream.student).joinedload(Student.user),
        )
        .filter(StudentKnowledgeStream.id == assignment.id)
        .one()
    )
    return AssignmentRead.model_validate(assignment)


def list_student_streams(db: Session, student_id: UUID) -> list[StudentStreamRead]:
    if not db.query(Student.id).filter(Student.id == student_id).first():
        raise not_found("Student not found")

    assignments = (
        db.query(StudentKnowledgeStream)
        .options(
            joinedload(StudentKnowledgeStream.knowledge_stream).selectinload(KnowledgeStream.levels)
        )
        .filter(StudentKnowledgeStream.student_id == student_id)
        .order_by(StudentKnowledgeStream.assigned_at.desc())
        .all()
    )
    return [StudentStreamRead.model_validate(a) for a in assignments]
