"""Knowledge streams router."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from mindforge.core.deps import get_db, require_roles
from mindforge.core.responses import success
from mindforge.db.enums import ROLES_CAN_MANAGE_BOOTCAMPS
from mindforge.schemas.auth import UserSession
from mindforge.schemas.knowledge_stream import AssignStreamRequest, KnowledgeStreamCreate
from mindforge.services import knowledge_stream_service

router = APIRouter()

MANAGERS = list(ROLES_CAN_MANAGE_BOOTCAMPS)


@router.get("/knowledge-streams")
def list_streams(db: Session = Depends(get_db)):
    streams = knowledge_stream_service.list_streams(db)
    return success(results=len(streams), knowledgeStreams=streams)


@router.post("/knowledge-streams", status_code=status.HTTP_201_CREATED)
def create_stream(
    data: KnowledgeStreamCreate,
    session: UserSession = Depends(require_roles(MANAGERS)),
    db: Session = Depends(get_db),
):
    stream = knowledge_stream_service.create_stream(db, session, data)
    return success(knowledgeStream=stream)


@router.get("/knowledge-streams/{stream_id}")
def get_stream(stream_id: UUID, db: Session = Depends(get_db)):
    return success(knowledgeStream=knowledge_stream_service.get_stream(db, stream_id))


@router.post("/students/{student_id}/knowledge-streams", status_code=status.HTTP_201_CREATED)
def assign_stream(
    student_id: UUID,
    data: AssignStreamRequest,
    session: UserSession = Depends(require_roles(MANAGERS)),
    db: Session = Depends(get_db),
):
    assignment = knowledge_stream_service.assign_stream(
        db, session, student_id, data.knowledge_stream_id
    )
    return success(assignment=assignment)


@router.get("/students/{student_id}/knowledge-streams")
def list_student_streams(student_id: UUID, db: Session = Depends(get_db)):
    streams = knowledge_stream_service.list_student_streams(db, student_id)
    return success(results=len(streams), knowledgeStreams=streams)
