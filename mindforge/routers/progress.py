"""Progress router - student assessments and rubrics."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from mindforge.core.deps import get_db, require_roles
from mindforge.core.responses import success
from mindforge.db.enums import ROLES_CAN_MANAGE_BOOTCAMPS
from mindforge.schemas.auth import UserSession
from mindforge.schemas.progress import ProgressCreate
from mindforge.services import progress_service
from mindforge.utils.pagination import create_paginated_response, parse_pagination

router = APIRouter()


@router.get("/students/{student_id}/progress")
def list_student_progress(
    student_id: UUID,
    page: str | None = Query(None),
    limit: str | None = Query(None),
    skill: str | None = Query(None),
    bootcamp_id: UUID | None = Query(None, alias="bootcampId"),
    db: Session = Depends(get_db),
):
    pagination = parse_pagination(page, limit)
    items, total = progress_service.list_student_progress(
        db, student_id, pagination, skill=skill, bootcamp_id=bootcamp_id
    )
    return create_paginated_response(items, total, pagination.page, pagination.limit, "progress")


@router.post("/progress", status_code=status.HTTP_201_CREATED)
def create_progress(
    data: ProgressCreate,
    session: UserSession = Depends(require_roles(list(ROLES_CAN_MANAGE_BOOTCAMPS))),
    db: Session = Depends(get_db),
):
    return success(progress=progress_service.create_progress(db, session, data))


@router.get("/bootcamps/{bootcamp_id}/progress")
def list_bootcamp_progress(
    bootcamp_id: UUID,
    skill: str | None = Query(None),
    student_id: UUID | None = Query(None, alias="studentId"),
    db: Session = Depends(get_db),
):
    records = progress_service.list_bootcamp_progress(
        db, bootcamp_id, skill=skill, student_id=student_id
    )
    return success(results=len(records), progress=records)


@router.get("/rubrics")
def list_rubrics(db: Session = Depends(get_db)):
    rubrics = progress_service.list_rubrics(db)
    return success(results=len(rubrics), rubrics=rubrics)


@router.get("/rubrics/{skill}")
def get_rubric(skill: str, db: Session = Depends(get_db)):
    return success(rubric=progress_service.get_rubric(db, skill))
