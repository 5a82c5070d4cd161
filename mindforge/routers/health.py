"""Health check endpoints."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from mindforge.core.config import settings
from mindforge.core.deps import get_db
from mindforge.db.base import utcnow

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health():
    """Process is up; no dependency checks."""
    return {
        "status": "ok",
        "env": settings.ENV,
        "version": settings.VERSION,
        "timestamp": utcnow().isoformat(),
    }


@router.get("/health/live")
def live():
    return {"status": "alive"}


@router.get("/health/ready")
def ready(db: Session = Depends(get_db)):
    """Readiness: the database answers SELECT 1."""
    try:
        db.execute(text("SELECT 1"))
    except OperationalError:
        logger.error("Readiness check failed: database unreachable")
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "database": "disconnected"},
        )
    return {"status": "ready", "database": "connected"}
