import logging
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, text
from typing import Any

from jingjai.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter()

# Liveness/readiness probes mounted at the application root
probes = APIRouter()


@router.get("", response_model=dict[str, Any])
def health_check() -> Any:
    """
    Health check endpoint.
    """
    return {"status": "ok"}


@probes.get("/healthz", response_class=PlainTextResponse, include_in_schema=False)
def healthz():
    return "ok"


@probes.get("/readyz", response_class=PlainTextResponse, include_in_schema=False)
def readyz(db: Session = Depends(get_db)):
    """Ready once the database answers a trivial query."""
    try:
        db.connection().execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Readiness check failed", exc_info=True)
        return PlainTextResponse("not ready", status_code=503)
    return "ready"
