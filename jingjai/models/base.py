"""
Shared Model Helpers

Audit columns common to every business record. Values are always set
server-side by the service layer; anything a caller sends for them is ignored.
"""
from datetime import datetime, timezone
from typing import Optional
import uuid

from sqlmodel import SQLModel, Field


def utcnow_iso() -> str:
    """Current UTC time as an ISO-8601 string (the storage format for audit timestamps)."""
    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


class AuditFields(SQLModel):
    """
    Created/updated timestamps and the user ids that performed the writes.
    """
    created_at: Optional[str] = Field(default_factory=utcnow_iso)
    updated_at: Optional[str] = Field(default_factory=utcnow_iso)
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
