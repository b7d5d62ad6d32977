"""
Booking Endpoints Module

Resource scheduling. Writes are rejected when the booking would overlap
another booking of the same resource, unless the caller sets ``force``.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from jingjai.api import deps
from jingjai.core.errors import InvalidArgumentError, NotFoundError
from jingjai.db.session import get_db
from jingjai.models.booking import Booking
from jingjai.models.user import User
from jingjai.schemas.rpc import DeleteRequest, OkResult, UpsertBookingRequest, UpsertResult, ValidateResult
from jingjai.services import bookings as booking_service
from jingjai.services.validation import parse_timestamp

router = APIRouter()


@router.get("", response_model=List[Booking])
def list_bookings(
    skip: int = 0,
    limit: int = 100,
    resource_id: Optional[str] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Retrieve bookings ordered by start time.

    Args:
        resource_id: Only bookings of this resource
        start, end: Only bookings overlapping this window (ISO timestamps)
    """
    statement = select(Booking)
    if resource_id:
        statement = statement.where(Booking.resource_id == resource_id)
    try:
        if end:
            statement = statement.where(Booking.start < parse_timestamp(end))
        if start:
            statement = statement.where(Booking.end > parse_timestamp(start))
    except ValueError:
        raise InvalidArgumentError("Invalid date/time filter.")
    statement = statement.order_by(Booking.start).offset(skip).limit(limit)
    return db.exec(statement).all()


@router.get("/{booking_id}", response_model=Booking)
def read_booking(
    booking_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    booking = db.get(Booking, booking_id)
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


@router.post("/upsert", response_model=UpsertResult)
def upsert_booking(
    body: UpsertBookingRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Create or update a booking.

    Errors:
        invalid-argument: bad fields, end not after start, unknown resource
        failed-precondition: overlap with another booking, archived resource
        not-found: id does not exist
    """
    result = booking_service.upsert_booking(
        db, body.id, body.booking, current_user.id, force=body.force
    )
    return UpsertResult(id=result["id"])


@router.post("/delete", response_model=OkResult)
def delete_booking(
    body: DeleteRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    booking_service.delete_booking(db, body.id, current_user.id)
    return OkResult()


@router.post("/validate", response_model=ValidateResult)
def validate_booking(
    body: UpsertBookingRequest,
    current_user: User = Depends(deps.get_current_active_user),
):
    errors = booking_service.validate_booking(body.booking, partial=bool(body.id))
    return ValidateResult(ok=not errors, field_errors=errors)
