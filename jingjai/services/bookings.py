"""
Booking and resource services.

Two bookings of the same resource conflict when their half-open [start, end)
intervals overlap. The check runs inside the write transaction, after
locking the resource row, against every booking of that resource read in
the same transaction; two concurrent writers for one resource therefore
cannot both pass it.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, Mapping, Optional

from sqlmodel import Session, select

from jingjai.core.errors import FailedPreconditionError, InvalidArgumentError, NotFoundError
from jingjai.db.session import run_in_transaction
from jingjai.models.base import utcnow_iso
from jingjai.models.booking import Booking, BookingStatus, Resource
from jingjai.services.validation import clean_booking, clean_resource, interval_errors

logger = logging.getLogger(__name__)


def intervals_overlap(start1: datetime, end1: datetime, start2: datetime, end2: datetime) -> bool:
    """Half-open intervals [start1, end1) and [start2, end2) share at least one instant."""
    return start1 < end2 and end1 > start2


def find_conflict(candidate: Booking, existing: Iterable[Booking]) -> Optional[Booking]:
    """
    First booking in ``existing`` that ``candidate`` overlaps, or None.

    Bookings of other resources, cancelled bookings and the candidate itself
    (matched by id, so re-saving an unchanged booking is fine) never conflict.
    A candidate without a resource, or a cancelled one, conflicts with nothing.
    """
    if not candidate.resource_id or candidate.status == BookingStatus.CANCELLED:
        return None
    for other in existing:
        if candidate.id is not None and other.id == candidate.id:
            continue
        if other.resource_id != candidate.resource_id or other.status == BookingStatus.CANCELLED:
            continue
        if intervals_overlap(candidate.start, candidate.end, other.start, other.end):
            return other
    return None


def has_conflict(candidate: Booking, existing: Iterable[Booking]) -> bool:
    return find_conflict(candidate, existing) is not None


def validate_booking(raw: Optional[Mapping[str, Any]], partial: bool = False) -> Dict[str, str]:
    return clean_booking(raw, partial=partial)[1]


def upsert_booking(
    db: Session,
    booking_id: Optional[str],
    raw: Optional[Mapping[str, Any]],
    actor: str,
    force: bool = False,
) -> Dict[str, str]:
    """
    Create or update a booking.

    Args:
        db: Database session
        booking_id: Booking to edit, or None to create
        raw: Booking fields as sent by the caller
        actor: User id recorded as created_by/updated_by
        force: Skip the overlap check (explicit double-booking)

    Raises:
        InvalidArgumentError: Bad fields, end not after start, unknown resource
        FailedPreconditionError: Resource archived, or overlap with another booking
        NotFoundError: booking_id does not exist
    """
    partial = bool(booking_id)
    payload, field_errors = clean_booking(raw, partial=partial)
    if field_errors:
        raise InvalidArgumentError("Validation failed", field_errors)

    def work(session: Session) -> Dict[str, str]:
        now = utcnow_iso()
        if partial:
            booking = session.get(Booking, booking_id, with_for_update=True)
            if booking is None:
                raise NotFoundError("Booking not found")
            for key, value in payload.items():
                setattr(booking, key, value)
            errors = interval_errors(booking.start, booking.end)
            if errors:
                raise InvalidArgumentError("Validation failed", errors)
        else:
            booking = Booking(**payload, created_at=now, created_by=actor)

        if booking.resource_id:
            _check_resource(session, booking)
            if not force:
                others = session.exec(
                    select(Booking).where(
                        Booking.resource_id == booking.resource_id,
                        Booking.id != booking.id,
                    )
                ).all()
                clash = find_conflict(booking, others)
                if clash is not None:
                    raise FailedPreconditionError(
                        f'Overlaps "{clash.title}" on the same resource.',
                        {"start": "Resource already booked for this time."},
                    )

        booking.updated_at = now
        booking.updated_by = actor
        session.add(booking)
        session.flush()
        return {"id": booking.id}

    result = run_in_transaction(db, work)
    logger.info("Saved booking %s by %s%s", result["id"], actor, " (forced)" if force else "")
    return result


def _check_resource(db: Session, booking: Booking) -> None:
    # Locking the resource row serialises writers booking the same resource
    resource = db.get(Resource, booking.resource_id, with_for_update=True)
    if resource is None:
        raise InvalidArgumentError("Validation failed", {"resourceId": "Unknown resource."})
    if resource.archived and booking.status != BookingStatus.CANCELLED:
        raise FailedPreconditionError(
            f'Resource "{resource.name}" is archived.', {"resourceId": "Resource is archived."}
        )


def delete_booking(db: Session, booking_id: Optional[str], actor: str) -> None:
    if not booking_id:
        raise InvalidArgumentError("id required", {"id": "Required."})

    def work(session: Session) -> None:
        booking = session.get(Booking, booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        session.delete(booking)
        session.flush()

    run_in_transaction(db, work)
    logger.info("Deleted booking %s by %s", booking_id, actor)


def upsert_resource(db: Session, resource_id: Optional[str], raw: Optional[Mapping[str, Any]], actor: str) -> Dict[str, str]:
    partial = bool(resource_id)
    payload, field_errors = clean_resource(raw, partial=partial)
    if field_errors:
        raise InvalidArgumentError("Validation failed", field_errors)

    def work(session: Session) -> Dict[str, str]:
        now = utcnow_iso()
        if partial:
            resource = session.get(Resource, resource_id, with_for_update=True)
            if resource is None:
                raise NotFoundError("Resource not found")
            for key, value in payload.items():
                setattr(resource, key, value)
        else:
            resource = Resource(**payload, created_at=now, created_by=actor)
        resource.updated_at = now
        resource.updated_by = actor
        session.add(resource)
        session.flush()
        return {"id": resource.id}

    result = run_in_transaction(db, work)
    logger.info("Saved resource %s by %s", result["id"], actor)
    return result


def delete_resource(db: Session, resource_id: Optional[str], actor: str) -> None:
    """
    Delete a resource that has no bookings.

    Raises:
        FailedPreconditionError: Bookings still reference the resource (archive it instead)
    """
    if not resource_id:
        raise InvalidArgumentError("id required", {"id": "Required."})

    def work(session: Session) -> None:
        resource = session.get(Resource, resource_id, with_for_update=True)
        if resource is None:
            raise NotFoundError("Resource not found")
        in_use = session.exec(select(Booking.id).where(Booking.resource_id == resource_id)).first()
        if in_use is not None:
            raise FailedPreconditionError("Resource has bookings; archive it instead.")
        session.delete(resource)
        session.flush()

    run_in_transaction(db, work)
    logger.info("Deleted resource %s by %s", resource_id, actor)
