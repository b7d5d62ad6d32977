"""
Inventory services.

Item create/edit/delete keeps SKUs unique through the uniqueness index.
Quantity adjustments are a locked read-modify-write on the item followed by
an append to the adjustment log. The log append runs in its own transaction:
the current quantity only depends on the first one being atomic, the log is
there for auditing.
"""
import logging
import math
from numbers import Real
from typing import Any, Dict, List, Mapping, Optional

from sqlmodel import Session, select

from jingjai.core.config import settings
from jingjai.core.errors import FailedPreconditionError, InvalidArgumentError, NotFoundError
from jingjai.db.session import run_in_transaction
from jingjai.models.base import utcnow_iso
from jingjai.models.inventory import InventoryEvent, InventoryItem
from jingjai.services import unique_index
from jingjai.services.validation import clean_inventory_item, clean_text

logger = logging.getLogger(__name__)

SKU_NAMESPACE = "sku"


def validate_item(raw: Optional[Mapping[str, Any]], partial: bool = False) -> Dict[str, str]:
    return clean_inventory_item(raw, partial=partial)[1]


def upsert_item(db: Session, item_id: Optional[str], raw: Optional[Mapping[str, Any]], actor: str) -> Dict[str, str]:
    """
    Create or update an inventory item.

    Raises:
        InvalidArgumentError: Field-level validation failures
        AlreadyExistsError: SKU already used by another item
        NotFoundError: item_id does not exist
    """
    partial = bool(item_id)
    payload, field_errors = clean_inventory_item(raw, partial=partial)
    if field_errors:
        raise InvalidArgumentError("Validation failed", field_errors)

    def work(session: Session) -> Dict[str, str]:
        now = utcnow_iso()
        if partial:
            item = session.get(InventoryItem, item_id, with_for_update=True)
            if item is None:
                raise NotFoundError("Inventory item not found")
            if "sku" in payload:
                unique_index.reindex(session, SKU_NAMESPACE, payload["sku"], item.id, item.sku)
            for key, value in payload.items():
                setattr(item, key, value)
        else:
            item = InventoryItem(**payload, created_at=now, created_by=actor)
            unique_index.reindex(session, SKU_NAMESPACE, item.sku, item.id, "")
        item.updated_at = now
        item.updated_by = actor
        session.add(item)
        session.flush()
        return {"id": item.id}

    result = run_in_transaction(db, work)
    logger.info("Saved inventory item %s by %s", result["id"], actor)
    return result


def delete_item(db: Session, item_id: Optional[str], actor: str) -> None:
    """
    Delete an item and release its SKU. Adjustment events are kept.
    """
    if not item_id:
        raise InvalidArgumentError("id required", {"id": "Required."})

    def work(session: Session) -> None:
        item = session.get(InventoryItem, item_id, with_for_update=True)
        if item is None:
            raise NotFoundError("Inventory item not found")
        unique_index.release(session, SKU_NAMESPACE, item.sku, item.id)
        session.delete(item)
        session.flush()

    run_in_transaction(db, work)
    logger.info("Deleted inventory item %s by %s", item_id, actor)


def coerce_delta(delta: Any) -> Optional[int]:
    """
    Return the delta as an int, or None when the adjustment is a no-op.

    Absent, non-numeric, non-finite, fractional and zero deltas are all no-ops.
    """
    if delta is None or isinstance(delta, bool):
        return None
    if isinstance(delta, str):
        try:
            delta = float(delta.strip())
        except ValueError:
            return None
    if not isinstance(delta, Real):
        return None
    if not math.isfinite(delta) or float(delta) != int(delta):
        return None
    delta = int(delta)
    return delta or None


def adjust_quantity(
    db: Session,
    item_id: str,
    delta: Any,
    reason: Any,
    actor: str,
) -> Optional[int]:
    """
    Add ``delta`` to an item's quantity and log the adjustment.

    Args:
        db: Database session
        item_id: Item to adjust
        delta: Signed change; invalid or zero values make the call a no-op
        reason: Free-text reason stored on the event
        actor: User id stored on the event and as updated_by

    Returns:
        The new quantity, or None if the call was a no-op

    Raises:
        NotFoundError: The item does not exist
        FailedPreconditionError: The result would be negative while
            INVENTORY_ALLOW_NEGATIVE is off
    """
    amount = coerce_delta(delta)
    if amount is None:
        logger.debug("Ignoring no-op adjustment of %s (delta=%r)", item_id, delta)
        return None

    def work(session: Session) -> int:
        item = session.get(InventoryItem, item_id, with_for_update=True)
        if item is None:
            raise NotFoundError("Inventory item not found")
        current = item.quantity if isinstance(item.quantity, int) else 0
        new_quantity = current + amount
        if new_quantity < 0 and not settings.INVENTORY_ALLOW_NEGATIVE:
            raise FailedPreconditionError(
                f"Only {current} in stock.", {"delta": "Would take quantity below zero."}
            )
        item.quantity = new_quantity
        item.updated_at = utcnow_iso()
        item.updated_by = actor
        session.add(item)
        session.flush()
        return new_quantity

    new_quantity = run_in_transaction(db, work)
    logger.info("Inventory %s adjusted %+d -> %d by %s", item_id, amount, new_quantity, actor)

    try:
        run_in_transaction(db, lambda session: _append_event(session, item_id, amount, reason, actor))
    except Exception:
        logger.exception("Failed to log adjustment %+d on inventory %s", amount, item_id)

    return new_quantity


def _append_event(db: Session, item_id: str, delta: int, reason: Any, actor: str) -> None:
    db.add(InventoryEvent(item_id=item_id, delta=delta, reason=clean_text(reason), actor=actor))
    db.flush()


def list_events(db: Session, item_id: str, limit: int = 100) -> List[InventoryEvent]:
    """Adjustment history for an item, newest first."""
    statement = (
        select(InventoryEvent)
        .where(InventoryEvent.item_id == item_id)
        .order_by(InventoryEvent.id.desc())
        .limit(limit)
    )
    return list(db.exec(statement).all())
