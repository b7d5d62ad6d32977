"""
Application-level uniqueness index.

A secondary field (client tax ID, inventory SKU) is kept unique by claiming
its normalized form in the ``unique_keys`` table inside the same transaction
that writes the owning record. Empty keys are never indexed.
"""
import logging
from typing import Optional

from sqlmodel import Session, select

from jingjai.core.errors import AlreadyExistsError
from jingjai.models.base import utcnow_iso
from jingjai.models.unique_key import UniqueKey
from jingjai.services.validation import clean_text

logger = logging.getLogger(__name__)


def normalize_key(value) -> str:
    """Trim, uppercase and replace path separators so the key is safe as a lookup id."""
    return clean_text(value).upper().replace("/", "_").replace("\\", "_")


def lookup_owner(db: Session, namespace: str, key) -> Optional[str]:
    """Return the id of the record currently holding ``key``, if any."""
    normalized = normalize_key(key)
    if not normalized:
        return None
    entry = db.get(UniqueKey, (namespace, normalized))
    return entry.owner_id if entry else None


def reindex(
    db: Session,
    namespace: str,
    key,
    owner_id: str,
    previous_key="",
    field: Optional[str] = None,
) -> None:
    """
    Move ``owner_id``'s claim in ``namespace`` from ``previous_key`` to ``key``.

    An unchanged key (after normalization) performs no reads or writes. The
    conflict check runs before any index write, so a rejected claim leaves
    the index untouched; the caller's transaction then rolls back the rest.

    Args:
        db: Session with an open transaction
        namespace: Index partition, e.g. "taxId" or "sku"
        key: New raw value of the owning field
        owner_id: Primary key of the record being written
        previous_key: Raw value stored on the record before this write
        field: Field name reported in the conflict's field errors (defaults to namespace)

    Raises:
        AlreadyExistsError: If another record already holds the new key
    """
    new_key = normalize_key(key)
    old_key = normalize_key(previous_key)
    if new_key == old_key:
        return

    if new_key:
        entry = db.exec(
            select(UniqueKey)
            .where(UniqueKey.namespace == namespace, UniqueKey.key == new_key)
            .with_for_update()
        ).first()
        if entry is not None and entry.owner_id != owner_id:
            raise AlreadyExistsError(
                f"{new_key} is already in use.",
                field_errors={field or namespace: "Already in use by another record."},
            )
        if entry is None:
            db.add(UniqueKey(namespace=namespace, key=new_key, owner_id=owner_id))
        else:
            entry.updated_at = utcnow_iso()
            db.add(entry)

    if old_key:
        release(db, namespace, old_key, owner_id)

    db.flush()
    logger.debug("Reindexed %s for %s: %r -> %r", namespace, owner_id, old_key, new_key)


def release(db: Session, namespace: str, key, owner_id: str) -> None:
    """Drop the index entry for ``key`` if ``owner_id`` holds it."""
    normalized = normalize_key(key)
    if not normalized:
        return
    entry = db.get(UniqueKey, (namespace, normalized))
    if entry is not None and entry.owner_id == owner_id:
        db.delete(entry)
