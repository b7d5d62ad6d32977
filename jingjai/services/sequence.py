"""
Sequential ID allocation.

Human-readable identifiers (``CL-100001``, ``CL-100002``, ...) come from a
single counter row per entity type. The row is only ever touched here, inside
the caller's transaction, so a rolled-back creation never consumes a number.
"""
import logging

from sqlalchemy import update
from sqlmodel import Session, select

from jingjai.models.unique_key import Counter

logger = logging.getLogger(__name__)


def allocate(db: Session, counter_name: str, base: int) -> int:
    """
    Increment the named counter and return the new value.

    Must run inside the transaction that also writes the record using the
    value. The increment is a single ``UPDATE ... SET current_value =
    current_value + 1`` so the database serialises concurrent allocators;
    a lost race creating the row surfaces as IntegrityError and is retried by
    run_in_transaction.

    Args:
        db: Session with an open transaction
        counter_name: Counter row to use (e.g. "client")
        base: Value the counter starts from when the row doesn't exist yet

    Returns:
        int: The allocated value (strictly greater than every earlier one)
    """
    if db.get(Counter, counter_name) is None:
        db.add(Counter(name=counter_name, current_value=base))
        db.flush()

    db.connection().execute(
        update(Counter)
        .where(Counter.name == counter_name)
        .values(current_value=Counter.current_value + 1)
    )
    value = db.exec(select(Counter.current_value).where(Counter.name == counter_name)).one()
    logger.debug("Allocated %s=%d", counter_name, value)
    return value


def format_sequential_id(prefix: str, value: int) -> str:
    return f"{prefix}-{value}"
