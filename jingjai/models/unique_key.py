"""
Bookkeeping Models Module

Two small tables that back the transactional invariants:
1. Counter: one row per counted entity type, used to mint sequential IDs
2. UniqueKey: normalized secondary keys (tax ID, SKU) and the record owning each
"""
from sqlmodel import SQLModel, Field

from jingjai.models.base import utcnow_iso


class Counter(SQLModel, table=True):
    """
    Monotonic counter for a named entity type (e.g. "client").

    Only ever modified through the allocate operation inside a transaction.
    """
    __tablename__ = "counters"

    name: str = Field(primary_key=True)
    current_value: int = Field(nullable=False)


class UniqueKey(SQLModel, table=True):
    """
    Maps a normalized key within a namespace to the record that owns it.

    Attributes:
        namespace: Which field is being kept unique ("taxId", "sku")
        key: Normalized key (trimmed, uppercased, separators replaced)
        owner_id: Primary key of the owning record
        updated_at: When the entry was last (re)claimed
    """
    __tablename__ = "unique_keys"

    namespace: str = Field(primary_key=True)
    key: str = Field(primary_key=True)
    owner_id: str = Field(nullable=False, index=True)
    updated_at: str = Field(default_factory=utcnow_iso)
