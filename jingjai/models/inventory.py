"""
Inventory Models Module

This module defines two models:
1. InventoryItem: a piece (or pool) of equipment with a mutable quantity
2. InventoryEvent: immutable audit record of each quantity adjustment
"""
from enum import Enum
from typing import List, Optional
from sqlmodel import SQLModel, Field, AutoString, JSON, Column

from jingjai.models.base import AuditFields, new_id, utcnow_iso


class InventoryStatus(str, Enum):
    AVAILABLE = "Available"
    OUT = "Out"
    MAINTENANCE = "Maintenance"
    RETIRED = "Retired"


class InventoryItem(AuditFields, table=True):
    """
    Equipment inventory item.

    The quantity column may be changed either by a full-record upsert or by
    the adjustment ledger; the latter also appends an InventoryEvent.
    """
    __tablename__ = "inventory_items"

    id: str = Field(default_factory=new_id, primary_key=True)

    name: str = Field(nullable=False)
    sku: str = ""  # unique across items when non-empty (see uniqueness index)
    category: str = ""
    location: str = ""
    status: InventoryStatus = Field(default=InventoryStatus.AVAILABLE, sa_type=AutoString)

    quantity: int = 0
    unit_cost: float = 0
    rental_rate: float = 0

    serial_number: str = ""
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    notes: str = ""


class InventoryEvent(SQLModel, table=True):
    """
    Append-only record of a quantity adjustment.

    Attributes:
        item_id: Item that was adjusted (kept even if the item is later deleted)
        delta: Signed change applied to the quantity
        reason: Free-text reason given by the actor
        actor: User id of whoever made the adjustment
        created_at: ISO timestamp of the adjustment
    """
    __tablename__ = "inventory_events"

    id: Optional[int] = Field(default=None, primary_key=True)
    item_id: str = Field(nullable=False, index=True)
    delta: int = Field(nullable=False)
    reason: str = ""
    actor: Optional[str] = None
    created_at: str = Field(default_factory=utcnow_iso)
