"""
Inventory Endpoints Module

CRUD for equipment items, the quantity adjustment ledger, and read access
to each item's adjustment history.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from jingjai.api import deps
from jingjai.core.errors import NotFoundError
from jingjai.db.session import get_db
from jingjai.models.inventory import InventoryEvent, InventoryItem
from jingjai.models.user import User
from jingjai.schemas.rpc import (
    AdjustQuantityRequest,
    AdjustQuantityResult,
    DeleteRequest,
    OkResult,
    UpsertItemRequest,
    UpsertResult,
    ValidateResult,
)
from jingjai.services import inventory as inventory_service

router = APIRouter()


@router.get("", response_model=List[InventoryItem])
def list_items(
    skip: int = 0,
    limit: int = 100,
    category: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Retrieve a paginated list of inventory items ordered by name.
    """
    statement = select(InventoryItem)
    if category:
        statement = statement.where(InventoryItem.category == category)
    statement = statement.order_by(InventoryItem.name).offset(skip).limit(limit)
    return db.exec(statement).all()


@router.get("/{item_id}", response_model=InventoryItem)
def read_item(
    item_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    item = db.get(InventoryItem, item_id)
    if not item:
        raise NotFoundError("Inventory item not found")
    return item


@router.get("/{item_id}/events", response_model=List[InventoryEvent])
def list_item_events(
    item_id: str,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Adjustment history for an item, newest first. History outlives the item.
    """
    return inventory_service.list_events(db, item_id, limit=limit)


@router.post("/upsert", response_model=UpsertResult)
def upsert_item(
    body: UpsertItemRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    result = inventory_service.upsert_item(db, body.id, body.item, current_user.id)
    return UpsertResult(id=result["id"])


@router.post("/delete", response_model=OkResult)
def delete_item(
    body: DeleteRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    inventory_service.delete_item(db, body.id, current_user.id)
    return OkResult()


@router.post("/validate", response_model=ValidateResult)
def validate_item(
    body: UpsertItemRequest,
    current_user: User = Depends(deps.get_current_active_user),
):
    errors = inventory_service.validate_item(body.item, partial=bool(body.id))
    return ValidateResult(ok=not errors, field_errors=errors)


@router.post("/adjust", response_model=AdjustQuantityResult)
def adjust_quantity(
    body: AdjustQuantityRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Add a signed delta to an item's quantity and log the adjustment.

    A zero, missing or non-numeric delta does nothing and reports applied=false.
    """
    quantity = inventory_service.adjust_quantity(
        db, body.item_id, body.delta, body.reason, current_user.id
    )
    return AdjustQuantityResult(applied=quantity is not None, quantity=quantity)
