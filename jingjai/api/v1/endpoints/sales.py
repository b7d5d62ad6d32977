"""
Sales Endpoints Module

Pipeline deals: listing, upsert, delete and validate.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from jingjai.api import deps
from jingjai.core.errors import NotFoundError
from jingjai.db.session import get_db
from jingjai.models.sale import Sale
from jingjai.models.user import User
from jingjai.schemas.rpc import DeleteRequest, OkResult, UpsertResult, UpsertSaleRequest, ValidateResult
from jingjai.services import sales as sale_service

router = APIRouter()


@router.get("", response_model=List[Sale])
def list_sales(
    skip: int = 0,
    limit: int = 100,
    stage: Optional[str] = None,
    client_id: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Retrieve a paginated list of deals, optionally filtered by stage or client.
    """
    statement = select(Sale)
    if stage:
        statement = statement.where(Sale.stage == stage)
    if client_id:
        statement = statement.where(Sale.client_id == client_id)
    statement = statement.order_by(Sale.created_at.desc()).offset(skip).limit(limit)
    return db.exec(statement).all()


@router.get("/{sale_id}", response_model=Sale)
def read_sale(
    sale_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    sale = db.get(Sale, sale_id)
    if not sale:
        raise NotFoundError("Sale not found")
    return sale


@router.post("/upsert", response_model=UpsertResult)
def upsert_sale(
    body: UpsertSaleRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    result = sale_service.upsert_sale(db, body.id, body.sale, current_user.id)
    return UpsertResult(id=result["id"])


@router.post("/delete", response_model=OkResult)
def delete_sale(
    body: DeleteRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    sale_service.delete_sale(db, body.id, current_user.id)
    return OkResult()


@router.post("/validate", response_model=ValidateResult)
def validate_sale(
    body: UpsertSaleRequest,
    current_user: User = Depends(deps.get_current_active_user),
):
    errors = sale_service.validate_sale(body.sale, partial=bool(body.id))
    return ValidateResult(ok=not errors, field_errors=errors)
