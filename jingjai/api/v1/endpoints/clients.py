"""
Client Endpoints Module

Callable operations for client records: upsert, delete and validate, plus
read-only listing. All of them require an authenticated caller, whose user id
is recorded on every write.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from jingjai.api import deps
from jingjai.core.errors import NotFoundError
from jingjai.db.session import get_db
from jingjai.models.client import Client
from jingjai.models.user import User
from jingjai.schemas.rpc import (
    ClientUpsertResult,
    DeleteRequest,
    OkResult,
    UpsertClientRequest,
    ValidateResult,
)
from jingjai.services import clients as client_service

router = APIRouter()


@router.get("", response_model=List[Client])
def list_clients(
    skip: int = 0,
    limit: int = 100,
    status: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Retrieve a paginated list of clients ordered by legal name.

    Args:
        skip: Number of records to skip (for pagination)
        limit: Maximum number of records to return
        status: Optional status filter ("Prospect", "Active", "Inactive")
    """
    statement = select(Client)
    if status:
        statement = statement.where(Client.status == status)
    statement = statement.order_by(Client.legal_name).offset(skip).limit(limit)
    return db.exec(statement).all()


@router.get("/{client_pk}", response_model=Client)
def read_client(
    client_pk: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    client = db.get(Client, client_pk)
    if not client:
        raise NotFoundError("Client not found")
    return client


@router.post("/upsert", response_model=ClientUpsertResult)
def upsert_client(
    body: UpsertClientRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Create a client (no id) or merge fields into an existing one (with id).

    New clients get the next sequential client id (e.g. "CL-100001").

    Returns:
        ClientUpsertResult: {ok, id, clientId}

    Errors:
        failed-precondition: VAT registered without a tax ID
        invalid-argument: field errors in fieldErrors
        already-exists: tax ID used by another client
        not-found: id does not exist
    """
    result = client_service.upsert_client(db, body.id, body.client, current_user.id)
    return ClientUpsertResult(id=result["id"], client_id=result["client_id"])


@router.post("/delete", response_model=OkResult)
def delete_client(
    body: DeleteRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Delete a client and free its tax ID for reuse.
    """
    client_service.delete_client(db, body.id, current_user.id)
    return OkResult()


@router.post("/validate", response_model=ValidateResult)
def validate_client(
    body: UpsertClientRequest,
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Run the same field checks as /upsert without writing anything.
    """
    errors = client_service.validate_client(body.client, partial=bool(body.id))
    return ValidateResult(ok=not errors, field_errors=errors)
