"""
Resource Endpoints Module

Bookable resources. A resource with bookings can't be deleted; archive it.
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from jingjai.api import deps
from jingjai.db.session import get_db
from jingjai.models.booking import Resource
from jingjai.models.user import User
from jingjai.schemas.rpc import DeleteRequest, OkResult, UpsertResourceRequest, UpsertResult
from jingjai.services import bookings as booking_service

router = APIRouter()


@router.get("", response_model=List[Resource])
def list_resources(
    include_archived: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    statement = select(Resource)
    if not include_archived:
        statement = statement.where(Resource.archived == False)  # noqa: E712
    return db.exec(statement.order_by(Resource.name)).all()


@router.post("/upsert", response_model=UpsertResult)
def upsert_resource(
    body: UpsertResourceRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    result = booking_service.upsert_resource(db, body.id, body.resource, current_user.id)
    return UpsertResult(id=result["id"])


@router.post("/delete", response_model=OkResult)
def delete_resource(
    body: DeleteRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    booking_service.delete_resource(db, body.id, current_user.id)
    return OkResult()
