"""Sales pipeline services."""
import logging
from typing import Any, Dict, Mapping, Optional

from sqlmodel import Session

from jingjai.core.errors import InvalidArgumentError, NotFoundError
from jingjai.db.session import run_in_transaction
from jingjai.models.base import utcnow_iso
from jingjai.models.sale import Sale
from jingjai.services.validation import clean_sale

logger = logging.getLogger(__name__)


def validate_sale(raw: Optional[Mapping[str, Any]], partial: bool = False) -> Dict[str, str]:
    return clean_sale(raw, partial=partial)[1]


def upsert_sale(db: Session, sale_id: Optional[str], raw: Optional[Mapping[str, Any]], actor: str) -> Dict[str, str]:
    partial = bool(sale_id)
    payload, field_errors = clean_sale(raw, partial=partial)
    if field_errors:
        raise InvalidArgumentError("Validation failed", field_errors)

    def work(session: Session) -> Dict[str, str]:
        now = utcnow_iso()
        if partial:
            sale = session.get(Sale, sale_id, with_for_update=True)
            if sale is None:
                raise NotFoundError("Sale not found")
            for key, value in payload.items():
                setattr(sale, key, value)
        else:
            sale = Sale(**payload, created_at=now, created_by=actor)
        sale.updated_at = now
        sale.updated_by = actor
        session.add(sale)
        session.flush()
        return {"id": sale.id}

    result = run_in_transaction(db, work)
    logger.info("Saved sale %s by %s", result["id"], actor)
    return result


def delete_sale(db: Session, sale_id: Optional[str], actor: str) -> None:
    if not sale_id:
        raise InvalidArgumentError("id required", {"id": "Required."})

    def work(session: Session) -> None:
        sale = session.get(Sale, sale_id)
        if sale is None:
            raise NotFoundError("Sale not found")
        session.delete(sale)
        session.flush()

    run_in_transaction(db, work)
    logger.info("Deleted sale %s by %s", sale_id, actor)
