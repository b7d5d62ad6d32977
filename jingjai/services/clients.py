"""
Client services.

Creating a client allocates its sequential ``CL-<n>`` identifier, claims its
tax ID in the uniqueness index and writes the record, all in one transaction.
Edits merge the supplied fields over the stored record and move the tax-ID
claim if it changed. Deletes drop the record and its index entry together.
"""
import logging
from typing import Any, Dict, Mapping, Optional

from sqlmodel import Session

from jingjai.core.config import settings
from jingjai.core.errors import FailedPreconditionError, InvalidArgumentError, NotFoundError
from jingjai.db.session import run_in_transaction
from jingjai.models.base import utcnow_iso
from jingjai.models.client import Client
from jingjai.services import unique_index
from jingjai.services.sequence import allocate, format_sequential_id
from jingjai.services.validation import clean_client, vat_rule_errors

logger = logging.getLogger(__name__)

TAX_ID_NAMESPACE = "taxId"
CLIENT_COUNTER = "client"


def validate_client(raw: Optional[Mapping[str, Any]], partial: bool = False) -> Dict[str, str]:
    """
    All field errors for a client form, business rule included.

    For edits the VAT rule can only be judged when the form carries both
    fields; otherwise the stored record decides it at upsert time.
    """
    payload, errors = clean_client(raw, partial=partial)
    if partial and not {"vat_registered", "tax_id"} <= payload.keys():
        return errors
    rule_errors = vat_rule_errors(payload.get("vat_registered"), payload.get("tax_id"))
    return {**errors, **rule_errors}


def upsert_client(
    db: Session,
    client_pk: Optional[str],
    raw: Optional[Mapping[str, Any]],
    actor: str,
) -> Dict[str, str]:
    """
    Create or update a client.

    Args:
        db: Database session
        client_pk: Primary key of the client to edit, or None to create
        raw: Client fields as sent by the caller
        actor: User id recorded as created_by/updated_by

    Returns:
        dict: {"id": primary key, "client_id": human-facing CL-<n> id}

    Raises:
        FailedPreconditionError: VAT registered without a tax ID
        InvalidArgumentError: Field-level validation failures
        AlreadyExistsError: Tax ID already held by another client
        NotFoundError: client_pk does not exist
    """
    partial = bool(client_pk)
    payload, field_errors = clean_client(raw, partial=partial)

    # On create the VAT rule is reported ahead of any other field problem;
    # edits check it against the merged record inside the transaction
    if not partial:
        rule_errors = vat_rule_errors(payload.get("vat_registered"), payload.get("tax_id"))
        if rule_errors:
            raise FailedPreconditionError("A tax ID is required for VAT-registered clients.", rule_errors)
    if field_errors:
        raise InvalidArgumentError("Validation failed", field_errors)

    if partial:
        return run_in_transaction(db, lambda session: _update(session, client_pk, payload, actor))
    return run_in_transaction(db, lambda session: _create(session, payload, actor))


def _create(db: Session, payload: Dict[str, Any], actor: str) -> Dict[str, str]:
    number = allocate(db, CLIENT_COUNTER, settings.CLIENT_COUNTER_BASE)
    now = utcnow_iso()
    client = Client(
        **payload,
        client_id=format_sequential_id(settings.CLIENT_ID_PREFIX, number),
        created_at=now,
        updated_at=now,
        created_by=actor,
        updated_by=actor,
    )
    unique_index.reindex(db, TAX_ID_NAMESPACE, client.tax_id, client.id, "")
    db.add(client)
    db.flush()
    logger.info("Created client %s (%s) by %s", client.id, client.client_id, actor)
    return {"id": client.id, "client_id": client.client_id}


def _update(db: Session, client_pk: str, payload: Dict[str, Any], actor: str) -> Dict[str, str]:
    client = db.get(Client, client_pk, with_for_update=True)
    if client is None:
        raise NotFoundError("Client not found")

    merged_vat = payload.get("vat_registered", client.vat_registered)
    merged_tax_id = payload.get("tax_id", client.tax_id)
    rule_errors = vat_rule_errors(merged_vat, merged_tax_id)
    if rule_errors:
        raise FailedPreconditionError("A tax ID is required for VAT-registered clients.", rule_errors)

    if "tax_id" in payload:
        unique_index.reindex(db, TAX_ID_NAMESPACE, payload["tax_id"], client.id, client.tax_id)

    for key, value in payload.items():
        setattr(client, key, value)
    client.updated_at = utcnow_iso()
    client.updated_by = actor
    db.add(client)
    db.flush()
    logger.info("Updated client %s (%s) by %s", client.id, client.client_id, actor)
    return {"id": client.id, "client_id": client.client_id}


def delete_client(db: Session, client_pk: Optional[str], actor: str) -> None:
    """
    Delete a client and release its tax-ID index entry.

    Raises:
        InvalidArgumentError: No id given
        NotFoundError: The client does not exist
    """
    if not client_pk:
        raise InvalidArgumentError("id required", {"id": "Required."})

    def work(session: Session) -> None:
        client = session.get(Client, client_pk, with_for_update=True)
        if client is None:
            raise NotFoundError("Client not found")
        unique_index.release(session, TAX_ID_NAMESPACE, client.tax_id, client.id)
        session.delete(client)
        session.flush()

    run_in_transaction(db, work)
    logger.info("Deleted client %s by %s", client_pk, actor)
