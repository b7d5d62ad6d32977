"""
Tests for client create/edit/delete
"""
import threading

import pytest
from sqlmodel import SQLModel, Session, create_engine, select

from jingjai.core.errors import (
    AlreadyExistsError,
    FailedPreconditionError,
    InvalidArgumentError,
    NotFoundError,
)
from jingjai.models.client import Client
from jingjai.models.unique_key import UniqueKey
from jingjai.services import clients as client_service
from jingjai.services.unique_index import lookup_owner


def _index(db):
    return {(entry.key, entry.owner_id) for entry in db.exec(select(UniqueKey)).all()}


@pytest.mark.integration
class TestCreateClient:
    def test_sequential_ids_without_tax_id(self, db, actor):
        first = client_service.upsert_client(db, None, {"legalName": "Acme Corp"}, actor)
        second = client_service.upsert_client(db, None, {"legalName": "Acme Corp"}, actor)

        assert first["client_id"] == "CL-100001"
        assert second["client_id"] == "CL-100002"
        assert first["id"] != second["id"]
        assert _index(db) == set()

    def test_empty_id_creates(self, db, actor):
        result = client_service.upsert_client(db, "", {"legalName": "Acme"}, actor)
        assert result["client_id"] == "CL-100001"
        assert db.get(Client, result["id"]) is not None

    def test_defaults_and_audit_fields(self, db, actor):
        result = client_service.upsert_client(db, None, {"legalName": "  Acme Corp "}, actor)
        client = db.get(Client, result["id"])

        assert client.legal_name == "Acme Corp"
        assert client.status == "Prospect"
        assert client.tier == "B"
        assert client.currency == "THB"
        assert client.created_by == actor
        assert client.updated_by == actor
        assert client.created_at

    def test_tax_id_claimed_in_index(self, db, actor):
        result = client_service.upsert_client(
            db, None, {"legalName": "Acme", "taxId": "0105551234567"}, actor
        )
        assert _index(db) == {("0105551234567", result["id"])}

    @pytest.mark.parametrize("duplicate", ["1234567890123", " 1234567890123 ", "1234567890123\t"])
    def test_duplicate_tax_id_rejected(self, db, actor, duplicate):
        first = client_service.upsert_client(db, None, {"legalName": "A", "taxId": "1234567890123"}, actor)

        with pytest.raises(AlreadyExistsError) as excinfo:
            client_service.upsert_client(db, None, {"legalName": "B", "taxId": duplicate}, actor)

        assert "taxId" in excinfo.value.field_errors
        assert [c.id for c in db.exec(select(Client)).all()] == [first["id"]]
        assert lookup_owner(db, "taxId", "1234567890123") == first["id"]

    def test_duplicate_tax_id_ignores_case(self, db, actor):
        client_service.upsert_client(db, None, {"legalName": "A", "taxId": "ab-123"}, actor)
        with pytest.raises(AlreadyExistsError):
            client_service.upsert_client(db, None, {"legalName": "B", "taxId": "AB-123"}, actor)

    def test_failed_create_does_not_consume_id(self, db, actor):
        client_service.upsert_client(db, None, {"legalName": "A", "taxId": "T1"}, actor)
        with pytest.raises(AlreadyExistsError):
            client_service.upsert_client(db, None, {"legalName": "B", "taxId": "T1"}, actor)
        result = client_service.upsert_client(db, None, {"legalName": "C"}, actor)
        assert result["client_id"] == "CL-100002"

    def test_vat_without_tax_id_is_precondition(self, db, actor):
        raw = {"legalName": "A", "vatRegistered": True, "taxId": "", "discountRate": 500}
        with pytest.raises(FailedPreconditionError) as excinfo:
            client_service.upsert_client(db, None, raw, actor)
        assert excinfo.value.field_errors == {"taxId": "Required when VAT Registered."}
        assert db.exec(select(Client)).all() == []

    def test_field_errors_are_invalid_argument(self, db, actor):
        raw = {"legalName": "", "status": "Bogus", "discountRate": 150}
        with pytest.raises(InvalidArgumentError) as excinfo:
            client_service.upsert_client(db, None, raw, actor)
        assert set(excinfo.value.field_errors) == {"legalName", "status", "discountRate"}
        assert db.exec(select(Client)).all() == []


@pytest.mark.integration
class TestUpdateClient:
    def test_partial_update_keeps_other_fields(self, db, actor):
        created = client_service.upsert_client(
            db, None, {"legalName": "Acme", "tier": "A", "tags": "Studio, Preferred"}, actor
        )
        client_service.upsert_client(db, created["id"], {"status": "Active"}, actor)
        client = db.get(Client, created["id"])

        assert client.status == "Active"
        assert client.tier == "A"
        assert client.tags == ["Studio", "Preferred"]
        assert client.client_id == "CL-100001"

    def test_change_tax_id_moves_index_entry(self, db, actor):
        created = client_service.upsert_client(db, None, {"legalName": "Acme", "taxId": "A1"}, actor)
        result = client_service.upsert_client(db, created["id"], {"taxId": "B2"}, actor)

        assert result["client_id"] == created["client_id"]
        assert _index(db) == {("B2", created["id"])}
        assert db.get(Client, created["id"]).tax_id == "B2"

    def test_edit_with_same_tax_id_skips_index(self, db, actor):
        created = client_service.upsert_client(db, None, {"legalName": "Acme", "taxId": "A1"}, actor)
        before = db.get(UniqueKey, ("taxId", "A1")).updated_at

        client_service.upsert_client(db, created["id"], {"legalName": "Acme Ltd", "taxId": " a1 "}, actor)
        client_service.upsert_client(db, created["id"], {"tradingName": "Acme"}, actor)

        assert db.get(UniqueKey, ("taxId", "A1")).updated_at == before
        assert _index(db) == {("A1", created["id"])}

    def test_taking_another_clients_tax_id_fails(self, db, actor):
        client_service.upsert_client(db, None, {"legalName": "A", "taxId": "A1"}, actor)
        other = client_service.upsert_client(db, None, {"legalName": "B", "taxId": "B1"}, actor)

        with pytest.raises(AlreadyExistsError):
            client_service.upsert_client(db, other["id"], {"legalName": "B2", "taxId": "a1"}, actor)

        client = db.get(Client, other["id"])
        assert client.tax_id == "B1"
        assert client.legal_name == "B"
        assert lookup_owner(db, "taxId", "B1") == other["id"]

    def test_vat_rule_checked_against_merged_record(self, db, actor):
        created = client_service.upsert_client(
            db, None, {"legalName": "A", "vatRegistered": True, "taxId": "A1"}, actor
        )
        with pytest.raises(FailedPreconditionError):
            client_service.upsert_client(db, created["id"], {"taxId": ""}, actor)
        assert db.get(Client, created["id"]).tax_id == "A1"

    def test_vat_flag_alone_uses_stored_tax_id(self, db, actor):
        created = client_service.upsert_client(db, None, {"legalName": "A", "taxId": "A1"}, actor)
        client_service.upsert_client(db, created["id"], {"vatRegistered": True}, actor)
        client = db.get(Client, created["id"])
        assert client.vat_registered is True
        assert client.tax_id == "A1"

    def test_partial_form_skips_vat_rule_without_both_fields(self):
        assert client_service.validate_client({"vatRegistered": True}, partial=True) == {}
        assert "taxId" in client_service.validate_client(
            {"vatRegistered": True, "taxId": ""}, partial=True
        )

    def test_unknown_client(self, db, actor):
        with pytest.raises(NotFoundError):
            client_service.upsert_client(db, "no-such-id", {"legalName": "A"}, actor)

    def test_updated_by_recorded(self, db, actor):
        created = client_service.upsert_client(db, None, {"legalName": "A"}, "someone-else")
        client_service.upsert_client(db, created["id"], {"tier": "C"}, actor)
        client = db.get(Client, created["id"])
        assert client.created_by == "someone-else"
        assert client.updated_by == actor


@pytest.mark.integration
class TestDeleteClient:
    def test_delete_frees_tax_id(self, db, actor):
        created = client_service.upsert_client(db, None, {"legalName": "A", "taxId": "A1"}, actor)
        client_service.delete_client(db, created["id"], actor)

        assert db.get(Client, created["id"]) is None
        assert _index(db) == set()
        again = client_service.upsert_client(db, None, {"legalName": "B", "taxId": "A1"}, actor)
        assert again["client_id"] == "CL-100002"

    def test_delete_requires_id(self, db, actor):
        with pytest.raises(InvalidArgumentError) as excinfo:
            client_service.delete_client(db, "", actor)
        assert excinfo.value.field_errors == {"id": "Required."}

    def test_delete_unknown(self, db, actor):
        with pytest.raises(NotFoundError):
            client_service.delete_client(db, "missing", actor)


@pytest.mark.integration
def test_concurrent_creates_get_distinct_ids(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'clients.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    SQLModel.metadata.create_all(engine)

    workers, per_worker = 4, 5
    results, failures = [], []
    lock = threading.Lock()

    def create_many(worker):
        with Session(engine) as session:
            for n in range(per_worker):
                try:
                    result = client_service.upsert_client(
                        session, None, {"legalName": f"Client {worker}-{n}"}, f"user-{worker}"
                    )
                except Exception as exc:  # collected and asserted below
                    with lock:
                        failures.append(exc)
                else:
                    with lock:
                        results.append(result["client_id"])

    threads = [threading.Thread(target=create_many, args=(w,)) for w in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert failures == []
    expected = {f"CL-{100000 + n}" for n in range(1, workers * per_worker + 1)}
    assert set(results) == expected
    with Session(engine) as session:
        assert len(session.exec(select(Client)).all()) == workers * per_worker
    engine.dispose()
