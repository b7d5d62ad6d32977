"""
Tests for the shared input validation module
"""
from datetime import datetime

import pytest

from jingjai.services.validation import (
    clean_booking,
    clean_client,
    clean_inventory_item,
    clean_sale,
    parse_timestamp,
    sanitize_csv,
    vat_rule_errors,
)


@pytest.mark.unit
class TestClientCleaning:
    """Tests for client sanitising and field errors"""

    def test_create_fills_defaults(self):
        payload, errors = clean_client({"legalName": "  Acme Corp  "})
        assert errors == {}
        assert payload["legal_name"] == "Acme Corp"
        assert payload["status"] == "Prospect"
        assert payload["tier"] == "B"
        assert payload["industry"] == "TV"
        assert payload["payment_terms"] == "Net 30"
        assert payload["currency"] == "THB"
        assert payload["tags"] == []
        assert payload["billing_address"]["city"] == ""

    def test_partial_only_emits_present_fields(self):
        payload, errors = clean_client({"tier": "A"}, partial=True)
        assert errors == {}
        assert payload == {"tier": "A"}

    def test_partial_keeps_explicit_empty_values(self):
        payload, _ = clean_client({"tradingName": "", "tags": []}, partial=True)
        assert payload == {"trading_name": "", "tags": []}

    def test_snake_case_keys_accepted(self):
        payload, errors = clean_client({"legal_name": "Acme", "tax_id": " 123 "})
        assert errors == {}
        assert payload["tax_id"] == "123"

    def test_missing_legal_name(self):
        _, errors = clean_client({"legalName": "   "})
        assert errors["legalName"] == "Required."

    def test_invalid_enum_reported_per_field(self):
        _, errors = clean_client({"legalName": "Acme", "status": "Bogus", "tier": "Z"})
        assert "status" in errors
        assert "tier" in errors
        assert "Prospect" in errors["status"]

    def test_enum_match_is_case_insensitive(self):
        payload, errors = clean_client({"legalName": "Acme", "status": "active"})
        assert errors == {}
        assert payload["status"] == "Active"

    @pytest.mark.parametrize("rate", [-1, 100.5, "abc"])
    def test_discount_rate_out_of_range(self, rate):
        _, errors = clean_client({"legalName": "Acme", "discountRate": rate})
        assert "discountRate" in errors

    def test_discount_rate_bounds_inclusive(self):
        for rate in (0, 100):
            payload, errors = clean_client({"legalName": "Acme", "discountRate": rate})
            assert errors == {}
            assert payload["discount_rate"] == rate

    def test_contacts_sanitised(self):
        payload, errors = clean_client({
            "legalName": "Acme",
            "contacts": [{"name": " Jane ", "email": "jane@acme.co", "isPrimary": 1}],
        })
        assert errors == {}
        assert payload["contacts"] == [
            {"name": "Jane", "title": "", "email": "jane@acme.co", "phone": "", "isPrimary": True}
        ]

    def test_contacts_must_be_list(self):
        _, errors = clean_client({"legalName": "Acme", "contacts": "Jane"})
        assert "contacts" in errors

    def test_currency_code(self):
        payload, _ = clean_client({"legalName": "Acme", "currency": "usd"})
        assert payload["currency"] == "USD"
        _, errors = clean_client({"legalName": "Acme", "currency": "dollars"})
        assert "currency" in errors

    def test_vat_rule(self):
        assert vat_rule_errors(True, "  ") == {"taxId": "Required when VAT Registered."}
        assert vat_rule_errors(True, "123") == {}
        assert vat_rule_errors(False, "") == {}


@pytest.mark.unit
class TestCsv:
    def test_string_input(self):
        assert sanitize_csv(" Studio, Preferred ,, ") == ["Studio", "Preferred"]

    def test_list_input(self):
        assert sanitize_csv([" a ", "", None, "b"]) == ["a", "b"]

    def test_none(self):
        assert sanitize_csv(None) == []


@pytest.mark.unit
class TestInventoryCleaning:
    def test_negative_quantity_rejected(self):
        _, errors = clean_inventory_item({"name": "Camera", "quantity": -1})
        assert errors["quantity"] == ">= 0."

    def test_fractional_quantity_rejected(self):
        _, errors = clean_inventory_item({"name": "Camera", "quantity": 1.5})
        assert "quantity" in errors

    def test_status_values(self):
        payload, errors = clean_inventory_item({"name": "Camera", "status": "Maintenance"})
        assert errors == {}
        assert payload["status"] == "Maintenance"
        _, errors = clean_inventory_item({"name": "Camera", "status": "Repair"})
        assert "status" in errors


@pytest.mark.unit
class TestSaleCleaning:
    def test_legacy_stage_labels(self):
        payload, _ = clean_sale({"name": "Deal", "stage": "Awarded"})
        assert payload["stage"] == "Won"
        payload, _ = clean_sale({"name": "Deal", "stage": "Quote"})
        assert payload["stage"] == "Quoted"

    def test_close_date_format(self):
        _, errors = clean_sale({"name": "Deal", "closeDate": "31/12/2024"})
        assert errors["closeDate"] == "Use YYYY-MM-DD."

    def test_empty_client_reference_is_none(self):
        payload, _ = clean_sale({"name": "Deal", "clientId": "  "})
        assert payload["client_id"] is None


@pytest.mark.unit
class TestBookingCleaning:
    def test_end_must_follow_start(self):
        _, errors = clean_booking({
            "title": "Shoot",
            "start": "2024-05-01T11:00:00+07:00",
            "end": "2024-05-01T10:00:00+07:00",
        })
        assert errors["end"] == "End must be after start."

    def test_equal_start_and_end_rejected(self):
        _, errors = clean_booking({
            "title": "Shoot",
            "start": "2024-05-01T10:00:00Z",
            "end": "2024-05-01T10:00:00Z",
        })
        assert "end" in errors

    def test_start_and_end_required_on_create(self):
        _, errors = clean_booking({"title": "Shoot"})
        assert errors["start"] == "Required."
        assert errors["end"] == "Required."

    def test_garbage_timestamp(self):
        _, errors = clean_booking({"title": "Shoot", "start": "tomorrow", "end": "2024-05-01T10:00:00Z"})
        assert errors["start"] == "Invalid date/time."


@pytest.mark.unit
class TestTimestamps:
    def test_utc_suffix(self):
        assert parse_timestamp("2024-05-01T10:00:00Z") == datetime(2024, 5, 1, 10, 0)

    def test_offset_normalised_to_utc(self):
        assert parse_timestamp("2024-05-01T10:00:00+07:00") == datetime(2024, 5, 1, 3, 0)

    def test_naive_read_in_given_zone(self):
        assert parse_timestamp("2024-05-01T10:00:00", "Asia/Bangkok") == datetime(2024, 5, 1, 3, 0)
        assert parse_timestamp("2024-05-01T10:00:00", "UTC") == datetime(2024, 5, 1, 10, 0)

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_timestamp("not a date")
