"""
Input Validation Module

Single home for sanitising and field-level rules on every business record.
The upsert services call these as the authoritative check; the ``/validate``
endpoints call the same functions so an interactive form can show errors
before submitting.

Each ``clean_*`` function takes the raw mapping sent by the caller (camelCase
or snake_case keys), and returns ``(payload, field_errors)``:

- ``payload`` uses model attribute names and contains sanitised values.
  With ``partial=True`` (edits) only keys present in the input appear, so
  omitted fields are left untouched by the merge. With ``partial=False``
  (creates) missing fields are filled with defaults.
- ``field_errors`` maps the camelCase field name to a message.
"""
import math
import re
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type
from zoneinfo import ZoneInfo

from jingjai.core.config import settings
from jingjai.models.booking import BookingStatus
from jingjai.models.client import ClientStatus, ClientTier, Industry, PaymentTerms
from jingjai.models.inventory import InventoryStatus
from jingjai.models.sale import LEGACY_STAGES, SaleStage

FieldErrors = Dict[str, str]

_MISSING = object()
_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")

ADDRESS_FIELDS = ("line1", "line2", "city", "state", "postcode", "country")


def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def clean_text(value: Any) -> str:
    """Coerce to a trimmed string; None becomes empty."""
    if value is None:
        return ""
    return str(value).strip()


def sanitize_csv(value: Any) -> List[str]:
    """Accept a list or a comma-separated string; return trimmed non-empty items."""
    if isinstance(value, (list, tuple, set)):
        items = [clean_text(item) for item in value]
    else:
        items = [part.strip() for part in clean_text(value).split(",")]
    return [item for item in items if item]


def parse_timestamp(value: Any, tz_name: Optional[str] = None) -> datetime:
    """
    Parse an ISO-8601 timestamp into a naive UTC datetime.

    Values without an offset are read in ``tz_name`` (default
    settings.DEFAULT_TIMEZONE) before conversion.

    Raises:
        ValueError: If the value is not a timestamp
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = clean_text(value)
        if not text:
            raise ValueError("empty timestamp")
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=ZoneInfo(tz_name or settings.DEFAULT_TIMEZONE))
    return parsed.astimezone(timezone.utc).replace(tzinfo=None)


def vat_rule_errors(vat_registered: Any, tax_id: Any) -> FieldErrors:
    """Business rule: VAT-registered clients must carry a tax ID."""
    if vat_registered and not clean_text(tax_id):
        return {"taxId": "Required when VAT Registered."}
    return {}


def interval_errors(start: Optional[datetime], end: Optional[datetime]) -> FieldErrors:
    if start is not None and end is not None and start >= end:
        return {"end": "End must be after start."}
    return {}


class _Cleaner:
    """Accumulates a sanitised payload and field errors for one record."""

    def __init__(self, raw: Optional[Mapping[str, Any]], partial: bool):
        self.raw = raw or {}
        self.partial = partial
        self.payload: Dict[str, Any] = {}
        self.errors: FieldErrors = {}

    def _get(self, name: str, default: Any) -> Any:
        alias = to_camel(name)
        if alias in self.raw:
            return self.raw[alias]
        if name in self.raw:
            return self.raw[name]
        return _MISSING if self.partial else default

    def _error(self, name: str, message: str) -> None:
        self.errors.setdefault(to_camel(name), message)

    def text(self, name: str, required: bool = False) -> None:
        value = self._get(name, "")
        if value is _MISSING:
            return
        value = clean_text(value)
        if required and not value:
            self._error(name, "Required.")
        self.payload[name] = value

    def optional_ref(self, name: str) -> None:
        value = self._get(name, None)
        if value is _MISSING:
            return
        self.payload[name] = clean_text(value) or None

    def flag(self, name: str) -> None:
        value = self._get(name, False)
        if value is _MISSING:
            return
        self.payload[name] = bool(value)

    def csv(self, name: str) -> None:
        value = self._get(name, [])
        if value is _MISSING:
            return
        self.payload[name] = sanitize_csv(value)

    def choice(
        self,
        name: str,
        enum_cls: Type[Enum],
        default: Enum,
        legacy: Optional[Mapping[str, Enum]] = None,
    ) -> None:
        value = self._get(name, None)
        if value is _MISSING:
            return
        text = clean_text(value)
        if not text:
            self.payload[name] = default.value
            return
        if legacy and text in legacy:
            self.payload[name] = legacy[text].value
            return
        for member in enum_cls:
            if member.value.lower() == text.lower():
                self.payload[name] = member.value
                return
        self._error(name, "Must be one of: " + ", ".join(m.value for m in enum_cls) + ".")

    def number(
        self,
        name: str,
        minimum: Optional[float] = None,
        maximum: Optional[float] = None,
        integer: bool = False,
    ) -> None:
        value = self._get(name, 0)
        if value is _MISSING:
            return
        if value is None or value == "":
            value = 0
        try:
            if isinstance(value, bool):
                raise ValueError(value)
            number = float(value)
        except (TypeError, ValueError):
            self._error(name, "Must be a number.")
            return
        if not math.isfinite(number):
            self._error(name, "Must be a number.")
            return
        if integer and not number.is_integer():
            self._error(name, "Must be a whole number.")
            return
        if minimum is not None and maximum is not None and not minimum <= number <= maximum:
            self._error(name, f"{minimum:g} - {maximum:g}.")
            return
        if minimum is not None and number < minimum:
            self._error(name, f">= {minimum:g}.")
            return
        self.payload[name] = int(number) if integer else number

    def currency(self, name: str = "currency", default: str = "THB") -> None:
        value = self._get(name, default)
        if value is _MISSING:
            return
        code = clean_text(value).upper() or default
        if not _CURRENCY_RE.match(code):
            self._error(name, "Use a 3-letter currency code.")
            return
        self.payload[name] = code

    def iso_date(self, name: str) -> None:
        value = self._get(name, "")
        if value is _MISSING:
            return
        text = clean_text(value)
        if text:
            try:
                date.fromisoformat(text)
            except ValueError:
                self._error(name, "Use YYYY-MM-DD.")
                return
        self.payload[name] = text

    def timestamp(self, name: str, required: bool = True) -> None:
        value = self._get(name, None)
        if value is _MISSING:
            return
        if value is None or clean_text(value) == "":
            if required:
                self._error(name, "Required.")
            return
        try:
            self.payload[name] = parse_timestamp(value)
        except (TypeError, ValueError):
            self._error(name, "Invalid date/time.")

    def address(self, name: str) -> None:
        value = self._get(name, {})
        if value is _MISSING:
            return
        if value is None:
            value = {}
        if not isinstance(value, Mapping):
            self._error(name, "Must be an object.")
            return
        self.payload[name] = {field: clean_text(value.get(field)) for field in ADDRESS_FIELDS}

    def contacts(self, name: str = "contacts") -> None:
        value = self._get(name, [])
        if value is _MISSING:
            return
        if value is None:
            value = []
        if not isinstance(value, (list, tuple)):
            self._error(name, "Must be a list.")
            return
        contacts = []
        for entry in value:
            if not isinstance(entry, Mapping):
                self._error(name, "Each contact must be an object.")
                return
            contacts.append({
                "name": clean_text(entry.get("name")),
                "title": clean_text(entry.get("title")),
                "email": clean_text(entry.get("email")),
                "phone": clean_text(entry.get("phone")),
                "isPrimary": bool(entry.get("isPrimary", entry.get("is_primary"))),
            })
        self.payload[name] = contacts

    def result(self) -> Tuple[Dict[str, Any], FieldErrors]:
        return self.payload, self.errors


def clean_client(raw: Optional[Mapping[str, Any]], partial: bool = False) -> Tuple[Dict[str, Any], FieldErrors]:
    """
    Sanitise and validate a client record.

    The VAT/tax-ID business rule is NOT reported here; callers check it with
    ``vat_rule_errors`` so it can surface as a precondition failure.
    """
    c = _Cleaner(raw, partial)
    c.text("legal_name", required=True)
    c.text("trading_name")
    c.choice("industry", Industry, Industry.TV)
    c.text("website")
    c.choice("status", ClientStatus, ClientStatus.PROSPECT)
    c.choice("tier", ClientTier, ClientTier.B)
    c.csv("tags")
    c.text("tax_id")
    c.flag("vat_registered")
    c.flag("nda_on_file")
    c.text("vendor_form_url")
    c.currency()
    c.choice("payment_terms", PaymentTerms, PaymentTerms.NET_30)
    c.number("discount_rate", minimum=0, maximum=100)
    c.flag("po_required")
    c.csv("billing_emails")
    c.address("billing_address")
    c.contacts()
    return c.result()


def clean_inventory_item(raw: Optional[Mapping[str, Any]], partial: bool = False) -> Tuple[Dict[str, Any], FieldErrors]:
    c = _Cleaner(raw, partial)
    c.text("name", required=True)
    c.text("sku")
    c.text("category")
    c.text("location")
    c.choice("status", InventoryStatus, InventoryStatus.AVAILABLE)
    c.number("quantity", minimum=0, integer=True)
    c.number("unit_cost", minimum=0)
    c.number("rental_rate", minimum=0)
    c.text("serial_number")
    c.csv("tags")
    c.text("notes")
    return c.result()


def clean_sale(raw: Optional[Mapping[str, Any]], partial: bool = False) -> Tuple[Dict[str, Any], FieldErrors]:
    c = _Cleaner(raw, partial)
    c.text("name", required=True)
    c.optional_ref("client_id")
    c.choice("stage", SaleStage, SaleStage.LEAD, legacy=LEGACY_STAGES)
    c.number("amount", minimum=0)
    c.currency()
    c.iso_date("close_date")
    c.text("owner_email")
    c.csv("tags")
    c.text("notes")
    return c.result()


def clean_booking(raw: Optional[Mapping[str, Any]], partial: bool = False) -> Tuple[Dict[str, Any], FieldErrors]:
    """
    Sanitise and validate a booking. Start/end are parsed to naive UTC
    datetimes; when both are present end must be after start.
    """
    c = _Cleaner(raw, partial)
    c.text("title", required=True)
    c.optional_ref("resource_id")
    c.timestamp("start")
    c.timestamp("end")
    c.choice("status", BookingStatus, BookingStatus.TENTATIVE)
    c.optional_ref("client_id")
    c.text("location")
    c.text("notes")
    payload, errors = c.result()
    for field, message in interval_errors(payload.get("start"), payload.get("end")).items():
        errors.setdefault(field, message)
    return payload, errors


def clean_resource(raw: Optional[Mapping[str, Any]], partial: bool = False) -> Tuple[Dict[str, Any], FieldErrors]:
    c = _Cleaner(raw, partial)
    c.text("name", required=True)
    c.text("type")
    c.flag("archived")
    return c.result()
