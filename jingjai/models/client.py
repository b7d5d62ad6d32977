"""
Client Model Module

This module defines the Client model representing companies and counterparties
the production company works with, plus the closed value sets its
classification and billing fields draw from.
"""
from enum import Enum
from typing import Any, Dict, List, Optional
from sqlmodel import SQLModel, Field, AutoString, JSON, Column

from jingjai.models.base import AuditFields, new_id


class ClientStatus(str, Enum):
    PROSPECT = "Prospect"
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class ClientTier(str, Enum):
    A = "A"
    B = "B"
    C = "C"


class Industry(str, Enum):
    TV = "TV"
    FILM = "Film"
    MUSIC_VIDEO = "Music Video"
    COMMERCIAL = "Commercial"
    OTHER = "Other"


class PaymentTerms(str, Enum):
    DUE_ON_RECEIPT = "Due on receipt"
    NET_7 = "Net 7"
    NET_15 = "Net 15"
    NET_30 = "Net 30"
    NET_45 = "Net 45"
    NET_60 = "Net 60"


class Client(AuditFields, table=True):
    """
    Client model representing a company or counterparty.

    Attributes:
        id: Opaque primary key (UUID)
        client_id: Human-facing sequential identifier (e.g. "CL-100001"),
            assigned once at creation and never changed
        legal_name: Registered company name (required)
        tax_id: Tax/VAT identifier; unique across clients once normalized
        vat_registered: When true, tax_id must be present
        discount_rate: Percentage discount, 0-100 inclusive
        billing_emails: List of invoice recipients
        billing_address: Postal address object (line1, line2, city, state, postcode, country)
        contacts: Ordered list of {name, title, email, phone, isPrimary}
    """
    __tablename__ = "clients"

    id: str = Field(default_factory=new_id, primary_key=True)
    client_id: str = Field(nullable=False, unique=True, index=True)

    # Identity
    legal_name: str = Field(nullable=False)
    trading_name: str = ""
    industry: Industry = Field(default=Industry.TV, sa_type=AutoString)
    website: str = ""

    # Classification
    status: ClientStatus = Field(default=ClientStatus.PROSPECT, sa_type=AutoString)
    tier: ClientTier = Field(default=ClientTier.B, sa_type=AutoString)
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    # Compliance
    tax_id: str = ""
    vat_registered: bool = False
    nda_on_file: bool = False
    vendor_form_url: str = ""

    # Billing
    currency: str = "THB"
    payment_terms: PaymentTerms = Field(default=PaymentTerms.NET_30, sa_type=AutoString)
    discount_rate: float = 0
    po_required: bool = False
    billing_emails: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    billing_address: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    # Contacts
    contacts: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
