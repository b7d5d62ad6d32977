"""
Sale Model Module

Deals moving through the sales pipeline.
"""
from enum import Enum
from typing import List, Optional
from sqlmodel import Field, AutoString, JSON, Column

from jingjai.models.base import AuditFields, new_id


class SaleStage(str, Enum):
    """
    Pipeline stages in order. LOST is the terminal non-success state.
    """
    LEAD = "Lead"
    QUALIFIED = "Qualified"
    QUOTED = "Quoted"
    WON = "Won"
    LOST = "Lost"


# Older records and forms used these stage labels
LEGACY_STAGES = {
    "Quote": SaleStage.QUOTED,
    "Awarded": SaleStage.WON,
}


class Sale(AuditFields, table=True):
    """
    A deal/opportunity.

    Attributes:
        name: Deal title (required)
        client_id: Primary key of the related Client, if any
        stage: Current SaleStage
        amount: Deal value in `currency`, >= 0
        close_date: Expected/actual close date (YYYY-MM-DD)
        owner_email: Sales owner
    """
    __tablename__ = "sales"

    id: str = Field(default_factory=new_id, primary_key=True)

    name: str = Field(nullable=False)
    client_id: Optional[str] = Field(default=None, index=True)
    stage: SaleStage = Field(default=SaleStage.LEAD, sa_type=AutoString)
    amount: float = 0
    currency: str = "THB"
    close_date: str = ""
    owner_email: str = ""
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    notes: str = ""
