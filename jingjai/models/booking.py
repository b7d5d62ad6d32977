"""
Scheduling Models Module

This module defines two models:
1. Resource: a bookable thing (studio, crew member, camera package)
2. Booking: a reservation of a resource over a half-open [start, end) interval
"""
from datetime import datetime
from enum import Enum
from typing import Optional
from sqlalchemy import DateTime
from sqlmodel import Field, AutoString

from jingjai.models.base import AuditFields, new_id


class BookingStatus(str, Enum):
    TENTATIVE = "Tentative"
    CONFIRMED = "Confirmed"
    HOLD = "Hold"
    CANCELLED = "Cancelled"


class Resource(AuditFields, table=True):
    __tablename__ = "resources"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(nullable=False)
    type: str = ""
    archived: bool = False


class Booking(AuditFields, table=True):
    """
    A booking of a resource.

    Start and end are stored as naive UTC datetimes (plain DateTime columns)
    and compared as datetimes. No two non-cancelled bookings of the same resource may
    overlap unless the write explicitly bypassed the conflict check.
    """
    __tablename__ = "bookings"

    id: str = Field(default_factory=new_id, primary_key=True)

    title: str = Field(nullable=False)
    resource_id: Optional[str] = Field(default=None, foreign_key="resources.id", index=True)
    start: datetime = Field(sa_type=DateTime, nullable=False)
    end: datetime = Field(sa_type=DateTime, nullable=False)
    status: BookingStatus = Field(default=BookingStatus.TENTATIVE, sa_type=AutoString)
    client_id: Optional[str] = None
    location: str = ""
    notes: str = ""
