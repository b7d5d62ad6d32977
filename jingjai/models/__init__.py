from .user import User, UserRole
from .client import Client, ClientStatus, ClientTier, Industry, PaymentTerms
from .unique_key import Counter, UniqueKey
from .inventory import InventoryItem, InventoryEvent, InventoryStatus
from .sale import Sale, SaleStage
from .booking import Booking, BookingStatus, Resource

__all__ = [
    "User", "UserRole",
    "Client", "ClientStatus", "ClientTier", "Industry", "PaymentTerms",
    "Counter", "UniqueKey",
    "InventoryItem", "InventoryEvent", "InventoryStatus",
    "Sale", "SaleStage",
    "Booking", "BookingStatus", "Resource",
]
