"""Models wrapping NextEvent API data"""

from .access import (
    AccessCode,
    AccessCodeState,
    Connection,
    Device,
    EntryState,
    Gate,
    GateMode,
    ScanLog,
)
from .base import Model, MutableModel, Spawnable, parse_datetime
from .catalog import (
    BaseCategory,
    BasePrice,
    Category,
    DiscountCode,
    DiscountGroup,
    Price,
    Seat,
)
from .collection import AccessCodeCollection, Collection
from .event import Event, GeoCoordinates, Location, Organization, PostalAddress
from .order import (
    Basket,
    BasketItem,
    Order,
    OrderDocument,
    OrderItem,
    Ticket,
    TicketDocument,
)
from .payment import CancellationRequest, Invoice, Payment
from .token import Token
from .webhook import WebhookMessage

__all__ = [
    "AccessCode",
    "AccessCodeCollection",
    "AccessCodeState",
    "BaseCategory",
    "BasePrice",
    "Basket",
    "BasketItem",
    "CancellationRequest",
    "Category",
    "Collection",
    "Connection",
    "Device",
    "DiscountCode",
    "DiscountGroup",
    "EntryState",
    "Event",
    "Gate",
    "GateMode",
    "GeoCoordinates",
    "Invoice",
    "Location",
    "Model",
    "MutableModel",
    "Order",
    "OrderDocument",
    "OrderItem",
    "Organization",
    "Payment",
    "PostalAddress",
    "Price",
    "ScanLog",
    "Seat",
    "Spawnable",
    "Ticket",
    "TicketDocument",
    "Token",
    "WebhookMessage",
    "parse_datetime",
]
