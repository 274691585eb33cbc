"""Basket and order models"""

from datetime import datetime
from typing import TYPE_CHECKING, Any

from nextevent.shared.exceptions import (
    MissingDocumentError,
    TicketNotFoundError,
)

from .base import Model
from .catalog import Category, Price

if TYPE_CHECKING:
    from nextevent.rest import RestClient


class Basket(Model):
    """In-progress order before checkout"""

    def __init__(self, source: dict[str, Any]) -> None:
        super().__init__(source)
        self._items: list[BasketItem] | None = None

    def is_valid(self) -> bool:
        return (
            self._has("order_id")
            and "expires" in self._source
            and isinstance(self._source.get("tickets"), list)
        )

    @property
    def id(self) -> int:
        return self._source["order_id"]

    @property
    def expires(self) -> datetime | None:
        return self._date("expires")

    @property
    def basket_items(self) -> list["BasketItem"]:
        if self._items is None:
            self._items = [
                BasketItem({**item, "order_id": self.id})
                for item in self._source["tickets"]
            ]
        return self._items

    def has_basket_items(self) -> bool:
        return len(self._source["tickets"]) > 0

    @property
    def widget_parameter(self) -> str:
        """Value for the widget's basket parameter"""
        return str(self.id)


class BasketItem(Model):
    """Single item of a basket, with its category and price"""

    def __init__(self, source: dict[str, Any]) -> None:
        super().__init__(source)
        self.category = Category(source["category"])
        self.price = Price(source["price"])

    def is_valid(self) -> bool:
        return self._has("order_item_id", "category", "price", "type")

    @property
    def id(self) -> int:
        return self._source["order_item_id"]

    @property
    def order_id(self) -> int | None:
        return self._source.get("order_id")

    @property
    def event_id(self) -> str:
        return self.category.event_id

    @property
    def event_title(self) -> str | None:
        return self.category.event_title

    @property
    def type(self) -> str:
        return self._source["type"]

    def get_description(self, delimiter: str = " - ") -> str:
        segments = [self.category.displayname, self.price.title]
        return delimiter.join(s for s in segments if s)

    @property
    def description(self) -> str:
        return self.get_description()


class OrderItem(BasketItem):
    """Item of a completed order"""


class Order(Model):
    """Order that went through checkout

    Order items are fetched lazily through the attached rest client when the
    order was loaded without them.
    """

    def __init__(
        self,
        source: dict[str, Any],
        rest_client: "RestClient | None" = None,
    ) -> None:
        super().__init__(source)
        self.rest_client = rest_client
        self._tickets = [Ticket(t) for t in source.get("tickets") or []]
        self._items: list[OrderItem] | None = None

    def set_rest_client(self, rest_client: "RestClient") -> "Order":
        self.rest_client = rest_client
        return self

    def is_valid(self) -> bool:
        tickets = self._source.get("tickets")
        return self._has("order_id", "state") and (
            tickets is None or isinstance(tickets, list)
        )

    @property
    def id(self) -> int:
        return self._source["order_id"]

    @property
    def state(self) -> str:
        return self._source["state"]

    @property
    def order_items(self) -> list[OrderItem]:
        if (
            not self._items
            and "order_items" not in self._source
            and self.rest_client is not None
        ):
            response = self.rest_client.get(
                f"/order_items_by?order_id={int(self.id)}"
            )
            embedded = response.embedded or {}
            self._source["order_items"] = embedded.get("order_item", [])

        if not self._items and self._source.get("order_items"):
            self._items = [
                OrderItem({**item, "order_id": self.id})
                for item in self._source["order_items"]
            ]
        return self._items or []

    @property
    def tickets(self) -> list["Ticket"]:
        """Tickets of a completed order

        Raises:
            TicketNotFoundError: If the order has no tickets or is not complete
        """
        if not self.has_tickets() or not self.is_complete():
            raise TicketNotFoundError(
                f"No tickets available for order {self.id}"
            )
        return self._tickets

    def has_tickets(self) -> bool:
        return bool(self._tickets)

    def all_tickets_issued(self) -> bool:
        return bool(self._tickets) and all(t.is_issued() for t in self._tickets)

    def is_complete(self) -> bool:
        return self.state == "completed"


class OrderDocument(Model):
    def is_valid(self) -> bool:
        return self._has("uri")

    @property
    def download_url(self) -> str:
        return self._source["uri"]

    @property
    def title(self) -> str | None:
        return self.get("title")


class Ticket(Model):
    def is_valid(self) -> bool:
        return self._has("ticket_id", "status")

    @property
    def id(self) -> int:
        return self._source["ticket_id"]

    def is_issued(self) -> bool:
        return self._source["status"] == "issued"

    def has_document(self) -> bool:
        return self.is_issued() and isinstance(self._source.get("document"), dict)

    @property
    def document(self) -> "TicketDocument":
        if not self.has_document():
            raise MissingDocumentError(f"Missing document for ticket {self.id}")
        return TicketDocument(self._source["document"])


class TicketDocument(Model):
    def is_valid(self) -> bool:
        return self._has("document_id", "uri")

    @property
    def id(self) -> int:
        return self._source["document_id"]

    @property
    def download_url(self) -> str:
        return self._source["uri"]
