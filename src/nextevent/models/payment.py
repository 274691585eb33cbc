"""Payment, invoice and cancellation models"""

from datetime import datetime
from typing import Any

from .base import Model


class Payment(Model):
    """Payment authorization returned by the checkout

    Holds everything the payment service needs to settle or abort it.
    """

    def is_valid(self) -> bool:
        return self._has("id", "uuid", "reference", "authorization", "expires")

    @property
    def id(self) -> int:
        return self._source["id"]

    @property
    def uuid(self) -> str:
        return self._source["uuid"]

    @property
    def reference(self) -> str:
        return self._source["reference"]

    @property
    def authorization(self) -> str:
        return self._source["authorization"]

    @property
    def expires(self) -> datetime | None:
        return self._date("expires")

    @property
    def amount(self) -> Any:
        return self._source.get("amount")

    @property
    def currency(self) -> str | None:
        return self._source.get("currency")

    def is_expired(self) -> bool:
        expires = self.expires
        if expires is None:
            return False
        now = datetime.now(expires.tzinfo) if expires.tzinfo else datetime.now()
        return expires < now


class Invoice(Model):
    def is_valid(self) -> bool:
        return self._has("id", "uuid", "reference", "authorization")

    @property
    def id(self) -> int:
        return self._source["id"]

    @property
    def uuid(self) -> str:
        return self._source["uuid"]

    @property
    def reference(self) -> str:
        return self._source["reference"]

    @property
    def authorization(self) -> str:
        return self._source["authorization"]


class CancellationRequest(Model):
    """Authorization to cancel an order and refund its amount"""

    def is_valid(self) -> bool:
        return self._has("order_id", "authorization", "refund_amount")

    @property
    def order_id(self) -> int:
        return self._source["order_id"]

    @property
    def authorization(self) -> str:
        return self._source["authorization"]

    @property
    def refund_amount(self) -> Any:
        return self._source["refund_amount"]

    @property
    def currency(self) -> str | None:
        return self._source.get("currency")

    def settlement_data(self, reason: str = "") -> dict[str, Any]:
        """Payload confirming the cancellation"""
        return {
            "order_id": self.order_id,
            "authorization": self.authorization,
            "reason": reason,
        }
