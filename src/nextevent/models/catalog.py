"""Catalog models: categories, prices, seats and discounts

BaseCategory, BasePrice and DiscountCode can be spawned locally and are
created on the server through the Client.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any

from nextevent.shared.exceptions import (
    InvalidArgumentError,
    InvalidBaseCategoryError,
    InvalidModelDataError,
)

from .base import Model, MutableModel
from .collection import Collection

if TYPE_CHECKING:
    from nextevent.rest import RestClient


def _facet_title(source: dict[str, Any]) -> str | None:
    facet = (source.get("facets") or {}).get("title") or {}
    if facet.get("value") is not None:
        return facet["value"]
    if source.get("displayname") is not None:
        return source["displayname"]
    return source.get("title")


class Category(Model):
    def is_valid(self) -> bool:
        return self._has("category_id", "displayname", "event_id")

    @property
    def id(self) -> int:
        return self._source["category_id"]

    @property
    def created_date(self) -> datetime | None:
        return self._date("created")

    @property
    def changed_date(self) -> datetime | None:
        return self._date("changed")

    @property
    def title(self) -> str | None:
        return _facet_title(self._source)

    @property
    def displayname(self) -> str:
        return self._source["displayname"]

    @property
    def event_id(self) -> str:
        return str(self._source["event_id"])

    @property
    def event_title(self) -> str | None:
        return self._source.get("event_title")

    def is_deleted(self) -> bool:
        return bool(self._source.get("deleted"))

    @property
    def capacity(self) -> int | None:
        return self._source.get("capacity")

    @property
    def available_items(self) -> int | None:
        return self._source.get("available_items")


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    try:
        float(value)
    except (TypeError, ValueError):
        return False
    return True


class Price(Model):
    def is_valid(self) -> bool:
        return (
            self._has("price_id", "currency")
            and "title" in self._source
            and _is_number(self._source.get("price"))
        )

    @property
    def id(self) -> int:
        return self._source["price_id"]

    @property
    def created_date(self) -> datetime | None:
        return self._date("created")

    @property
    def changed_date(self) -> datetime | None:
        return self._date("changed")

    @property
    def title(self) -> str | None:
        return self._source["title"]

    @property
    def net_price(self) -> Any:
        return self._source["price"]

    @property
    def price(self) -> Any:
        """Price including fees"""
        return self._source.get("real_price")

    @property
    def currency(self) -> str:
        return self._source["currency"]

    def is_sideevent_price(self) -> bool:
        side_event = self._source.get("side_event") or {}
        return bool(side_event.get("parent_category_id"))

    def is_package_price(self) -> bool:
        side_event = self._source.get("side_event") or {}
        return "parent_category_id" in side_event and bool(
            side_event.get("preselected_items")
        )

    def is_discount_price(self) -> bool:
        return bool(self._source.get("parent_price_id"))

    def is_hidden(self) -> bool:
        return (
            self.is_sideevent_price()
            or self.is_package_price()
            or self.is_discount_price()
        )

    def is_deleted(self) -> bool:
        return bool(self._source.get("deleted"))


class BaseCategory(MutableModel):
    """Category template of an event

    Instances without base_category_id are only created via spawn().
    """

    def __init__(
        self,
        source: dict[str, Any],
        rest_client: "RestClient | None" = None,
    ) -> None:
        self._is_new = False
        self._base_prices: Collection | None = None
        self.rest_client = rest_client
        if isinstance(source, dict) and source.get("base_category_id") is None:
            self._source = source
        else:
            super().__init__(source)

    @classmethod
    def spawn(cls, data: dict[str, Any]) -> "BaseCategory":
        """Create a new base category not yet stored on the server"""
        base_category = cls(data)
        base_category._is_new = True
        base_category.set_base_prices(Collection(BasePrice))
        if not base_category.is_valid():
            raise InvalidModelDataError(
                f"Given data for {cls.__name__} creation is invalid"
            )
        return base_category

    def is_new(self) -> bool:
        return self._is_new

    def is_valid(self) -> bool:
        return (
            (self._has("base_category_id") or self.is_new())
            and self._has("title", "event_id")
        )

    def set_rest_client(self, rest_client: "RestClient") -> "BaseCategory":
        self.rest_client = rest_client
        return self

    @property
    def id(self) -> int:
        base_category_id = self._source.get("base_category_id")
        return -1 if base_category_id is None else base_category_id

    @property
    def created_date(self) -> datetime | None:
        return self._date("created")

    @property
    def changed_date(self) -> datetime | None:
        return self._date("changed")

    @property
    def title(self) -> str | None:
        return _facet_title(self._source)

    @title.setter
    def title(self, title: str) -> None:
        facets = self._source.get("facets") or {}
        if facets.get("title") is not None:
            facets["title"]["value"] = title
        else:
            self._source["title"] = title

    @property
    def displayname(self) -> str | None:
        return self._source.get("displayname")

    @property
    def event_id(self) -> str:
        return str(self._source["event_id"])

    @property
    def base_prices(self) -> Collection | None:
        """Prices of this base category, fetched on first access"""
        if self._base_prices is None and self.rest_client is not None:
            response = self.rest_client.get(
                f"/base_price?base_category_id={self.id}"
            )
            self.set_base_prices(
                Collection(
                    BasePrice, data=response.content, rest_client=self.rest_client
                )
            )
        return self._base_prices

    def set_base_prices(self, base_prices: Collection) -> None:
        for price in base_prices:
            price.set_base_category(self)
        self._base_prices = base_prices

    def to_dict(self, filter_id: bool = False) -> dict[str, Any]:
        if filter_id:
            return {
                k: v for k, v in self._source.items() if k != "base_category_id"
            }
        return super().to_dict()

    def set_source(self, source: dict[str, Any]) -> "BaseCategory":
        super().set_source(source)
        self._is_new = False
        return self


class BasePrice(MutableModel):
    """Price template attached to a base category"""

    def __init__(self, source: dict[str, Any]) -> None:
        self._is_new = False
        self._base_category: BaseCategory | None = None
        if isinstance(source, dict) and source.get("base_price_id") is None:
            self._source = source
        else:
            super().__init__(source)

    @classmethod
    def spawn(
        cls, data: dict[str, Any], base_category: BaseCategory
    ) -> "BasePrice":
        """Create a new base price for the given base category"""
        base_price = cls(data)
        base_price._is_new = True
        base_price.set_base_category(base_category)
        if not base_price.is_valid():
            raise InvalidModelDataError(
                f"Given data for {cls.__name__} creation is invalid"
            )
        return base_price

    def is_new(self) -> bool:
        return self._is_new

    def is_valid(self) -> bool:
        return (
            (self._has("base_price_id") or self.is_new())
            and self._has("base_category_id", "event_id", "currency")
            and "title" in self._source
            and _is_number(self._source.get("price"))
        )

    @property
    def id(self) -> int | None:
        return self._source.get("base_price_id")

    @property
    def base_category_id(self) -> int:
        base_category_id = self._source.get("base_category_id")
        return -1 if base_category_id is None else base_category_id

    @property
    def base_category(self) -> BaseCategory | None:
        return self._base_category

    def set_base_category(self, base_category: BaseCategory) -> BaseCategory:
        """Attach the base category this price belongs to

        New prices take over the category's id and event id, existing prices
        must already reference the category.
        """
        if not isinstance(base_category, BaseCategory):
            raise InvalidArgumentError(
                "The given base category must be a BaseCategory instance"
            )
        if self.is_new():
            self._source["base_category_id"] = base_category.id
            self._source["event_id"] = base_category.event_id
        elif base_category.id != self.base_category_id:
            raise InvalidBaseCategoryError(
                "The given base category instance does not match "
                "the base category id of this base price"
            )
        self._base_category = base_category
        return base_category

    @property
    def title(self) -> str | None:
        return self._source["title"]

    @title.setter
    def title(self, title: str) -> None:
        self._source["title"] = title

    @property
    def price(self) -> Any:
        return self._source["price"]

    @price.setter
    def price(self, price: Any) -> None:
        self._source["price"] = price

    @property
    def currency(self) -> str:
        return self._source["currency"]

    @currency.setter
    def currency(self, currency: str) -> None:
        self._source["currency"] = currency

    def to_dict(self, filter_id: bool = False) -> dict[str, Any]:
        if filter_id:
            return {k: v for k, v in self._source.items() if k != "base_price_id"}
        return super().to_dict()

    def set_source(self, source: dict[str, Any]) -> "BasePrice":
        super().set_source(source)
        self._is_new = False
        return self


class Seat(Model):
    def is_valid(self) -> bool:
        return self._has("seat_id", "description", "row")

    @property
    def id(self) -> int:
        return self._source["seat_id"]

    @property
    def displayname(self) -> str:
        if self._source.get("displayname") is not None:
            return self._source["displayname"]
        segments = [self.row_label("R%s"), self.place_label("S%s")]
        return " / ".join(str(s) for s in segments if s)

    def row_label(self, template: str = "") -> str:
        row = self._source["row"]
        if row != "" and "%" in template:
            return template % row
        return row

    def place_label(self, template: str = "") -> str:
        place = self._source["description"]
        if place != "" and "%" in template:
            return template % place
        return place

    @property
    def map_title(self) -> str | None:
        return self._source.get("seat_map_title")


class DiscountGroup(Model):
    def is_valid(self) -> bool:
        return self._has("discount_group_id", "title")

    @property
    def id(self) -> int:
        return self._source["discount_group_id"]

    @property
    def title(self) -> str:
        return self._source["title"]

    @property
    def displayname(self) -> str:
        return self._source["title"]

    @property
    def description(self) -> str | None:
        return self.get("description")

    @property
    def amount(self) -> Any:
        return self.get("amount")

    @property
    def factor(self) -> Any:
        return self.get("factor")


class DiscountCode(MutableModel):
    """Discount code, new until the server assigns a discount_code_id"""

    @classmethod
    def spawn(
        cls, data: dict[str, Any], discount_group: DiscountGroup
    ) -> "DiscountCode":
        data = dict(data)
        data.setdefault("title", discount_group.title)
        for key in ("valid_from", "valid_to"):
            if isinstance(data.get(key), datetime):
                data[key] = data[key].isoformat()
        formdata = data.pop("formdata", None)
        if isinstance(formdata, dict):
            data = {**formdata, **data}

        model = cls(data)
        model.set_discount_group(discount_group)
        if not model.get("discount_group_id"):
            raise InvalidModelDataError("Missing required discount group relation")
        return model

    def is_new(self) -> bool:
        return not self._source.get("discount_code_id")

    def is_valid(self) -> bool:
        if self.is_new():
            return bool(self._source.get("code"))
        return bool(
            self._source.get("title") or self._source.get("discount_group_id")
        )

    @property
    def id(self) -> int | None:
        return self._source.get("discount_code_id")

    @property
    def title(self) -> str | None:
        return self._source.get("title")

    @property
    def displayname(self) -> str | None:
        return self._source.get("title")

    @property
    def code(self) -> str:
        return self._source["code"]

    @property
    def valid_from(self) -> datetime | None:
        return self._date("valid_from")

    @property
    def valid_to(self) -> datetime | None:
        return self._date("valid_to")

    def set_discount_group(self, group: DiscountGroup) -> "DiscountCode":
        if not self.is_new():
            raise InvalidModelDataError("DiscountGroup relation cannot be changed")
        self._source["discount_group_id"] = group.id
        return self
