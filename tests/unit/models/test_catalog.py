"""Tests for categories, prices, seats and discounts"""

from datetime import datetime

import pytest

from nextevent.models import (
    BaseCategory,
    BasePrice,
    Category,
    Collection,
    DiscountCode,
    DiscountGroup,
    Price,
    Seat,
    Spawnable,
)
from nextevent.shared.exceptions import (
    InvalidArgumentError,
    InvalidBaseCategoryError,
    InvalidModelDataError,
)


@pytest.fixture
def base_category_data(fixture_loader):
    return fixture_loader("base_categories")["_embedded"]["base_category"]


@pytest.fixture
def discount_group() -> DiscountGroup:
    return DiscountGroup({"discount_group_id": 3, "title": "Friends"})


@pytest.mark.unit
class TestCategoryAndPrice:
    def test_category_title_prefers_facet(self):
        category = Category(
            {
                "category_id": 1,
                "displayname": "Standing",
                "event_id": 1,
                "facets": {"title": {"value": "Stehplatz"}},
            }
        )

        assert category.title == "Stehplatz"
        assert category.event_id == "1"

    def test_category_title_falls_back_to_displayname(self):
        category = Category(
            {"category_id": 1, "displayname": "Standing", "event_id": 1}
        )

        assert category.title == "Standing"
        assert not category.is_deleted()

    def test_price_requires_numeric_price(self):
        data = {"price_id": 1, "title": "Adult", "currency": "CHF"}

        assert Price({**data, "price": "12.50"}).net_price == "12.50"
        with pytest.raises(InvalidModelDataError):
            Price({**data, "price": "free"})
        with pytest.raises(InvalidModelDataError):
            Price({**data, "price": True})

    @pytest.mark.parametrize(
        "extra, sideevent, package, discount",
        [
            ({}, False, False, False),
            ({"side_event": {"parent_category_id": 5}}, True, False, False),
            (
                {"side_event": {"parent_category_id": 5, "preselected_items": [1]}},
                True,
                True,
                False,
            ),
            ({"parent_price_id": 9}, False, False, True),
        ],
    )
    def test_hidden_prices(self, extra, sideevent, package, discount):
        price = Price(
            {"price_id": 1, "title": "", "price": 10, "currency": "CHF", **extra}
        )

        assert price.is_sideevent_price() is sideevent
        assert price.is_package_price() is package
        assert price.is_discount_price() is discount
        assert price.is_hidden() is (sideevent or package or discount)


@pytest.mark.unit
class TestBaseCategory:
    def test_spawn(self):
        base_category = BaseCategory.spawn({"title": "VIP", "event_id": 1})

        assert base_category.is_new()
        assert isinstance(base_category, Spawnable)
        assert base_category.id == -1
        assert len(base_category.base_prices) == 0

    def test_spawn_requires_event(self):
        with pytest.raises(InvalidModelDataError):
            BaseCategory.spawn({"title": "VIP"})

    def test_existing_requires_fields(self):
        with pytest.raises(InvalidModelDataError):
            BaseCategory({"base_category_id": 1, "title": "VIP"})

    def test_title_setter_updates_facet(self, base_category_data):
        seated = BaseCategory(base_category_data[0])
        standing = BaseCategory(base_category_data[1])

        seated.title = "Seated front"
        standing.title = "Standing back"

        assert seated.title == "Seated front"
        assert seated.get("title") == "Seated"
        assert standing.get("title") == "Standing back"

    def test_to_dict_filters_id(self, base_category_data):
        base_category = BaseCategory(base_category_data[1])

        assert "base_category_id" in base_category.to_dict()
        assert base_category.to_dict(filter_id=True) == {
            "title": "Standing",
            "event_id": 1,
        }

    def test_set_source_clears_new_flag(self):
        base_category = BaseCategory.spawn({"title": "VIP", "event_id": 1})

        base_category.set_source(
            {"base_category_id": 30, "title": "VIP", "event_id": 1}
        )

        assert not base_category.is_new()
        assert base_category.id == 30

    def test_base_prices_fetched_lazily(
        self, fake_api, rest_client, base_category_data, fixture_loader
    ):
        fake_api.add("GET", "/base_price", json=fixture_loader("base_prices"))
        base_category = BaseCategory(base_category_data[0], rest_client)

        prices = base_category.base_prices
        base_category.base_prices

        assert isinstance(prices, Collection)
        assert [price.id for price in prices] == [200]
        assert prices[0].base_category is base_category
        calls = fake_api.calls("GET", "/base_price")
        assert len(calls) == 1
        assert calls[0].url.params["base_category_id"] == "20"

    def test_base_prices_without_client(self, base_category_data):
        assert BaseCategory(base_category_data[0]).base_prices is None


@pytest.mark.unit
class TestBasePrice:
    def test_spawn_takes_category_ids(self, base_category_data):
        base_category = BaseCategory(base_category_data[0])

        base_price = BasePrice.spawn(
            {"title": "Child", "price": 20, "currency": "CHF"}, base_category
        )

        assert base_price.is_new()
        assert base_price.id is None
        assert base_price.base_category_id == 20
        assert base_price.get("event_id") == "1"
        assert base_price.base_category is base_category

    def test_spawn_requires_price(self, base_category_data):
        with pytest.raises(InvalidModelDataError):
            BasePrice.spawn(
                {"title": "Child", "currency": "CHF"},
                BaseCategory(base_category_data[0]),
            )

    def test_existing_price_must_match_category(
        self, base_category_data, fixture_loader
    ):
        data = fixture_loader("base_prices")["_embedded"]["base_price"][0]
        base_price = BasePrice(data)

        base_price.set_base_category(BaseCategory(base_category_data[0]))
        with pytest.raises(InvalidBaseCategoryError):
            base_price.set_base_category(BaseCategory(base_category_data[1]))

    def test_rejects_non_category(self, fixture_loader):
        data = fixture_loader("base_prices")["_embedded"]["base_price"][0]

        with pytest.raises(InvalidArgumentError):
            BasePrice(data).set_base_category({"base_category_id": 20})

    def test_setters_and_to_dict(self, fixture_loader):
        data = fixture_loader("base_prices")["_embedded"]["base_price"][0]
        base_price = BasePrice(data)

        base_price.title = "Senior"
        base_price.price = 35
        base_price.currency = "EUR"

        payload = base_price.to_dict(filter_id=True)
        assert "base_price_id" not in payload
        assert payload["title"] == "Senior"
        assert payload["price"] == 35
        assert payload["currency"] == "EUR"


@pytest.mark.unit
class TestSeat:
    def test_displayname_from_labels(self):
        seat = Seat({"seat_id": 1, "row": "3", "description": "12"})

        assert seat.displayname == "R3 / S12"
        assert seat.row_label("Row %s") == "Row 3"
        assert seat.place_label() == "12"

    def test_displayname_skips_empty_row(self):
        assert Seat({"seat_id": 1, "row": "", "description": "12"}).displayname == "S12"

    def test_explicit_displayname(self):
        seat = Seat(
            {
                "seat_id": 1,
                "row": "3",
                "description": "12",
                "displayname": "Box 1",
                "seat_map_title": "Hall",
            }
        )

        assert seat.displayname == "Box 1"
        assert seat.map_title == "Hall"


@pytest.mark.unit
class TestDiscountCode:
    def test_spawn(self, discount_group):
        code = DiscountCode.spawn(
            {
                "code": "SUMMER",
                "valid_from": datetime(2025, 6, 1, 8, 0),
                "formdata": {"note": "press"},
            },
            discount_group,
        )

        assert code.is_new()
        assert code.title == "Friends"
        assert code.get("discount_group_id") == 3
        assert code.get("valid_from") == "2025-06-01T08:00:00"
        assert code.valid_from == datetime(2025, 6, 1, 8, 0)
        assert code.get("note") == "press"

    def test_spawn_keeps_title(self, discount_group):
        code = DiscountCode.spawn({"code": "A", "title": "Press"}, discount_group)

        assert code.title == "Press"

    def test_spawn_requires_code(self, discount_group):
        with pytest.raises(InvalidModelDataError):
            DiscountCode.spawn({"title": "Press"}, discount_group)

    def test_group_of_existing_code_is_fixed(self, discount_group):
        code = DiscountCode(
            {"discount_code_id": 9, "code": "A", "discount_group_id": 1}
        )

        assert not code.is_new()
        with pytest.raises(InvalidModelDataError):
            code.set_discount_group(discount_group)
