"""Unit tests for search and filter helpers."""

import copy

from console.models import Customer, StockItem, Warranty
from console.resources import RESOURCES, filter_items, get_path


PEOPLE = [
    {"name": "Alice", "status": "ACTIVE"},
    {"name": "Bob", "status": "INACTIVE"},
]


class TestFilterItems:
    """Tests for filter_items."""

    def test_search_with_all_filter(self):
        result = filter_items(PEOPLE, "ali", {"status": "ALL"}, search_fields=["name"])
        assert result == [{"name": "Alice", "status": "ACTIVE"}]

    def test_search_with_non_matching_filter(self):
        result = filter_items(PEOPLE, "ali", {"status": "INACTIVE"}, search_fields=["name"])
        assert result == []

    def test_is_pure(self):
        items = copy.deepcopy(PEOPLE)
        filters = {"status": "ACTIVE"}

        first = filter_items(items, " BO ", filters, search_fields=["name"])
        second = filter_items(items, " BO ", filters, search_fields=["name"])

        assert first == second == []
        assert items == PEOPLE
        assert filters == {"status": "ACTIVE"}

    def test_empty_search_matches_everything(self):
        assert filter_items(PEOPLE, "", {}, search_fields=["name"]) == PEOPLE
        assert filter_items(PEOPLE, "   ", {"status": None}, search_fields=["name"]) == PEOPLE

    def test_lowercase_all_disables_dimension(self):
        assert filter_items(PEOPLE, "", {"status": "all"}, search_fields=["name"]) == PEOPLE

    def test_none_fields_never_match(self):
        items = [{"name": None, "email": "x@y.z"}]
        assert filter_items(items, "none", {}, search_fields=["name"]) == []
        assert filter_items(items, "x@y", {}, search_fields=["name", "email"]) == items

    def test_nested_search_fields(self):
        items = [{"customer": {"first_name": "Carla"}}, {"customer": None}]
        result = filter_items(items, "carl", {}, search_fields=["customer.first_name"])
        assert result == [items[0]]

    def test_custom_matcher(self):
        result = filter_items(
            PEOPLE,
            "",
            {"initial": "B"},
            search_fields=["name"],
            matchers={"initial": lambda item, value: item["name"].startswith(value)},
        )
        assert result == [PEOPLE[1]]

    def test_works_on_models(self):
        customers = [
            Customer(id="1", first_name="Ana", last_name="Diaz", customer_type="BUSINESS"),
            Customer(id="2", first_name="Ben", last_name="Ng", customer_type="INDIVIDUAL"),
        ]
        result = filter_items(
            customers,
            "",
            {"customer_type": "BUSINESS"},
            search_fields=["first_name"],
        )
        assert [c.id for c in result] == ["1"]


class TestGetPath:
    """Tests for dotted path lookup."""

    def test_dict_and_attribute(self):
        assert get_path({"a": {"b": 1}}, "a.b") == 1
        assert get_path(Customer(id="1", first_name="Ana"), "first_name") == "Ana"

    def test_missing_segment(self):
        assert get_path({"a": None}, "a.b") is None
        assert get_path({}, "a") is None


class TestResourceMatchers:
    """Filter dimensions backed by derived values."""

    def test_customer_status_uses_is_active(self):
        spec = RESOURCES["customers"]
        items = [Customer(id="1", is_active=True), Customer(id="2", is_active=False)]

        active = filter_items(items, "", {"status": "ACTIVE"}, search_fields=spec.search_fields, matchers=spec.matchers)
        inactive = filter_items(items, "", {"status": "INACTIVE"}, search_fields=spec.search_fields, matchers=spec.matchers)

        assert [c.id for c in active] == ["1"]
        assert [c.id for c in inactive] == ["2"]

    def test_stock_status_is_derived(self):
        spec = RESOURCES["stock"]
        items = [
            StockItem(id="a", quantity=0, min_quantity=5),
            StockItem(id="b", quantity=3, min_quantity=5),
            StockItem(id="c", quantity=50, min_quantity=5),
        ]

        low = filter_items(items, "", {"status": "low_stock"}, search_fields=spec.search_fields, matchers=spec.matchers)
        out = filter_items(items, "", {"status": "out_of_stock"}, search_fields=spec.search_fields, matchers=spec.matchers)

        assert [i.id for i in low] == ["b"]
        assert [i.id for i in out] == ["a"]

    def test_warranty_expiring_soon(self):
        spec = RESOURCES["warranties"]
        items = [
            Warranty(id="soon", is_active=True, days_remaining=10),
            Warranty(id="later", is_active=True, days_remaining=200),
            Warranty(id="gone", is_active=False, is_expired=True),
        ]

        soon = filter_items(items, "", {"status": "expiring_soon"}, search_fields=spec.search_fields, matchers=spec.matchers)
        expired = filter_items(items, "", {"status": "expired"}, search_fields=spec.search_fields, matchers=spec.matchers)

        assert [w.id for w in soon] == ["soon"]
        assert [w.id for w in expired] == ["gone"]
