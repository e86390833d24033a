"""
Tests for the filter/sort view engine.

Covers:
- Each filter predicate and their AND combination
- Sorting by every field in both directions
- Stability for equal keys
- Query validation
- Purity (input untouched, fresh output)
"""

from decimal import Decimal

import pytest

from stock_kernel.domain.records import ItemKind, StockStatus
from stock_kernel.exceptions import InvalidQueryError
from stock_engines.classifier import classify
from stock_engines.views import (
    SortSpec,
    ViewFilter,
    build_view,
    collation_key,
    list_categories,
)
from tests.conftest import make_draft


def names(records):
    return [r.name for r in records]


class TestFilters:
    """Tests for individual predicates."""

    def test_no_filter_returns_everything(self, stocked_store):
        assert len(build_view(stocked_store.all())) == 5

    def test_search_matches_name_case_insensitively(self, stocked_store):
        view = build_view(stocked_store.all(), view_filter=ViewFilter(search="bAnAnA"))

        assert names(view) == ["Banana"]

    def test_search_matches_category(self, stocked_store):
        view = build_view(stocked_store.all(), view_filter=ViewFilter(search="vegeta"))

        assert names(view) == ["Carrot"]

    def test_search_matches_supplier(self, stocked_store):
        view = build_view(stocked_store.all(), view_filter=ViewFilter(search="farmco"))

        assert names(view) == ["Apple", "Carrot"]

    def test_search_matches_notes(self, stocked_store):
        view = build_view(stocked_store.all(), view_filter=ViewFilter(search="cordless"))

        assert names(view) == ["Drill"]

    def test_search_without_match(self, stocked_store):
        assert build_view(stocked_store.all(), view_filter=ViewFilter(search="zzz")) == ()

    def test_category_is_exact(self, stocked_store):
        view = build_view(stocked_store.all(), view_filter=ViewFilter(category="Tools"))

        assert names(view) == ["Drill", "Forklift"]

    def test_category_partial_does_not_match(self, stocked_store):
        assert build_view(stocked_store.all(), view_filter=ViewFilter(category="Tool")) == ()

    def test_kind_filter(self, stocked_store):
        view = build_view(stocked_store.all(), view_filter=ViewFilter(item_kind="equipment"))

        assert all(r.item_kind is ItemKind.EQUIPMENT for r in view)
        assert len(view) == 2

    def test_kind_all(self, stocked_store):
        view = build_view(stocked_store.all(), view_filter=ViewFilter(item_kind="all"))

        assert len(view) == 5

    def test_status_filter_low(self, stocked_store):
        view = build_view(
            stocked_store.all(), view_filter=ViewFilter(status=StockStatus.LOW_STOCK)
        )

        assert names(view) == ["Apple", "Carrot"]
        assert all(classify(r) is StockStatus.LOW_STOCK for r in view)

    def test_status_filter_by_string(self, stocked_store):
        view = build_view(stocked_store.all(), view_filter=ViewFilter(status="out_of_stock"))

        assert names(view) == ["Drill"]

    def test_status_filter_in_stock_includes_zero_threshold(self, stocked_store):
        view = build_view(stocked_store.all(), view_filter=ViewFilter(status="in_stock"))

        assert names(view) == ["Banana", "Forklift"]

    def test_predicates_combine_with_and(self, stocked_store):
        view = build_view(
            stocked_store.all(),
            view_filter=ViewFilter(search="farm", category="Fruit", status="low_stock"),
        )

        assert names(view) == ["Apple"]

    def test_status_filter_sees_edits(self, stocked_store):
        banana = build_view(stocked_store.all(), view_filter=ViewFilter(search="banana"))[0]
        stocked_store.update(banana.id, {"quantity": 0})

        view = build_view(stocked_store.all(), view_filter=ViewFilter(status="out_of_stock"))

        assert names(view) == ["Banana", "Drill"]

    def test_unknown_status_rejected(self):
        with pytest.raises(InvalidQueryError) as exc_info:
            ViewFilter(status="normal")

        assert exc_info.value.parameter == "status"
        assert exc_info.value.code == "INVALID_QUERY"

    def test_unknown_kind_rejected(self):
        with pytest.raises(InvalidQueryError):
            ViewFilter(item_kind="service")


class TestSorting:
    """Tests for ordering."""

    def test_default_sort_is_name_ascending(self, stocked_store):
        assert names(build_view(stocked_store.all())) == [
            "Apple", "Banana", "Carrot", "Drill", "Forklift",
        ]

    def test_name_descending(self, stocked_store):
        view = build_view(stocked_store.all(), sort=SortSpec("name", "desc"))

        assert names(view) == ["Forklift", "Drill", "Carrot", "Banana", "Apple"]

    def test_quantity_ascending(self, stocked_store):
        view = build_view(stocked_store.all(), sort=SortSpec("quantity", "asc"))

        assert [r.quantity for r in view] == [0, 3, 5, 12, 40]

    def test_unit_price_descending(self, stocked_store):
        view = build_view(stocked_store.all(), sort=SortSpec("unit_price", "desc"))

        assert [r.unit_price for r in view] == [
            Decimal("15000"), Decimal("89.99"), Decimal("1.50"),
            Decimal("0.333"), Decimal("0.25"),
        ]

    def test_unit_price_camel_case_alias(self, stocked_store):
        a = build_view(stocked_store.all(), sort=SortSpec("unitPrice"))
        b = build_view(stocked_store.all(), sort=SortSpec("unit_price"))

        assert a == b

    def test_numeric_not_lexicographic(self, store):
        for qty in (9, 100, 20):
            store.add(make_draft(name=f"item{qty}", quantity=qty))

        view = build_view(store.all(), sort=SortSpec("quantity"))

        assert [r.quantity for r in view] == [9, 20, 100]

    def test_text_sort_ignores_case(self, store):
        for name in ("banana", "Apple", "cherry"):
            store.add(make_draft(name=name))

        assert names(build_view(store.all())) == ["Apple", "banana", "cherry"]

    def test_text_sort_ignores_accents(self, store):
        for name in ("Zebra", "Éclair", "Date"):
            store.add(make_draft(name=name))

        assert names(build_view(store.all())) == ["Date", "Éclair", "Zebra"]

    def test_lowercase_before_uppercase_on_case_tie(self, store):
        for name in ("Apple", "apple", "banana"):
            store.add(make_draft(name=name))

        assert names(build_view(store.all())) == ["apple", "Apple", "banana"]

    def test_case_tie_reversed_when_descending(self, store):
        for name in ("apple", "Apple"):
            store.add(make_draft(name=name))

        view = build_view(store.all(), sort=SortSpec("name", "desc"))

        assert names(view) == ["Apple", "apple"]

    def test_unaccented_before_accented(self, store):
        for name in ("éclair", "eclair", "Eclair"):
            store.add(make_draft(name=name))

        assert names(build_view(store.all())) == ["eclair", "Eclair", "éclair"]

    def test_category_sort_is_stable(self, stocked_store):
        view = build_view(stocked_store.all(), sort=SortSpec("category"))

        assert names(view) == ["Apple", "Banana", "Drill", "Forklift", "Carrot"]

    def test_descending_sort_is_stable(self, stocked_store):
        view = build_view(stocked_store.all(), sort=SortSpec("category", "desc"))

        assert names(view) == ["Carrot", "Drill", "Forklift", "Apple", "Banana"]

    def test_ascending_descending_are_reversed_without_ties(self, stocked_store):
        asc = build_view(stocked_store.all(), sort=SortSpec("quantity", "asc"))
        desc = build_view(stocked_store.all(), sort=SortSpec("quantity", "desc"))

        assert list(desc) == list(reversed(asc))

    def test_unknown_sort_field_rejected(self):
        with pytest.raises(InvalidQueryError) as exc_info:
            SortSpec("supplier")

        assert exc_info.value.parameter == "sort field"

    def test_unknown_direction_rejected(self):
        with pytest.raises(InvalidQueryError):
            SortSpec("name", "up")


class TestPurity:
    def test_input_untouched_and_output_fresh(self, stocked_store):
        records = list(stocked_store.all())
        before = list(records)

        view = build_view(records, sort=SortSpec("quantity", "desc"))

        assert records == before
        assert isinstance(view, tuple)
        assert len(stocked_store) == 5


class TestCategories:
    def test_distinct_sorted(self, stocked_store):
        assert list_categories(stocked_store.all()) == ("Fruit", "Tools", "Vegetables")

    def test_empty(self):
        assert list_categories([]) == ()


class TestCollationKey:
    def test_case_folds_primary_key(self):
        assert collation_key("Apple")[0] == collation_key("apple")[0]

    def test_distinct_strings_never_equal(self):
        assert collation_key("Apple") != collation_key("apple")

    def test_lowercase_orders_first(self):
        assert collation_key("apple") < collation_key("Apple")

    def test_letters_outrank_case(self):
        assert collation_key("Apple") < collation_key("banana")
        assert collation_key("apple") < collation_key("Banana")

    def test_accents_outrank_case(self):
        assert collation_key("Eclair") < collation_key("éclair")
