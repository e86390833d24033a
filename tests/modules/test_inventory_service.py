"""
Tests for InventoryService.

The service is glue: these tests check that config defaults reach the store
and the engines, and that errors propagate unchanged.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from stock_kernel.domain.records import ItemKind, StockStatus
from stock_kernel.exceptions import InvalidQueryError, NotFoundError, ValidationError
from stock_modules.inventory import (
    InMemoryPersistence,
    InventoryConfig,
    InventoryService,
    RecordStore,
)


@pytest.fixture
def service(stocked_store):
    return InventoryService(stocked_store)


def add_apple(service, **overrides):
    fields = {
        "name": "Apple",
        "category": "Fruit",
        "quantity": 5,
        "unit_price": Decimal("1.50"),
        "supplier": "FarmCo",
    }
    fields.update(overrides)
    return service.add_item(**fields)


class TestCrud:
    def test_add_uses_config_defaults(self, store):
        service = InventoryService(
            store, config=InventoryConfig(default_threshold=3, default_item_kind="equipment"),
        )

        record = service.get_item(add_apple(service))

        assert record.threshold == 3
        assert record.item_kind is ItemKind.EQUIPMENT

    def test_explicit_values_beat_defaults(self, store):
        service = InventoryService(store)

        record = service.get_item(add_apple(service, threshold=1, item_kind="product"))

        assert record.threshold == 1

    def test_default_threshold_is_ten(self, store):
        service = InventoryService(store)

        assert service.get_item(add_apple(service)).threshold == 10

    def test_missing_required_field(self, store):
        service = InventoryService(store)

        with pytest.raises(ValidationError) as exc_info:
            service.add_item(name="Apple", category="Fruit", quantity=1, unit_price=1)

        assert exc_info.value.field == "supplier"

    def test_edit_and_status(self, store):
        service = InventoryService(store)
        record_id = add_apple(service)

        assert service.status_of(record_id) is StockStatus.LOW_STOCK
        service.edit_item(record_id, quantity=0)
        assert service.status_of(record_id) is StockStatus.OUT_OF_STOCK

    def test_delete(self, service):
        record_id = service.view(search="banana")[0].id

        service.delete_item(record_id)

        with pytest.raises(NotFoundError):
            service.get_item(record_id)


class TestViewsAndReports:
    def test_view_defaults_to_name_ascending(self, service):
        assert [r.name for r in service.view()] == [
            "Apple", "Banana", "Carrot", "Drill", "Forklift",
        ]

    def test_view_uses_configured_sort(self, stocked_store):
        service = InventoryService(
            stocked_store,
            config=InventoryConfig(default_sort_field="quantity", default_sort_direction="desc"),
        )

        assert [r.quantity for r in service.view()] == [40, 12, 5, 3, 0]

    def test_view_filters(self, service):
        rows = service.view(item_kind="equipment", status="out_of_stock")

        assert [r.name for r in rows] == ["Drill"]

    def test_invalid_query_propagates(self, service):
        with pytest.raises(InvalidQueryError):
            service.view(sort_field="colour")

    def test_categories(self, service):
        assert service.categories() == ("Fruit", "Tools", "Vegetables")

    def test_report(self, service):
        rows = service.report("status")

        assert [(r.label, r.value) for r in rows] == [
            ("In Stock", 2), ("Low Stock", 2), ("Out of Stock", 1),
        ]

    def test_summary(self, service):
        assert service.summary().total_items == 5


class TestExport:
    def test_export_whole_store_by_default(self, service):
        lines = service.export_csv().splitlines()

        assert len(lines) == 6

    def test_export_view(self, service):
        text = service.export_csv(service.view(category="Tools"))

        assert len(text.splitlines()) == 3

    def test_configured_delimiter(self, stocked_store):
        service = InventoryService(
            stocked_store, config=InventoryConfig(export_delimiter=";")
        )

        header = service.export_csv().splitlines()[0]

        assert header.startswith("id;name;category")

    def test_filename_from_clock(self, service):
        assert service.export_filename() == "inventory-report-2024-03-01.csv"

    def test_filename_explicit_date(self, service):
        assert service.export_filename(date(2025, 12, 31)) == "inventory-report-2025-12-31.csv"

    def test_filename_follows_the_store_clock(self, store, clock):
        service = InventoryService(store)
        clock.set_time(datetime(2030, 7, 4, 23, 59, tzinfo=timezone.utc))

        assert service.store.clock is clock
        assert service.export_filename() == "inventory-report-2030-07-04.csv"


class TestOpen:
    def test_open_loads_and_saves(self, stocked_store, clock):
        persistence = InMemoryPersistence(stocked_store.to_state())

        service = InventoryService.open(persistence, clock=clock)
        add_apple(service, name="Pear")

        assert len(service.store) == 6
        assert persistence.rows == service.store.to_state()

    def test_default_config(self, clock):
        service = InventoryService(RecordStore(clock=clock))

        assert service.config == InventoryConfig()
