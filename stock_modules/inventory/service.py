"""
InventoryService -- thin glue between a host and the inventory engine.

Responsibility
--------------
Wires a ``RecordStore`` to the pure engines (views, aggregation, summary,
export) and to ``InventoryConfig`` defaults, so a host application makes one
call per user action.  Holds no business logic of its own: every rule lives
in the kernel domain or the engines.

Failure Modes
-------------
Errors from the store and engines propagate unchanged
(``ValidationError``, ``NotFoundError``, ``InvalidQueryError``,
``PersistenceError``).
"""

from __future__ import annotations

from datetime import date
from typing import Any
from uuid import UUID

from stock_kernel.domain.clock import Clock
from stock_kernel.domain.records import InventoryRecord, ItemKind, StockStatus
from stock_kernel.logging_config import LogContext, get_logger
from stock_engines.aggregation import AggregateRow, AggregationDimension, aggregate
from stock_engines.classifier import classify
from stock_engines.export import export_filename, serialize
from stock_engines.summary import InventorySummary, summarize
from stock_engines.views import SortSpec, ViewFilter, build_view, list_categories
from stock_modules.inventory.config import InventoryConfig
from stock_modules.inventory.persistence import RecordPersistence
from stock_modules.inventory.store import RecordStore

logger = get_logger("modules.inventory.service")


class InventoryService:
    """
    One-stop surface for a host application.

    Usage:
        service = InventoryService.open(JsonFilePersistence("inventory.json"))
        record_id = service.add_item(
            name="Apple", category="Fruit", quantity=5,
            unit_price=Decimal("1.50"), supplier="FarmCo",
        )
        rows = service.view(status="low_stock", sort_field="quantity")
        csv_text = service.export_csv(rows)
    """

    def __init__(
        self,
        store: RecordStore,
        config: InventoryConfig | None = None,
    ):
        self.store = store
        self.config = config or InventoryConfig.with_defaults()

    @classmethod
    def open(
        cls,
        persistence: RecordPersistence,
        config: InventoryConfig | None = None,
        clock: Clock | None = None,
    ) -> "InventoryService":
        """Load state from ``persistence`` and save back to it on every change."""
        return cls(RecordStore.from_persistence(persistence, clock=clock), config=config)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def add_item(self, **fields: Any) -> UUID:
        """
        Create a record.  ``threshold`` and ``item_kind`` fall back to the
        configured defaults when omitted; every other field is required.
        """
        fields.setdefault("threshold", self.config.default_threshold)
        fields.setdefault("item_kind", self.config.default_item_kind)
        return self.store.add(fields)

    def edit_item(self, record_id: UUID | str, **changes: Any) -> InventoryRecord:
        return self.store.update(record_id, changes)

    def delete_item(self, record_id: UUID | str) -> None:
        self.store.remove(record_id)

    def get_item(self, record_id: UUID | str) -> InventoryRecord:
        return self.store.get(record_id)

    def status_of(self, record_id: UUID | str) -> StockStatus:
        return classify(self.store.get(record_id))

    # ------------------------------------------------------------------
    # Views and reports
    # ------------------------------------------------------------------

    def view(
        self,
        *,
        search: str = "",
        category: str | None = None,
        item_kind: ItemKind | str = "all",
        status: StockStatus | str = "all",
        sort_field: str | None = None,
        sort_direction: str | None = None,
    ) -> tuple[InventoryRecord, ...]:
        """Filtered and sorted records; sort defaults come from config."""
        return build_view(
            self.store.all(),
            view_filter=ViewFilter(
                search=search, category=category, item_kind=item_kind, status=status
            ),
            sort=SortSpec(
                field=sort_field or self.config.default_sort_field,
                direction=sort_direction or self.config.default_sort_direction,
            ),
        )

    def categories(self) -> tuple[str, ...]:
        return list_categories(self.store.all())

    def report(self, dimension: AggregationDimension | str) -> tuple[AggregateRow, ...]:
        return aggregate(self.store.all(), dimension=dimension)

    def summary(self) -> InventorySummary:
        return summarize(self.store.all())

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_csv(self, records: tuple[InventoryRecord, ...] | None = None) -> str:
        """CSV text for ``records`` (default: the full store in store order)."""
        if records is None:
            records = self.store.all()
        with LogContext.bind(operation="export"):
            text = serialize(
                records,
                delimiter=self.config.export_delimiter,
                line_terminator=self.config.export_line_terminator,
            )
            logger.info("inventory_exported", extra={"record_count": len(records)})
        return text

    def export_filename(self, as_of: date | None = None) -> str:
        as_of = as_of or self.store.clock.now_utc().date()
        return export_filename(as_of, self.config.export_filename_pattern)
