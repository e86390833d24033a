"""
Module: stock_engines.aggregation
Responsibility:
    Group the record store along one reporting dimension and return ordered
    ``(label, value)`` rows that any charting layer can consume.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Recomputed on every call;
    nothing is cached because records may have changed since the last call.

Invariants enforced:
    - CATEGORY: value is the summed quantity per category; one row per
      distinct category, in first-encountered store order.
    - STATUS: value is the record count per stock status; exactly three
      rows (In Stock, Low Stock, Out of Stock), zero-valued rows included.
      Row values sum to the number of records.
    - ITEM_KIND: value is the record count per kind; exactly two rows
      (Products, Equipment), zero-valued rows included.

Failure modes:
    - InvalidQueryError for an unknown dimension.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from stock_kernel.domain.records import InventoryRecord, ItemKind, StockStatus
from stock_kernel.exceptions import InvalidQueryError
from stock_engines.classifier import classify
from stock_engines.tracer import traced_engine


class AggregationDimension(Enum):
    """Dimension along which records are grouped for reporting."""
    CATEGORY = "category"
    STATUS = "status"
    ITEM_KIND = "item_kind"

    @classmethod
    def parse(cls, value: "AggregationDimension | str") -> "AggregationDimension":
        if isinstance(value, cls):
            return value
        if value == "itemKind":
            return cls.ITEM_KIND
        try:
            return cls(value)
        except ValueError:
            raise InvalidQueryError(
                "dimension", value, tuple(d.value for d in cls)
            ) from None


@dataclass(frozen=True)
class AggregateRow:
    """One labelled value of a report."""
    label: str
    value: int


def _by_category(records: Sequence[InventoryRecord]) -> tuple[AggregateRow, ...]:
    totals: dict[str, int] = {}
    for record in records:
        totals[record.category] = totals.get(record.category, 0) + record.quantity
    return tuple(AggregateRow(label, value) for label, value in totals.items())


def _by_status(records: Sequence[InventoryRecord]) -> tuple[AggregateRow, ...]:
    counts = {status: 0 for status in StockStatus}
    for record in records:
        counts[classify(record)] += 1
    return tuple(AggregateRow(status.label, count) for status, count in counts.items())


def _by_kind(records: Sequence[InventoryRecord]) -> tuple[AggregateRow, ...]:
    counts = {kind: 0 for kind in ItemKind}
    for record in records:
        counts[record.item_kind] += 1
    return tuple(AggregateRow(kind.label, count) for kind, count in counts.items())


_AGGREGATORS = {
    AggregationDimension.CATEGORY: _by_category,
    AggregationDimension.STATUS: _by_status,
    AggregationDimension.ITEM_KIND: _by_kind,
}


@traced_engine("aggregation", "1.0", fingerprint_fields=("dimension",))
def aggregate(
    records: Sequence[InventoryRecord],
    dimension: AggregationDimension | str = AggregationDimension.CATEGORY,
) -> tuple[AggregateRow, ...]:
    """Ordered ``(label, value)`` rows for ``dimension`` over ``records``."""
    return _AGGREGATORS[AggregationDimension.parse(dimension)](records)
