"""
Module: stock_engines.summary
Responsibility:
    Scalar roll-up statistics over the full record store.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Computed fresh from the records passed in on every call.
    - ``total_value`` keeps full Decimal precision; two-place rounding is
      applied only by ``total_value_display()`` / ``to_dict()``.
    - low/out-of-stock counts agree with the classifier.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Sequence

from stock_kernel.domain.records import InventoryRecord, StockStatus, round_amount
from stock_engines.classifier import classify
from stock_engines.tracer import traced_engine


@dataclass(frozen=True)
class InventorySummary:
    total_items: int
    total_quantity: int
    low_stock_count: int
    out_of_stock_count: int
    total_value: Decimal

    def total_value_display(self, places: int = 2) -> Decimal:
        """``total_value`` rounded for presentation."""
        return round_amount(self.total_value, places)

    def to_dict(self, places: int = 2) -> dict[str, Any]:
        return {
            "totalItems": self.total_items,
            "totalQuantity": self.total_quantity,
            "lowStockCount": self.low_stock_count,
            "outOfStockCount": self.out_of_stock_count,
            "totalValue": str(self.total_value_display(places)),
        }


@traced_engine("summary", "1.0")
def summarize(records: Sequence[InventoryRecord]) -> InventorySummary:
    total_quantity = 0
    total_value = Decimal("0")
    low = 0
    out = 0
    for record in records:
        total_quantity += record.quantity
        total_value += record.unit_price * record.quantity
        status = classify(record)
        if status is StockStatus.LOW_STOCK:
            low += 1
        elif status is StockStatus.OUT_OF_STOCK:
            out += 1
    return InventorySummary(
        total_items=len(records),
        total_quantity=total_quantity,
        low_stock_count=low,
        out_of_stock_count=out,
        total_value=total_value,
    )
