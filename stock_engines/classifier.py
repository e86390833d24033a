"""
Module: stock_engines.classifier
Responsibility:
    Map a record to its ``StockStatus`` from quantity and threshold.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Total: every valid record classifies to exactly one status.
    - quantity == 0                  -> OUT_OF_STOCK
    - 0 < quantity <= threshold      -> LOW_STOCK
    - quantity > threshold           -> IN_STOCK
    - A zero threshold means "no reorder point": any positive quantity is
      IN_STOCK, never LOW_STOCK.
    - The low-stock boundary is inclusive (``<=``), not ``<``.
"""

from __future__ import annotations

from stock_kernel.domain.records import InventoryRecord, StockStatus


def classify_quantity(quantity: int, threshold: int) -> StockStatus:
    if quantity == 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= threshold:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def classify(record: InventoryRecord) -> StockStatus:
    """Stock status of ``record``, recomputed on every call."""
    return classify_quantity(record.quantity, record.threshold)
