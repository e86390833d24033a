"""Record domain and clock for the stock kernel."""

from stock_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from stock_kernel.domain.records import (
    EDITABLE_FIELDS,
    RECORD_COLUMNS,
    InventoryRecord,
    ItemKind,
    RecordDraft,
    StockStatus,
    record_from_state,
    record_to_state,
    round_amount,
)

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "EDITABLE_FIELDS",
    "RECORD_COLUMNS",
    "InventoryRecord",
    "ItemKind",
    "RecordDraft",
    "StockStatus",
    "record_from_state",
    "record_to_state",
    "round_amount",
]
