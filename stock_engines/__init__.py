"""
Module: stock_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    engines: classifier, view (filter/sort), aggregation, summary, export.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import stock_kernel (and sibling engine modules).
    MUST NOT import stock_modules.

Invariants enforced:
    - Purity: engines never read the clock or touch files.
    - Decimal-only arithmetic for prices and values.
    - Determinism: identical inputs always produce identical outputs.
    - Stock status is always derived through ``classify``.

Usage:
    from stock_engines import aggregate, build_view, classify, serialize, summarize
"""

from stock_kernel.logging_config import get_logger

logger = get_logger("engines")

from stock_engines.aggregation import (
    AggregateRow,
    AggregationDimension,
    aggregate,
)
from stock_engines.classifier import classify, classify_quantity
from stock_engines.export import (
    DEFAULT_FILENAME_PATTERN,
    EXPORT_COLUMNS,
    export_filename,
    export_row,
    serialize,
)
from stock_engines.summary import InventorySummary, summarize
from stock_engines.tracer import compute_input_fingerprint, traced_engine
from stock_engines.views import (
    SORT_FIELDS,
    SortSpec,
    ViewFilter,
    build_view,
    collation_key,
    list_categories,
)

__all__ = [
    "AggregateRow",
    "AggregationDimension",
    "aggregate",
    "classify",
    "classify_quantity",
    "DEFAULT_FILENAME_PATTERN",
    "EXPORT_COLUMNS",
    "export_filename",
    "export_row",
    "serialize",
    "InventorySummary",
    "summarize",
    "compute_input_fingerprint",
    "traced_engine",
    "SORT_FIELDS",
    "SortSpec",
    "ViewFilter",
    "build_view",
    "collation_key",
    "list_categories",
]
