"""
Module: stock_engines.export
Responsibility:
    Serialize an ordered view of records into CSV text for download.

Architecture position:
    Engines -- pure calculation layer.  Writes into an in-memory buffer
    only; delivering the text as a file is the host's job.

Invariants enforced:
    - Fixed column order and header row (``RECORD_COLUMNS`` verbatim).
    - Standard CSV quoting: fields containing the delimiter, a quote or a
      line break are quoted, internal quotes doubled.
    - ``unitPrice`` has exactly two decimal places (ROUND_HALF_UP).
    - ``lastUpdated`` is ISO-8601; missing ``notes`` render as "".
    - The input sequence is never mutated.
"""

from __future__ import annotations

import csv
import io
from datetime import date
from typing import Sequence

from stock_kernel.domain.records import RECORD_COLUMNS, InventoryRecord, round_amount
from stock_engines.tracer import traced_engine

EXPORT_COLUMNS = RECORD_COLUMNS

DEFAULT_FILENAME_PATTERN = "inventory-report-{date}.csv"

PRICE_PLACES = 2


def export_row(record: InventoryRecord) -> list[str]:
    """One record as CSV cell text, in ``EXPORT_COLUMNS`` order."""
    return [
        str(record.id),
        record.name,
        record.category,
        record.item_kind.value,
        str(record.quantity),
        str(record.threshold),
        str(round_amount(record.unit_price, PRICE_PLACES)),
        record.supplier,
        record.last_updated.isoformat(),
        record.notes or "",
    ]


@traced_engine("export", "1.0", fingerprint_fields=("delimiter",))
def serialize(
    records: Sequence[InventoryRecord],
    delimiter: str = ",",
    line_terminator: str = "\n",
) -> str:
    """CSV text (header plus one row per record) for ``records``."""
    buffer = io.StringIO()
    writer = csv.writer(
        buffer,
        delimiter=delimiter,
        lineterminator=line_terminator,
        quoting=csv.QUOTE_MINIMAL,
    )
    writer.writerow(EXPORT_COLUMNS)
    for record in records:
        writer.writerow(export_row(record))
    return buffer.getvalue()


def export_filename(as_of: date, pattern: str = DEFAULT_FILENAME_PATTERN) -> str:
    """Suggested download name, e.g. ``inventory-report-2024-03-01.csv``."""
    return pattern.format(date=as_of.isoformat())
