"""
Persistence collaborators for the record store.

Contract:
    RecordPersistence.load() returns the initial ordered record sequence.
    RecordPersistence.save(records) receives the complete new state after
    every successful mutation, before the store makes it visible.

The store never decides where or how data lives; hosts pick an adapter
or supply their own object satisfying the protocol.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol, Sequence, runtime_checkable

from stock_kernel.domain.records import (
    InventoryRecord,
    record_from_state,
    record_to_state,
)
from stock_kernel.exceptions import ValidationError
from stock_kernel.logging_config import get_logger

logger = get_logger("modules.inventory.persistence")


@runtime_checkable
class RecordPersistence(Protocol):
    """Protocol for loading and saving the full record state."""

    def load(self) -> list[InventoryRecord]:
        """Initial records, in store order."""
        ...

    def save(self, records: Sequence[InventoryRecord]) -> None:
        """Persist the complete state. Raise to veto the mutation."""
        ...


class InMemoryPersistence:
    """Keeps the last saved state as JSON-ready rows. Useful for tests and previews."""

    def __init__(self, rows: list[dict[str, Any]] | None = None):
        self.rows: list[dict[str, Any]] = list(rows or [])
        self.save_count = 0

    def load(self) -> list[InventoryRecord]:
        return [record_from_state(row) for row in self.rows]

    def save(self, records: Sequence[InventoryRecord]) -> None:
        self.rows = [record_to_state(r) for r in records]
        self.save_count += 1


class JsonFilePersistence:
    """
    Stores the state as a JSON array of records in one file.

    A missing file loads as an empty store.  Saves write a sibling temp
    file and atomically replace the target.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> list[InventoryRecord]:
        if not self.path.exists():
            logger.info("record_state_missing", extra={"path": str(self.path)})
            return []
        try:
            with self.path.open(encoding="utf-8") as f:
                data = json.load(f)
        except ValueError as e:
            raise ValidationError("state", "must be valid JSON", str(self.path)) from e
        if not isinstance(data, list):
            raise ValidationError("state", "must be a JSON array of records", type(data).__name__)
        records = [record_from_state(row) for row in data]
        logger.info(
            "record_state_loaded",
            extra={"path": str(self.path), "record_count": len(records)},
        )
        return records

    def save(self, records: Sequence[InventoryRecord]) -> None:
        rows = [record_to_state(r) for r in records]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(rows, f, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug(
            "record_state_saved",
            extra={"path": str(self.path), "record_count": len(rows)},
        )
