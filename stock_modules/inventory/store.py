"""
Record Store (``stock_modules.inventory.store``).

Responsibility
--------------
Holds the authoritative, ordered set of inventory records and applies the
create / edit / delete / bulk-load operations to it.  Every other component
(views, reports, export) is a pure function over ``RecordStore.all()``.

Architecture
------------
Layer: **Modules** -- stateful orchestration over kernel domain objects.
Time comes from an injected ``Clock``; storage from an optional injected
``RecordPersistence``.  There are no module-level store instances.

Invariants
----------
- ``id`` is unique and immutable; insertion order is preserved, and an edit
  keeps the record in place.
- ``last_updated`` strictly increases on every mutation of the same id.
- Mutations are all-or-nothing: the new state is built on a copy, offered
  to the persistence collaborator, and only then published.
- ``all()`` returns an immutable snapshot; mutation and snapshotting are
  serialized by a re-entrant lock, so readers never observe a partially
  applied change.

Failure Modes
-------------
- ``ValidationError`` -- a field violates a record invariant, an unknown
  field is supplied, or ``id`` / ``last_updated`` is edited.
- ``DuplicateRecordError`` -- initial state or bulk load repeats an id.
- ``NotFoundError`` -- update / remove / get of an absent id.
- ``PersistenceError`` -- the collaborator's ``save`` failed; the store is
  unchanged.
"""

from __future__ import annotations

import dataclasses
import threading
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, Mapping
from uuid import UUID, uuid4

from stock_kernel.domain.clock import Clock, SystemClock
from stock_kernel.domain.records import (
    EDITABLE_FIELDS,
    InventoryRecord,
    RecordDraft,
    record_from_state,
    record_to_state,
)
from stock_kernel.exceptions import (
    DuplicateRecordError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from stock_kernel.logging_config import LogContext, get_logger
from stock_modules.inventory.persistence import RecordPersistence

logger = get_logger("modules.inventory.store")

_IMMUTABLE_FIELDS = frozenset({"id", "last_updated", "lastUpdated"})
_MIN_STEP = timedelta(microseconds=1)


def _index(records: Iterable[InventoryRecord]) -> dict[UUID, InventoryRecord]:
    indexed: dict[UUID, InventoryRecord] = {}
    for record in records:
        if not isinstance(record, InventoryRecord):
            raise ValidationError("record", "must be an InventoryRecord", record)
        if record.id in indexed:
            raise DuplicateRecordError(str(record.id))
        indexed[record.id] = record
    return indexed


class RecordStore:
    """
    Mutable, ordered collection of ``InventoryRecord``.

    Args:
        records: Initial state, in store order (e.g. loaded by the host).
        clock: Source of ``last_updated`` stamps.  Defaults to SystemClock.
        persistence: Optional collaborator called with the full new state
            after each mutation.
        id_factory: Generator of new record ids.  Defaults to ``uuid4``.
    """

    def __init__(
        self,
        records: Iterable[InventoryRecord] = (),
        *,
        clock: Clock | None = None,
        persistence: RecordPersistence | None = None,
        id_factory: Callable[[], UUID] = uuid4,
    ):
        self._clock = clock or SystemClock()
        self._persistence = persistence
        self._id_factory = id_factory
        self._lock = threading.RLock()
        self._records = _index(records)

    @classmethod
    def from_persistence(
        cls,
        persistence: RecordPersistence,
        *,
        clock: Clock | None = None,
        id_factory: Callable[[], UUID] = uuid4,
    ) -> "RecordStore":
        """Load the initial state from ``persistence`` and keep saving to it."""
        return cls(
            persistence.load(),
            clock=clock,
            persistence=persistence,
            id_factory=id_factory,
        )

    @classmethod
    def from_state(
        cls,
        rows: Iterable[Mapping[str, Any]],
        **kwargs: Any,
    ) -> "RecordStore":
        """Build a store from JSON-ready rows (see ``to_state``)."""
        return cls((record_from_state(row) for row in rows), **kwargs)

    @property
    def clock(self) -> Clock:
        """The clock that stamps ``last_updated``."""
        return self._clock

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def all(self) -> tuple[InventoryRecord, ...]:
        """Snapshot of current contents in insertion order."""
        with self._lock:
            return tuple(self._records.values())

    def get(self, record_id: UUID | str) -> InventoryRecord:
        key = self._key(record_id)
        with self._lock:
            try:
                return self._records[key]
            except KeyError:
                raise NotFoundError(str(record_id)) from None

    def to_state(self) -> list[dict[str, Any]]:
        """Full state as a JSON-serializable list, in store order."""
        return [record_to_state(r) for r in self.all()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        if not isinstance(record_id, (UUID, str)):
            return False
        try:
            key = self._key(record_id)
        except NotFoundError:
            return False
        with self._lock:
            return key in self._records

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, draft: RecordDraft | Mapping[str, Any]) -> UUID:
        """
        Insert a new record and return its generated id.

        Raises:
            ValidationError: If the draft violates a record invariant.
        """
        with LogContext.bind(operation="add"):
            if not isinstance(draft, RecordDraft):
                draft = RecordDraft.from_mapping(draft)
            with self._lock:
                record_id = self._new_id()
                record = InventoryRecord.from_draft(record_id, draft, self._stamp(None))
                staged = dict(self._records)
                staged[record_id] = record
                with LogContext.bind(record_id=str(record_id)):
                    self._commit(staged, "add")
                    logger.info(
                        "record_added",
                        extra={"category": record.category, "quantity": record.quantity},
                    )
        return record_id

    def update(self, record_id: UUID | str, changes: Mapping[str, Any]) -> InventoryRecord:
        """
        Merge ``changes`` into an existing record and re-stamp it.

        Returns:
            The updated record.

        Raises:
            NotFoundError: If ``record_id`` is absent.
            ValidationError: If a change is invalid; the store is unchanged.
        """
        with LogContext.bind(operation="update", record_id=str(record_id)):
            for name in changes:
                if name in _IMMUTABLE_FIELDS:
                    raise ValidationError(name, "cannot be changed", changes[name])
                if name not in EDITABLE_FIELDS:
                    raise ValidationError(name, "is not a record field", changes[name])
            key = self._key(record_id)
            with self._lock:
                current = self._records.get(key)
                if current is None:
                    raise NotFoundError(str(record_id))
                updated = dataclasses.replace(
                    current,
                    **changes,
                    last_updated=self._stamp(current.last_updated),
                )
                staged = dict(self._records)
                staged[key] = updated
                self._commit(staged, "update")
            logger.info("record_updated", extra={"fields": sorted(changes)})
        return updated

    def remove(self, record_id: UUID | str) -> None:
        """
        Permanently delete a record.

        Raises:
            NotFoundError: If ``record_id`` is absent; the store is unchanged.
        """
        with LogContext.bind(operation="remove", record_id=str(record_id)):
            key = self._key(record_id)
            with self._lock:
                if key not in self._records:
                    raise NotFoundError(str(record_id))
                staged = dict(self._records)
                del staged[key]
                self._commit(staged, "remove")
            logger.info("record_removed")

    def bulk_load(self, records: Iterable[InventoryRecord]) -> None:
        """
        Replace the entire contents with ``records`` (kept as given,
        including their ids and timestamps).

        Raises:
            DuplicateRecordError: If ``records`` repeats an id.
        """
        with LogContext.bind(operation="bulk_load"):
            staged = _index(records)
            with self._lock:
                self._commit(staged, "bulk_load")
            logger.info("records_bulk_loaded", extra={"record_count": len(staged)})

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _key(record_id: UUID | str) -> UUID:
        if isinstance(record_id, UUID):
            return record_id
        try:
            return UUID(str(record_id))
        except ValueError:
            raise NotFoundError(str(record_id)) from None

    def _new_id(self) -> UUID:
        record_id = self._id_factory()
        while record_id in self._records:
            logger.warning("record_id_collision", extra={"record_id": str(record_id)})
            record_id = self._id_factory()
        return record_id

    def _stamp(self, previous: datetime | None) -> datetime:
        now = self._clock.now_utc()
        if previous is not None and now <= previous:
            now = previous + _MIN_STEP
        return now

    def _commit(self, staged: dict[UUID, InventoryRecord], operation: str) -> None:
        if self._persistence is not None:
            try:
                self._persistence.save(tuple(staged.values()))
            except Exception as e:
                logger.error("record_state_save_failed", exc_info=True)
                raise PersistenceError(operation, str(e)) from e
        self._records = staged
