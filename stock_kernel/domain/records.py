"""
Inventory Record Domain (``stock_kernel.domain.records``).

Responsibility
--------------
The sole entity of the inventory engine -- ``InventoryRecord`` -- together
with the closed enums it references (``ItemKind``, and the derived
``StockStatus``), the caller-supplied ``RecordDraft``, and the conversion to
and from the JSON-ready state format a persistence collaborator stores.

Architecture
------------
Layer: **Kernel > Domain** -- pure data structures, zero I/O.  All
dataclasses are ``frozen=True``; an edit produces a new record via
``dataclasses.replace`` so validation re-runs on every mutation.

Invariants
----------
- ``name``, ``category`` and ``supplier`` are non-empty (whitespace-only is
  empty).
- ``quantity`` and ``threshold`` are ``int`` and never negative.
- ``unit_price`` is a finite, non-negative ``Decimal`` -- never ``float``.
- ``last_updated`` is timezone-aware.
- Stock status is NOT a field.  It is recomputed by the classifier engine
  from ``quantity``/``threshold`` on every read.

Failure Modes
-------------
- Any invariant violation raises ``ValidationError`` at construction; invalid
  input is rejected, never clamped or coerced to a different value.
"""

from dataclasses import dataclass, fields
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping
from uuid import UUID

from stock_kernel.exceptions import ValidationError
from stock_kernel.logging_config import get_logger

logger = get_logger("domain.records")


class ItemKind(Enum):
    """What sort of stock a record tracks."""
    PRODUCT = "product"
    EQUIPMENT = "equipment"

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]


_KIND_LABELS = {
    ItemKind.PRODUCT: "Products",
    ItemKind.EQUIPMENT: "Equipment",
}


class StockStatus(Enum):
    """Derived stock health of a record.  Never stored."""
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    StockStatus.IN_STOCK: "In Stock",
    StockStatus.LOW_STOCK: "Low Stock",
    StockStatus.OUT_OF_STOCK: "Out of Stock",
}


# External (state / export) column names, in canonical order.
RECORD_COLUMNS: tuple[str, ...] = (
    "id",
    "name",
    "category",
    "itemKind",
    "quantity",
    "threshold",
    "unitPrice",
    "supplier",
    "lastUpdated",
    "notes",
)

# Fields a caller may replace through an edit.
EDITABLE_FIELDS: frozenset[str] = frozenset({
    "name",
    "category",
    "item_kind",
    "quantity",
    "threshold",
    "unit_price",
    "supplier",
    "notes",
})


# ---------------------------------------------------------------------------
# Field validators
# ---------------------------------------------------------------------------


def _reject(field_name: str, reason: str, value: Any) -> ValidationError:
    logger.warning(
        "record_validation_failed",
        extra={"field": field_name, "reason": reason, "value": repr(value)},
    )
    return ValidationError(field_name, reason, value)


def require_text(field_name: str, value: Any) -> str:
    """Return ``value`` if it is a non-blank string."""
    if not isinstance(value, str):
        raise _reject(field_name, "must be a string", value)
    if not value.strip():
        raise _reject(field_name, "must not be empty", value)
    return value


def require_count(field_name: str, value: Any) -> int:
    """Return ``value`` if it is a non-negative ``int`` (bools rejected)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise _reject(field_name, "must be an integer", value)
    if value < 0:
        raise _reject(field_name, "cannot be negative", value)
    return value


def require_price(field_name: str, value: Any) -> Decimal:
    """Return ``value`` as a finite, non-negative ``Decimal``."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise _reject(field_name, "must be a decimal amount", value)
    if not isinstance(value, Decimal):
        try:
            value = Decimal(str(value))
        except InvalidOperation as e:
            raise _reject(field_name, "must be a decimal amount", value) from e
    if not value.is_finite():
        raise _reject(field_name, "must be finite", value)
    if value < 0:
        raise _reject(field_name, "cannot be negative", value)
    return value


def require_kind(field_name: str, value: Any) -> ItemKind:
    """Return ``value`` as an ``ItemKind`` member."""
    if isinstance(value, ItemKind):
        return value
    try:
        return ItemKind(value)
    except ValueError as e:
        raise _reject(
            field_name,
            f"must be one of {', '.join(k.value for k in ItemKind)}",
            value,
        ) from e


def optional_text(field_name: str, value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise _reject(field_name, "must be a string", value)


def _validate_payload(obj: Any) -> None:
    """Validate and normalize the caller-editable fields of a frozen dataclass."""
    object.__setattr__(obj, "name", require_text("name", obj.name))
    object.__setattr__(obj, "category", require_text("category", obj.category))
    object.__setattr__(obj, "item_kind", require_kind("item_kind", obj.item_kind))
    object.__setattr__(obj, "quantity", require_count("quantity", obj.quantity))
    object.__setattr__(obj, "threshold", require_count("threshold", obj.threshold))
    object.__setattr__(obj, "unit_price", require_price("unit_price", obj.unit_price))
    object.__setattr__(obj, "supplier", require_text("supplier", obj.supplier))
    object.__setattr__(obj, "notes", optional_text("notes", obj.notes))


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RecordDraft:
    """
    Everything a caller supplies to create a record.

    Contract: Immutable.  ``id`` and ``last_updated`` are assigned by the
    store, never by the caller.

    Raises:
        ValidationError: If any field violates a record invariant.
    """
    name: str
    category: str
    item_kind: ItemKind
    quantity: int
    threshold: int
    unit_price: Decimal
    supplier: str
    notes: str | None = None

    def __post_init__(self):
        _validate_payload(self)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RecordDraft":
        """Build a draft from a field mapping, rejecting unknown or missing keys."""
        unknown = set(data) - EDITABLE_FIELDS
        if unknown:
            raise _reject(sorted(unknown)[0], "is not a record field", data)
        missing = {f.name for f in fields(cls) if f.name != "notes"} - set(data)
        if missing:
            raise _reject(sorted(missing)[0], "is required", None)
        return cls(**data)


@dataclass(frozen=True)
class InventoryRecord:
    """
    A stock-keeping record.

    Contract: Immutable value object.  ``id`` never changes over the life of
    the record; every other field is replaced wholesale by an edit, which
    also re-stamps ``last_updated``.

    Raises:
        ValidationError: If any field violates a record invariant.
    """
    id: UUID
    name: str
    category: str
    item_kind: ItemKind
    quantity: int
    threshold: int
    unit_price: Decimal
    supplier: str
    last_updated: datetime
    notes: str | None = None

    def __post_init__(self):
        if not isinstance(self.id, UUID):
            raise _reject("id", "must be a UUID", self.id)
        _validate_payload(self)
        if not isinstance(self.last_updated, datetime) or self.last_updated.tzinfo is None:
            raise _reject("last_updated", "must be a timezone-aware datetime", self.last_updated)

    @classmethod
    def from_draft(cls, record_id: UUID, draft: RecordDraft, stamped_at: datetime) -> "InventoryRecord":
        return cls(
            id=record_id,
            name=draft.name,
            category=draft.category,
            item_kind=draft.item_kind,
            quantity=draft.quantity,
            threshold=draft.threshold,
            unit_price=draft.unit_price,
            supplier=draft.supplier,
            last_updated=stamped_at,
            notes=draft.notes,
        )

    def to_draft(self) -> RecordDraft:
        """The caller-editable portion of this record."""
        return RecordDraft(
            name=self.name,
            category=self.category,
            item_kind=self.item_kind,
            quantity=self.quantity,
            threshold=self.threshold,
            unit_price=self.unit_price,
            supplier=self.supplier,
            notes=self.notes,
        )


# ---------------------------------------------------------------------------
# State conversion
# ---------------------------------------------------------------------------


def record_to_state(record: InventoryRecord) -> dict[str, Any]:
    """
    Render a record as a JSON-serializable dict keyed by the external
    column names.  ``unitPrice`` is a decimal string (full precision) and
    ``lastUpdated`` an ISO-8601 string.
    """
    return {
        "id": str(record.id),
        "name": record.name,
        "category": record.category,
        "itemKind": record.item_kind.value,
        "quantity": record.quantity,
        "threshold": record.threshold,
        "unitPrice": str(record.unit_price),
        "supplier": record.supplier,
        "lastUpdated": record.last_updated.isoformat(),
        "notes": record.notes,
    }


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError as e:
            raise _reject("lastUpdated", "must be an ISO-8601 timestamp", value) from e
    else:
        raise _reject("lastUpdated", "must be an ISO-8601 timestamp", value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def record_from_state(row: Mapping[str, Any]) -> InventoryRecord:
    """
    Rebuild a record from its persisted state.

    Raises:
        ValidationError: If a column is missing or holds an invalid value.
    """
    if not isinstance(row, Mapping):
        raise _reject("state", "each record must be a JSON object", row)
    for column in RECORD_COLUMNS:
        if column != "notes" and column not in row:
            raise _reject(column, "is required", None)
    try:
        record_id = row["id"] if isinstance(row["id"], UUID) else UUID(str(row["id"]))
    except ValueError as e:
        raise _reject("id", "must be a UUID", row["id"]) from e
    return InventoryRecord(
        id=record_id,
        name=row["name"],
        category=row["category"],
        item_kind=row["itemKind"],
        quantity=row["quantity"],
        threshold=row["threshold"],
        unit_price=row["unitPrice"],
        supplier=row["supplier"],
        last_updated=_parse_timestamp(row["lastUpdated"]),
        notes=row.get("notes"),
    )


def round_amount(value: Decimal, places: int = 2) -> Decimal:
    """Presentation rounding (ROUND_HALF_UP); internal arithmetic never calls this."""
    quantum = Decimal(1).scaleb(-places)
    return value.quantize(quantum, rounding=ROUND_HALF_UP)
