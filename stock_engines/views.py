"""
Module: stock_engines.views
Responsibility:
    Produce an ordered view of the record store: filter by free-text search,
    category, item kind and stock status, then sort by one field.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Never mutates its input; always returns a fresh tuple.
    - Predicates combine with logical AND; an unset predicate matches all.
    - Status is evaluated through the classifier, never read from a field.
    - Sort is stable in both directions: records equal under the key keep
      their relative store order.

Failure modes:
    - InvalidQueryError for an unknown sort field, sort direction, kind
      filter or status filter.

Usage:
    from stock_engines.views import SortSpec, ViewFilter, build_view

    view = build_view(
        store.all(),
        view_filter=ViewFilter(search="farm", status="low_stock"),
        sort=SortSpec(field="quantity", direction="desc"),
    )
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from stock_kernel.domain.records import InventoryRecord, ItemKind, StockStatus
from stock_kernel.exceptions import InvalidQueryError
from stock_kernel.logging_config import get_logger
from stock_engines.classifier import classify
from stock_engines.tracer import traced_engine

logger = get_logger("engines.views")

ALL = "all"

# Sort field name -> (record attribute, is_text)
SORT_FIELDS: dict[str, tuple[str, bool]] = {
    "name": ("name", True),
    "category": ("category", True),
    "quantity": ("quantity", False),
    "unit_price": ("unit_price", False),
    "unitPrice": ("unit_price", False),
}

SORT_DIRECTIONS = ("asc", "desc")


def collation_key(text: str) -> tuple[str, str, str, str]:
    """
    Locale-independent approximation of a natural-language string ordering.

    Compared level by level, like a locale collator:

    1. base letters, ignoring case and accents ("apple" ~ "Äpple");
    2. accents: unaccented before accented ("eclair" < "éclair");
    3. case: lowercase before uppercase ("apple" < "Apple");
    4. the raw string, so distinct strings never compare equal.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), decomposed.casefold(), decomposed.swapcase(), text)


def _parse_kind(value: Any) -> ItemKind | None:
    if value is None or value == ALL:
        return None
    if isinstance(value, ItemKind):
        return value
    try:
        return ItemKind(value)
    except ValueError:
        raise InvalidQueryError(
            "item_kind", value, (ALL,) + tuple(k.value for k in ItemKind)
        ) from None


def _parse_status(value: Any) -> StockStatus | None:
    if value is None or value == ALL:
        return None
    if isinstance(value, StockStatus):
        return value
    try:
        return StockStatus(value)
    except ValueError:
        raise InvalidQueryError(
            "status", value, (ALL,) + tuple(s.value for s in StockStatus)
        ) from None


@dataclass(frozen=True)
class ViewFilter:
    """
    Filter specification.  Every predicate is optional.

    ``search`` is a case-insensitive substring match against name,
    category, supplier and notes.  ``category`` is an exact match.
    ``item_kind`` and ``status`` accept an enum member, its string value,
    or ``"all"``.
    """

    search: str = ""
    category: str | None = None
    item_kind: ItemKind | str | None = ALL
    status: StockStatus | str | None = ALL

    def __post_init__(self) -> None:
        object.__setattr__(self, "item_kind", _parse_kind(self.item_kind))
        object.__setattr__(self, "status", _parse_status(self.status))

    def matches(self, record: InventoryRecord) -> bool:
        if self.search:
            needle = self.search.casefold()
            haystacks = (record.name, record.category, record.supplier, record.notes or "")
            if not any(needle in h.casefold() for h in haystacks):
                return False
        if self.category and record.category != self.category:
            return False
        if self.item_kind is not None and record.item_kind is not self.item_kind:
            return False
        if self.status is not None and classify(record) is not self.status:
            return False
        return True


@dataclass(frozen=True)
class SortSpec:
    """Sort field (name, category, quantity, unit_price) and direction."""

    field: str = "name"
    direction: str = "asc"

    def __post_init__(self) -> None:
        if self.field not in SORT_FIELDS:
            raise InvalidQueryError("sort field", self.field, tuple(SORT_FIELDS))
        if self.direction not in SORT_DIRECTIONS:
            raise InvalidQueryError("sort direction", self.direction, SORT_DIRECTIONS)

    @property
    def descending(self) -> bool:
        return self.direction == "desc"

    def key(self, record: InventoryRecord) -> Any:
        attribute, is_text = SORT_FIELDS[self.field]
        value = getattr(record, attribute)
        return collation_key(value) if is_text else value


@traced_engine("views", "1.0", fingerprint_fields=("view_filter", "sort"))
def build_view(
    records: Sequence[InventoryRecord],
    view_filter: ViewFilter | None = None,
    sort: SortSpec | None = None,
) -> tuple[InventoryRecord, ...]:
    """
    Filter then sort ``records``.

    Returns:
        A new tuple; ``records`` is left untouched.
    """
    view_filter = view_filter or ViewFilter()
    sort = sort or SortSpec()
    selected = [r for r in records if view_filter.matches(r)]
    # sorted() keeps equal keys in input order even with reverse=True
    ordered = sorted(selected, key=sort.key, reverse=sort.descending)
    logger.debug(
        "view_built",
        extra={
            "input_count": len(records),
            "output_count": len(ordered),
            "sort_field": sort.field,
            "sort_direction": sort.direction,
        },
    )
    return tuple(ordered)


def list_categories(records: Iterable[InventoryRecord]) -> tuple[str, ...]:
    """Distinct categories present in ``records``, in collation order."""
    return tuple(sorted({r.category for r in records}, key=collation_key))
