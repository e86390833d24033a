"""
Pytest fixtures for the stock kernel test suite.

Provides:
- A deterministic clock
- Empty and pre-populated record stores
- A draft factory with valid defaults
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import pytest

from stock_kernel.domain.clock import DeterministicClock
from stock_kernel.domain.records import ItemKind, RecordDraft
from stock_kernel.logging_config import LogContext, reset_logging
from stock_modules.inventory.store import RecordStore


def make_draft(**overrides: Any) -> RecordDraft:
    """A valid draft; any field can be overridden."""
    fields: dict[str, Any] = {
        "name": "Apple",
        "category": "Fruit",
        "item_kind": ItemKind.PRODUCT,
        "quantity": 5,
        "threshold": 10,
        "unit_price": Decimal("1.50"),
        "supplier": "FarmCo",
        "notes": None,
    }
    fields.update(overrides)
    return RecordDraft(**fields)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(datetime(2024, 3, 1, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(clock) -> RecordStore:
    return RecordStore(clock=clock)


@pytest.fixture
def stocked_store(clock) -> RecordStore:
    """
    Five records covering every status and both kinds:

        Apple      Fruit      product    5 / 10   LOW
        Banana     Fruit      product   40 / 10   IN
        Drill      Tools      equipment  0 /  2   OUT
        Carrot     Vegetables product   12 / 12   LOW (boundary)
        Forklift   Tools      equipment  3 /  0   IN (zero threshold)
    """
    s = RecordStore(clock=clock)
    s.add(make_draft())
    clock.tick()
    s.add(make_draft(name="Banana", quantity=40, unit_price=Decimal("0.25"), supplier="Tropico"))
    clock.tick()
    s.add(make_draft(
        name="Drill", category="Tools", item_kind=ItemKind.EQUIPMENT,
        quantity=0, threshold=2, unit_price=Decimal("89.99"), supplier="ToolHaus",
        notes="Cordless, 18V",
    ))
    clock.tick()
    s.add(make_draft(
        name="Carrot", category="Vegetables", quantity=12, threshold=12,
        unit_price=Decimal("0.333"), supplier="FarmCo",
    ))
    clock.tick()
    s.add(make_draft(
        name="Forklift", category="Tools", item_kind=ItemKind.EQUIPMENT,
        quantity=3, threshold=0, unit_price=Decimal("15000"), supplier="LiftCo",
        notes="Annual service due",
    ))
    clock.tick()
    return s
