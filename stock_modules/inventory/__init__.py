"""
Inventory Module (``stock_modules.inventory``).

Responsibility
--------------
The mutable half of the inventory engine: the ``RecordStore`` holding the
authoritative records, the persistence collaborators it saves through, the
module configuration, and ``InventoryService`` for hosts.  Classification,
views, reports and export are delegated to ``stock_engines``.

Invariants
----------
- Record ids are unique; mutations are all-or-nothing.
- Stock status is derived, never stored.
- No module-level store instances: hosts construct and own the store.
"""

from stock_modules.inventory.config import InventoryConfig
from stock_modules.inventory.persistence import (
    InMemoryPersistence,
    JsonFilePersistence,
    RecordPersistence,
)
from stock_modules.inventory.service import InventoryService
from stock_modules.inventory.store import RecordStore

__all__ = [
    "InventoryConfig",
    "InMemoryPersistence",
    "JsonFilePersistence",
    "RecordPersistence",
    "InventoryService",
    "RecordStore",
]
