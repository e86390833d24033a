"""
Configuration Loader (``stock_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses its ``inventory:`` mapping into
an ``InventoryConfig``.  Hosts should go through
``stock_config.get_active_config()`` rather than calling this directly.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* ``inventory`` section not a mapping, or unknown keys  -> ``ValueError``.
* Invalid values  -> ``ValueError`` from ``InventoryConfig.__post_init__``.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import fields
from pathlib import Path
from typing import Any

import yaml

from stock_modules.inventory.config import InventoryConfig

_CONFIG_KEYS = frozenset(f.name for f in fields(InventoryConfig))


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_inventory_config(data: dict[str, Any]) -> InventoryConfig:
    """Parse the ``inventory`` section of a loaded YAML document."""
    section = data.get("inventory", {}) or {}
    if not isinstance(section, dict):
        raise ValueError("'inventory' section must be a mapping")
    unknown = set(section) - _CONFIG_KEYS
    if unknown:
        raise ValueError(f"Unknown inventory config keys: {sorted(unknown)}")
    return InventoryConfig.from_dict(section)


def load_inventory_config(path: Path) -> InventoryConfig:
    return parse_inventory_config(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
