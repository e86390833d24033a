"""
stock_config -- single public entrypoint for inventory configuration.

Responsibility:
    ``get_active_config()`` is the one way a host obtains an
    ``InventoryConfig``.  It reads the bundled ``sets/default.yaml`` unless a
    path is supplied, and emits a ``STOCK_CONFIG_TRACE`` log record with the
    configuration checksum so every export can be tied back to the settings
    that produced it.

Failure modes:
    - ``FileNotFoundError`` -- the requested file does not exist.
    - ``yaml.YAMLError`` -- the file is not valid YAML.
    - ``ValueError`` -- unknown keys or invalid values.
"""

from __future__ import annotations

import logging
from pathlib import Path

from stock_config.loader import compute_checksum, load_inventory_config
from stock_modules.inventory.config import InventoryConfig

_logger = logging.getLogger("stock_kernel.config")

_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(config_path: Path | str | None = None) -> InventoryConfig:
    """Load and validate the inventory configuration."""
    path = Path(config_path) if config_path is not None else _DEFAULT_CONFIG_PATH
    config = load_inventory_config(path)
    _logger.info(
        "STOCK_CONFIG_TRACE",
        extra={
            "trace_type": "STOCK_CONFIG_TRACE",
            "config_path": str(path),
            "checksum": compute_checksum(config.to_dict()),
        },
    )
    return config


__all__ = ["get_active_config", "InventoryConfig"]
