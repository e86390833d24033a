"""
Inventory Configuration Schema.

Defines the structure and sensible defaults for inventory settings.
Actual values are loaded from YAML through ``stock_config`` at runtime.
"""

from dataclasses import asdict, dataclass
from typing import Any, Self

from stock_kernel.domain.records import ItemKind
from stock_kernel.logging_config import get_logger
from stock_engines.export import DEFAULT_FILENAME_PATTERN
from stock_engines.views import SORT_DIRECTIONS, SORT_FIELDS

logger = get_logger("modules.inventory.config")


@dataclass
class InventoryConfig:
    """
    Configuration schema for the inventory module.

    Override at instantiation with site-specific values:

        config = InventoryConfig(
            default_threshold=5,
            export_delimiter=";",
        )
    """

    # New records
    default_threshold: int = 10
    default_item_kind: str = "product"

    # Views
    default_sort_field: str = "name"
    default_sort_direction: str = "asc"

    # Export
    export_delimiter: str = ","
    export_line_terminator: str = "\n"
    export_filename_pattern: str = DEFAULT_FILENAME_PATTERN

    # Host state file (used by scripts/inventory_report.py)
    state_path: str | None = None

    def __post_init__(self):
        if isinstance(self.default_threshold, bool) or not isinstance(self.default_threshold, int):
            raise ValueError("default_threshold must be an integer")
        if self.default_threshold < 0:
            raise ValueError("default_threshold cannot be negative")

        valid_kinds = {k.value for k in ItemKind}
        if self.default_item_kind not in valid_kinds:
            raise ValueError(
                f"default_item_kind must be one of {valid_kinds}, "
                f"got '{self.default_item_kind}'"
            )

        if self.default_sort_field not in SORT_FIELDS:
            raise ValueError(
                f"default_sort_field must be one of {set(SORT_FIELDS)}, "
                f"got '{self.default_sort_field}'"
            )
        if self.default_sort_direction not in SORT_DIRECTIONS:
            raise ValueError(
                f"default_sort_direction must be one of {set(SORT_DIRECTIONS)}, "
                f"got '{self.default_sort_direction}'"
            )

        if len(self.export_delimiter) != 1 or self.export_delimiter in "\"\r\n":
            raise ValueError("export_delimiter must be a single non-quote, non-newline character")
        if self.export_line_terminator not in ("\n", "\r\n"):
            raise ValueError("export_line_terminator must be '\\n' or '\\r\\n'")
        if "{date}" not in self.export_filename_pattern:
            raise ValueError("export_filename_pattern must contain '{date}'")

        logger.info(
            "inventory_config_initialized",
            extra={
                "default_threshold": self.default_threshold,
                "default_item_kind": self.default_item_kind,
                "default_sort_field": self.default_sort_field,
                "default_sort_direction": self.default_sort_direction,
                "export_delimiter": self.export_delimiter,
            },
        )

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with the stock defaults."""
        logger.info("inventory_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create config from dictionary (e.g., loaded from a YAML file)."""
        logger.info(
            "inventory_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
