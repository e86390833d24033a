#!/usr/bin/env python3
"""
Inventory report from a JSON state file.

Loads the record state, prints the summary and one aggregation as JSON, and
optionally writes the CSV export of a filtered, sorted view.

Usage:
  python3 scripts/inventory_report.py --state inventory.json \\
    [--config site.yaml] [--dimension status] \\
    [--search farm] [--category Fruit] [--kind product] [--status low_stock] \\
    [--sort quantity] [--direction desc] [--csv out.csv | --csv-dir reports/]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from stock_config import get_active_config
from stock_kernel.exceptions import StockKernelError
from stock_kernel.logging_config import configure_logging, get_logger
from stock_modules.inventory import InventoryService, JsonFilePersistence

logger = get_logger("scripts.inventory_report")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inventory summary, report and CSV export")
    parser.add_argument("--state", type=Path, help="JSON state file (default: config state_path)")
    parser.add_argument("--config", type=Path, help="YAML config file (default: bundled)")
    parser.add_argument(
        "--dimension",
        default="category",
        choices=("category", "status", "item_kind"),
        help="Aggregation dimension",
    )
    parser.add_argument("--search", default="")
    parser.add_argument("--category")
    parser.add_argument("--kind", default="all")
    parser.add_argument("--status", default="all")
    parser.add_argument("--sort")
    parser.add_argument("--direction", choices=("asc", "desc"))
    out = parser.add_mutually_exclusive_group()
    out.add_argument("--csv", type=Path, help="Write the filtered view as CSV to this file")
    out.add_argument("--csv-dir", type=Path, help="Write the CSV under its default name in this directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    config = get_active_config(args.config)
    state = args.state or (Path(config.state_path) if config.state_path else None)
    if state is None:
        print("error: no --state given and config has no state_path", file=sys.stderr)
        return 2

    try:
        service = InventoryService.open(JsonFilePersistence(state), config=config)
        rows = service.view(
            search=args.search,
            category=args.category,
            item_kind=args.kind,
            status=args.status,
            sort_field=args.sort,
            sort_direction=args.direction,
        )
        report = {
            "summary": service.summary().to_dict(),
            "dimension": args.dimension,
            "rows": [{"label": r.label, "value": r.value} for r in service.report(args.dimension)],
            "viewCount": len(rows),
        }
    except StockKernelError as e:
        logger.error("inventory_report_failed", exc_info=True)
        print(f"error [{e.code}]: {e}", file=sys.stderr)
        return 1

    print(json.dumps(report, indent=2))

    target = args.csv
    if args.csv_dir is not None:
        target = args.csv_dir / service.export_filename()
    if target is not None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(service.export_csv(rows), encoding="utf-8", newline="")
        print(f"wrote {len(rows)} records to {target}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
