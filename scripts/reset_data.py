#!/usr/bin/env python3
"""
Reset one or more collection files to their seed data.

Usage:
  python scripts/reset_data.py --collection products [--collection users] [--data-dir ./data]
  python scripts/reset_data.py --all
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Make the artisanverse package importable when run from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from artisanverse.core.config import get_settings  # noqa: E402
from artisanverse.core.logging_setup import setup_logging  # noqa: E402
from artisanverse.domain.records import COLLECTIONS  # noqa: E402
from artisanverse.repositories.json_storage import RecordStore  # noqa: E402


def reset(data_dir: Path, collections: list[str]) -> RecordStore:
    for name in collections:
        path = data_dir / f"{name}.json"
        if path.exists():
            path.unlink()
    store = RecordStore(data_dir, collections=collections)
    store.initialize()
    return store


def main() -> None:
    ap = argparse.ArgumentParser(description="Reset collection files to seed data")
    ap.add_argument("--collection", action="append", default=[], choices=COLLECTIONS, help="Collection to reset")
    ap.add_argument("--all", action="store_true", help="Reset every collection")
    ap.add_argument("--data-dir", help="Data directory (default: DATA_DIR env or ./data)")
    args = ap.parse_args()

    selected = list(COLLECTIONS) if args.all else args.collection
    if not selected:
        raise SystemExit("Pass --collection NAME or --all")
    setup_logging()
    data_dir = Path(args.data_dir) if args.data_dir else get_settings().data_dir
    store = reset(data_dir, selected)

    print("OK: collections reset")
    for name in selected:
        print(f"  {name}: {store.count(name)} records")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
