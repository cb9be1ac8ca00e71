#!/usr/bin/env python3
"""
Seed the SQL catalog, either with the built-in demo products or from a JSON
file holding a list of product entries.

Re-running is safe: products already present (same brand, size and container
type) are left as they are.

Usage:
    python scripts/seed_products.py
    python scripts/seed_products.py --file products.json
"""
import argparse
import json
import os
import sys

# allow running from repo/scripts
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from stockroom.config import settings
from stockroom.db import SessionLocal, init_db
from stockroom.repositories import SqlStore
from stockroom.seed import DEMO_PRODUCTS, seed_demo_products
from stockroom.utils.logconfig import configure_logging


def _normalize_entry(entry):
    """Return a (name, brand, size, container_type, box_size, price, category) tuple"""
    price = entry.get("price", entry.get("unit_price", 0))
    try:
        price = float(price)
    except (TypeError, ValueError):
        price = 0.0
    return (
        entry.get("name") or entry.get("title") or "",
        entry.get("brand", ""),
        int(entry.get("size", 0) or 0),
        entry.get("container_type") or entry.get("containerType") or "",
        int(entry.get("box_size", entry.get("boxSize", 0)) or 0),
        price,
        entry.get("category", ""),
    )


def load_entries(path: str):
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise RuntimeError(f"Failed to parse JSON from {path}: {e}")
    if isinstance(data, dict):
        data = data.get("items", list(data.values()))
    return [_normalize_entry(e) for e in data]


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--file", "-f", default=None, help="JSON list of products; demo catalog if omitted")
    args = parser.parse_args()

    configure_logging(settings.LOG_LEVEL)
    if args.file and not os.path.exists(args.file):
        print("File not found:", args.file)
        sys.exit(1)

    entries = load_entries(args.file) if args.file else DEMO_PRODUCTS
    init_db()
    repo = SqlStore(
        SessionLocal,
        lock_dir=settings.STOCK_LOCK_DIR,
        lock_timeout=settings.STOCK_LOCK_TIMEOUT_SECONDS,
    )
    ids = seed_demo_products(repo, entries)
    print("Seeded products:", len(ids))
    print("Active products:", repo.count())
