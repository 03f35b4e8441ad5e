#!/usr/bin/env python3
"""
Food ordering backend -- process launcher.

Usage:
  python main.py                      # serve on HOST:PORT from the environment (default 0.0.0.0:5000)
  python main.py --port 8080
  python main.py --reload             # auto-reload for local development
  python main.py --seed               # insert the missing sample products and exit

Environment variables (see core/config.py for the full list):
  SECRET_KEY / JWT_SECRET   Token signing secret, at least 32 characters.
  DATABASE_URL              SQLAlchemy URL. Defaults to sqlite:///food_ordering.db.
  PORT                      Listening port. Defaults to 5000.
  DEBUG                     "true" auto-generates a signing secret for local runs.
"""

import argparse
import logging

import uvicorn

from catalog.store import ProductStore
from core.config import get_settings

logger = logging.getLogger("foodorder.main")


def seed(database_url: str) -> int:
    """Insert missing sample products. Returns how many were added."""
    store = ProductStore(database_url)
    try:
        inserted = store.seed_samples()
    finally:
        store.close()
    return len(inserted)


def main() -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(
        description="Food ordering backend.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Listening port (default: {settings.port})")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    parser.add_argument("--seed", action="store_true", help="Insert the sample products and exit")
    args = parser.parse_args()

    if args.seed:
        logging.basicConfig(level=logging.INFO, format="%(levelname)-5s %(name)s %(message)s")
        added = seed(settings.database_url)
        if added:
            print(f"  Added {added} sample product(s).")
        else:
            print("  All sample products already exist, nothing added.")
        return

    uvicorn.run("api.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
