#!/usr/bin/env python3
"""
Create or migrate the store and load the default crop catalog.

Usage:
    python scripts/seed_crops.py

Does nothing to the crop table if it already has rows.
"""
import asyncio
import logging
import sys

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s: %(message)s",
    stream=sys.stdout,
)

from gardenplanner.core.config import settings
from gardenplanner.db.schema import ensure_schema
from gardenplanner.db.session import Database
from gardenplanner.services.crop_service import seed_default_crops


async def main() -> None:
    database = Database(settings.DATABASE_URL)
    await database.connect()
    try:
        version = await ensure_schema(database)
        async with database.session() as db:
            inserted = await seed_default_crops(db)
    finally:
        await database.dispose()
    print(f"Schema version {version}, {inserted} crops inserted.")


if __name__ == "__main__":
    asyncio.run(main())
