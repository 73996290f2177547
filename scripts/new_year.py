#!/usr/bin/env python3
"""
Copy one year's tasks into another year.

Usage:
    python scripts/new_year.py --from 2024 --to 2025 --preview
    python scripts/new_year.py --from 2024 --to 2025 --category seeding --category planning
    python scripts/new_year.py --from 2024 --to 2025 --no-notes --keep-completion --atomic
"""
import argparse
import asyncio
import logging
import sys

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s: %(message)s",
    stream=sys.stdout,
)

from gardenplanner.core.config import settings
from gardenplanner.core.exceptions import RolloverError
from gardenplanner.db.schema import ensure_schema
from gardenplanner.db.session import Database
from gardenplanner.schemas.rollover import CopyYearOptions
from gardenplanner.schemas.task import TaskCategory
from gardenplanner.services.rollover import copy_selected_tasks, preview_copy

parser = argparse.ArgumentParser(description="Copy tasks from one year to another")
parser.add_argument("--from", dest="from_year", type=int, required=True, help="Source year")
parser.add_argument("--to", dest="to_year", type=int, required=True, help="Target year")
parser.add_argument(
    "--category", action="append", choices=[c.value for c in TaskCategory],
    help="Only copy this category (repeatable); default is every category",
)
parser.add_argument("--no-templates", action="store_true", help="Skip template tasks")
parser.add_argument("--no-notes", action="store_true", help="Skip notes")
parser.add_argument("--keep-completion", action="store_true", help="Keep completed flags instead of clearing them")
parser.add_argument("--preview", action="store_true", help="List what would be copied and exit")
parser.add_argument("--atomic", action="store_true", help="All-or-nothing copy")


async def main() -> int:
    args = parser.parse_args()
    options = CopyYearOptions(
        from_year=args.from_year,
        to_year=args.to_year,
        categories=args.category,
        include_templates=not args.no_templates,
        include_notes=not args.no_notes,
        reset_completion=not args.keep_completion,
    )

    database = Database(settings.DATABASE_URL)
    await database.connect()
    try:
        await ensure_schema(database)
        async with database.session() as db:
            if args.preview:
                preview = await preview_copy(db, options)
                for item in preview.items:
                    print(f"{item.source.date} -> {item.new_date}  [{item.source.type.value}] {item.source.title}")
                print(f"\n{preview.count} item(s) would be copied from {args.from_year} to {args.to_year}.")
                return 0
            try:
                copied = await copy_selected_tasks(db, options, atomic=args.atomic)
            except RolloverError as exc:
                print(f"\n{exc}")
                return 1
    finally:
        await database.dispose()

    print(f"\nCopied {copied} item(s) from {args.from_year} to {args.to_year}.")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
