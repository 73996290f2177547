"""
Backup export and restore.

A backup is one JSON document: ``{"version", "timestamp", "data": {"tasks",
"crops", "settings"}}`` with camelCase keys. Restore replaces the whole store
inside a single transaction.
"""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError
from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gardenplanner.core.exceptions import InvalidBackupError
from gardenplanner.db.schema import ensure_schema
from gardenplanner.db.session import Database
from gardenplanner.models.crop import Crop
from gardenplanner.models.settings import GardenSettings
from gardenplanner.models.task import Task
from gardenplanner.schemas.backup import (
    BACKUP_VERSION,
    BackupCrop,
    BackupData,
    BackupFile,
    BackupSettings,
    BackupTask,
)

logger = logging.getLogger(__name__)


async def export_backup(db: AsyncSession) -> BackupFile:
    tasks = (await db.execute(select(Task).order_by(Task.year, Task.date))).scalars().all()
    crops = (await db.execute(select(Crop).order_by(Crop.name))).scalars().all()
    rows = (await db.execute(select(GardenSettings).order_by(GardenSettings.id))).scalars().all()

    backup = BackupFile(
        version=BACKUP_VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        data=BackupData(
            tasks=[BackupTask.model_validate(t) for t in tasks],
            crops=[BackupCrop.model_validate(c) for c in crops],
            settings=[BackupSettings.model_validate(s) for s in rows],
        ),
    )
    logger.info(
        "export_backup: %d tasks, %d crops, %d settings rows",
        len(tasks), len(crops), len(rows),
    )
    return backup


async def write_backup(db: AsyncSession, directory: Union[str, Path]) -> Path:
    backup = await export_backup(db)
    stamp = backup.timestamp.replace(":", "-").replace(".", "-").replace("+", "_")
    path = Path(directory) / f"gardenplanner_backup_{stamp}.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(backup.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
    logger.info("write_backup: %s", path)
    return path


def parse_backup(payload: Union[str, bytes, dict[str, Any]]) -> BackupFile:
    """Validate a backup document. Raises InvalidBackupError on any shape problem."""
    try:
        if isinstance(payload, (str, bytes)):
            return BackupFile.model_validate_json(payload)
        return BackupFile.model_validate(payload)
    except ValidationError as exc:
        raise InvalidBackupError(f"Invalid backup file format: {exc.error_count()} error(s)") from exc


async def import_backup(database: Database, payload: Union[str, bytes, dict[str, Any]]) -> BackupData:
    """
    Replace every task, crop and settings row with the backup's contents.

    Validation happens before the store is touched. A failed insert rolls the
    whole restore back. Either way the connection pool is reset and the
    schema re-ensured afterwards, so a backup taken before a migration comes
    back at the current schema version.
    """
    backup = parse_backup(payload)
    data = backup.data

    try:
        async with database.session() as db:
            async with db.begin():
                await db.execute(delete(Task))
                await db.execute(delete(Crop))
                await db.execute(delete(GardenSettings))

                if data.crops:
                    await db.execute(insert(Crop), [c.model_dump() for c in data.crops])
                if data.tasks:
                    await db.execute(insert(Task), [_task_row(t) for t in data.tasks])
                for row in data.settings:
                    await db.execute(insert(GardenSettings).values(**row.model_dump()))
    except SQLAlchemyError:
        logger.exception("import_backup: restore failed, rolled back")
        await _reopen_after_failure(database)
        raise

    await database.reset()
    await ensure_schema(database)

    logger.info(
        "import_backup: restored %d tasks, %d crops, %d settings rows (backup %s from %s)",
        len(data.tasks), len(data.crops), len(data.settings), backup.version, backup.timestamp,
    )
    return data


async def _reopen_after_failure(database: Database) -> None:
    """Reset and re-ensure after a failed restore; the restore error is what the caller sees."""
    await database.reset()
    try:
        await ensure_schema(database)
    except SQLAlchemyError:
        logger.exception("import_backup: schema check after the failed restore also failed")


def _task_row(task: BackupTask) -> dict[str, Any]:
    row = task.model_dump(mode="json")
    row["photos"] = row["photos"] or None
    return row
