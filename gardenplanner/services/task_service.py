"""
Task and note persistence.

Every read returns fully materialized `TaskRead` records. Archived rows are
hidden from the year, type and crop listings.

List ordering follows ``settings.TASK_DATE_ORDER``: ``"text"`` sorts on the
raw MM/DD/YYYY string, which is not chronological across months or years
(``"12/01/2023"`` sorts after ``"01/15/2024"``); ``"chronological"`` sorts on
year, month, day.
"""
import logging
from datetime import date
from typing import Optional

import sqlalchemy as sa
from sqlalchemy import func, insert, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gardenplanner.core.config import settings
from gardenplanner.core.dates import is_task_date, parse_task_date
from gardenplanner.core.exceptions import TaskNotFoundError
from gardenplanner.models.crop import new_id
from gardenplanner.models.task import Task
from gardenplanner.schemas.task import ItemType, TaskCategory, TaskCreate, TaskDeleteResult, TaskRead, TaskUpdate
from gardenplanner.services.photos import PhotoStorage, cleanup_task_photos

logger = logging.getLogger(__name__)

_BOOL_FIELDS = {"completed", "is_template", "archived"}
_REQUIRED_FIELDS = {"title", "type", "date", "year"}
# Columns that arrived through migrations; inserts skip them on a store that
# has not been migrated yet.
_MIGRATED_COLUMNS = {"is_template", "category", "archived"}


# ── Query helpers ─────────────────────────────────────────────────────────────


def task_order(order: Optional[str] = None) -> tuple:
    order = order or settings.TASK_DATE_ORDER
    if order == "chronological":
        # MM/DD/YYYY -> YYYY, MM, DD
        return (
            func.substr(Task.date, 7, 4),
            func.substr(Task.date, 1, 2),
            func.substr(Task.date, 4, 2),
        )
    if order != "text":
        raise ValueError(f"Unknown task order {order!r}")
    return (Task.date,)


def _visible():
    return or_(Task.archived.is_(None), Task.archived == False)  # noqa: E712


async def _fetch(db: AsyncSession, query) -> list[TaskRead]:
    result = await db.execute(query)
    return [TaskRead.model_validate(t) for t in result.scalars().all()]


def _tasks_table(columns) -> sa.TableClause:
    # Only the given columns, so model-side defaults cannot add absent ones back
    return sa.table(
        Task.__tablename__,
        *(sa.column(name, Task.__table__.c[name].type) for name in columns),
    )


async def _task_columns(db: AsyncSession) -> set[str]:
    def _probe(session) -> set[str]:
        return {col["name"] for col in sa.inspect(session.connection()).get_columns("tasks")}

    return await db.run_sync(_probe)


# ── Reads ─────────────────────────────────────────────────────────────────────


async def get_tasks_by_year(db: AsyncSession, year: int, order: Optional[str] = None) -> list[TaskRead]:
    return await _fetch(
        db, select(Task).where(Task.year == year, _visible()).order_by(*task_order(order))
    )


async def get_tasks_by_type(
    db: AsyncSession, year: int, item_type: ItemType, order: Optional[str] = None
) -> list[TaskRead]:
    return await _fetch(
        db,
        select(Task)
        .where(Task.year == year, Task.type == ItemType(item_type).value, _visible())
        .order_by(*task_order(order)),
    )


async def get_tasks_by_crop_id(db: AsyncSession, crop_id: str, order: Optional[str] = None) -> list[TaskRead]:
    return await _fetch(
        db, select(Task).where(Task.crop_id == crop_id, _visible()).order_by(*task_order(order))
    )


async def get_task_by_id(db: AsyncSession, task_id: str) -> TaskRead:
    """Raises TaskNotFoundError for an unknown id."""
    result = await db.execute(select(Task).where(Task.id == task_id))
    task = result.scalar_one_or_none()
    if task is None:
        raise TaskNotFoundError(task_id)
    return TaskRead.model_validate(task)


async def get_available_years(db: AsyncSession) -> list[int]:
    result = await db.execute(select(Task.year).distinct().order_by(Task.year.desc()))
    return [int(y) for y in result.scalars().all()]


async def get_templates_by_category(
    db: AsyncSession, category: Optional[TaskCategory] = None
) -> list[TaskRead]:
    q = select(Task).where(Task.is_template == True)  # noqa: E712
    if category:
        q = q.where(Task.category == TaskCategory(category).value)
    return await _fetch(db, q.order_by(Task.category, Task.title))


async def get_archived_notes(db: AsyncSession, year: int, order: Optional[str] = None) -> list[TaskRead]:
    return await _fetch(
        db,
        select(Task)
        .where(Task.year == year, Task.type == ItemType.note.value, Task.archived == True)  # noqa: E712
        .order_by(*task_order(order)),
    )


# ── Writes ────────────────────────────────────────────────────────────────────


async def create_task(db: AsyncSession, data: TaskCreate) -> TaskRead:
    values = {
        "id": data.id or new_id(),
        "title": data.title,
        "type": ItemType(data.type).value,
        "crop_id": data.crop_id or None,
        "date": data.date,
        "notes": data.notes or None,
        "photos": list(data.photos) if data.photos else None,
        "completed": bool(data.completed),
        "year": data.year or date.today().year,
        "is_template": bool(data.is_template),
        "category": TaskCategory(data.category).value if data.category else None,
        "archived": bool(data.archived),
    }

    present = await _task_columns(db)
    missing = _MIGRATED_COLUMNS - present
    if missing:
        logger.warning("create_task: store lacks columns %s, not persisting them", sorted(missing))
    row = {k: v for k, v in values.items() if k not in missing}

    try:
        await db.execute(insert(_tasks_table(row)).values(**row))
        await db.commit()
    except SQLAlchemyError:
        logger.exception("create_task: insert failed title=%s", data.title)
        raise
    logger.debug("create_task: id=%s year=%s", values["id"], values["year"])
    return TaskRead(**values)


async def update_task(db: AsyncSession, task_id: str, data: TaskUpdate) -> TaskRead:
    """Apply only the provided fields, then re-read the row."""
    fields = {}
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field in _REQUIRED_FIELDS:
            continue
        if field in _BOOL_FIELDS:
            value = bool(value)
        elif field in ("type", "category") and value is not None:
            value = getattr(value, "value", value)
        elif field == "photos" and value is not None:
            value = list(value)
        fields[field] = value

    if fields:
        try:
            await db.execute(update(Task).where(Task.id == task_id).values(**fields))
            await db.commit()
        except SQLAlchemyError:
            logger.exception("update_task: failed id=%s", task_id)
            raise

    task = await get_task_by_id(db, task_id)
    if "date" in fields and is_task_date(task.date) and parse_task_date(task.date).year != task.year:
        logger.warning(
            "update_task: id=%s date %s does not match year %s", task.id, task.date, task.year
        )
    return task


async def delete_task(db: AsyncSession, task_id: str, photos: PhotoStorage) -> TaskDeleteResult:
    """
    Release the task's photo files, then delete the row.

    Photo failures do not stop the delete; they are returned to the caller.
    """
    task = await get_task_by_id(db, task_id)
    failures = await cleanup_task_photos(photos, task.photos) if task.photos else []

    try:
        await db.execute(sa.delete(Task).where(Task.id == task_id))
        await db.commit()
    except SQLAlchemyError:
        logger.exception("delete_task: failed id=%s", task_id)
        raise

    if failures:
        logger.warning("delete_task: id=%s deleted, %d photo(s) not released", task_id, len(failures))
    return TaskDeleteResult(
        id=task_id,
        photos_released=len(task.photos) - len(failures),
        photo_failures=failures,
    )


async def archive_notes_from_year(db: AsyncSession, year: int) -> int:
    try:
        result = await db.execute(
            update(Task)
            .where(Task.year == year, Task.type == ItemType.note.value, _visible())
            .values(archived=True)
        )
        await db.commit()
    except SQLAlchemyError:
        logger.exception("archive_notes_from_year: failed year=%s", year)
        raise
    logger.info("archive_notes_from_year: archived %d notes from %s", result.rowcount, year)
    return result.rowcount or 0


async def unarchive_note(db: AsyncSession, task_id: str) -> None:
    try:
        await db.execute(update(Task).where(Task.id == task_id).values(archived=False))
        await db.commit()
    except SQLAlchemyError:
        logger.exception("unarchive_note: failed id=%s", task_id)
        raise
    logger.info("unarchive_note: %s", task_id)
