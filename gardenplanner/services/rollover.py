"""
Year rollover: copy a filtered slice of one year's tasks into another year.

Copies are new rows with fresh ids. Dates move by whole calendar years with
month and day kept; Feb 29 landing on a non-leap year becomes Feb 28. Photos
are never copied and archived is always cleared.

By default each copied row is committed on its own, so a failure part-way
leaves the earlier copies in place and raises `RolloverError` carrying that
count. ``atomic=True`` commits the whole copy at once instead.
"""
import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gardenplanner.core.dates import shift_task_date
from gardenplanner.core.exceptions import InvalidTaskDateError, RolloverError
from gardenplanner.models.crop import new_id
from gardenplanner.models.task import Task
from gardenplanner.schemas.rollover import CopyYearOptions, RolloverCandidate, RolloverPreview
from gardenplanner.schemas.task import ItemType, TaskRead
from gardenplanner.services.task_service import task_order

logger = logging.getLogger(__name__)


def _source_query(options: CopyYearOptions, order: Optional[str] = None):
    q = select(Task).where(Task.year == options.from_year)
    if options.categories:
        q = q.where(Task.category.in_([c.value for c in options.categories]))
    if not options.include_templates:
        q = q.where(or_(Task.is_template.is_(None), Task.is_template == False))  # noqa: E712
    if not options.include_notes:
        q = q.where(Task.type == ItemType.task.value)
    return q.order_by(*task_order(order))


async def _load_sources(db: AsyncSession, options: CopyYearOptions) -> list[Task]:
    result = await db.execute(_source_query(options))
    return list(result.scalars().all())


def _shifted_date(source_date: str, years: int) -> str:
    try:
        return shift_task_date(source_date, years)
    except InvalidTaskDateError:
        logger.warning("rollover: unparseable date %r kept as-is", source_date)
        return source_date


def _copy_of(source: Task, options: CopyYearOptions) -> Task:
    years = options.to_year - options.from_year
    return Task(
        id=new_id(),
        title=source.title,
        type=source.type or ItemType.task.value,
        crop_id=source.crop_id,
        date=_shifted_date(source.date, years),
        notes=source.notes,
        photos=None,
        completed=False if options.reset_completion else bool(source.completed),
        year=options.to_year,
        is_template=bool(source.is_template),
        category=source.category,
        archived=False,
    )


async def preview_copy(db: AsyncSession, options: CopyYearOptions) -> RolloverPreview:
    """The rows a copy with these options would create, without writing anything."""
    sources = await _load_sources(db, options)
    years = options.to_year - options.from_year
    items = [
        RolloverCandidate(
            source=TaskRead.model_validate(s),
            new_date=_shifted_date(s.date, years),
        )
        for s in sources
    ]
    return RolloverPreview(
        from_year=options.from_year,
        to_year=options.to_year,
        count=len(items),
        items=items,
    )


async def copy_selected_tasks(db: AsyncSession, options: CopyYearOptions, atomic: bool = False) -> int:
    """Copy matching tasks from ``from_year`` into ``to_year``. Returns the number copied."""
    sources = await _load_sources(db, options)
    copied = 0
    try:
        for source in sources:
            db.add(_copy_of(source, options))
            if not atomic:
                await db.commit()
                copied += 1
        if atomic:
            await db.commit()
            copied = len(sources)
    except SQLAlchemyError as exc:
        logger.exception(
            "copy_selected_tasks: failed %s -> %s after %d copied",
            options.from_year, options.to_year, copied,
        )
        await db.rollback()
        raise RolloverError(copied, options.from_year, options.to_year) from exc

    logger.info(
        "copy_selected_tasks: copied %d tasks from %s to %s",
        copied, options.from_year, options.to_year,
    )
    return copied
