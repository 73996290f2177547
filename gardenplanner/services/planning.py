"""
Frost-date planning on top of the crop and task services.

- planting dates for a crop in a given season
- drafting a task from a crop pick
- succession plantings (the same task repeated every N weeks)
- moving a crop's tasks after its weeks-before-frost changes
"""
import logging
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gardenplanner.core.dates import add_weeks, format_task_date, parse_month_day, parse_task_date
from gardenplanner.models.task import Task
from gardenplanner.schemas.settings import GardenSettingsData
from gardenplanner.schemas.task import TaskCreate, TaskRead, TaskUpdate
from gardenplanner.services.crop_service import calculate_planting_date
from gardenplanner.services.task_service import create_task, update_task

logger = logging.getLogger(__name__)


def planting_date_for(crop, frost_end: str, year: int) -> date:
    """Planting date for a season whose last frost is ``frost_end`` (MM-DD) in ``year``."""
    return calculate_planting_date(crop, parse_month_day(frost_end, year))


def task_for_crop(crop, garden_settings: GardenSettingsData, year: Optional[int] = None) -> TaskCreate:
    planted = planting_date_for(crop, garden_settings.frost_end_date, year or garden_settings.current_year)
    return TaskCreate(
        title=crop.name,
        crop_id=crop.id,
        date=format_task_date(planted),
        year=planted.year,
    )


async def create_with_succession(
    db: AsyncSession, task: TaskCreate, interval_weeks: int, count: int
) -> list[TaskRead]:
    """
    Create ``task`` and ``count - 1`` follow-ups, each ``interval_weeks`` apart.

    Follow-ups are titled "<title> - #2", "<title> - #3", ... and get their
    year from their own date.
    """
    if interval_weeks < 1:
        raise ValueError("interval_weeks must be at least 1")

    created = [await create_task(db, task)]
    base = parse_task_date(task.date)
    for i in range(1, count):
        when = add_weeks(base, i * interval_weeks)
        follow_up = task.model_copy(update={
            "id": None,
            "title": f"{task.title} - #{i + 1}",
            "date": format_task_date(when),
            "year": when.year,
        })
        created.append(await create_task(db, follow_up))

    if count > 1:
        logger.info(
            "create_with_succession: %s x%d every %d week(s)", task.title, count, interval_weeks
        )
    return created


async def reschedule_crop_tasks(db: AsyncSession, crop, frost_end: str) -> int:
    """Recompute date and year of every task referencing ``crop``, each within its own season."""
    result = await db.execute(select(Task.id, Task.year).where(Task.crop_id == crop.id))
    rows = result.all()
    for task_id, year in rows:
        planted = planting_date_for(crop, frost_end, year)
        await update_task(db, task_id, TaskUpdate(date=format_task_date(planted), year=planted.year))
    logger.info("reschedule_crop_tasks: %s moved %d task(s)", crop.name, len(rows))
    return len(rows)
