"""
Weekly task reminder.

Delivery belongs to the app shell (`NotificationScheduler`); this module
decides what goes into the reminder and when it first fires: next Sunday at
09:00, covering that Sunday through the following Saturday.
"""
import logging
from datetime import date, datetime, time, timedelta
from typing import Optional, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from gardenplanner.core.dates import is_task_date, parse_task_date
from gardenplanner.schemas.task import TaskRead
from gardenplanner.services.settings_store import get_garden_settings
from gardenplanner.services.task_service import get_tasks_by_year

logger = logging.getLogger(__name__)

REMINDER_TIME = time(9, 0)
DIGEST_TITLE = "Weekly Garden Tasks"


class NotificationScheduler(Protocol):
    async def schedule_weekly(self, tasks: list[TaskRead], first_at: datetime) -> None: ...

    async def cancel_all(self) -> None: ...


def next_reminder_at(now: datetime) -> datetime:
    """Next Sunday at 09:00 strictly after the current week's Sunday."""
    # Python weekday: Monday=0 ... Sunday=6
    days_since_sunday = (now.weekday() + 1) % 7
    this_sunday = now.date() - timedelta(days=days_since_sunday)
    return datetime.combine(this_sunday + timedelta(days=7), REMINDER_TIME, tzinfo=now.tzinfo)


def tasks_in_week(tasks: list[TaskRead], week_start: date) -> list[TaskRead]:
    week_end = week_start + timedelta(days=7)
    return [
        t for t in tasks
        if is_task_date(t.date) and week_start <= parse_task_date(t.date) < week_end
    ]


def build_weekly_digest(tasks: list[TaskRead]) -> tuple[str, str]:
    lines = "\n".join(f"• {t.title} ({t.date})" for t in tasks)
    return DIGEST_TITLE, f"Here are your tasks for this week:\n\n{lines}"


async def refresh_weekly_notification(
    db: AsyncSession, scheduler: NotificationScheduler, now: Optional[datetime] = None
) -> int:
    """Re-plan the weekly reminder. Returns how many tasks it covers (0 when none is scheduled)."""
    await scheduler.cancel_all()

    garden_settings = await get_garden_settings(db)
    if not garden_settings.notifications_enabled:
        logger.info("refresh_weekly_notification: notifications disabled")
        return 0

    now = now or datetime.now()
    first_at = next_reminder_at(now)
    tasks = await get_tasks_by_year(db, garden_settings.current_year)
    upcoming = tasks_in_week(tasks, first_at.date())
    if not upcoming:
        logger.info("refresh_weekly_notification: nothing due week of %s", first_at.date())
        return 0

    await scheduler.schedule_weekly(upcoming, first_at)
    logger.info("refresh_weekly_notification: %d task(s) for %s", len(upcoming), first_at)
    return len(upcoming)
