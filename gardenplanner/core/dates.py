"""
Calendar helpers for the text date formats used in the store.

Tasks carry their date as ``MM/DD/YYYY`` text; frost dates in settings are
``MM-DD`` without a year.
"""
from datetime import date, datetime, timedelta

from gardenplanner.core.exceptions import InvalidTaskDateError

TASK_DATE_FORMAT = "%m/%d/%Y"
MONTH_DAY_FORMAT = "%m-%d"


def parse_task_date(value: str) -> date:
    try:
        return datetime.strptime(value.strip(), TASK_DATE_FORMAT).date()
    except (AttributeError, ValueError):
        raise InvalidTaskDateError(value) from None


def format_task_date(value: date) -> str:
    return value.strftime(TASK_DATE_FORMAT)


def is_task_date(value: str) -> bool:
    try:
        parse_task_date(value)
    except InvalidTaskDateError:
        return False
    return True


def parse_month_day(value: str, year: int) -> date:
    """Resolve an ``MM-DD`` frost date into the given year.

    ``02-29`` in a non-leap year resolves to Feb 28.
    """
    try:
        month_str, day_str = value.strip().split("-")
        month, day = int(month_str), int(day_str)
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid month-day {value!r}, expected MM-DD") from None
    if month == 2 and day == 29 and not _is_leap(year):
        day = 28
    return date(year, month, day)


def shift_years(value: date, years: int) -> date:
    """Move a date by whole calendar years keeping month and day.

    Feb 29 landing on a non-leap year clamps to Feb 28.
    """
    target = value.year + years
    if value.month == 2 and value.day == 29 and not _is_leap(target):
        return date(target, 2, 28)
    return value.replace(year=target)


def shift_task_date(value: str, years: int) -> str:
    return format_task_date(shift_years(parse_task_date(value), years))


def subtract_weeks(value: date, weeks: int) -> date:
    return value - timedelta(days=7 * weeks)


def add_weeks(value: date, weeks: int) -> date:
    return value + timedelta(days=7 * weeks)


def _is_leap(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)
