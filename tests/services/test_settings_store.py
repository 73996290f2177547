from datetime import date

import pytest
from pydantic import ValidationError
from sqlalchemy import func, select

from gardenplanner.models.settings import GardenSettings
from gardenplanner.schemas.settings import GardenSettingsData
from gardenplanner.services.settings_store import get_garden_settings, save_garden_settings


async def _row_count(db) -> int:
    return await db.scalar(select(func.count(GardenSettings.id)))


async def test_first_read_writes_defaults(db):
    current = await get_garden_settings(db)

    assert current.frost_start_date == "10-03"
    assert current.frost_end_date == "05-11"
    assert current.current_year == date.today().year
    assert current.notifications_enabled is True
    assert current.save_to_photo_library is False
    assert await _row_count(db) == 1

    await get_garden_settings(db)
    assert await _row_count(db) == 1


async def test_save_appends_and_latest_wins(db):
    await get_garden_settings(db)
    await save_garden_settings(db, GardenSettingsData(
        frost_start_date="10-15", frost_end_date="04-20", current_year=2025, notifications_enabled=False,
    ))

    current = await get_garden_settings(db)

    assert current.frost_end_date == "04-20"
    assert current.current_year == 2025
    assert current.notifications_enabled is False
    assert await _row_count(db) == 2


def test_frost_dates_must_be_month_day():
    with pytest.raises(ValidationError):
        GardenSettingsData(frost_start_date="10/03", frost_end_date="05-11", current_year=2024)
