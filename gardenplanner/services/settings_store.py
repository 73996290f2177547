"""
Garden settings.

Saves append a row; the newest row (highest id) is the current settings.
"""
import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gardenplanner.core.config import settings
from gardenplanner.models.settings import GardenSettings
from gardenplanner.schemas.settings import GardenSettingsData

logger = logging.getLogger(__name__)


def default_garden_settings() -> GardenSettingsData:
    return GardenSettingsData(
        frost_start_date=settings.DEFAULT_FROST_START,
        frost_end_date=settings.DEFAULT_FROST_END,
        current_year=date.today().year,
        notifications_enabled=True,
        save_to_photo_library=False,
    )


async def get_garden_settings(db: AsyncSession) -> GardenSettingsData:
    """Latest settings row; writes and returns the defaults when there is none."""
    row = await db.scalar(
        select(GardenSettings).order_by(GardenSettings.id.desc()).limit(1)
    )
    if row is not None:
        return GardenSettingsData.model_validate(row)

    defaults = default_garden_settings()
    await save_garden_settings(db, defaults)
    logger.info("get_garden_settings: no settings stored, wrote defaults")
    return defaults


async def save_garden_settings(db: AsyncSession, data: GardenSettingsData) -> GardenSettingsData:
    db.add(GardenSettings(**data.model_dump()))
    try:
        await db.commit()
    except SQLAlchemyError:
        logger.exception("save_garden_settings: insert failed")
        raise
    return data
