from fastapi import APIRouter

from gardenplanner.core.deps import DB
from gardenplanner.schemas.settings import GardenSettingsData
from gardenplanner.services.settings_store import get_garden_settings, save_garden_settings

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=GardenSettingsData)
async def read_settings(db: DB):
    return await get_garden_settings(db)


@router.put("", response_model=GardenSettingsData)
async def replace_settings(data: GardenSettingsData, db: DB):
    return await save_garden_settings(db, data)
