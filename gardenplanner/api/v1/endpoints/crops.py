from typing import Optional

from fastapi import APIRouter, HTTPException, status

from gardenplanner.core.dates import format_task_date
from gardenplanner.core.deps import DB
from gardenplanner.models.crop import Crop
from gardenplanner.schemas.crop import CropCreate, CropRead, CropUpdate, PlantingDateRead
from gardenplanner.schemas.task import TaskRead
from gardenplanner.services import crop_service, planning
from gardenplanner.services.settings_store import get_garden_settings
from gardenplanner.services.task_service import get_tasks_by_crop_id

router = APIRouter(prefix="/crops", tags=["crops"])


@router.get("", response_model=list[CropRead])
async def list_crops(db: DB):
    return await crop_service.get_crops(db)


@router.post("", response_model=CropRead, status_code=status.HTTP_201_CREATED)
async def create_crop(data: CropCreate, db: DB):
    return await crop_service.create_crop(db, data)


@router.get("/{crop_id}", response_model=CropRead)
async def get_crop(crop_id: str, db: DB):
    return await _get_crop_or_404(db, crop_id)


@router.patch("/{crop_id}", response_model=CropRead)
async def update_crop(crop_id: str, data: CropUpdate, db: DB):
    crop = await crop_service.update_crop(db, crop_id, data)
    if crop is None:
        raise HTTPException(status_code=404, detail="Crop not found")
    return crop


@router.delete("/{crop_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_crop(crop_id: str, db: DB):
    if not await crop_service.delete_crop(db, crop_id):
        raise HTTPException(status_code=404, detail="Crop not found")


# ── Planting dates ────────────────────────────────────────────────────────────


@router.get("/{crop_id}/planting-date", response_model=PlantingDateRead)
async def get_planting_date(crop_id: str, db: DB, year: Optional[int] = None):
    crop = await _get_crop_or_404(db, crop_id)
    garden = await get_garden_settings(db)
    planted = planning.planting_date_for(crop, garden.frost_end_date, year or garden.current_year)
    return PlantingDateRead(
        crop_id=crop.id,
        frost_end_date=garden.frost_end_date,
        planting_date=format_task_date(planted),
    )


@router.post("/{crop_id}/reschedule-tasks")
async def reschedule_tasks(crop_id: str, db: DB):
    crop = await _get_crop_or_404(db, crop_id)
    garden = await get_garden_settings(db)
    updated = await planning.reschedule_crop_tasks(db, crop, garden.frost_end_date)
    return {"updated": updated}


@router.get("/{crop_id}/tasks", response_model=list[TaskRead])
async def list_crop_tasks(crop_id: str, db: DB):
    return await get_tasks_by_crop_id(db, crop_id)


# ── Helpers ───────────────────────────────────────────────────────────────────


async def _get_crop_or_404(db, crop_id: str) -> Crop:
    crop = await crop_service.get_crop_by_id(db, crop_id)
    if crop is None:
        raise HTTPException(status_code=404, detail="Crop not found")
    return crop
