import csv
import io
import logging
from datetime import date
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gardenplanner.core.dates import subtract_weeks
from gardenplanner.models.crop import Crop, new_id
from gardenplanner.schemas.crop import CropCreate, CropUpdate

logger = logging.getLogger(__name__)

# ── Default catalog ───────────────────────────────────────────────────────────

_DEFAULT_CROPS_CSV = """name,weeksBeforeFrost,daysToMaturity
Ageratum,7,80
Amaranth,4,65
Basil,0,55
Beans,0,55
Beets,8,55
Bok Choi,6,55
Broccoli,8,60
Brussels Sprouts,8,90
Cabbage,8,70
Carrots,8,75
Cauliflower,8,60
Celosia,6,90
Cilantro,4,55
Collards,8,55
Corn,0,70
Cucumbers,4,55
Eggplant,6,65
Ground Cherry,6,75
Kale,8,55
Lavender,8,100
Lettuce,8,45
Melons,4,75
Onions,6,100
Parsley,8,75
Peas,4,60
Peppers,8,65
Potatoes,4,90
Pumpkins,3,90
Radishes,8,30
Spinach,8,40
Sweet Potatoes,0,100
Swiss Chard,8,55
Tomatoes,6,70
Winter Squash,3,90
Zucchini,3,50
"""


def default_crop_rows() -> list[CropCreate]:
    """Parse the embedded catalog. Blank lines are skipped, cells are stripped."""
    reader = csv.DictReader(io.StringIO(_DEFAULT_CROPS_CSV))
    rows = []
    for record in reader:
        if not record.get("name") or not record["name"].strip():
            continue
        rows.append(CropCreate(
            name=record["name"].strip(),
            weeks_before_frost=int(record["weeksBeforeFrost"].strip()),
            days_to_maturity=int(record["daysToMaturity"].strip()),
        ))
    return rows


async def seed_default_crops(db: AsyncSession) -> int:
    """Insert the default catalog when the crop table is empty. Returns rows inserted."""
    existing = await db.scalar(select(func.count(Crop.id)))
    if existing:
        return 0

    rows = default_crop_rows()
    db.add_all([Crop(id=new_id(), **row.model_dump()) for row in rows])
    try:
        await db.commit()
    except SQLAlchemyError:
        logger.exception("seed_default_crops: insert failed")
        raise
    logger.info("seed_default_crops: inserted %d crops", len(rows))
    return len(rows)


# ── CRUD ──────────────────────────────────────────────────────────────────────


async def get_crops(db: AsyncSession) -> list[Crop]:
    result = await db.execute(select(Crop).order_by(Crop.name))
    return list(result.scalars().all())


async def get_crop_by_id(db: AsyncSession, crop_id: str) -> Optional[Crop]:
    """Missing ids come back as None, never an error."""
    result = await db.execute(select(Crop).where(Crop.id == crop_id))
    return result.scalar_one_or_none()


async def create_crop(db: AsyncSession, data: CropCreate) -> Crop:
    crop = Crop(id=new_id(), **data.model_dump())
    db.add(crop)
    try:
        await db.commit()
    except SQLAlchemyError:
        logger.exception("create_crop: insert failed name=%s", data.name)
        raise
    await db.refresh(crop)
    return crop


async def update_crop(db: AsyncSession, crop_id: str, data: CropUpdate) -> Optional[Crop]:
    crop = await get_crop_by_id(db, crop_id)
    if crop is None:
        return None
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        setattr(crop, field, value)
    try:
        await db.commit()
    except SQLAlchemyError:
        logger.exception("update_crop: failed id=%s", crop_id)
        raise
    await db.refresh(crop)
    return crop


async def delete_crop(db: AsyncSession, crop_id: str) -> bool:
    """Remove a crop. Tasks pointing at it keep their crop_id."""
    try:
        result = await db.execute(delete(Crop).where(Crop.id == crop_id))
        await db.commit()
    except SQLAlchemyError:
        logger.exception("delete_crop: failed id=%s", crop_id)
        raise
    return result.rowcount > 0


# ── Planting dates ────────────────────────────────────────────────────────────


def calculate_planting_date(crop, frost_end_date: date) -> date:
    """Frost end date minus the crop's weeks before frost."""
    planting = subtract_weeks(frost_end_date, crop.weeks_before_frost)
    logger.debug(
        "calculate_planting_date: %s weeks=%d frost=%s -> %s",
        crop.name, crop.weeks_before_frost, frost_end_date, planting,
    )
    return planting
