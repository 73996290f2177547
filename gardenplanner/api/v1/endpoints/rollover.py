from fastapi import APIRouter

from gardenplanner.core.deps import DB
from gardenplanner.schemas.rollover import CopyYearOptions, RolloverPreview, RolloverResult
from gardenplanner.services.rollover import copy_selected_tasks, preview_copy

router = APIRouter(prefix="/rollover", tags=["rollover"])


@router.post("/preview", response_model=RolloverPreview)
async def preview(options: CopyYearOptions, db: DB):
    return await preview_copy(db, options)


@router.post("/copy", response_model=RolloverResult)
async def copy(options: CopyYearOptions, db: DB, atomic: bool = False):
    copied = await copy_selected_tasks(db, options, atomic=atomic)
    return RolloverResult(from_year=options.from_year, to_year=options.to_year, copied=copied)
