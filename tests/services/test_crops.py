from datetime import date

from gardenplanner.models.crop import Crop
from gardenplanner.schemas.crop import CropCreate, CropUpdate
from gardenplanner.schemas.task import TaskCreate
from gardenplanner.services import crop_service
from gardenplanner.services.task_service import create_task, get_task_by_id


async def test_seed_loads_catalog_once(db):
    expected = len(crop_service.default_crop_rows())

    assert await crop_service.seed_default_crops(db) == expected
    assert await crop_service.seed_default_crops(db) == 0
    assert len(await crop_service.get_crops(db)) == expected


async def test_catalog_rows():
    rows = crop_service.default_crop_rows()
    assert rows[0].name == "Ageratum"
    assert rows[0].weeks_before_frost == 7
    assert rows[0].days_to_maturity == 80
    assert rows[-1].name == "Zucchini"


async def test_crops_listed_by_name(db):
    await crop_service.create_crop(db, CropCreate(name="Tomatoes", weeks_before_frost=6, days_to_maturity=70))
    await crop_service.create_crop(db, CropCreate(name="Basil", weeks_before_frost=0, days_to_maturity=55))

    names = [c.name for c in await crop_service.get_crops(db)]
    assert names == ["Basil", "Tomatoes"]


async def test_partial_update(db):
    crop = await crop_service.create_crop(db, CropCreate(name="Kale", weeks_before_frost=8, days_to_maturity=55))

    updated = await crop_service.update_crop(db, crop.id, CropUpdate(weeks_before_frost=6))

    assert updated.weeks_before_frost == 6
    assert updated.name == "Kale"
    assert updated.days_to_maturity == 55


async def test_missing_crop_is_none(db):
    assert await crop_service.get_crop_by_id(db, "nope") is None
    assert await crop_service.update_crop(db, "nope", CropUpdate(name="x")) is None
    assert await crop_service.delete_crop(db, "nope") is False


async def test_delete_leaves_task_reference(db):
    crop = await crop_service.create_crop(db, CropCreate(name="Peas", weeks_before_frost=4, days_to_maturity=60))
    task = await create_task(db, TaskCreate(title="Sow peas", crop_id=crop.id, date="03/01/2024"))

    assert await crop_service.delete_crop(db, crop.id) is True

    assert await crop_service.get_crop_by_id(db, crop.id) is None
    assert (await get_task_by_id(db, task.id)).crop_id == crop.id


def test_planting_date():
    crop = Crop(name="Tomatoes", weeks_before_frost=6, days_to_maturity=70)
    assert crop_service.calculate_planting_date(crop, date(2024, 5, 11)) == date(2024, 3, 30)


def test_planting_date_rolls_into_previous_year():
    crop = Crop(name="Lettuce", weeks_before_frost=8, days_to_maturity=45)
    assert crop_service.calculate_planting_date(crop, date(2024, 1, 10)) == date(2023, 11, 15)
