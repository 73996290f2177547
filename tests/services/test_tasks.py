import json
from datetime import date

import pytest
from pydantic import ValidationError
from sqlalchemy import text

from gardenplanner.core.exceptions import TaskNotFoundError
from gardenplanner.schemas.task import ItemType, TaskCategory, TaskCreate, TaskUpdate
from gardenplanner.services import task_service


class FakePhotos:
    def __init__(self, broken=()):
        self.broken = set(broken)
        self.deleted = []

    async def save(self, uri, task_id):
        return f"{task_id}.jpg"

    async def delete(self, filename):
        if filename in self.broken:
            raise OSError("permission denied")
        self.deleted.append(filename)

    def resolve_uri(self, filename):
        return filename


async def _add(db, title, when, **kwargs):
    return await task_service.create_task(db, TaskCreate(title=title, date=when, **kwargs))


async def test_create_and_get(db):
    created = await _add(db, "Sow carrots", "04/01/2024", year=2024)

    task = await task_service.get_task_by_id(db, created.id)

    assert task.title == "Sow carrots"
    assert task.type == ItemType.task
    assert task.photos == []
    assert task.completed is False
    assert task.archived is False


async def test_year_defaults_to_current(db):
    created = await _add(db, "Mulch", "06/01/2024")
    assert created.year == date.today().year


async def test_unknown_task_raises(db):
    with pytest.raises(TaskNotFoundError):
        await task_service.get_task_by_id(db, "missing")


def test_bad_date_rejected():
    with pytest.raises(ValidationError):
        TaskCreate(title="x", date="2024-04-01")


async def test_text_order_vs_chronological(db):
    await _add(db, "Late", "12/01/2023", year=2024)
    await _add(db, "Early", "01/15/2024", year=2024)

    text_titles = [t.title for t in await task_service.get_tasks_by_year(db, 2024, order="text")]
    chrono_titles = [t.title for t in await task_service.get_tasks_by_year(db, 2024, order="chronological")]

    assert text_titles == ["Early", "Late"]
    assert chrono_titles == ["Late", "Early"]


async def test_unknown_order_rejected(db):
    with pytest.raises(ValueError):
        await task_service.get_tasks_by_year(db, 2024, order="random")


async def test_type_and_crop_filters(db):
    await _add(db, "Water", "05/01/2024", year=2024)
    await _add(db, "Aphids on kale", "05/02/2024", year=2024, type=ItemType.note)
    await _add(db, "Thin beets", "05/03/2024", year=2024, crop_id="beets")

    notes = await task_service.get_tasks_by_type(db, 2024, ItemType.note)
    by_crop = await task_service.get_tasks_by_crop_id(db, "beets")

    assert [t.title for t in notes] == ["Aphids on kale"]
    assert [t.title for t in by_crop] == ["Thin beets"]


async def test_available_years_descending(db):
    await _add(db, "a", "01/01/2023", year=2023)
    await _add(db, "b", "01/01/2025", year=2025)
    await _add(db, "c", "02/01/2023", year=2023)

    assert await task_service.get_available_years(db) == [2025, 2023]


async def test_templates_by_category(db):
    await _add(db, "Order seeds", "01/05/2024", year=2024, is_template=True, category=TaskCategory.planning)
    await _add(db, "Start onions", "02/01/2024", year=2024, is_template=True, category=TaskCategory.seeding)
    await _add(db, "Draw beds", "01/10/2024", year=2024, is_template=True, category=TaskCategory.planning)
    await _add(db, "One-off", "01/10/2024", year=2024, category=TaskCategory.planning)

    every = await task_service.get_templates_by_category(db)
    planning = await task_service.get_templates_by_category(db, TaskCategory.planning)

    assert [t.title for t in every] == ["Draw beds", "Order seeds", "Start onions"]
    assert [t.title for t in planning] == ["Draw beds", "Order seeds"]


async def test_archive_and_unarchive_notes(db):
    note = await _add(db, "Slugs everywhere", "06/01/2023", year=2023, type=ItemType.note)
    await _add(db, "Rain gauge 2in", "07/01/2023", year=2023, type=ItemType.note)
    await _add(db, "Harvest garlic", "07/04/2023", year=2023)
    await _add(db, "Next year note", "01/04/2024", year=2024, type=ItemType.note)

    assert await task_service.archive_notes_from_year(db, 2023) == 2

    visible = await task_service.get_tasks_by_year(db, 2023)
    archived = await task_service.get_archived_notes(db, 2023)
    assert [t.title for t in visible] == ["Harvest garlic"]
    assert len(archived) == 2
    assert len(await task_service.get_tasks_by_year(db, 2024)) == 1

    await task_service.unarchive_note(db, note.id)
    assert note.id in [t.id for t in await task_service.get_tasks_by_year(db, 2023)]


async def test_partial_update(db):
    task = await _add(db, "Prune", "03/01/2024", year=2024, notes="roses")

    updated = await task_service.update_task(db, task.id, TaskUpdate(completed=True))

    assert updated.completed is True
    assert updated.title == "Prune"
    assert updated.notes == "roses"


async def test_update_skips_null_required_fields(db):
    task = await _add(db, "Prune", "03/01/2024", year=2024)

    updated = await task_service.update_task(db, task.id, TaskUpdate(title=None, notes="apple trees"))

    assert updated.title == "Prune"
    assert updated.notes == "apple trees"


async def test_update_missing_task_raises(db):
    with pytest.raises(TaskNotFoundError):
        await task_service.update_task(db, "missing", TaskUpdate(completed=True))


async def test_delete_releases_photos_even_when_some_fail(db):
    task = await _add(db, "Harvest", "08/01/2024", year=2024, photos=["a.jpg", "b.jpg"])
    photos = FakePhotos(broken={"b.jpg"})

    result = await task_service.delete_task(db, task.id, photos)

    assert result.photos_released == 1
    assert result.photo_failures == ["b.jpg"]
    assert photos.deleted == ["a.jpg"]
    with pytest.raises(TaskNotFoundError):
        await task_service.get_task_by_id(db, task.id)


async def test_delete_missing_task_raises(db):
    with pytest.raises(TaskNotFoundError):
        await task_service.delete_task(db, "missing", FakePhotos())


async def test_create_on_store_without_migrated_columns(raw_database):
    async with raw_database.engine.begin() as conn:
        await conn.execute(text(
            "CREATE TABLE tasks (id TEXT PRIMARY KEY, title TEXT, type TEXT, crop_id TEXT, "
            "date TEXT, notes TEXT, photos TEXT, completed BOOLEAN, year INTEGER)"
        ))

    async with raw_database.session() as db:
        created = await task_service.create_task(db, TaskCreate(
            title="Sow spinach", date="03/01/2024", year=2024,
            photos=["s.jpg"], is_template=True, category=TaskCategory.seeding,
        ))

    async with raw_database.engine.connect() as conn:
        row = (await conn.execute(
            text("SELECT title, date, year, photos FROM tasks WHERE id = :id"), {"id": created.id}
        )).one()
    assert row.title == "Sow spinach"
    assert row.date == "03/01/2024"
    assert row.year == 2024
    assert json.loads(row.photos) == ["s.jpg"]


async def test_unpadded_dates_stored_padded(db):
    feb = await _add(db, "Feb", "2/1/2024", year=2024)
    await _add(db, "Dec", "12/01/2024", year=2024)

    assert feb.date == "02/01/2024"
    assert (await task_service.get_task_by_id(db, feb.id)).date == "02/01/2024"
    chrono = await task_service.get_tasks_by_year(db, 2024, order="chronological")
    assert [t.title for t in chrono] == ["Feb", "Dec"]


async def test_update_pads_date(db):
    task = await _add(db, "Prune", "03/01/2024", year=2024)

    updated = await task_service.update_task(db, task.id, TaskUpdate(date="3/9/2024"))

    assert updated.date == "03/09/2024"
