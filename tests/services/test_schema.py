import sqlalchemy as sa
from sqlalchemy import text

from gardenplanner.db.schema import LATEST_VERSION, MIGRATIONS, current_version, ensure_schema
from gardenplanner.services.task_service import get_task_by_id


async def _columns(database, table: str) -> set[str]:
    async with database.engine.connect() as conn:
        return await conn.run_sync(
            lambda c: {col["name"] for col in sa.inspect(c).get_columns(table)}
        )


async def _create_legacy_tables(database, with_photos: bool = False):
    photos = ", photos TEXT" if with_photos else ""
    async with database.engine.begin() as conn:
        await conn.execute(text(
            "CREATE TABLE crops (id TEXT PRIMARY KEY, name TEXT, "
            "weeks_before_frost INTEGER, days_to_maturity INTEGER)"
        ))
        await conn.execute(text(
            "CREATE TABLE tasks (id TEXT PRIMARY KEY, title TEXT, crop_id TEXT, "
            f"date TEXT, notes TEXT, completed BOOLEAN, year INTEGER{photos})"
        ))
        await conn.execute(text(
            "CREATE TABLE settings (id INTEGER PRIMARY KEY AUTOINCREMENT, "
            "frost_start_date TEXT, frost_end_date TEXT, current_year INTEGER, "
            "notifications_enabled BOOLEAN)"
        ))
        await conn.execute(text(
            "INSERT INTO tasks (id, title, date, completed, year) "
            "VALUES ('old-1', 'Start peppers', '03/01/2023', 1, 2023)"
        ))


async def test_fresh_store_is_stamped_latest(raw_database):
    assert await current_version(raw_database) is None

    version = await ensure_schema(raw_database)

    assert version == LATEST_VERSION
    assert await current_version(raw_database) == LATEST_VERSION
    assert {"photos", "type", "is_template", "category", "archived"} <= await _columns(raw_database, "tasks")


async def test_ensure_schema_is_idempotent(database):
    assert await ensure_schema(database) == LATEST_VERSION
    assert await ensure_schema(database) == LATEST_VERSION


def test_migrations_are_numbered_in_order():
    versions = [m.version for m in MIGRATIONS]
    assert versions == sorted(versions)
    assert versions == list(range(1, LATEST_VERSION + 1))


async def test_legacy_store_gets_every_column(raw_database):
    await _create_legacy_tables(raw_database)

    assert await ensure_schema(raw_database) == LATEST_VERSION

    assert {"photos", "type", "is_template", "category", "archived"} <= await _columns(raw_database, "tasks")
    assert "save_to_photo_library" in await _columns(raw_database, "settings")


async def test_legacy_rows_survive_with_defaults(raw_database):
    await _create_legacy_tables(raw_database)
    await ensure_schema(raw_database)

    async with raw_database.session() as db:
        task = await get_task_by_id(db, "old-1")

    assert task.title == "Start peppers"
    assert task.type.value == "task"
    assert task.photos == []
    assert task.is_template is False
    assert task.archived is False
    assert task.completed is True


async def test_partially_migrated_store(raw_database):
    await _create_legacy_tables(raw_database, with_photos=True)

    assert await ensure_schema(raw_database) == LATEST_VERSION
    assert "photos" in await _columns(raw_database, "tasks")
