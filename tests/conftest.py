import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from gardenplanner.core.deps import get_database, get_db, get_photo_storage
from gardenplanner.db.schema import ensure_schema
from gardenplanner.db.session import Database
from gardenplanner.main import app
from gardenplanner.services.photos import LocalPhotoStorage


@pytest_asyncio.fixture
async def raw_database(tmp_path):
    """Connected handle on an empty file, schema not ensured."""
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'garden.db'}")
    await database.connect()
    yield database
    await database.dispose()


@pytest_asyncio.fixture
async def database(raw_database: Database):
    await ensure_schema(raw_database)
    return raw_database


@pytest_asyncio.fixture
async def db(database: Database):
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture
async def client(database: Database, db, tmp_path):
    async def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_database] = lambda: database
    app.dependency_overrides[get_photo_storage] = lambda: LocalPhotoStorage(tmp_path / "photos")

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
