from typing import Annotated, AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from gardenplanner.core.config import settings
from gardenplanner.db.session import Database
from gardenplanner.services.photos import LocalPhotoStorage, PhotoStorage


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db(database: Annotated[Database, Depends(get_database)]) -> AsyncIterator[AsyncSession]:
    async with database.session() as session:
        yield session


def get_photo_storage() -> PhotoStorage:
    return LocalPhotoStorage(settings.PHOTOS_DIR)


DB = Annotated[AsyncSession, Depends(get_db)]
Photos = Annotated[PhotoStorage, Depends(get_photo_storage)]
