from fastapi import APIRouter

from gardenplanner.api.v1.endpoints import backup, crops, rollover, settings, tasks

api_router = APIRouter()

api_router.include_router(crops.router)
api_router.include_router(tasks.router)
api_router.include_router(settings.router)
api_router.include_router(rollover.router)
api_router.include_router(backup.router)
