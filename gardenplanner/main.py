import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gardenplanner.api.v1.router import api_router
from gardenplanner.core.config import settings
from gardenplanner.core.exceptions import InvalidBackupError, RolloverError, TaskNotFoundError
from gardenplanner.db.schema import ensure_schema
from gardenplanner.db.session import Database
from gardenplanner.services.crop_service import seed_default_crops
from gardenplanner.services.settings_store import get_garden_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    database = Database(settings.DATABASE_URL)
    await database.connect()
    await ensure_schema(database)
    async with database.session() as db:
        await seed_default_crops(db)
        await get_garden_settings(db)
    app.state.database = database
    logger.info("Garden Planner started env=%s", settings.ENVIRONMENT)
    yield
    # Shutdown
    await database.dispose()


app = FastAPI(
    title="Garden Planner API",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TaskNotFoundError)
async def task_not_found(request: Request, exc: TaskNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(InvalidBackupError)
async def invalid_backup(request: Request, exc: InvalidBackupError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(RolloverError)
async def rollover_failed(request: Request, exc: RolloverError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc), "copied": exc.copied},
    )


@app.get("/api/health", tags=["health"])
async def health():
    return {"status": "ok"}


app.include_router(api_router, prefix="/api/v1")
