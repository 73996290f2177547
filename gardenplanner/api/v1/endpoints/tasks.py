from typing import Optional

from fastapi import APIRouter, status

from gardenplanner.core.deps import DB, Photos
from gardenplanner.schemas.task import (
    ItemType,
    TaskCategory,
    TaskCreate,
    TaskCreateRequest,
    TaskDeleteResult,
    TaskRead,
    TaskUpdate,
)
from gardenplanner.services import task_service
from gardenplanner.services.planning import create_with_succession

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskRead])
async def list_tasks(year: int, db: DB, type: Optional[ItemType] = None):
    if type is not None:
        return await task_service.get_tasks_by_type(db, year, type)
    return await task_service.get_tasks_by_year(db, year)


@router.post("", response_model=list[TaskRead], status_code=status.HTTP_201_CREATED)
async def create_task(data: TaskCreateRequest, db: DB):
    """Create a task; with a ``succession`` block, create the whole series."""
    task = TaskCreate(**data.model_dump(exclude={"succession"}))
    if data.succession is None:
        return [await task_service.create_task(db, task)]
    return await create_with_succession(
        db, task, data.succession.interval_weeks, data.succession.count
    )


# Fixed paths are registered before /{task_id}


@router.get("/years", response_model=list[int])
async def list_years(db: DB):
    return await task_service.get_available_years(db)


@router.get("/templates", response_model=list[TaskRead])
async def list_templates(db: DB, category: Optional[TaskCategory] = None):
    return await task_service.get_templates_by_category(db, category)


@router.post("/archive-notes/{year}")
async def archive_notes(year: int, db: DB):
    return {"archived": await task_service.archive_notes_from_year(db, year)}


@router.get("/archived-notes/{year}", response_model=list[TaskRead])
async def list_archived_notes(year: int, db: DB):
    return await task_service.get_archived_notes(db, year)


# ── Single task ───────────────────────────────────────────────────────────────


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(task_id: str, db: DB):
    return await task_service.get_task_by_id(db, task_id)


@router.patch("/{task_id}", response_model=TaskRead)
async def update_task(task_id: str, data: TaskUpdate, db: DB):
    return await task_service.update_task(db, task_id, data)


@router.delete("/{task_id}", response_model=TaskDeleteResult)
async def delete_task(task_id: str, db: DB, photos: Photos):
    return await task_service.delete_task(db, task_id, photos)


@router.post("/{task_id}/unarchive", response_model=TaskRead)
async def unarchive_note(task_id: str, db: DB):
    await task_service.get_task_by_id(db, task_id)
    await task_service.unarchive_note(db, task_id)
    return await task_service.get_task_by_id(db, task_id)
