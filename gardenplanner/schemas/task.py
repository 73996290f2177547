from enum import Enum
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, Field, field_validator

from gardenplanner.core.dates import format_task_date, is_task_date, parse_task_date


class ItemType(str, Enum):
    task = "task"
    note = "note"


class TaskCategory(str, Enum):
    seeding = "seeding"
    maintenance = "maintenance"
    harvesting = "harvesting"
    planning = "planning"
    other = "other"


def _check_date(value: str) -> str:
    if not is_task_date(value):
        raise ValueError("date must be MM/DD/YYYY")
    # Stored zero-padded so text and substr ordering hold
    return format_task_date(parse_task_date(value))


TaskDate = Annotated[str, AfterValidator(_check_date)]


class TaskCreate(BaseModel):
    id: Optional[str] = None
    title: str = Field(min_length=1)
    type: ItemType = ItemType.task
    crop_id: Optional[str] = None
    date: TaskDate
    notes: Optional[str] = None
    photos: Optional[list[str]] = None
    completed: bool = False
    year: Optional[int] = None
    is_template: bool = False
    category: Optional[TaskCategory] = None
    archived: bool = False


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    type: Optional[ItemType] = None
    crop_id: Optional[str] = None
    date: Optional[TaskDate] = None
    notes: Optional[str] = None
    photos: Optional[list[str]] = None
    completed: Optional[bool] = None
    year: Optional[int] = None
    is_template: Optional[bool] = None
    category: Optional[TaskCategory] = None
    archived: Optional[bool] = None


class TaskRead(BaseModel):
    id: str
    title: str
    type: ItemType = ItemType.task
    crop_id: Optional[str] = None
    date: str
    notes: Optional[str] = None
    photos: list[str] = []
    completed: bool = False
    year: int
    is_template: bool = False
    category: Optional[TaskCategory] = None
    archived: bool = False

    model_config = {"from_attributes": True}

    # Rows written before a column existed come back as NULL
    @field_validator("type", mode="before")
    @classmethod
    def _default_type(cls, value):
        return value or ItemType.task

    @field_validator("photos", mode="before")
    @classmethod
    def _default_photos(cls, value):
        return value or []

    @field_validator("completed", "is_template", "archived", mode="before")
    @classmethod
    def _default_flag(cls, value):
        return bool(value)


class SuccessionPlan(BaseModel):
    interval_weeks: int = Field(default=2, ge=1)
    count: int = Field(default=4, ge=1)


class TaskCreateRequest(TaskCreate):
    succession: Optional[SuccessionPlan] = None


class TaskDeleteResult(BaseModel):
    id: str
    photos_released: int
    photo_failures: list[str] = []
