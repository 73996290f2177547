from typing import Optional

from pydantic import BaseModel

from gardenplanner.schemas.task import TaskCategory, TaskRead


class CopyYearOptions(BaseModel):
    from_year: int
    to_year: int
    # None or empty: every category, including uncategorized items
    categories: Optional[list[TaskCategory]] = None
    include_templates: bool = True
    include_notes: bool = True
    reset_completion: bool = True


class RolloverCandidate(BaseModel):
    source: TaskRead
    new_date: str


class RolloverPreview(BaseModel):
    from_year: int
    to_year: int
    count: int
    items: list[RolloverCandidate]


class RolloverResult(BaseModel):
    from_year: int
    to_year: int
    copied: int
