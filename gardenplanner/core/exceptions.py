class GardenPlannerError(Exception):
    """Base class for planner errors."""


class TaskNotFoundError(GardenPlannerError):
    def __init__(self, task_id: str):
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class InvalidTaskDateError(GardenPlannerError, ValueError):
    def __init__(self, value: str):
        super().__init__(f"Invalid task date {value!r}, expected MM/DD/YYYY")
        self.value = value


class InvalidBackupError(GardenPlannerError):
    """Backup payload failed validation. Raised before the store is touched."""


class RolloverError(GardenPlannerError):
    """
    A non-atomic year copy stopped part-way.

    Rows copied before the failure stay committed; `copied` says how many.
    """

    def __init__(self, copied: int, from_year: int, to_year: int):
        super().__init__(
            f"Copy from {from_year} to {to_year} failed after {copied} item(s) were "
            f"already copied; those items were kept in {to_year}"
        )
        self.copied = copied
        self.from_year = from_year
        self.to_year = to_year
