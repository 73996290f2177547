from gardenplanner.models.crop import Crop
from gardenplanner.models.settings import GardenSettings, SchemaVersion
from gardenplanner.models.task import Task

__all__ = [
    "Crop",
    "Task",
    "GardenSettings",
    "SchemaVersion",
]
