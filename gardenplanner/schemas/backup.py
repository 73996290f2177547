"""Backup file shape. Keys are camelCase on disk."""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from gardenplanner.schemas.crop import CropRead
from gardenplanner.schemas.settings import GardenSettingsData
from gardenplanner.schemas.task import TaskRead

BACKUP_VERSION = "1.0"

_camel = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class BackupTask(TaskRead):
    model_config = _camel


class BackupCrop(CropRead):
    model_config = _camel


class BackupSettings(GardenSettingsData):
    model_config = _camel


class BackupData(BaseModel):
    tasks: list[BackupTask] = []
    crops: list[BackupCrop] = []
    settings: list[BackupSettings] = []


class BackupFile(BaseModel):
    version: str = Field(min_length=1)
    timestamp: str = Field(min_length=1)
    data: BackupData
