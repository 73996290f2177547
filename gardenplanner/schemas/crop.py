from typing import Optional

from pydantic import BaseModel, Field


class CropCreate(BaseModel):
    name: str = Field(min_length=1)
    weeks_before_frost: int = Field(ge=0)
    days_to_maturity: int = Field(ge=0)


class CropUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    weeks_before_frost: Optional[int] = Field(default=None, ge=0)
    days_to_maturity: Optional[int] = Field(default=None, ge=0)


class CropRead(BaseModel):
    id: str
    name: str
    weeks_before_frost: int
    days_to_maturity: int

    model_config = {"from_attributes": True}


class PlantingDateRead(BaseModel):
    crop_id: str
    frost_end_date: str
    planting_date: str
