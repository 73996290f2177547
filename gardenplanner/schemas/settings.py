from pydantic import BaseModel, Field

_MONTH_DAY = r"^(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])$"


class GardenSettingsData(BaseModel):
    frost_start_date: str = Field(pattern=_MONTH_DAY)
    frost_end_date: str = Field(pattern=_MONTH_DAY)
    current_year: int
    notifications_enabled: bool = True
    save_to_photo_library: bool = False

    model_config = {"from_attributes": True}
