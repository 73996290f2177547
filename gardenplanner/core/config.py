from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./gardenplanner.db"

    # Local file storage
    PHOTOS_DIR: str = "./task_photos"
    BACKUP_DIR: str = "./backups"

    # Task lists
    # "text" sorts on the raw MM/DD/YYYY string (legacy order); "chronological"
    # sorts on year, month, day.
    TASK_DATE_ORDER: Literal["text", "chronological"] = "text"

    # Defaults written on first settings read
    DEFAULT_FROST_START: str = "10-03"
    DEFAULT_FROST_END: str = "05-11"

    # App
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: str = "http://localhost:5173,http://localhost:8081"

    @property
    def origins(self) -> List[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",")]


settings = Settings()
