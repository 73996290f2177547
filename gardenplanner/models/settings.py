from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from gardenplanner.db.base import Base


class GardenSettings(Base):
    """Append-only settings history; the newest row is the current one."""

    __tablename__ = "settings"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    frost_start_date: Mapped[str] = mapped_column(String(5))
    frost_end_date: Mapped[str] = mapped_column(String(5))
    current_year: Mapped[int] = mapped_column(Integer)
    notifications_enabled: Mapped[bool] = mapped_column(Boolean, default=True, server_default="1")
    save_to_photo_library: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0")


class SchemaVersion(Base):
    __tablename__ = "schema_version"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    version: Mapped[int] = mapped_column(Integer, default=0)
