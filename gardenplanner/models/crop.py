import uuid

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from gardenplanner.db.base import Base


def new_id() -> str:
    return str(uuid.uuid4())


class Crop(Base):
    __tablename__ = "crops"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    # Unique by convention only
    name: Mapped[str] = mapped_column(String(200))
    weeks_before_frost: Mapped[int] = mapped_column(Integer, default=0)
    days_to_maturity: Mapped[int] = mapped_column(Integer, default=0)
