from typing import Optional

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from gardenplanner.db.base import Base
from gardenplanner.models.crop import new_id


class Task(Base):
    """A dated task or free-form note.

    `year` duplicates the year inside `date` (MM/DD/YYYY text) for year-scoped
    queries; writers that change `date` must change `year` too.
    """

    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(200))
    type: Mapped[str] = mapped_column(String(10), default="task", server_default="task")
    # Not enforced: deleting a crop leaves this dangling
    crop_id: Mapped[Optional[str]] = mapped_column(ForeignKey("crops.id"), nullable=True)
    date: Mapped[str] = mapped_column(String(10))
    notes: Mapped[Optional[str]] = mapped_column(Text)
    photos: Mapped[Optional[list[str]]] = mapped_column(JSON(none_as_null=True))
    completed: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0")
    year: Mapped[int] = mapped_column(Integer, index=True)
    is_template: Mapped[Optional[bool]] = mapped_column(Boolean, default=False, server_default="0")
    category: Mapped[Optional[str]] = mapped_column(String(20))
    archived: Mapped[Optional[bool]] = mapped_column(Boolean, default=False, server_default="0")
