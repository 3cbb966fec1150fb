from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, SQLModel


class WorkingHours(SQLModel, table=True):
    """One day of an entity's weekly schedule.

    The seven rows of an entity are replaced together; a single row is never
    patched in place.
    """

    __tablename__ = "working_hours"
    __table_args__ = (
        SAUniqueConstraint("entity_type", "entity_id", "day_of_week", name="uq_working_hours_entity_day"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    entity_type: str = Field(index=True)  # organization|complex|clinic|user
    entity_id: int = Field(index=True)
    day_of_week: str  # monday..sunday
    is_working_day: bool = Field(default=True)
    opening_time: Optional[str] = Field(default=None)  # HH:MM
    closing_time: Optional[str] = Field(default=None)  # HH:MM
    break_start_time: Optional[str] = Field(default=None)  # HH:MM
    break_end_time: Optional[str] = Field(default=None)  # HH:MM
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column_kwargs={"onupdate": datetime.utcnow})
