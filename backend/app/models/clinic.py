from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.complex import Complex
    from app.models.user import User


class Clinic(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    # Standalone clinics are allowed (no complex)
    complex_id: Optional[int] = Field(default=None, foreign_key="complex.id", index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    complex: Optional["Complex"] = Relationship(back_populates="clinics")
    users: List["User"] = Relationship(back_populates="clinic")
