from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.clinic import Clinic


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str
    last_name: str
    role: str = Field(default="doctor")  # doctor|staff|admin
    # Null until the user is assigned; schedule entry may precede assignment
    clinic_id: Optional[int] = Field(default=None, foreign_key="clinic.id", index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationship
    clinic: Optional["Clinic"] = Relationship(back_populates="users")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
