from datetime import date, datetime
from typing import Optional

from sqlmodel import Field, SQLModel

ACTIVE_APPOINTMENT_STATUSES = ("scheduled", "confirmed")


class Appointment(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    patient_id: int = Field(foreign_key="patient.id", index=True)
    doctor_id: int = Field(foreign_key="user.id", index=True)
    clinic_id: Optional[int] = Field(default=None, foreign_key="clinic.id", index=True)
    service_name: Optional[str] = Field(default=None)
    appointment_date: date = Field(index=True)
    appointment_time: str  # HH:MM
    duration_minutes: int = Field(default=30)
    status: str = Field(default="scheduled", index=True)  # scheduled|confirmed|cancelled|completed|no_show
    cancellation_reason: Optional[str] = Field(default=None)
    rescheduling_reason: Optional[str] = Field(default=None)
    marked_for_rescheduling_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column_kwargs={"onupdate": datetime.utcnow})
