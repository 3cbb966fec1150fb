"""Notification model for tracking patient notifications."""

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class Notification(SQLModel, table=True):
    """Log of every notification dispatched to a patient."""

    __tablename__ = "notification"

    id: Optional[int] = Field(default=None, primary_key=True)
    recipient_patient_id: int = Field(foreign_key="patient.id", index=True)
    appointment_id: Optional[int] = Field(default=None, foreign_key="appointment.id")
    kind: str  # appointment_cancelled|appointment_needs_rescheduling|appointment_hours_changed
    language: str = Field(default="ar")  # ar|en
    title: str
    message: str
    delivery_method: str = Field(default="in_app")  # in_app|sms
    delivery_status: str = Field(default="pending")  # pending|sent|dry_run|failed
    error_message: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
