from app.models.appointment import Appointment
from app.models.audit_log import AuditLog
from app.models.clinic import Clinic
from app.models.complex import Complex
from app.models.notification import Notification
from app.models.organization import Organization
from app.models.patient import Patient
from app.models.user import User
from app.models.working_hours import WorkingHours

__all__ = [
    "Organization",
    "Complex",
    "Clinic",
    "User",
    "Patient",
    "Appointment",
    "WorkingHours",
    "Notification",
    "AuditLog",
]
