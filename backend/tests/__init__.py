# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from app.models.appointment import Appointment  # noqa: F401
from app.models.audit_log import AuditLog  # noqa: F401
from app.models.clinic import Clinic  # noqa: F401
from app.models.complex import Complex  # noqa: F401
from app.models.notification import Notification  # noqa: F401
from app.models.organization import Organization  # noqa: F401
from app.models.patient import Patient  # noqa: F401
from app.models.user import User  # noqa: F401
from app.models.working_hours import WorkingHours  # noqa: F401
