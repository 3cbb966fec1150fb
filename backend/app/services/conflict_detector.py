"""
Conflict Detector - find future active appointments that no longer fit a schedule.

Read-only: no appointment is mutated here. Used standalone (pre-flight check)
and as the detect phase of reconciliation.

An appointment conflicts when, for the weekday of its date, the schedule:
  - has no entry or marks the day closed        → closed_day
  - opens after the appointment's start time     → before_opening
  - closes at or before the appointment's start  → after_closing
  - has a break containing the start time        → inside_break
Only the start time is compared; the working interval is [opening, closing).
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import and_, or_
from sqlmodel import Session, col, select

from app.exceptions import ScheduleValidationError
from app.models import Appointment, Clinic, Complex, Patient, User
from app.models.appointment import ACTIVE_APPOINTMENT_STATUSES
from app.services.hierarchy_resolver import require_entity_type
from app.utils import messages
from app.utils.interval_validation import validate_schedule_entries
from app.utils.working_hours import BilingualMessage, WorkingHourEntry, day_of_week_for, schedule_by_day, time_to_minutes


@dataclass
class AppointmentConflict:
    appointment_id: int
    patient_id: int
    patient_name: str
    appointment_date: str
    appointment_time: str
    service_name: Optional[str]
    reason_code: str
    conflict_reason: BilingualMessage

    def to_dict(self) -> Dict[str, Any]:
        return {
            "appointment_id": self.appointment_id,
            "patient_id": self.patient_id,
            "patient_name": self.patient_name,
            "appointment_date": self.appointment_date,
            "appointment_time": self.appointment_time,
            "service_name": self.service_name,
            "reason_code": self.reason_code,
            "conflict_reason": self.conflict_reason.model_dump(),
        }


@dataclass
class ConflictResult:
    conflicts: List[AppointmentConflict] = field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    @property
    def affected_appointments(self) -> int:
        return len(self.conflicts)

    @property
    def requires_rescheduling(self) -> bool:
        return bool(self.conflicts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "has_conflicts": self.has_conflicts,
            "conflicts": [c.to_dict() for c in self.conflicts],
            "affected_appointments": self.affected_appointments,
            "requires_rescheduling": self.requires_rescheduling,
        }


def appointment_conflict_reason(
    appointment_time: str,
    day: str,
    working_hours: Optional[WorkingHourEntry],
) -> Optional[Tuple[str, BilingualMessage]]:
    """Return (reason_code, message) if an appointment at this time conflicts, else None."""
    if working_hours is None or not working_hours.is_working_day:
        return "closed_day", messages.conflict_closed_day(day)

    if not working_hours.opening_time or not working_hours.closing_time:
        return None

    start = time_to_minutes(appointment_time)

    if start < time_to_minutes(working_hours.opening_time):
        return "before_opening", messages.conflict_before_opening(appointment_time, working_hours.opening_time)

    if start >= time_to_minutes(working_hours.closing_time):
        return "after_closing", messages.conflict_after_closing(appointment_time, working_hours.closing_time)

    if working_hours.break_start_time and working_hours.break_end_time:
        break_start = time_to_minutes(working_hours.break_start_time)
        break_end = time_to_minutes(working_hours.break_end_time)
        if break_start <= start < break_end:
            return "inside_break", messages.conflict_inside_break(
                working_hours.break_start_time, working_hours.break_end_time
            )

    return None


def _scope_clinic_ids(session: Session, entity_type: str, entity_id: int) -> List[int]:
    if entity_type == "clinic":
        return [entity_id]
    if entity_type == "complex":
        return list(session.exec(select(Clinic.id).where(Clinic.complex_id == entity_id)).all())
    # organization
    complex_ids = list(session.exec(select(Complex.id).where(Complex.organization_id == entity_id)).all())
    if not complex_ids:
        return []
    return list(session.exec(select(Clinic.id).where(col(Clinic.complex_id).in_(complex_ids))).all())


def find_future_active_appointments(
    session: Session,
    entity_type: str,
    entity_id: int,
    today: Optional[date] = None,
) -> List[Appointment]:
    """Scheduled/confirmed appointments from today on, for a doctor or every doctor beneath an entity."""
    today = today or date.today()
    query = select(Appointment).where(
        Appointment.appointment_date >= today,
        col(Appointment.status).in_(ACTIVE_APPOINTMENT_STATUSES),
    )

    if entity_type == "user":
        query = query.where(Appointment.doctor_id == entity_id)
    else:
        clinic_ids = _scope_clinic_ids(session, entity_type, entity_id)
        if not clinic_ids:
            return []
        doctor_ids = list(session.exec(select(User.id).where(col(User.clinic_id).in_(clinic_ids))).all())
        # Rows booked without a clinic still belong to the clinic of their doctor
        query = query.where(
            or_(
                col(Appointment.clinic_id).in_(clinic_ids),
                and_(col(Appointment.clinic_id).is_(None), col(Appointment.doctor_id).in_(doctor_ids)),
            )
        )

    query = query.order_by(Appointment.appointment_date, Appointment.appointment_time, Appointment.id)
    return list(session.exec(query).all())


def detect_conflicts(
    session: Session,
    appointments: List[Appointment],
    schedule: List[WorkingHourEntry],
) -> List[AppointmentConflict]:
    days = schedule_by_day(schedule)
    patient_ids = {a.patient_id for a in appointments}
    patients = {}
    if patient_ids:
        patients = {p.id: p for p in session.exec(select(Patient).where(col(Patient.id).in_(list(patient_ids)))).all()}

    conflicts: List[AppointmentConflict] = []
    for appointment in appointments:
        day = day_of_week_for(appointment.appointment_date)
        found = appointment_conflict_reason(appointment.appointment_time, day, days.get(day))
        if found is None:
            continue
        reason_code, reason = found
        patient = patients.get(appointment.patient_id)
        conflicts.append(
            AppointmentConflict(
                appointment_id=appointment.id,
                patient_id=appointment.patient_id,
                patient_name=patient.full_name if patient else "Unknown Patient",
                appointment_date=appointment.appointment_date.isoformat(),
                appointment_time=appointment.appointment_time,
                service_name=appointment.service_name,
                reason_code=reason_code,
                conflict_reason=reason,
            )
        )
    return conflicts


def check_conflicts(
    session: Session,
    entity_id: int,
    proposed_schedule: List[WorkingHourEntry],
    entity_type: str = "user",
    today: Optional[date] = None,
) -> ConflictResult:
    """
    Pre-flight check: which future appointments would the proposed schedule orphan?

    Raises:
        BadRequestError: unknown entity type
        ScheduleValidationError: the proposed week is malformed or incomplete
    """
    require_entity_type(entity_type)
    errors = validate_schedule_entries(proposed_schedule)
    if errors:
        raise ScheduleValidationError(errors)
    proposed_schedule = [e.normalized() for e in proposed_schedule]
    appointments = find_future_active_appointments(session, entity_type, entity_id, today=today)
    return ConflictResult(conflicts=detect_conflicts(session, appointments, proposed_schedule))
