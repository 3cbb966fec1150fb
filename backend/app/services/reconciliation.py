"""
Reconciliation Orchestrator - replace an entity's hours and resolve the fallout.

Steps (in order):
1. Validate (interval + containment); nothing is written on failure
2. Persist the new week (delete all rows, insert seven)
3. Detect conflicts against the rows just written
4. Resolve each conflict per strategy:
     reschedule → cancelled + flagged for staff follow-up (no new slot is picked)
     notify     → appointment untouched, patient told
     cancel     → cancelled
5. Audit, then a single commit
6. Invalidate the entity's cached schedule
7. Send queued notifications (best effort)

Steps 2-5 form one transaction: any failure rolls every change back.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlmodel import Session

from app.exceptions import BadRequestError
from app.models import Appointment, Patient
from app.services.audit_service import AuditService, get_audit_service
from app.services.conflict_detector import AppointmentConflict, detect_conflicts, find_future_active_appointments
from app.services.notification_service import NotificationService, get_notification_service
from app.services.schedule_store import load_schedule, replace_schedule
from app.services.working_hours_service import require_valid_schedule, transaction_failure
from app.utils import messages
from app.utils.schedule_cache import ScheduleCache, get_schedule_cache
from app.utils.working_hours import WorkingHourEntry

logger = logging.getLogger(__name__)

CONFLICT_STRATEGIES = ("reschedule", "notify", "cancel")

NOTIFICATION_KINDS = {
    "reschedule": "appointment_needs_rescheduling",
    "notify": "appointment_hours_changed",
    "cancel": "appointment_cancelled",
}

ACTIONS = {
    "reschedule": "marked_for_rescheduling",
    "notify": "notified",
    "cancel": "cancelled",
}


def hours_changed_reason(entity_type: str) -> str:
    """Reason code stamped on resolved appointments, e.g. doctor_hours_changed."""
    return f"{'doctor' if entity_type == 'user' else entity_type}_hours_changed"


# ============================================================================
# Result
# ============================================================================


class ResolvedAppointment:
    """What happened to one conflicting appointment"""

    def __init__(self, conflict: AppointmentConflict, action: str, reason_code: str):
        self.appointment_id = conflict.appointment_id
        self.patient_id = conflict.patient_id
        self.patient_name = conflict.patient_name
        self.original_date = conflict.appointment_date
        self.original_time = conflict.appointment_time
        self.service_name = conflict.service_name
        self.conflict_reason = conflict.conflict_reason
        self.action = action
        self.reason_code = reason_code

    def to_dict(self):
        return {
            "appointment_id": self.appointment_id,
            "patient_id": self.patient_id,
            "patient_name": self.patient_name,
            "original_date": self.original_date,
            "original_time": self.original_time,
            "service_name": self.service_name,
            "conflict_reason": self.conflict_reason.model_dump(),
            "action": self.action,
            "reason_code": self.reason_code,
        }


class ReconciliationResult:
    """Complete result of a reconciling update"""

    def __init__(self, entity_type: str, entity_id: int, handle_conflicts: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.handle_conflicts = handle_conflicts
        self.working_hours: List[WorkingHourEntry] = []
        # Always 0: "reschedule" flags appointments, it never moves them
        self.appointments_rescheduled = 0
        self.appointments_marked_for_rescheduling = 0
        self.appointments_cancelled = 0
        self.notifications_sent = 0
        self.rescheduled_appointments: List[ResolvedAppointment] = []
        self.failed_step: Optional[str] = None

    @property
    def conflicts_found(self) -> int:
        return len(self.rescheduled_appointments)

    def to_dict(self):
        return {
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "handle_conflicts": self.handle_conflicts,
            "working_hours": [e.model_dump() for e in self.working_hours],
            "conflicts_found": self.conflicts_found,
            "appointments_rescheduled": self.appointments_rescheduled,
            "appointments_marked_for_rescheduling": self.appointments_marked_for_rescheduling,
            "appointments_cancelled": self.appointments_cancelled,
            "notifications_sent": self.notifications_sent,
            "rescheduled_appointments": [r.to_dict() for r in self.rescheduled_appointments],
        }


# ============================================================================
# Main Orchestrator Function
# ============================================================================


def update_schedule_with_reconciliation(
    session: Session,
    entity_type: str,
    entity_id: int,
    schedule: List[WorkingHourEntry],
    handle_conflicts: str,
    notify_patients: bool = True,
    reason: Optional[str] = None,
    today: Optional[date] = None,
    notifier: Optional[NotificationService] = None,
    audit: Optional[AuditService] = None,
    cache: Optional[ScheduleCache] = None,
) -> ReconciliationResult:
    """
    Replace an entity's working hours and resolve every appointment they orphan.

    Args:
        session: Database session
        entity_type: organization | complex | clinic | user
        entity_id: Entity ID
        schedule: Full week, seven entries
        handle_conflicts: reschedule | notify | cancel
        notify_patients: Queue a patient notification per conflict
        reason: Free-text reason recorded in the audit entry and notifications
        today: First date considered "future" (defaults to date.today())

    Returns:
        ReconciliationResult with counts and per-appointment outcomes

    Raises:
        BadRequestError: unknown strategy or entity type
        NotFoundError: entity or its parent does not exist
        ScheduleValidationError: schedule rejected, nothing written
        TransactionError: persist/resolve failed, everything rolled back
    """
    if handle_conflicts not in CONFLICT_STRATEGIES:
        raise BadRequestError(messages.invalid_conflict_strategy(handle_conflicts), code="INVALID_CONFLICT_STRATEGY")

    cache = cache or get_schedule_cache()
    audit = audit or get_audit_service()
    notifier = notifier or get_notification_service()

    result = ReconciliationResult(entity_type, entity_id, handle_conflicts)

    result.failed_step = "VALIDATE"
    normalized = require_valid_schedule(session, entity_type, entity_id, schedule, cache=cache)

    reason_code = hours_changed_reason(entity_type)
    pending: List[Tuple[Patient, Dict[str, Any], str, str]] = []

    try:
        result.failed_step = "PERSIST"
        replace_schedule(session, entity_type, entity_id, normalized)
        result.working_hours = load_schedule(session, entity_type, entity_id)

        result.failed_step = "DETECT"
        appointments = find_future_active_appointments(session, entity_type, entity_id, today=today)
        conflicts = detect_conflicts(session, appointments, result.working_hours)
        by_id = {a.id: a for a in appointments}

        result.failed_step = "RESOLVE"
        now = datetime.utcnow()
        for conflict in conflicts:
            appointment = by_id[conflict.appointment_id]
            _resolve(appointment, handle_conflicts, reason_code, now)
            session.add(appointment)

            if handle_conflicts == "reschedule":
                result.appointments_marked_for_rescheduling += 1
            elif handle_conflicts == "cancel":
                result.appointments_cancelled += 1
            result.rescheduled_appointments.append(
                ResolvedAppointment(conflict, ACTIONS[handle_conflicts], reason_code)
            )

            if notify_patients:
                patient = session.get(Patient, appointment.patient_id)
                if patient is None:
                    logger.warning(
                        f"Appointment {appointment.id} has no patient record; notification skipped"
                    )
                    continue
                details = {
                    "appointment_id": conflict.appointment_id,
                    "patient_id": conflict.patient_id,
                    "patient_name": conflict.patient_name,
                    "appointment_date": conflict.appointment_date,
                    "appointment_time": conflict.appointment_time,
                    "service_name": conflict.service_name,
                    "reason_code": reason_code,
                    "reason": reason,
                }
                pending.append((patient, details, NOTIFICATION_KINDS[handle_conflicts], patient.preferred_language))

        result.failed_step = "AUDIT"
        audit.record(
            session,
            "working_hours_reconciled",
            entity_type,
            entity_id,
            {
                "handle_conflicts": handle_conflicts,
                "notify_patients": notify_patients,
                "reason": reason,
                "reason_code": reason_code,
                "schedule": [e.model_dump() for e in result.working_hours],
                "conflicts_found": result.conflicts_found,
                "appointment_ids": [r.appointment_id for r in result.rescheduled_appointments],
                "appointments_marked_for_rescheduling": result.appointments_marked_for_rescheduling,
                "appointments_cancelled": result.appointments_cancelled,
            },
        )

        # Single commit
        result.failed_step = "COMMIT"
        session.commit()
        result.failed_step = None

    except Exception as e:
        session.rollback()
        logger.exception(
            f"Working hours reconciliation for {entity_type}:{entity_id} failed at {result.failed_step}, "
            f"transaction rolled back"
        )
        raise transaction_failure(e, result.failed_step) from e

    cache.invalidate(entity_type, entity_id)

    logger.info(
        f"Reconciled hours for {entity_type}:{entity_id} ({handle_conflicts}): "
        f"{result.conflicts_found} conflicts, {result.appointments_marked_for_rescheduling} flagged, "
        f"{result.appointments_cancelled} cancelled"
    )

    for patient, details, kind, language in pending:
        if notifier.send(session, patient, details, kind, language):
            result.notifications_sent += 1
        else:
            logger.warning(f"Notification for appointment {details['appointment_id']} was not delivered")

    return result


def _resolve(appointment: Appointment, strategy: str, reason_code: str, now: datetime) -> None:
    if strategy == "notify":
        return

    appointment.status = "cancelled"
    appointment.cancellation_reason = reason_code
    appointment.updated_at = now
    if strategy == "reschedule":
        appointment.rescheduling_reason = reason_code
        appointment.marked_for_rescheduling_at = now
