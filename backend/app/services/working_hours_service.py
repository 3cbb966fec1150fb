"""
Working Hours Service - validation and the plain (non-reconciling) save path.

validate_schedule() runs interval checks first and only then containment, so
a malformed submission is never compared against its parent.

save_schedule() refuses to persist hours that would orphan a future active
appointment; callers that want the conflicts resolved use
update_schedule_with_reconciliation() instead.
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from app.exceptions import AppointmentConflictError, ScheduleValidationError, TransactionError
from app.services.audit_service import AuditService, get_audit_service
from app.services.conflict_detector import detect_conflicts, find_future_active_appointments
from app.services.containment_validator import ValidationResult, validate_against_parent
from app.services.hierarchy_resolver import get_entity_or_404
from app.services.schedule_store import replace_schedule, to_entry
from app.utils import messages
from app.utils.interval_validation import validate_schedule_entries
from app.utils.schedule_cache import ScheduleCache, get_schedule_cache
from app.utils.working_hours import WorkingHourEntry, sort_schedule

logger = logging.getLogger(__name__)


def validate_schedule(
    session: Session,
    entity_type: str,
    entity_id: int,
    schedule: List[WorkingHourEntry],
    cache: Optional[ScheduleCache] = None,
) -> ValidationResult:
    """
    Validate a full week for an entity.

    Raises:
        BadRequestError: unknown entity type or malformed parent reference
        NotFoundError: entity or its parent does not exist
    """
    get_entity_or_404(session, entity_type, entity_id)

    interval_errors = validate_schedule_entries(schedule)
    if interval_errors:
        return ValidationResult(is_valid=False, errors=interval_errors)

    normalized = [e.normalized() for e in schedule]
    return validate_against_parent(session, entity_type, entity_id, normalized, cache=cache)


def require_valid_schedule(
    session: Session,
    entity_type: str,
    entity_id: int,
    schedule: List[WorkingHourEntry],
    cache: Optional[ScheduleCache] = None,
) -> List[WorkingHourEntry]:
    """Validate and return the normalized week, or raise ScheduleValidationError with every issue."""
    result = validate_schedule(session, entity_type, entity_id, schedule, cache=cache)
    if not result.is_valid:
        logger.info(f"Rejected schedule for {entity_type}:{entity_id} with {len(result.errors)} issue(s)")
        raise ScheduleValidationError(result.errors)
    return sort_schedule(e.normalized() for e in schedule)


def transaction_failure(exc: Exception, failed_step: Optional[str]) -> TransactionError:
    """Map an exception raised inside the unit of work to the TransactionError to surface."""
    if isinstance(exc, OperationalError):
        return TransactionError(messages.TRANSACTION_RETRY, failed_step=failed_step, retryable=True)
    return TransactionError(messages.TRANSACTION_FAILED, failed_step=failed_step)


def save_schedule(
    session: Session,
    entity_type: str,
    entity_id: int,
    schedule: List[WorkingHourEntry],
    today: Optional[date] = None,
    audit: Optional[AuditService] = None,
    cache: Optional[ScheduleCache] = None,
) -> List[WorkingHourEntry]:
    """
    Replace an entity's week when it leaves every future appointment in place.

    Raises:
        ScheduleValidationError: interval or containment issues
        AppointmentConflictError: the new hours would orphan appointments
        TransactionError: persistence failed and was rolled back
    """
    cache = cache or get_schedule_cache()
    audit = audit or get_audit_service()

    normalized = require_valid_schedule(session, entity_type, entity_id, schedule, cache=cache)

    appointments = find_future_active_appointments(session, entity_type, entity_id, today=today)
    conflicts = detect_conflicts(session, appointments, normalized)
    if conflicts:
        raise AppointmentConflictError([c.to_dict() for c in conflicts], messages.SCHEDULE_CONFLICTS)

    failed_step = None
    try:
        failed_step = "PERSIST"
        rows = replace_schedule(session, entity_type, entity_id, normalized)
        saved = [to_entry(r) for r in rows]

        failed_step = "AUDIT"
        audit.record(
            session,
            "working_hours_updated",
            entity_type,
            entity_id,
            {"schedule": [e.model_dump() for e in saved]},
        )

        failed_step = "COMMIT"
        session.commit()
    except Exception as e:
        session.rollback()
        logger.exception(f"Saving working hours for {entity_type}:{entity_id} failed at {failed_step}, rolled back")
        raise transaction_failure(e, failed_step) from e

    cache.invalidate(entity_type, entity_id)
    return saved
