"""
Working hours error taxonomy.

Schedule issues (FormatError, LogicError, ContainmentError) are collected
per day and reported together; they are exception types so callers can
filter them with isinstance, but validators return them rather than raise.

WorkingHoursError subclasses are raised and mapped to HTTP responses by the
handler registered in app.main.
"""

from typing import Any, Dict, List, Optional

from app.utils.messages import SCHEDULE_INVALID
from app.utils.working_hours import BilingualMessage, SuggestedRange


class ScheduleIssue(Exception):
    """A single problem found in a submitted schedule."""

    kind = "schedule"

    def __init__(
        self,
        day_of_week: str,
        code: str,
        message: BilingualMessage,
        suggested_range: Optional[SuggestedRange] = None,
    ):
        self.day_of_week = day_of_week
        self.code = code
        self.message = message
        self.suggested_range = suggested_range
        super().__init__(message.en)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "day_of_week": self.day_of_week,
            "kind": self.kind,
            "code": self.code,
            "message": self.message.model_dump(),
        }
        if self.suggested_range is not None:
            result["suggested_range"] = self.suggested_range.model_dump()
        return result


class FormatError(ScheduleIssue):
    """Malformed time string or unknown day name."""

    kind = "format"


class LogicError(ScheduleIssue):
    """Times are well-formed but inconsistent (ordering, break bounds, missing fields)."""

    kind = "logic"


class ContainmentError(ScheduleIssue):
    """Child hours fall outside the parent's hours for the day."""

    kind = "containment"


class WorkingHoursError(Exception):
    """Base exception for working hours operations."""

    status_code = 400
    default_code = "WORKING_HOURS_ERROR"

    def __init__(self, message: BilingualMessage, code: Optional[str] = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(message.en)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message.model_dump()}


class BadRequestError(WorkingHoursError):
    status_code = 400
    default_code = "BAD_REQUEST"


class NotFoundError(WorkingHoursError):
    status_code = 404
    default_code = "NOT_FOUND"


class ScheduleValidationError(WorkingHoursError):
    """Schedule rejected; carries every issue found, across all days."""

    status_code = 400
    default_code = "SCHEDULE_VALIDATION_FAILED"

    def __init__(self, errors: List[ScheduleIssue], message: Optional[BilingualMessage] = None):
        self.errors = errors
        super().__init__(message or SCHEDULE_INVALID)

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["errors"] = [e.to_dict() for e in self.errors]
        return result


class AppointmentConflictError(WorkingHoursError):
    """New hours would orphan future appointments and no strategy was chosen."""

    status_code = 409
    default_code = "APPOINTMENT_CONFLICTS"

    def __init__(self, conflicts: List[Dict[str, Any]], message: BilingualMessage):
        self.conflicts = conflicts
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["conflicts"] = self.conflicts
        result["affected_appointments"] = len(self.conflicts)
        return result


class TransactionError(WorkingHoursError):
    """Persistence or conflict resolution failed; the whole unit was rolled back."""

    default_code = "TRANSACTION_ABORTED"

    def __init__(
        self,
        message: BilingualMessage,
        failed_step: Optional[str] = None,
        retryable: bool = False,
    ):
        self.failed_step = failed_step
        self.retryable = retryable
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return 503 if self.retryable else 500

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["failed_step"] = self.failed_step
        result["retryable"] = self.retryable
        return result
