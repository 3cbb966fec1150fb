"""
Containment Validator - a child's hours must sit inside its parent's hours.

Per day:
  parent closed, child open    → error (child cannot open when parent is closed)
  both open                    → child opening >= parent opening and
                                 child closing <= parent closing; each breached
                                 bound carries the parent's range as a suggestion
  parent open, child closed    → valid
A parent without a stored schedule imposes no constraint.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sqlmodel import Session

from app.exceptions import ContainmentError, ScheduleIssue
from app.services.hierarchy_resolver import get_entity_name, resolve_parent
from app.services.schedule_store import get_schedule
from app.utils import messages
from app.utils.schedule_cache import ScheduleCache
from app.utils.working_hours import SuggestedRange, WorkingHourEntry, schedule_by_day, time_to_minutes

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[ScheduleIssue] = field(default_factory=list)
    parent_entity_type: Optional[str] = None
    parent_entity_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
            "parent_entity_type": self.parent_entity_type,
            "parent_entity_id": self.parent_entity_id,
        }


def validate_containment(
    child_schedule: List[WorkingHourEntry],
    parent_schedule: List[WorkingHourEntry],
    parent_entity_type: str,
    child_entity_name: str,
) -> ValidationResult:
    if not parent_schedule:
        return ValidationResult(is_valid=True)

    parent_days = schedule_by_day(parent_schedule)
    errors: List[ScheduleIssue] = []

    for child_day in child_schedule:
        day = child_day.day_of_week.lower()
        if not child_day.is_working_day:
            continue

        parent_day = parent_days.get(day)
        if parent_day is None or not parent_day.is_working_day:
            errors.append(
                ContainmentError(
                    day,
                    "CHILD_OPEN_PARENT_CLOSED",
                    messages.child_open_parent_closed(child_entity_name, parent_entity_type, day),
                )
            )
            continue

        errors.extend(_validate_day_bounds(day, child_day, parent_day, parent_entity_type))

    return ValidationResult(is_valid=not errors, errors=errors)


def _validate_day_bounds(
    day: str,
    child_day: WorkingHourEntry,
    parent_day: WorkingHourEntry,
    parent_entity_type: str,
) -> List[ScheduleIssue]:
    if not (parent_day.opening_time and parent_day.closing_time and child_day.opening_time and child_day.closing_time):
        return []

    suggested = SuggestedRange(opening_time=parent_day.opening_time, closing_time=parent_day.closing_time)
    errors: List[ScheduleIssue] = []

    if time_to_minutes(child_day.opening_time) < time_to_minutes(parent_day.opening_time):
        errors.append(
            ContainmentError(
                day,
                "OPENING_BEFORE_PARENT",
                messages.opening_before_parent(parent_entity_type, child_day.opening_time, parent_day.opening_time),
                suggested_range=suggested,
            )
        )

    if time_to_minutes(child_day.closing_time) > time_to_minutes(parent_day.closing_time):
        errors.append(
            ContainmentError(
                day,
                "CLOSING_AFTER_PARENT",
                messages.closing_after_parent(parent_entity_type, child_day.closing_time, parent_day.closing_time),
                suggested_range=suggested,
            )
        )

    return errors


def validate_against_parent(
    session: Session,
    entity_type: str,
    entity_id: int,
    schedule: List[WorkingHourEntry],
    cache: Optional[ScheduleCache] = None,
) -> ValidationResult:
    """Resolve the entity's parent and check the schedule against its stored hours."""
    parent = resolve_parent(session, entity_type, entity_id)
    if parent is None:
        return ValidationResult(is_valid=True)

    parent_schedule = get_schedule(session, parent.entity_type, parent.entity_id, cache=cache)
    if not parent_schedule:
        logger.info(
            f"No hours configured for parent {parent.entity_type}:{parent.entity_id}, "
            f"{entity_type}:{entity_id} is unconstrained"
        )

    result = validate_containment(
        schedule,
        parent_schedule,
        parent.entity_type,
        get_entity_name(session, entity_type, entity_id),
    )
    result.parent_entity_type = parent.entity_type
    result.parent_entity_id = parent.entity_id
    return result
