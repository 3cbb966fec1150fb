"""
Suggestion Generator - pre-fill a child's week from its parent's hours.

Working days copy the parent's opening/closing times. Breaks are entity
specific and are not copied. Days the parent is closed produce no entry at
all ("nothing to suggest"), which is different from an explicit closed day.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlmodel import Session

from app.exceptions import BadRequestError, NotFoundError
from app.services.hierarchy_resolver import get_entity_name, get_entity_or_404, resolve_parent
from app.services.schedule_store import get_schedule
from app.utils import messages
from app.utils.working_hours import WorkingHourEntry, sort_schedule

# Role -> entity type the role's hours are suggested from
ROLE_SOURCES = {
    "doctor": "clinic",
    "staff": "complex",
}

STANDARD_BUSINESS_HOURS: List[WorkingHourEntry] = [
    WorkingHourEntry(day_of_week=day, is_working_day=True, opening_time="09:00", closing_time="17:00")
    for day in ("monday", "tuesday", "wednesday", "thursday", "friday")
] + [
    WorkingHourEntry(day_of_week="saturday", is_working_day=False),
    WorkingHourEntry(day_of_week="sunday", is_working_day=False),
]


@dataclass
class SuggestionSource:
    entity_type: str
    entity_id: Optional[int]
    entity_name: str


@dataclass
class SuggestionResult:
    suggested_schedule: List[WorkingHourEntry]
    source: SuggestionSource
    can_modify: bool = True
    from_standard_hours: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "suggested_schedule": [e.model_dump() for e in self.suggested_schedule],
            "source": {
                "entity_type": self.source.entity_type,
                "entity_id": self.source.entity_id,
                "entity_name": self.source.entity_name,
            },
            "can_modify": self.can_modify,
            "from_standard_hours": self.from_standard_hours,
        }


def generate_suggestions(parent_schedule: List[WorkingHourEntry]) -> Dict[str, WorkingHourEntry]:
    """Map day -> suggested entry for every day the parent is open."""
    suggestions: Dict[str, WorkingHourEntry] = {}
    for parent_day in sort_schedule(parent_schedule):
        if not parent_day.is_working_day:
            continue
        if not parent_day.opening_time or not parent_day.closing_time:
            continue
        day = parent_day.day_of_week.lower()
        suggestions[day] = WorkingHourEntry(
            day_of_week=day,
            is_working_day=True,
            opening_time=parent_day.opening_time,
            closing_time=parent_day.closing_time,
        )
    return suggestions


def suggest_schedule(
    session: Session,
    role: str,
    parent_entity_type: str,
    parent_entity_id: int,
) -> SuggestionResult:
    """
    Suggest hours for a new doctor (from a clinic) or staff member (from a complex).

    Raises:
        BadRequestError: role unknown or not allowed to take hours from this entity type
        NotFoundError: parent entity missing, or it has no hours configured
    """
    if ROLE_SOURCES.get(role) != parent_entity_type:
        raise BadRequestError(messages.invalid_role(role, parent_entity_type), code="INVALID_ROLE")

    get_entity_or_404(session, parent_entity_type, parent_entity_id)

    parent_schedule = get_schedule(session, parent_entity_type, parent_entity_id)
    if not parent_schedule:
        raise NotFoundError(
            messages.hours_not_found(parent_entity_type),
            code=f"{parent_entity_type.upper()}_HOURS_NOT_FOUND",
        )

    return SuggestionResult(
        suggested_schedule=list(generate_suggestions(parent_schedule).values()),
        source=SuggestionSource(
            entity_type=parent_entity_type,
            entity_id=parent_entity_id,
            entity_name=get_entity_name(session, parent_entity_type, parent_entity_id),
        ),
    )


def suggest_for_entity(session: Session, entity_type: str, entity_id: int) -> SuggestionResult:
    """Suggest hours for any entity from its resolved parent, or standard hours when there is none."""
    parent = resolve_parent(session, entity_type, entity_id)

    if parent is None:
        return SuggestionResult(
            suggested_schedule=[e.model_copy() for e in STANDARD_BUSINESS_HOURS],
            source=SuggestionSource(entity_type="standard", entity_id=None, entity_name="Standard Business Hours"),
            from_standard_hours=True,
        )

    parent_name = get_entity_name(session, parent.entity_type, parent.entity_id)
    parent_schedule = get_schedule(session, parent.entity_type, parent.entity_id)
    source = SuggestionSource(entity_type=parent.entity_type, entity_id=parent.entity_id, entity_name=parent_name)

    if not parent_schedule:
        return SuggestionResult(
            suggested_schedule=[e.model_copy() for e in STANDARD_BUSINESS_HOURS],
            source=source,
            from_standard_hours=True,
        )

    return SuggestionResult(suggested_schedule=list(generate_suggestions(parent_schedule).values()), source=source)
