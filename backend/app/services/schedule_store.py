"""
Schedule persistence: cached reads and wholesale replacement of an entity's week.

replace_schedule() deletes every row of the entity and inserts the new seven
inside the caller's transaction. It never commits; the caller owns the unit.
"""

import logging
from typing import List, Optional

from sqlmodel import Session, select

from app.models.working_hours import WorkingHours
from app.utils.schedule_cache import ScheduleCache, get_schedule_cache
from app.utils.working_hours import WorkingHourEntry, sort_schedule

logger = logging.getLogger(__name__)


def to_entry(row: WorkingHours) -> WorkingHourEntry:
    return WorkingHourEntry(
        day_of_week=row.day_of_week,
        is_working_day=row.is_working_day,
        opening_time=row.opening_time,
        closing_time=row.closing_time,
        break_start_time=row.break_start_time,
        break_end_time=row.break_end_time,
    )


def load_schedule_rows(session: Session, entity_type: str, entity_id: int) -> List[WorkingHours]:
    rows = session.exec(
        select(WorkingHours).where(
            WorkingHours.entity_type == entity_type,
            WorkingHours.entity_id == entity_id,
            WorkingHours.is_active,
        )
    ).all()
    return rows


def load_schedule(session: Session, entity_type: str, entity_id: int) -> List[WorkingHourEntry]:
    """Read straight from the session, bypassing the cache (sees uncommitted rows)."""
    return sort_schedule(to_entry(r) for r in load_schedule_rows(session, entity_type, entity_id))


def get_schedule(
    session: Session,
    entity_type: str,
    entity_id: int,
    cache: Optional[ScheduleCache] = None,
) -> List[WorkingHourEntry]:
    """Cached read of an entity's schedule. Empty list when never configured."""
    cache = cache or get_schedule_cache()
    cached = cache.get(entity_type, entity_id)
    if cached is not None:
        return cached

    schedule = load_schedule(session, entity_type, entity_id)
    cache.set(entity_type, entity_id, schedule)
    return schedule


def replace_schedule(
    session: Session,
    entity_type: str,
    entity_id: int,
    schedule: List[WorkingHourEntry],
) -> List[WorkingHours]:
    """Delete-all-then-insert-all for one entity, within the open transaction."""
    existing = session.exec(
        select(WorkingHours).where(WorkingHours.entity_type == entity_type, WorkingHours.entity_id == entity_id)
    ).all()
    for row in existing:
        session.delete(row)
    # Deletes must reach the database before the inserts hit the unique constraint
    session.flush()

    rows = []
    for entry in sort_schedule(e.normalized() for e in schedule):
        row = WorkingHours(
            entity_type=entity_type,
            entity_id=entity_id,
            day_of_week=entry.day_of_week,
            is_working_day=entry.is_working_day,
            opening_time=entry.opening_time,
            closing_time=entry.closing_time,
            break_start_time=entry.break_start_time,
            break_end_time=entry.break_end_time,
        )
        session.add(row)
        rows.append(row)
    session.flush()

    logger.info(
        f"Replaced schedule for {entity_type}:{entity_id} ({len(existing)} rows removed, {len(rows)} rows written)"
    )
    return rows
