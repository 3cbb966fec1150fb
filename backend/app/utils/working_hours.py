"""
Working hours interval model and time helpers.

A weekly schedule is seven WorkingHourEntry values, one per day. Times are
"HH:MM" strings (24h) and compared as minutes since midnight.
"""

import re
from datetime import date
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

DAYS_OF_WEEK = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

ENTITY_TYPES = ("organization", "complex", "clinic", "user")

TIME_PATTERN = re.compile(r"([01]\d|2[0-3]):([0-5]\d)")


class BilingualMessage(BaseModel):
    ar: str
    en: str


class SuggestedRange(BaseModel):
    opening_time: str
    closing_time: str


class WorkingHourEntry(BaseModel):
    day_of_week: str
    is_working_day: bool
    opening_time: Optional[str] = None
    closing_time: Optional[str] = None
    break_start_time: Optional[str] = None
    break_end_time: Optional[str] = None

    class Config:
        from_attributes = True

    @property
    def has_break(self) -> bool:
        return bool(self.break_start_time or self.break_end_time)

    def normalized(self) -> "WorkingHourEntry":
        """Copy with a lower-case day and time fields dropped on closed days."""
        if not self.is_working_day:
            return WorkingHourEntry(day_of_week=self.day_of_week.lower(), is_working_day=False)
        return self.model_copy(update={"day_of_week": self.day_of_week.lower()})


def is_valid_time(value: Optional[str]) -> bool:
    return bool(value) and TIME_PATTERN.fullmatch(value) is not None


def time_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight"""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def day_of_week_for(d: date) -> str:
    return DAYS_OF_WEEK[d.weekday()]


def schedule_by_day(entries: Iterable[WorkingHourEntry]) -> Dict[str, WorkingHourEntry]:
    return {e.day_of_week.lower(): e for e in entries}


def sort_schedule(entries: Iterable[WorkingHourEntry]) -> List[WorkingHourEntry]:
    """Order entries Monday → Sunday; unknown day names go last."""

    def _key(e: WorkingHourEntry):
        day = e.day_of_week.lower()
        return (DAYS_OF_WEEK.index(day) if day in DAYS_OF_WEEK else len(DAYS_OF_WEEK), day)

    return sorted(entries, key=_key)
