"""
Interval validation for a single day entry and for a full weekly schedule.

validate_entry() checks one WorkingHourEntry in a fixed order:
  a. day_of_week is one of the seven day names
  b. closed days need no times (extra fields are ignored and stripped on save)
  c. open days need opening_time and closing_time in HH:MM
  d. closing_time is strictly after opening_time
  e. a break has both ends, end after start, and sits inside the working interval

Errors are collected, never raised, so a submission with several bad days is
rejected with one complete error set.
"""

from collections import Counter
from typing import Iterable, List

from app.exceptions import FormatError, LogicError, ScheduleIssue
from app.utils import messages
from app.utils.working_hours import DAYS_OF_WEEK, WorkingHourEntry, is_valid_time, time_to_minutes


def validate_entry(entry: WorkingHourEntry) -> List[ScheduleIssue]:
    day = (entry.day_of_week or "").lower()

    if day not in DAYS_OF_WEEK:
        return [FormatError(entry.day_of_week, "INVALID_DAY_OF_WEEK", messages.invalid_day(entry.day_of_week))]

    if not entry.is_working_day:
        return []

    if not entry.opening_time or not entry.closing_time:
        return [LogicError(day, "MISSING_WORKING_TIMES", messages.missing_times(day))]

    errors: List[ScheduleIssue] = []
    for field, value in (("opening_time", entry.opening_time), ("closing_time", entry.closing_time)):
        if not is_valid_time(value):
            errors.append(FormatError(day, "INVALID_TIME_FORMAT", messages.invalid_time_format(day, field, value)))
    if errors:
        return errors

    opening = time_to_minutes(entry.opening_time)
    closing = time_to_minutes(entry.closing_time)
    if closing <= opening:
        errors.append(
            LogicError(
                day,
                "CLOSING_NOT_AFTER_OPENING",
                messages.closing_not_after_opening(day, entry.opening_time, entry.closing_time),
            )
        )

    if entry.has_break:
        errors.extend(_validate_break(day, entry, opening, closing))

    return errors


def _validate_break(day: str, entry: WorkingHourEntry, opening: int, closing: int) -> List[ScheduleIssue]:
    if not entry.break_start_time or not entry.break_end_time:
        return [LogicError(day, "BREAK_INCOMPLETE", messages.break_incomplete(day))]

    errors: List[ScheduleIssue] = []
    for field, value in (("break_start_time", entry.break_start_time), ("break_end_time", entry.break_end_time)):
        if not is_valid_time(value):
            errors.append(FormatError(day, "INVALID_TIME_FORMAT", messages.invalid_time_format(day, field, value)))
    if errors:
        return errors

    break_start = time_to_minutes(entry.break_start_time)
    break_end = time_to_minutes(entry.break_end_time)
    if break_end <= break_start:
        errors.append(
            LogicError(
                day,
                "BREAK_END_NOT_AFTER_START",
                messages.break_end_not_after_start(day, entry.break_start_time, entry.break_end_time),
            )
        )
    if break_start < opening or break_end > closing:
        errors.append(
            LogicError(
                day,
                "BREAK_OUTSIDE_WORKING_HOURS",
                messages.break_outside_hours(day, entry.opening_time, entry.closing_time),
            )
        )
    return errors


def validate_schedule_entries(entries: Iterable[WorkingHourEntry]) -> List[ScheduleIssue]:
    """Validate every day plus the weekly shape: each of the seven days exactly once."""
    entries = list(entries)
    errors: List[ScheduleIssue] = []

    for entry in entries:
        errors.extend(validate_entry(entry))

    counts = Counter((e.day_of_week or "").lower() for e in entries)
    for day in DAYS_OF_WEEK:
        if counts[day] > 1:
            errors.append(LogicError(day, "DUPLICATE_DAY", messages.duplicate_day(day)))
        elif counts[day] == 0:
            errors.append(LogicError(day, "MISSING_DAY", messages.missing_day(day)))

    return errors
