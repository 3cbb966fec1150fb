"""
Tests for single-day and weekly interval validation.

Tests:
- Well-formed open and closed days
- Time format (two-digit HH:MM, 00:00-23:59)
- Ordering of opening/closing and break bounds
- Weekly shape: each day exactly once
- Every issue is collected, not just the first
"""

import pytest

from app.exceptions import FormatError, LogicError
from app.utils.interval_validation import validate_entry, validate_schedule_entries
from app.utils.working_hours import WorkingHourEntry
from tests.factories import week


def entry(day="monday", opening="09:00", closing="17:00", break_start=None, break_end=None, working=True):
    return WorkingHourEntry(
        day_of_week=day,
        is_working_day=working,
        opening_time=opening,
        closing_time=closing,
        break_start_time=break_start,
        break_end_time=break_end,
    )


def codes(errors):
    return [e.code for e in errors]


def test_valid_open_day():
    assert validate_entry(entry()) == []


def test_valid_day_with_break():
    assert validate_entry(entry(break_start="12:00", break_end="13:00")) == []


def test_break_may_touch_working_bounds():
    assert validate_entry(entry(break_start="09:00", break_end="17:00")) == []


def test_day_name_is_case_insensitive():
    assert validate_entry(entry(day="Monday")) == []


def test_closed_day_ignores_time_fields():
    closed = entry(working=False, opening="bogus", closing="25:99")
    assert validate_entry(closed) == []

    normalized = closed.normalized()
    assert normalized.opening_time is None
    assert normalized.closing_time is None


def test_unknown_day():
    errors = validate_entry(entry(day="funday"))
    assert codes(errors) == ["INVALID_DAY_OF_WEEK"]
    assert isinstance(errors[0], FormatError)


def test_open_day_requires_times():
    errors = validate_entry(entry(closing=None))
    assert codes(errors) == ["MISSING_WORKING_TIMES"]
    assert isinstance(errors[0], LogicError)


@pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "12-00", "noon", "12:00:00", "09:00\n"])
def test_malformed_time(value):
    errors = validate_entry(entry(opening=value))
    assert codes(errors) == ["INVALID_TIME_FORMAT"]
    assert isinstance(errors[0], FormatError)
    assert value in errors[0].message.en


def test_edge_times_are_valid():
    assert validate_entry(entry(opening="00:00", closing="23:59")) == []


def test_closing_equal_to_opening_is_rejected():
    errors = validate_entry(entry(opening="09:00", closing="09:00"))
    assert codes(errors) == ["CLOSING_NOT_AFTER_OPENING"]


def test_closing_before_opening_is_rejected():
    errors = validate_entry(entry(opening="17:00", closing="09:00"))
    assert codes(errors) == ["CLOSING_NOT_AFTER_OPENING"]
    assert errors[0].message.ar
    assert "Closing time (09:00)" in errors[0].message.en


def test_half_break_is_rejected():
    errors = validate_entry(entry(break_start="12:00"))
    assert codes(errors) == ["BREAK_INCOMPLETE"]


def test_break_end_not_after_start():
    errors = validate_entry(entry(break_start="13:00", break_end="12:00"))
    assert codes(errors) == ["BREAK_END_NOT_AFTER_START"]


def test_break_outside_working_hours():
    errors = validate_entry(entry(break_start="08:00", break_end="09:30"))
    assert codes(errors) == ["BREAK_OUTSIDE_WORKING_HOURS"]


def test_malformed_break_time():
    errors = validate_entry(entry(break_start="12", break_end="13:00"))
    assert codes(errors) == ["INVALID_TIME_FORMAT"]


def test_full_week_is_valid():
    assert validate_schedule_entries(week(monday=("08:00", "17:00"), friday=("09:00", "14:00"))) == []


def test_missing_and_duplicate_days():
    entries = week(monday=("08:00", "17:00"))
    entries = [e for e in entries if e.day_of_week != "sunday"]
    entries.append(entry(day="monday"))

    errors = validate_schedule_entries(entries)

    by_code = {e.code: e.day_of_week for e in errors}
    assert by_code == {"DUPLICATE_DAY": "monday", "MISSING_DAY": "sunday"}


def test_issues_on_several_days_are_all_reported():
    entries = week(monday=("17:00", "09:00"), tuesday=("9:00", "17:00"), wednesday=("08:00", "16:00"))

    errors = validate_schedule_entries(entries)

    assert [(e.day_of_week, e.code) for e in errors] == [
        ("monday", "CLOSING_NOT_AFTER_OPENING"),
        ("tuesday", "INVALID_TIME_FORMAT"),
    ]


def test_issue_serialization():
    error = validate_entry(entry(opening="17:00", closing="09:00"))[0]
    data = error.to_dict()
    assert data["day_of_week"] == "monday"
    assert data["kind"] == "logic"
    assert data["code"] == "CLOSING_NOT_AFTER_OPENING"
    assert set(data["message"]) == {"ar", "en"}
    assert "suggested_range" not in data
