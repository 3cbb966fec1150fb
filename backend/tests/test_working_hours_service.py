import pytest
from sqlmodel import Session, select

from app.exceptions import AppointmentConflictError, NotFoundError, ScheduleValidationError
from app.models import AuditLog, WorkingHours
from app.services.working_hours_service import save_schedule, validate_schedule
from app.utils.working_hours import WorkingHourEntry
from tests.factories import book, next_weekday, open_week, seed_hierarchy, store_hours, week


def test_validate_reports_interval_issues_before_containment(session: Session):
    h = seed_hierarchy(session)
    store_hours(session, "complex", h.complex.id, week(monday=("08:00", "17:00")))

    # Tuesday breaks containment too, but interval issues short-circuit
    result = validate_schedule(
        session, "clinic", h.clinic.id, week(monday=("9:00", "16:00"), tuesday=("09:00", "12:00"))
    )

    assert not result.is_valid
    assert [e.code for e in result.errors] == ["INVALID_TIME_FORMAT"]


def test_validate_containment_after_clean_intervals(session: Session):
    h = seed_hierarchy(session)
    store_hours(session, "complex", h.complex.id, week(monday=("08:00", "17:00")))

    result = validate_schedule(session, "clinic", h.clinic.id, week(monday=("09:00", "16:00"), tuesday=("09:00", "12:00")))

    assert [(e.day_of_week, e.code) for e in result.errors] == [("tuesday", "CHILD_OPEN_PARENT_CLOSED")]
    assert result.to_dict()["parent_entity_type"] == "complex"


def test_validate_unknown_entity(session: Session):
    with pytest.raises(NotFoundError):
        validate_schedule(session, "clinic", 999, week())


def test_save_persists_seven_rows_and_audits(session: Session):
    h = seed_hierarchy(session)

    saved = save_schedule(session, "clinic", h.clinic.id, week(monday=("08:00", "17:00", "12:00", "13:00")))

    assert [e.day_of_week for e in saved] == [
        "monday",
        "tuesday",
        "wednesday",
        "thursday",
        "friday",
        "saturday",
        "sunday",
    ]
    rows = session.exec(select(WorkingHours).where(WorkingHours.entity_type == "clinic")).all()
    assert len(rows) == 7

    audits = session.exec(select(AuditLog)).all()
    assert [a.event_type for a in audits] == ["working_hours_updated"]
    assert audits[0].entity_id == h.clinic.id


def test_save_replaces_previous_week(session: Session):
    h = seed_hierarchy(session)
    save_schedule(session, "clinic", h.clinic.id, open_week("08:00", "20:00"))

    save_schedule(session, "clinic", h.clinic.id, week(monday=("10:00", "12:00")))

    rows = session.exec(select(WorkingHours).where(WorkingHours.entity_id == h.clinic.id)).all()
    assert len(rows) == 7
    assert sum(1 for r in rows if r.is_working_day) == 1


def test_save_strips_times_on_closed_days(session: Session):
    h = seed_hierarchy(session)
    schedule = week(monday=("08:00", "17:00"))
    schedule[1] = WorkingHourEntry(day_of_week="Tuesday", is_working_day=False, opening_time="08:00", closing_time="x")

    save_schedule(session, "clinic", h.clinic.id, schedule)

    tuesday = session.exec(
        select(WorkingHours).where(WorkingHours.entity_id == h.clinic.id, WorkingHours.day_of_week == "tuesday")
    ).one()
    assert tuesday.is_working_day is False
    assert tuesday.opening_time is None
    assert tuesday.closing_time is None


def test_save_refuses_to_orphan_appointments(session: Session):
    h = seed_hierarchy(session)
    store_hours(session, "user", h.doctor.id, week(friday=("09:00", "18:00")))
    book(session, h.doctor, h.patient, next_weekday("friday"), "15:00")

    with pytest.raises(AppointmentConflictError) as exc_info:
        save_schedule(session, "user", h.doctor.id, week(friday=("09:00", "14:00")))

    error = exc_info.value
    assert error.status_code == 409
    assert error.to_dict()["affected_appointments"] == 1
    assert error.conflicts[0]["reason_code"] == "after_closing"

    rows = session.exec(select(WorkingHours).where(WorkingHours.entity_type == "user")).all()
    assert {r.day_of_week: r.closing_time for r in rows}["friday"] == "18:00"


def test_save_rejects_invalid_schedule(session: Session):
    h = seed_hierarchy(session)

    with pytest.raises(ScheduleValidationError) as exc_info:
        save_schedule(session, "clinic", h.clinic.id, week()[:6])

    assert [e.code for e in exc_info.value.errors] == ["MISSING_DAY"]
    assert session.exec(select(WorkingHours)).all() == []
