"""
Tests for the working hours HTTP surface.

Error bodies follow {"detail": {"code", "message": {"ar", "en"}, ...}}.
"""

from fastapi.testclient import TestClient
from sqlmodel import Session

from app.models import Appointment
from tests.factories import book, next_weekday, open_week, seed_hierarchy, store_hours, week, week_payload


def test_health(client: TestClient):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_get_unconfigured_hours(client: TestClient, session: Session):
    h = seed_hierarchy(session)

    response = client.get(f"/api/working-hours/user/{h.doctor.id}")

    assert response.status_code == 200
    assert response.json() == {"entity_type": "user", "entity_id": h.doctor.id, "working_hours": []}


def test_get_missing_entity(client: TestClient):
    response = client.get("/api/working-hours/clinic/999")

    assert response.status_code == 404
    detail = response.json()["detail"]
    assert detail["code"] == "CLINIC_NOT_FOUND"
    assert set(detail["message"]) == {"ar", "en"}


def test_get_invalid_entity_type(client: TestClient):
    response = client.get("/api/working-hours/department/1")

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "INVALID_ENTITY_TYPE"


def test_put_then_get(client: TestClient, session: Session):
    h = seed_hierarchy(session)

    response = client.put(
        f"/api/working-hours/clinic/{h.clinic.id}",
        json={"schedule": week_payload(monday=("08:00", "17:00", "12:00", "13:00"))},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"]["en"] == "Working hours updated successfully"
    assert len(body["working_hours"]) == 7

    stored = client.get(f"/api/working-hours/clinic/{h.clinic.id}").json()["working_hours"]
    assert stored[0] == {
        "day_of_week": "monday",
        "is_working_day": True,
        "opening_time": "08:00",
        "closing_time": "17:00",
        "break_start_time": "12:00",
        "break_end_time": "13:00",
    }


def test_put_invalid_schedule(client: TestClient, session: Session):
    h = seed_hierarchy(session)

    response = client.put(
        f"/api/working-hours/clinic/{h.clinic.id}",
        json={"schedule": week_payload(monday=("9:00", "17:00"), tuesday=("17:00", "09:00"))},
    )

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["code"] == "SCHEDULE_VALIDATION_FAILED"
    assert [(e["day_of_week"], e["code"]) for e in detail["errors"]] == [
        ("monday", "INVALID_TIME_FORMAT"),
        ("tuesday", "CLOSING_NOT_AFTER_OPENING"),
    ]


def test_put_with_conflicts_is_refused(client: TestClient, session: Session):
    h = seed_hierarchy(session)
    store_hours(session, "user", h.doctor.id, week(friday=("09:00", "18:00")))
    book(session, h.doctor, h.patient, next_weekday("friday"), "15:00")

    response = client.put(
        f"/api/working-hours/user/{h.doctor.id}",
        json={"schedule": week_payload(friday=("09:00", "14:00"))},
    )

    assert response.status_code == 409
    detail = response.json()["detail"]
    assert detail["code"] == "APPOINTMENT_CONFLICTS"
    assert detail["affected_appointments"] == 1


def test_put_with_rescheduling(client: TestClient, session: Session):
    h = seed_hierarchy(session)
    store_hours(session, "clinic", h.clinic.id, open_week("08:00", "20:00"))
    store_hours(session, "user", h.doctor.id, week(friday=("09:00", "18:00")))
    appointment = book(session, h.doctor, h.patient, next_weekday("friday"), "15:00")

    response = client.put(
        f"/api/working-hours/user/{h.doctor.id}/with-rescheduling",
        json={
            "schedule": week_payload(friday=("09:00", "14:00")),
            "handle_conflicts": "reschedule",
            "notify_patients": True,
            "reason": "Afternoon surgery block",
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["appointments_marked_for_rescheduling"] == 1
    assert body["appointments_rescheduled"] == 0
    assert body["notifications_sent"] == 1
    assert body["rescheduled_appointments"][0]["appointment_id"] == appointment.id

    assert session.get(Appointment, appointment.id).rescheduling_reason == "doctor_hours_changed"


def test_put_with_rescheduling_requires_strategy(client: TestClient, session: Session):
    h = seed_hierarchy(session)

    response = client.put(
        f"/api/working-hours/user/{h.doctor.id}/with-rescheduling",
        json={"schedule": week_payload()},
    )

    assert response.status_code == 422


def test_put_with_rescheduling_unknown_strategy(client: TestClient, session: Session):
    h = seed_hierarchy(session)

    response = client.put(
        f"/api/working-hours/user/{h.doctor.id}/with-rescheduling",
        json={"schedule": week_payload(), "handle_conflicts": "ignore"},
    )

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "INVALID_CONFLICT_STRATEGY"


def test_validate_endpoint(client: TestClient, session: Session):
    h = seed_hierarchy(session)
    store_hours(session, "complex", h.complex.id, week(monday=("08:00", "17:00")))

    response = client.post(
        "/api/working-hours/validate",
        json={
            "entity_type": "clinic",
            "entity_id": h.clinic.id,
            "schedule": week_payload(monday=("07:00", "16:00")),
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["is_valid"] is False
    assert body["errors"][0]["suggested_range"] == {"opening_time": "08:00", "closing_time": "17:00"}


def test_suggest_endpoint(client: TestClient, session: Session):
    h = seed_hierarchy(session)
    store_hours(session, "clinic", h.clinic.id, week(monday=("09:00", "17:00")))

    response = client.get(
        "/api/working-hours/suggest",
        params={"role": "doctor", "parent_entity_type": "clinic", "parent_entity_id": h.clinic.id},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["can_modify"] is True
    assert [e["day_of_week"] for e in body["suggested_schedule"]] == ["monday"]


def test_suggest_endpoint_without_hours(client: TestClient, session: Session):
    h = seed_hierarchy(session)

    response = client.get(
        "/api/working-hours/suggest",
        params={"role": "doctor", "parent_entity_type": "clinic", "parent_entity_id": h.clinic.id},
    )

    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "CLINIC_HOURS_NOT_FOUND"


def test_suggest_for_entity_endpoint(client: TestClient, session: Session):
    h = seed_hierarchy(session)

    response = client.get(f"/api/working-hours/suggest/user/{h.doctor.id}")

    assert response.status_code == 200
    assert response.json()["from_standard_hours"] is True


def test_check_conflicts_endpoint(client: TestClient, session: Session):
    h = seed_hierarchy(session)
    book(session, h.doctor, h.patient, next_weekday("friday"), "15:00")

    response = client.post(
        "/api/working-hours/check-conflicts",
        json={"entity_id": h.doctor.id, "proposed_schedule": week_payload(friday=("09:00", "14:00"))},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["has_conflicts"] is True
    assert body["conflicts"][0]["reason_code"] == "after_closing"
    assert body["conflicts"][0]["conflict_reason"]["en"].startswith("Appointment at 15:00")


def test_check_conflicts_rejects_malformed_time(client: TestClient, session: Session):
    h = seed_hierarchy(session)
    book(session, h.doctor, h.patient, next_weekday("friday"), "15:00")

    response = client.post(
        "/api/working-hours/check-conflicts",
        json={"entity_id": h.doctor.id, "proposed_schedule": week_payload(friday=("9am", "14:00"))},
    )

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["code"] == "SCHEDULE_VALIDATION_FAILED"
    assert [(e["day_of_week"], e["code"]) for e in detail["errors"]] == [("friday", "INVALID_TIME_FORMAT")]


def test_check_conflicts_rejects_working_day_without_times(client: TestClient, session: Session):
    h = seed_hierarchy(session)
    book(session, h.doctor, h.patient, next_weekday("friday"), "15:00")
    payload = [e for e in week_payload() if e["day_of_week"] != "friday"]
    payload.append({"day_of_week": "friday", "is_working_day": True})

    response = client.post(
        "/api/working-hours/check-conflicts",
        json={"entity_id": h.doctor.id, "proposed_schedule": payload},
    )

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["code"] == "SCHEDULE_VALIDATION_FAILED"
    assert [(e["day_of_week"], e["code"]) for e in detail["errors"]] == [("friday", "MISSING_WORKING_TIMES")]
