from __future__ import annotations

import pytest

from src.class_attendance.class_attendance.main import create_app


@pytest.fixture
def app(container):
    return create_app("config.testing", container=container)


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, role, user_id="cr-a"):
    with client.session_transaction() as sess:
        sess["role"] = role
        sess["user_id"] = user_id


def _add_math(client):
    return client.post(
        "/api/classes/cse-a/timetable",
        json={"day": "Monday", "subject": "Math", "instructor": "Dr. Rao", "start_time": "09:00", "end_time": "10:00"},
    )


def test_health(client):
    assert client.get("/api/health").get_json() == {"success": True}


def test_timetable_requires_cr_or_admin(client):
    resp = _add_math(client)
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "forbidden"

    _login(client, "student", "a2")
    assert _add_math(client).status_code == 403


def test_timetable_crud_and_conflict(client):
    _login(client, "cr")
    created = _add_math(client)
    assert created.status_code == 201
    slot_id = created.get_json()["slot"]["slot_id"]

    clash = client.post(
        "/api/classes/cse-a/timetable",
        json={"day": "monday", "subject": "Physics", "start_time": "09:30", "end_time": "10:30"},
    )
    assert clash.status_code == 409
    assert clash.get_json()["slot"]["slot_id"] == slot_id

    bad = client.post(
        "/api/classes/cse-a/timetable",
        json={"day": "Monday", "subject": "Physics", "start_time": "11:00", "end_time": "10:00"},
    )
    assert bad.status_code == 400

    moved = client.patch(f"/api/timetable/{slot_id}", json={"start_time": "08:00"})
    assert moved.status_code == 200
    assert moved.get_json()["slot"]["start_time"] == "08:00"

    listed = client.get("/api/classes/cse-a/timetable").get_json()["slots"]
    assert [s["subject"] for s in listed] == ["Math"]

    assert client.delete(f"/api/timetable/{slot_id}").status_code == 200
    assert client.delete(f"/api/timetable/{slot_id}").status_code == 404


def test_unknown_class_and_bad_input(client):
    _login(client, "admin")
    resp = client.post(
        "/api/classes/nope/timetable",
        json={"day": "Monday", "subject": "Math", "start_time": "09:00", "end_time": "10:00"},
    )
    assert resp.status_code == 404

    resp = client.post(
        "/api/classes/cse-a/timetable",
        json={"day": "Sunday", "subject": "Math", "start_time": "09:00", "end_time": "10:00"},
    )
    assert resp.status_code == 400

    resp = client.post("/api/classes/cse-a/timetable", data="not json", content_type="text/plain")
    assert resp.status_code == 400


def test_live_session(client):
    _login(client, "cr")
    _add_math(client)

    body = client.get("/api/classes/cse-a/live-session").get_json()

    assert body["live"]["subject"] == "Math"
    assert body["now"] == "2024-03-04T09:15:00"
    assert body["poll_seconds"] == 10
    assert [e["live"] for e in body["today"]] == [True]


def test_attendance_commit_and_denial(client):
    _login(client, "cr")
    _add_math(client)

    auth = client.get("/api/classes/cse-a/attendance/authorize?subject=Physics").get_json()
    assert auth["authorized"] is False
    assert auth["reason"] == "subject-mismatch"

    denied = client.post(
        "/api/classes/cse-a/attendance",
        json={"subject": "Physics", "records": [{"student_id": "a2", "present": True}]},
    )
    assert denied.status_code == 403
    assert denied.get_json()["reason"] == "subject-mismatch"

    resp = client.post(
        "/api/classes/cse-a/attendance",
        json={
            "subject": "Math",
            "date": "2024-03-04",
            "records": [{"student_id": "a2", "present": True}, {"student_id": "a3", "present": False}],
        },
    )
    assert resp.status_code == 201
    assert resp.get_json() == {"success": True, "written": 2, "date": "2024-03-04"}

    student = client.get("/api/students/a2/attendance").get_json()
    assert student["percentage"] == 100
    assert student["records"][0]["subject"] == "Math"

    records = client.get("/api/classes/cse-a/attendance").get_json()["records"]
    assert len(records) == 2


def test_attendance_rejects_malformed_records(client):
    _login(client, "cr")
    _add_math(client)
    resp = client.post("/api/classes/cse-a/attendance", json={"subject": "Math", "records": [{"present": True}]})
    assert resp.status_code == 400


def test_reports(client):
    _login(client, "cr")
    _add_math(client)
    client.post(
        "/api/classes/cse-a/attendance",
        json={"subject": "Math", "records": [{"student_id": "a2", "present": True}, {"student_id": "a3", "present": False}]},
    )

    subjects = client.get("/api/classes/cse-a/reports/subjects").get_json()["subjects"]
    assert subjects == [{"subject": "Math", "total_sessions": 2, "present_sessions": 1, "percentage": 50}]

    students = client.get("/api/classes/cse-a/reports/students").get_json()["students"]
    assert len(students) == 10

    records = client.get("/api/classes/cse-a/reports/records?start=2024-03-01&end=2024-03-31").get_json()
    assert records["summary"]["average"] == 50.0

    assert client.get("/api/students/a2/report").get_json()["summary"]["present"] == 1
    assert client.get("/api/students/ghost/report").status_code == 404
    assert client.get("/api/classes/cse-a/reports/records?start=2024-13-01").status_code == 400

    # Daily overview is admin only.
    assert client.get("/api/reports/daily").status_code == 403
    _login(client, "admin", "root")
    daily = client.get("/api/reports/daily?date=2024-03-04").get_json()
    assert (daily["present"], daily["absent"]) == (1, 11)


def test_notices_and_alerts(client):
    assert client.get("/api/classes/cse-a/alerts").status_code == 403

    _login(client, "cr")
    assert client.post("/api/classes/cse-a/notices", json={"title": "Exam", "content": "Friday"}).status_code == 201
    _add_math(client)

    notices = client.get("/api/classes/cse-a/notices").get_json()["notices"]
    assert {n["title"] for n in notices} == {"Exam", "🚨 TIMETABLE_ADDED"}

    _login(client, "student", "a2")
    assert client.post("/api/classes/cse-a/notices", json={"title": "x", "content": "y"}).status_code == 403

    alerts = client.get("/api/classes/cse-a/alerts").get_json()
    assert alerts["state"] == "NOTIFIED"
    assert alerts["timetable"]["action"] == "ADDED"
    assert alerts["poll_seconds"] == 30

    notice_id = alerts["timetable"]["notice_id"]
    assert client.post(f"/api/notices/{notice_id}/dismiss").status_code == 200
    after = client.get("/api/classes/cse-a/alerts").get_json()
    assert after["state"] == "DISMISSED"
    assert after["timetable"] is None

    assert client.post("/api/notices/999/dismiss").status_code == 404


def test_attendance_alert(client):
    _login(client, "cr")
    _add_math(client)
    client.post(
        "/api/classes/cse-a/attendance",
        json={"subject": "Math", "records": [{"student_id": "a3", "present": False}]},
    )

    assert client.get("/api/students/a2/alerts").get_json()["attendance"] is None
    alert = client.get("/api/students/a3/alerts").get_json()["attendance"]
    assert alert["message"] == "Critically low attendance: 0%."


def test_class_representative_only_manages_own_class(client):
    _login(client, "cr", "cr-a")
    slot_id = _add_math(client).get_json()["slot"]["slot_id"]

    _login(client, "cr", "b1")
    assert _add_math(client).status_code == 403
    assert client.patch(f"/api/timetable/{slot_id}", json={"subject": "Maths"}).status_code == 403
    assert client.delete(f"/api/timetable/{slot_id}").status_code == 403
    commit = client.post(
        "/api/classes/cse-a/attendance",
        json={"subject": "Math", "records": [{"student_id": "a2", "present": True}]},
    )
    assert commit.status_code == 403
    assert commit.get_json()["error"] == "forbidden"
    assert client.post("/api/classes/cse-a/notices", json={"title": "x", "content": "y"}).status_code == 403

    # A student id claiming the cr role manages nothing.
    _login(client, "cr", "a2")
    assert _add_math(client).status_code == 403

    assert client.get("/api/classes/cse-a/attendance").get_json()["records"] == []
    assert [s["subject"] for s in client.get("/api/classes/cse-a/timetable").get_json()["slots"]] == ["Math"]


def test_admin_manages_every_class(client):
    _login(client, "admin", "root")
    assert _add_math(client).status_code == 201
    resp = client.post(
        "/api/classes/cse-b/timetable",
        json={"day": "Monday", "subject": "Math", "start_time": "09:00", "end_time": "10:00"},
    )
    assert resp.status_code == 201


@pytest.mark.parametrize("present", ["false", "true", 0, 1, None])
def test_attendance_present_flag_must_be_a_boolean(client, container, present):
    _login(client, "cr")
    _add_math(client)
    record = {"student_id": "a2"}
    if present is not None:
        record["present"] = present

    resp = client.post("/api/classes/cse-a/attendance", json={"subject": "Math", "records": [record]})

    assert resp.status_code == 400
    assert container.attendance_repo.all() == []
