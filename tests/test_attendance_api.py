from datetime import date

from attendance_api.db.models import ClassAttendance


def _session(class_id=99, day="2024-02-05", statuses=(1, 2, 0), **kw):
    return {
        "class_id": class_id,
        "date": day,
        "records": [{"student_id": i + 1, "status": s} for i, s in enumerate(statuses)],
        **kw,
    }


def test_save_session_creates_records(client, auth_header, db):
    resp = client.post("/api/attendance/sessions",
                       json=_session(learning_progress="Chapter 3", page=20, line=4),
                       headers=auth_header("class_admin", 99))
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert len(data) == 3
    assert {r["attendance_status"] for r in data} == {0, 1, 2}
    assert all(r["lamrin_page"] == 20 for r in data)

    stored = db.query(ClassAttendance).filter(
        ClassAttendance.class_id == 99,
        ClassAttendance.attendance_date == date(2024, 2, 5),
    ).count()
    assert stored == 3


def test_saving_same_session_again_replaces_it(client, auth_header, db):
    headers = auth_header("super_admin")
    client.post("/api/attendance/sessions", json=_session(statuses=(1, 1, 1)), headers=headers)
    resp = client.post("/api/attendance/sessions", json=_session(statuses=(4, 4)), headers=headers)
    assert resp.status_code == 200

    rows = db.query(ClassAttendance).filter(
        ClassAttendance.class_id == 99,
        ClassAttendance.attendance_date == date(2024, 2, 5),
    ).all()
    assert sorted((r.student_id, r.attendance_status) for r in rows) == [(1, 4), (2, 4)]


def test_save_session_rejects_duplicate_students(client, auth_header):
    payload = _session()
    payload["records"].append({"student_id": 1, "status": 0})
    resp = client.post("/api/attendance/sessions", json=payload, headers=auth_header("super_admin"))
    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_parameter"


def test_save_session_rejects_unknown_status(client, auth_header):
    resp = client.post("/api/attendance/sessions", json=_session(statuses=(1, 7)),
                       headers=auth_header("super_admin"))
    assert resp.status_code == 400


def test_save_session_outside_scope_is_forbidden(client, auth_header):
    resp = client.post("/api/attendance/sessions", json=_session(class_id=200),
                       headers=auth_header("state_admin", 1))
    assert resp.status_code == 403
    assert resp.json()["error"] == "scope_violation"


def test_save_session_for_unknown_class(client, auth_header):
    resp = client.post("/api/attendance/sessions", json=_session(class_id=12345),
                       headers=auth_header("super_admin"))
    assert resp.status_code == 404


def test_class_history_weeks(client, auth_header):
    resp = client.get("/api/attendance/classes/99/history", params={"referenceDate": "2024-01-29"},
                      headers=auth_header("branch_admin", 7))
    assert resp.status_code == 200
    body = resp.json()
    weeks = body["data"]
    assert [w["week_start"] for w in weeks] == ["2024-01-08", "2024-01-15", "2024-01-22", "2024-01-29"]
    assert weeks[0]["attendance_count"] == 2
    assert weeks[0]["is_missing"] is False and weeks[0]["is_holiday"] is False
    assert weeks[1]["is_missing"] is True
    assert weeks[2]["is_holiday"] is True and weeks[2]["attendance_count"] == 0
    assert weeks[3]["is_missing"] is True
    assert body["missing_weeks"] == ["01/15-01/21", "01/29-02/04"]
    assert body["holiday_weeks"] == ["01/22-01/28"]


def test_class_history_rejects_bad_reference_date(client, auth_header):
    resp = client.get("/api/attendance/classes/99/history", params={"referenceDate": "yesterday"},
                      headers=auth_header("super_admin"))
    assert resp.status_code == 400
    resp = client.get("/api/attendance/classes/99/history", params={"referenceDate": "2024-01-29junk"},
                      headers=auth_header("super_admin"))
    assert resp.status_code == 400


def test_class_history_outside_scope(client, auth_header):
    resp = client.get("/api/attendance/classes/99/history", headers=auth_header("branch_admin", 42))
    assert resp.status_code == 403


def test_class_summary(client, auth_header):
    headers = auth_header("super_admin")
    resp = client.get("/api/attendance/classes/99/summary", headers=headers)
    assert resp.status_code == 200
    summary = resp.json()
    # 2 attended out of 3 working records; the holiday session is excluded
    assert summary["attendance_rate"] == 67
    assert summary["latest_date"] == "2024-01-22"
    assert summary["learning_progress"] is None

    client.post("/api/attendance/sessions",
                json=_session(day="2024-02-05", statuses=(1, 1), learning_progress="Chapter 3",
                              page=20, line=4),
                headers=headers)
    summary = client.get("/api/attendance/classes/99/summary", headers=headers).json()
    assert summary["latest_date"] == "2024-02-05"
    assert (summary["learning_progress"], summary["page"], summary["line"]) == ("Chapter 3", 20, 4)
    assert summary["attendance_rate"] == 80


def test_latest_session_stats(client, auth_header):
    resp = client.get("/api/attendance/stats", params={"classId": "100"},
                      headers=auth_header("super_admin"))
    assert resp.status_code == 200
    stats = resp.json()
    assert stats["latest_date"] == "2024-01-11"
    assert (stats["total"], stats["online"], stats["leave"]) == (2, 1, 1)
    assert stats["attendance_rate"] == 50


def test_latest_session_stats_all_holiday(client, auth_header):
    stats = client.get("/api/attendance/stats", params={"classId": "99"},
                       headers=auth_header("class_admin", 99)).json()
    assert stats["holiday"] == 3
    assert stats["attendance_rate"] == 0


def test_latest_session_stats_with_empty_scope(client, auth_header):
    stats = client.get("/api/attendance/stats", headers=auth_header("classroom_admin", 999)).json()
    assert stats["total"] == 0
    assert stats["latest_date"] is None


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
