from datetime import datetime

import pytest

from conftest import TEACHER_EMAIL, TEACHER_PASSWORD, login


def _create(client, headers, **overrides):
    payload = {
        "name": "Asha",
        "email": "asha@school.com",
        "password": "pass123",
        "class_name": "10-A",
        "roll_no": 5,
    }
    payload.update(overrides)
    return client.post("/teacher/students/create", json=payload, headers=headers)


def test_home_and_db_check(client):
    assert client.get("/").status_code == 200

    response = client.get("/test-db")
    assert response.status_code == 200
    assert response.get_json()["solution"] == 2


class TestLogin:
    def test_missing_fields(self, client):
        response = client.post("/auth/login", json={"email": "a@b.com"})
        assert response.status_code == 400
        assert response.get_json()["error"] == "Please provide email and password"

    def test_wrong_password(self, client, teacher_headers):
        response = client.post("/auth/login", json={"email": TEACHER_EMAIL, "password": "nope"})
        assert response.status_code == 400
        assert response.get_json()["error"] == "Invalid credentials"

    def test_success_returns_token_and_profile(self, client, teacher_headers):
        response = client.post(
            "/auth/login", json={"email": TEACHER_EMAIL, "password": TEACHER_PASSWORD}
        )
        body = response.get_json()

        assert response.status_code == 200
        assert body["token"]
        assert body["user"]["role"] == "TEACHER"
        assert body["user"]["name"] == "Admin Teacher"
        assert body["user"]["details"]["subject"] == "Administration"
        assert "password_hash" not in body["user"]["details"]

    def test_me(self, client, teacher_headers):
        response = client.get("/auth/me", headers=teacher_headers)
        assert response.status_code == 200
        assert response.get_json()["email"] == TEACHER_EMAIL


class TestAuthGate:
    @pytest.mark.parametrize("path", [
        "/teacher/dashboard",
        "/teacher/low-attendance",
        "/teacher/attendance-sheet?date=2026-02-13",
        "/student/dashboard",
        "/student/calendar",
    ])
    def test_missing_token_is_rejected(self, client, path):
        response = client.get(path)
        assert response.status_code == 401
        assert "error" in response.get_json()

    def test_garbage_token_is_rejected(self, client):
        response = client.get("/teacher/dashboard", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_student_cannot_use_teacher_routes(self, client, teacher_headers):
        _create(client, teacher_headers)
        student_headers = login(client, "asha@school.com", "pass123")

        assert client.get("/teacher/dashboard", headers=student_headers).status_code == 403

    def test_teacher_cannot_use_student_routes(self, client, teacher_headers):
        assert client.get("/student/dashboard", headers=teacher_headers).status_code == 403


class TestTeacherRoutes:
    def test_dashboard_counts_today(self, client, teacher_headers):
        _create(client, teacher_headers, email="a@school.com", roll_no=1)
        _create(client, teacher_headers, email="b@school.com", roll_no=2)
        sheet = client.get(
            f"/teacher/attendance-sheet?date={datetime.utcnow().date().isoformat()}", headers=teacher_headers
        ).get_json()

        client.post("/teacher/attendance/bulk", headers=teacher_headers, json={
            "date": datetime.utcnow().date().isoformat(),
            "records": [{"student_id": sheet[0]["student_id"], "status": "PRESENT"}],
        })

        body = client.get("/teacher/dashboard", headers=teacher_headers).get_json()
        assert body == {"total_students": 2, "present_today": 1, "absent_today": 0}

    def test_create_student(self, client, teacher_headers):
        response = _create(client, teacher_headers)

        assert response.status_code == 201
        assert response.get_json() == {
            "message": "Student created successfully",
            "studentIdCode": "STD001",
        }

    @pytest.mark.parametrize("field,message", [
        ("name", "Name is required"),
        ("email", "Email is required"),
        ("password", "Password is required"),
        ("class_name", "Class is required"),
        ("roll_no", "Roll number is required"),
    ])
    def test_create_student_requires_each_field(self, client, teacher_headers, field, message):
        response = _create(client, teacher_headers, **{field: ""})

        assert response.status_code == 400
        assert response.get_json()["error"] == message

    @pytest.mark.parametrize("field,value,message", [
        ("name", 123, "Name is required"),
        ("email", ["asha@school.com"], "Email is required"),
        ("password", 123456, "Password is required"),
        ("class_name", {"name": "10-A"}, "Class is required"),
        ("name", "   ", "Name is required"),
    ])
    def test_create_student_rejects_non_text_fields(self, client, teacher_headers, field, value, message):
        response = _create(client, teacher_headers, **{field: value})

        assert response.status_code == 400
        assert response.get_json()["error"] == message
        sheet = client.get(
            "/teacher/attendance-sheet?date=2026-02-13", headers=teacher_headers
        ).get_json()
        assert sheet == []

    def test_create_student_rejects_non_integer_roll(self, client, teacher_headers):
        response = _create(client, teacher_headers, roll_no="five")
        assert response.status_code == 400

    def test_duplicate_roll_in_class(self, client, teacher_headers):
        assert _create(client, teacher_headers).status_code == 201

        response = _create(client, teacher_headers, email="other@school.com")

        assert response.status_code == 400
        assert response.get_json()["error"] == "Roll number 5 already exists in class 10-A"
        sheet = client.get(
            "/teacher/attendance-sheet?date=2026-02-13&class_name=10-A", headers=teacher_headers
        ).get_json()
        assert len(sheet) == 1

    def test_duplicate_email(self, client, teacher_headers):
        _create(client, teacher_headers)

        response = _create(client, teacher_headers, roll_no=6)

        assert response.status_code == 400
        assert response.get_json()["error"] == "User already exists"

    def test_attendance_sheet_requires_valid_date(self, client, teacher_headers):
        missing = client.get("/teacher/attendance-sheet", headers=teacher_headers)
        assert missing.status_code == 400
        assert missing.get_json()["error"] == "Date required"

        bad = client.get("/teacher/attendance-sheet?date=13-02-2026", headers=teacher_headers)
        assert bad.status_code == 400

    def test_attendance_sheet_shows_unmarked_students(self, client, teacher_headers):
        _create(client, teacher_headers, email="a@school.com", roll_no=2)
        _create(client, teacher_headers, email="b@school.com", roll_no=1)
        _create(client, teacher_headers, email="c@school.com", class_name="9-B", roll_no=1)

        rows = client.get(
            "/teacher/attendance-sheet?date=2026-02-13&class_name=10-A", headers=teacher_headers
        ).get_json()

        assert [row["roll_no"] for row in rows] == [1, 2]
        assert all(row["status"] is None for row in rows)

    def test_bulk_save_then_resave(self, client, teacher_headers):
        _create(client, teacher_headers)
        sheet_url = "/teacher/attendance-sheet?date=2026-02-13"
        student_id = client.get(sheet_url, headers=teacher_headers).get_json()[0]["student_id"]

        for status in ("PRESENT", "ABSENT"):
            response = client.post("/teacher/attendance/bulk", headers=teacher_headers, json={
                "date": "2026-02-13",
                "records": [{"student_id": student_id, "status": status}],
            })
            assert response.status_code == 200
            assert response.get_json() == {"message": "Attendance updated"}

        rows = client.get(sheet_url, headers=teacher_headers).get_json()
        assert [row["status"] for row in rows] == ["ABSENT"]

    @pytest.mark.parametrize("payload", [
        {},
        {"date": "2026-02-13"},
        {"records": []},
        {"date": "2026-02-13", "records": "PRESENT"},
        {"date": "2026-02-13", "records": ["PRESENT"]},
        {"date": "yesterday", "records": []},
        {"date": "2026-02-13", "records": [{"student_id": 1, "status": "LATE"}]},
    ])
    def test_bulk_rejects_invalid_payloads(self, client, teacher_headers, payload):
        response = client.post("/teacher/attendance/bulk", headers=teacher_headers, json=payload)
        assert response.status_code == 400

    def test_bulk_with_unknown_student_saves_nothing(self, client, teacher_headers):
        _create(client, teacher_headers)
        sheet_url = "/teacher/attendance-sheet?date=2026-02-13"
        student_id = client.get(sheet_url, headers=teacher_headers).get_json()[0]["student_id"]

        response = client.post("/teacher/attendance/bulk", headers=teacher_headers, json={
            "date": "2026-02-13",
            "records": [
                {"student_id": student_id, "status": "PRESENT"},
                {"student_id": 424242, "status": "PRESENT"},
            ],
        })

        assert response.status_code == 500
        assert response.get_json() == {"error": "Server error"}
        rows = client.get(sheet_url, headers=teacher_headers).get_json()
        assert rows[0]["status"] is None

    def test_low_attendance(self, client, teacher_headers):
        _create(client, teacher_headers)
        sheet = client.get(
            "/teacher/attendance-sheet?date=2026-01-01", headers=teacher_headers
        ).get_json()
        student_id = sheet[0]["student_id"]
        for day, status in (("2026-01-01", "PRESENT"), ("2026-01-02", "ABSENT")):
            client.post("/teacher/attendance/bulk", headers=teacher_headers, json={
                "date": day, "records": [{"student_id": student_id, "status": status}],
            })

        rows = client.get("/teacher/low-attendance", headers=teacher_headers).get_json()
        assert len(rows) == 1
        assert rows[0]["percentage"] == "50.0"
        assert rows[0]["email"] == "asha@school.com"

        relaxed = client.get("/teacher/low-attendance?threshold=50", headers=teacher_headers)
        assert relaxed.get_json() == []

    def test_monthly_report_requires_month_and_year(self, client, teacher_headers):
        response = client.get("/teacher/monthly-report?month=2", headers=teacher_headers)
        assert response.status_code == 400
        assert response.get_json()["error"] == "Month and Year are required"

        for query in ("month=13&year=2026", "month=feb&year=2026", "month=0&year=2026"):
            bad = client.get(f"/teacher/monthly-report?{query}", headers=teacher_headers)
            assert bad.status_code == 400

    def test_monthly_report_for_month_without_records(self, client, teacher_headers):
        _create(client, teacher_headers)
        student_id = client.get(
            "/teacher/attendance-sheet?date=2026-03-02", headers=teacher_headers
        ).get_json()[0]["student_id"]
        client.post("/teacher/attendance/bulk", headers=teacher_headers, json={
            "date": "2026-03-02", "records": [{"student_id": student_id, "status": "PRESENT"}],
        })

        february = client.get(
            "/teacher/monthly-report?month=2&year=2026", headers=teacher_headers
        ).get_json()
        march = client.get(
            "/teacher/monthly-report?month=3&year=2026&class_name=10-A", headers=teacher_headers
        ).get_json()

        assert february[0]["total_days"] == 0
        assert february[0]["percentage"] == "0.0"
        assert march[0]["total_days"] == 1
        assert march[0]["percentage"] == "100.0"


class TestStudentRoutes:
    def test_dashboard_and_calendar(self, client, teacher_headers):
        _create(client, teacher_headers)
        student_id = client.get(
            "/teacher/attendance-sheet?date=2026-02-13", headers=teacher_headers
        ).get_json()[0]["student_id"]
        for day, status in (("2026-02-12", "PRESENT"), ("2026-02-13", "HOLIDAY")):
            client.post("/teacher/attendance/bulk", headers=teacher_headers, json={
                "date": day, "records": [{"student_id": student_id, "status": status}],
            })

        student_headers = login(client, "asha@school.com", "pass123")

        dashboard = client.get("/student/dashboard", headers=student_headers).get_json()
        assert dashboard["profile"] == {
            "name": "Asha", "id_code": "STD001", "class": "10-A", "roll_no": 5,
        }
        assert dashboard["attendance_summary"] == {
            "percentage": "100.0", "total_present": 1, "total_days": 1,
        }

        calendar = client.get("/student/calendar", headers=student_headers).get_json()
        assert [entry["date"] for entry in calendar] == ["2026-02-13", "2026-02-12"]
        assert calendar[0]["color"] == "grey"

    def test_dashboard_without_history(self, client, teacher_headers):
        _create(client, teacher_headers)
        student_headers = login(client, "asha@school.com", "pass123")

        summary = client.get("/student/dashboard", headers=student_headers).get_json()
        assert summary["attendance_summary"]["percentage"] == "0.0"
        assert client.get("/student/calendar", headers=student_headers).get_json() == []
