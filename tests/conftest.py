import pytest

from attendance_app import create_app
from attendance_app.accounts import create_student, create_teacher
from attendance_app.config import TestConfig
from attendance_app.extensions import db
from attendance_app.models import AttendanceRecord, AttendanceStatus

TEACHER_EMAIL = "admin@school.com"
TEACHER_PASSWORD = "admin123"


@pytest.fixture
def app(tmp_path):
    class Config(TestConfig):
        AUDIT_LOG_FILE = str(tmp_path / "audit.log")

    app = create_app(Config)
    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield app
        db.session.remove()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_student(app):
    """Create a student account and return the student's primary key."""
    counter = {"n": 0}

    def _make(name, class_name="10-A", roll_no=None, email=None, password="pass123"):
        counter["n"] += 1
        with app.app_context():
            student = create_student(
                name=name,
                email=email or f"student{counter['n']}@school.com",
                password=password,
                class_name=class_name,
                roll_no=roll_no if roll_no is not None else counter["n"],
            )
            return student.id

    return _make


@pytest.fixture
def add_attendance(app):
    def _add(student_id, day, status):
        with app.app_context():
            db.session.add(AttendanceRecord(
                student_id=student_id, date=day, status=AttendanceStatus(status)
            ))
            db.session.commit()

    return _add


def login(client, email, password):
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.get_json()
    return {"Authorization": f"Bearer {response.get_json()['token']}"}


@pytest.fixture
def teacher_headers(app, client):
    with app.app_context():
        create_teacher("Admin Teacher", TEACHER_EMAIL, TEACHER_PASSWORD, "Administration")
    return login(client, TEACHER_EMAIL, TEACHER_PASSWORD)
