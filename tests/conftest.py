from datetime import date

import pytest
from fastapi.testclient import TestClient

from attendance_api.core.config import Settings
from attendance_api.core.security import create_access_token
from attendance_api.db.models import ClassAttendance, Class, Classroom, MainBranch, SubBranch
from attendance_api.main import create_app


@pytest.fixture()
def settings():
    return Settings(_env_file=None, DATABASE_URL="sqlite://", SECRET_KEY="test-secret",
                    IDENTITY_URL=None)


def _seed(db):
    db.add_all([
        MainBranch(id=1, name="North"),
        MainBranch(id=2, name="South"),
    ])
    db.flush()
    db.add_all([
        SubBranch(id=7, name="Penang", main_branch_id=1),
        SubBranch(id=42, name="Ipoh", main_branch_id=1),
        SubBranch(id=8, name="Johor", main_branch_id=2),
    ])
    db.flush()
    db.add_all([
        Classroom(id=3, name="Room A", sub_branch_id=7),
        Classroom(id=4, name="Room B", sub_branch_id=42),
    ])
    db.flush()
    db.add_all([
        Class(id=99, name="Tuesday class", main_branch_id=1, sub_branch_id=7,
              classroom_id=3, class_start_date=date(2024, 1, 8)),
        Class(id=100, name="Thursday class", main_branch_id=1, sub_branch_id=42,
              classroom_id=4),
        Class(id=200, name="Southern class", main_branch_id=2, sub_branch_id=8),
    ])
    db.flush()

    def row(class_id, student_id, day, status, **kw):
        return ClassAttendance(class_id=class_id, student_id=student_id,
                               attendance_date=day, attendance_status=status, **kw)

    db.add_all([
        # class 99: two present and one absent, then a holiday session
        row(99, 1, date(2024, 1, 10), 1, learning_progress="Chapter 2", lamrin_page=12, lamrin_line=3),
        row(99, 2, date(2024, 1, 10), 1, learning_progress="Chapter 2", lamrin_page=12, lamrin_line=3),
        row(99, 3, date(2024, 1, 10), 0, learning_progress="Chapter 2", lamrin_page=12, lamrin_line=3),
        row(99, 1, date(2024, 1, 22), 4),
        row(99, 2, date(2024, 1, 22), 4),
        row(99, 3, date(2024, 1, 22), 4),
        # class 100: one online, one on leave
        row(100, 4, date(2024, 1, 11), 2),
        row(100, 5, date(2024, 1, 11), 3),
        # class 200
        row(200, 6, date(2024, 1, 9), 1),
    ])
    db.commit()


@pytest.fixture()
def app(settings):
    app = create_app(settings)
    database = app.state.database
    database.create_all()
    db = database.SessionLocal()
    try:
        _seed(db)
    finally:
        db.close()
    yield app
    database.dispose()


@pytest.fixture()
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def db(app):
    session = app.state.database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def auth_header(settings):
    def make(role, scope=None, user_id="user-1"):
        claims = {"sub": user_id, "app_metadata": {"role": role}}
        if scope is not None:
            claims["app_metadata"]["scope"] = scope
        token = create_access_token(claims, settings)
        return {"Authorization": f"Bearer {token}"}
    return make
