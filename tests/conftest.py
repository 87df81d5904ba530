import os
import tempfile

# ✅ 앱/설정 import 전에 테스트용 SQLite 파일로 전환
_DB_DIR = tempfile.mkdtemp(prefix="academics-test-")
os.environ["DB_DRIVER"] = "sqlite"
os.environ["SQLITE_PATH"] = os.path.join(_DB_DIR, "test.db")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

import pytest
from fastapi.testclient import TestClient

from database.db import Base, SessionLocal, engine
from database.init_db import import_models
from main import app
from models.courses import Course as CourseModel, Semester
from models.students import Student as StudentModel
from models.users import User as UserModel, Role, WorkType, Permission
from services.course_service import make_slug

import_models()


@pytest.fixture(autouse=True)
def _tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


# ==========================================================
# 팩토리 fixture
# ==========================================================

@pytest.fixture
def make_user(db):
    def _make(email="faculty@school.edu", role=Role.FACULTY, work_type=WorkType.FULL_TIME, **kw):
        user = UserModel(
            name=kw.pop("name", "Dela Cruz Ana"),
            email=email,
            department=kw.pop("department", "Information Technology"),
            work_type=work_type,
            role=role,
            permission=kw.pop("permission", Permission.GRANTED),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def make_student(db):
    counter = {"n": 0}

    def _make(last_name="Garcia", first_name="Luis", **kw):
        counter["n"] += 1
        student = StudentModel(
            student_id=kw.pop("student_id", f"2024-{counter['n']:04d}"),
            last_name=last_name,
            first_name=first_name,
            middle_initial=kw.pop("middle_initial", None),
        )
        db.add(student)
        db.commit()
        db.refresh(student)
        return student
    return _make


@pytest.fixture
def make_course(db):
    def _make(code="IT 101", section="A", students=(), faculty=None):
        course = CourseModel(
            code=code,
            title="Introduction to Computing",
            section=section,
            room="R-201",
            semester=Semester.FIRST_SEMESTER,
            academic_year="2024-2025",
            slug=make_slug(code, section),
            faculty_id=faculty.id if faculty else None,
        )
        course.students = list(students)
        db.add(course)
        db.commit()
        db.refresh(course)
        return course
    return _make
