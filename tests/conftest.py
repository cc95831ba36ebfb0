# tests/conftest.py

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import schoolhub.models  # noqa: F401
from schoolhub.analytics.records import (
    AttendanceRecord,
    AttendanceStatus,
    CatalogCourse,
    RosterStudent,
    ScoreRecord,
)
from schoolhub.analytics.reports import ReportFilter
from schoolhub.core.database import Base, get_db
from schoolhub.models import Course, SchoolClass, Student

ACADEMIC_YEAR = "2023-2024"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, class_=Session, expire_on_commit=False)()
    yield session
    session.close()


@pytest.fixture
def school(db):
    """One class with three students and two courses."""
    school_class = SchoolClass(name="Form 1A", academic_year=ACADEMIC_YEAR)
    db.add(school_class)
    db.flush()

    math = Course(course_code="MATH101", name="Mathematics")
    english = Course(course_code="ENG101", name="English")
    students = [
        Student(first_name="Amina", last_name="Bello", registration_number="REG001", class_id=school_class.id),
        Student(first_name="Chidi", last_name="Okafor", registration_number="REG002", class_id=school_class.id),
        Student(first_name="Dana", last_name="Mwangi", registration_number="REG003", class_id=school_class.id),
    ]
    db.add_all([math, english, *students])
    db.flush()

    return {
        "class": school_class,
        "math": math,
        "english": english,
        "students": students,
    }


@pytest.fixture
def client(db):
    from schoolhub.main import app

    def override_get_db():
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# ==========================================
# Plain analytics records
# ==========================================

@pytest.fixture
def sample_students():
    return [
        RosterStudent(id=1, first_name="Amina", last_name="Bello", registration_number="REG001"),
        RosterStudent(id=2, first_name="Chidi", last_name="Okafor", registration_number="REG002"),
        RosterStudent(id=3, first_name="Dana", last_name="Mwangi", registration_number="REG003"),
    ]


@pytest.fixture
def sample_courses():
    return [
        CatalogCourse(id=10, name="Mathematics", course_code="MATH101"),
        CatalogCourse(id=20, name="English", course_code="ENG101"),
    ]


@pytest.fixture
def report_filter():
    return ReportFilter(class_id=1, term="Term 1", academic_year=ACADEMIC_YEAR)


@pytest.fixture
def make_score():
    return _score


@pytest.fixture
def make_mark():
    return _mark


def _score(student_id, course_id, score, max_score=100, exam_type="Final Exam",
           term="Term 1", academic_year=ACADEMIC_YEAR, class_id=1):
    return ScoreRecord(
        student_id=student_id,
        course_id=course_id,
        class_id=class_id,
        academic_year=academic_year,
        term=term,
        exam_type=exam_type,
        score=score,
        max_score=max_score,
    )


def _mark(status, day=date(2024, 3, 4), student_id=1, class_id=1):
    return AttendanceRecord(
        student_id=student_id,
        class_id=class_id,
        attendance_date=day,
        status=AttendanceStatus(status),
    )
