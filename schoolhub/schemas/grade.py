"""Grade schemas."""

from datetime import datetime

from pydantic import Field

from schoolhub.analytics.trends import Trend
from schoolhub.schemas.common import BaseSchema, TimestampSchema


# ==========================================
# Grade Record Schemas
# ==========================================

class GradeRecordCreate(BaseSchema):
    """Grade creation schema; an existing grade for the same key is updated."""

    student_id: int = Field(..., description="Student database ID")
    course_id: int = Field(..., description="Course database ID")
    class_id: int = Field(..., description="Class database ID")
    academic_year: str = Field(..., pattern=r"^\d{4}-\d{4}$", examples=["2023-2024"])
    term: str = Field(..., min_length=1, max_length=20)
    exam_type: str = Field(..., min_length=1, max_length=50)
    score: float = Field(..., ge=0)
    max_score: float = Field(..., ge=0)
    remarks: str | None = None


class GradeRecordResponse(TimestampSchema):
    """Grade record response schema."""

    id: int
    student_id: int
    student_name: str
    course_id: int
    course_name: str
    class_id: int
    academic_year: str
    term: str
    exam_type: str
    score: float
    max_score: float
    percentage: float
    grade: str
    remarks: str | None
    graded_date: datetime


# ==========================================
# Student Views
# ==========================================

class StudentGradesResponse(BaseSchema):
    """All grades of a student, newest period first, plus year -> term grouping."""

    student_id: int
    grades: list[GradeRecordResponse]
    grouped: dict[str, dict[str, list[GradeRecordResponse]]]


class AcademicSummary(BaseSchema):
    """Latest-term performance of a student compared to the term before."""

    student_id: int
    current_academic_year: str | None = None
    current_term: str | None = None
    average_score: float = 0.0
    total_courses: int = 0
    performance_trend: Trend = Trend.STABLE
    has_prior_data: bool = False
    previous_academic_year: str | None = None
    previous_term: str | None = None
    previous_average_score: float | None = None


# ==========================================
# Form Data
# ==========================================

class GradeFormData(BaseSchema):
    """Choices offered when entering grades."""

    exam_types: list[str]
    terms: list[str]
    current_academic_year: str


# ==========================================
# Class and Course Views
# ==========================================

class StudentCourseGrades(BaseSchema):
    """A student's grades in a class, keyed by course ID."""

    student_id: int
    student_name: str
    registration_number: str
    courses: dict[str, list[GradeRecordResponse]] = {}


class ClassGradesResponse(BaseSchema):
    """Class roster with each student's grades per course."""

    class_id: int
    class_name: str
    academic_year: str
    students: list[StudentCourseGrades]
    terms: list[str]


class CourseGradesResponse(BaseSchema):
    """All grades of a course, newest year and term first, plus class -> term grouping."""

    course_id: int
    course_name: str
    course_code: str
    grades: list[GradeRecordResponse]
    grouped: dict[str, dict[str, list[GradeRecordResponse]]]
    terms: list[str]
