"""Input record types consumed by the analytics core.

The persistence layer validates ORM rows into these types (``from_attributes``
is enabled on the base schema) so the core never touches a session.
"""

from datetime import date, datetime
from enum import Enum

from pydantic import Field, field_validator

from schoolhub.schemas.common import BaseSchema

Identifier = int | str

FINAL_EXAM = "Final Exam"

TERMS = ("Term 1", "Term 2", "Term 3")

EXAM_TYPES = (
    "Mid-Term Exam",
    "End-Term Exam",
    "Quiz",
    "Assignment",
    "Project",
    "Practical",
    "Oral Exam",
    FINAL_EXAM,
)


class AttendanceStatus(str, Enum):
    """Attendance status enumeration."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EXCUSED = "excused"

    @classmethod
    def from_string(cls, value: str) -> "AttendanceStatus":
        """Convert string to AttendanceStatus, handling common variations."""
        value = value.strip().upper()
        mapping = {
            "P": cls.PRESENT,
            "PRESENT": cls.PRESENT,
            "A": cls.ABSENT,
            "ABSENT": cls.ABSENT,
            "L": cls.LATE,
            "LATE": cls.LATE,
            "E": cls.EXCUSED,
            "EXCUSED": cls.EXCUSED,
        }
        if value in mapping:
            return mapping[value]
        raise ValueError(f"Invalid attendance status: {value}")


# Statuses that count towards the attendance rate
ATTENDED_STATUSES = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.LATE})


class ScoreRecord(BaseSchema):
    """One graded assessment instance."""

    student_id: Identifier
    course_id: Identifier
    class_id: Identifier
    academic_year: str
    term: str
    exam_type: str
    score: float = Field(..., ge=0)
    max_score: float = Field(..., ge=0)
    remarks: str | None = None


class AttendanceRecord(BaseSchema):
    """One daily attendance mark."""

    student_id: Identifier
    class_id: Identifier
    course_id: Identifier | None = None
    attendance_date: date
    status: AttendanceStatus
    remarks: str | None = None

    @field_validator("attendance_date", mode="before")
    @classmethod
    def truncate_to_day(cls, v):
        if isinstance(v, datetime):
            return v.date()
        return v


class RosterStudent(BaseSchema):
    """Student identity as shown on a report."""

    id: Identifier
    first_name: str
    last_name: str
    registration_number: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class CatalogCourse(BaseSchema):
    """Course column of a report."""

    id: Identifier
    name: str
    course_code: str | None = None
