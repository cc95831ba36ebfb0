"""Attendance schemas."""

from datetime import date

from pydantic import Field, field_validator

from schoolhub.analytics.records import AttendanceStatus
from schoolhub.analytics.trends import Trend
from schoolhub.schemas.common import BaseSchema, TimestampSchema


class AttendanceRecordCreate(BaseSchema):
    """Attendance mark; an existing mark for the same key is updated."""

    student_id: int = Field(..., description="Student database ID")
    class_id: int = Field(..., description="Class database ID")
    course_id: int | None = Field(None, description="Course database ID for per-lesson attendance")
    attendance_date: date
    status: AttendanceStatus
    remarks: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v):
        if isinstance(v, str):
            return AttendanceStatus.from_string(v)
        return v


class AttendanceRecordResponse(TimestampSchema):
    """Attendance record response schema."""

    id: int
    student_id: int
    student_name: str
    class_id: int
    course_id: int | None
    attendance_date: date
    status: AttendanceStatus
    remarks: str | None


class AttendanceStats(BaseSchema):
    """Attendance counts with the rate rounded for display."""

    total: int = 0
    present: int = 0
    absent: int = 0
    late: int = 0
    excused: int = 0
    attendance_rate: float = Field(
        default=0.0,
        description="Percentage of records marked present or late (0-100)"
    )


# ==========================================
# Bulk Attendance Operations
# ==========================================

class SingleAttendanceInput(BaseSchema):
    """Single student attendance entry for bulk operations."""

    student_id: int
    status: AttendanceStatus
    remarks: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v):
        if isinstance(v, str):
            return AttendanceStatus.from_string(v)
        return v


class BulkAttendanceCreate(BaseSchema):
    """Bulk attendance for a class on a specific date."""

    class_id: int
    course_id: int | None = None
    attendance_date: date
    records: list[SingleAttendanceInput]


class BulkAttendanceResponse(BaseSchema):
    """Response for bulk attendance operations."""

    total_records: int
    successful: int
    failed: int
    errors: list[dict] = []
    message: str


# ==========================================
# Student Views
# ==========================================

class StudentAttendanceResponse(BaseSchema):
    """A student's attendance over a date range."""

    student_id: int
    date_from: date
    date_to: date
    records: list[AttendanceRecordResponse]
    grouped_by_date: dict[str, list[AttendanceRecordResponse]]
    stats: AttendanceStats


class MonthAttendance(BaseSchema):
    """Attendance stats for one month window."""

    date_from: date
    date_to: date
    stats: AttendanceStats


class StudentAttendanceSummary(BaseSchema):
    """Current month against the previous month, plus recent absences."""

    student_id: int
    current_month: MonthAttendance
    previous_month: MonthAttendance
    trend: Trend
    has_prior_data: bool
    recent_absences: list[AttendanceRecordResponse]


# ==========================================
# Class Views
# ==========================================

class DailyAttendanceStats(BaseSchema):
    """Attendance stats for one calendar day."""

    date: date
    stats: AttendanceStats


class AttendanceStatistics(BaseSchema):
    """Overall and per-day attendance over a date range."""

    class_id: int | None = None
    date_from: date
    date_to: date
    overall: AttendanceStats
    daily: list[DailyAttendanceStats]


class StudentDayStatus(BaseSchema):
    """A student's mark for a single day, if any."""

    student_id: int
    student_name: str
    registration_number: str
    status: AttendanceStatus | None = None
    record_id: int | None = None


class ClassAttendanceResponse(BaseSchema):
    """Attendance sheet of a class for a single day."""

    class_id: int
    class_name: str
    attendance_date: date
    students: list[StudentDayStatus]
    total_students: int
    marked: int
    unmarked: int
    stats: AttendanceStats

