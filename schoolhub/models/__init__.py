"""Database models package."""

from schoolhub.models.attendance import AttendanceRecord
from schoolhub.models.course import Course
from schoolhub.models.grade import GradeRecord
from schoolhub.models.school_class import SchoolClass
from schoolhub.models.student import Student

__all__ = [
    # Class
    "SchoolClass",
    # Course
    "Course",
    # Student
    "Student",
    # Grades
    "GradeRecord",
    # Attendance
    "AttendanceRecord",
]
