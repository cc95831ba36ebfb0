"""Attendance management endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from schoolhub.core.database import get_db
from schoolhub.schemas.attendance import (
    AttendanceRecordCreate,
    AttendanceRecordResponse,
    AttendanceStatistics,
    BulkAttendanceCreate,
    BulkAttendanceResponse,
    ClassAttendanceResponse,
    StudentAttendanceResponse,
    StudentAttendanceSummary,
)
from schoolhub.schemas.common import ErrorResponse, MessageResponse
from schoolhub.services.attendance import AttendanceService

router = APIRouter(responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}})


@router.post("", response_model=AttendanceRecordResponse)
def mark_attendance(
    request: AttendanceRecordCreate,
    db: Annotated[Session, Depends(get_db)],
):
    """
    Mark a student's attendance.
    An existing mark for the same student, class, course and date is updated.
    """
    service = AttendanceService(db)
    return service.mark_attendance(request)


@router.post("/bulk", response_model=BulkAttendanceResponse)
def mark_bulk_attendance(
    request: BulkAttendanceCreate,
    db: Annotated[Session, Depends(get_db)],
):
    """
    Mark attendance for a whole class on one date.
    Nothing is saved if any student does not belong to the class.
    """
    service = AttendanceService(db)
    return service.mark_bulk_attendance(request)


@router.get("/statistics", response_model=AttendanceStatistics)
def get_attendance_statistics(
    db: Annotated[Session, Depends(get_db)],
    class_id: int | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
):
    """Overall and daily attendance, the current month by default."""
    service = AttendanceService(db)
    return service.get_attendance_statistics(class_id, date_from, date_to)


@router.get("/classes/{class_id}", response_model=ClassAttendanceResponse)
def get_class_attendance(
    class_id: int,
    attendance_date: date,
    db: Annotated[Session, Depends(get_db)],
    course_id: int | None = None,
):
    """Attendance sheet of a class for one day."""
    service = AttendanceService(db)
    return service.get_class_attendance(class_id, attendance_date, course_id)


@router.get("/students/{student_id}", response_model=StudentAttendanceResponse)
def get_student_attendance(
    student_id: int,
    db: Annotated[Session, Depends(get_db)],
    date_from: date | None = None,
    date_to: date | None = None,
):
    """A student's attendance records and stats, the last 30 days by default."""
    service = AttendanceService(db)
    return service.get_student_attendance(student_id, date_from, date_to)


@router.get("/students/{student_id}/summary", response_model=StudentAttendanceSummary)
def get_student_attendance_summary(
    student_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """This month's attendance against last month's."""
    service = AttendanceService(db)
    return service.get_student_attendance_summary(student_id)


@router.delete("/{record_id}", response_model=MessageResponse)
def delete_attendance_record(
    record_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Delete an attendance record."""
    service = AttendanceService(db)
    service.delete_record(record_id)
    return MessageResponse(message="Attendance record deleted successfully")
