"""Attendance service for marking attendance and attendance statistics."""

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from schoolhub.analytics.aggregation import (
    AttendanceStat,
    aggregate_attendance,
    daily_attendance,
    group_by,
    round_rate,
)
from schoolhub.analytics.periods import (
    DateRange,
    month_window,
    previous_month_window,
    trailing_window,
)
from schoolhub.analytics.records import AttendanceRecord as AttendanceMark
from schoolhub.analytics.records import AttendanceStatus
from schoolhub.analytics.trends import evaluate_trend
from schoolhub.core.config import settings
from schoolhub.core.exceptions import NotFoundError, ValidationError
from schoolhub.models.attendance import AttendanceRecord
from schoolhub.models.course import Course
from schoolhub.models.school_class import SchoolClass
from schoolhub.models.student import Student
from schoolhub.schemas.attendance import (
    AttendanceRecordCreate,
    AttendanceRecordResponse,
    AttendanceStatistics,
    AttendanceStats,
    BulkAttendanceCreate,
    BulkAttendanceResponse,
    ClassAttendanceResponse,
    DailyAttendanceStats,
    MonthAttendance,
    StudentAttendanceResponse,
    StudentAttendanceSummary,
    StudentDayStatus,
)

logger = logging.getLogger(__name__)


def to_stats(stat: AttendanceStat) -> AttendanceStats:
    """Presentation copy of an attendance stat with the rate rounded."""
    return AttendanceStats(
        total=stat.total,
        present=stat.present,
        absent=stat.absent,
        late=stat.late,
        excused=stat.excused,
        attendance_rate=round_rate(stat.attendance_rate),
    )


class AttendanceService:
    """Attendance management service."""

    def __init__(self, db: Session):
        self.db = db

    def _record_to_response(self, record: AttendanceRecord) -> AttendanceRecordResponse:
        """Convert AttendanceRecord to response schema."""
        return AttendanceRecordResponse.model_validate({
            "id": record.id,
            "student_id": record.student_id,
            "student_name": record.student_name,
            "class_id": record.class_id,
            "course_id": record.course_id,
            "attendance_date": record.attendance_date,
            "status": record.status,
            "remarks": record.remarks,
            "created_at": record.created_at,
            "updated_at": record.updated_at,
        })

    # ==========================================
    # Marking
    # ==========================================

    def mark_attendance(self, request: AttendanceRecordCreate) -> AttendanceRecordResponse:
        """Create an attendance mark, or update the one for the same student, class, course and date."""
        self._get_or_404(Student, request.student_id, "Student")
        self._get_or_404(SchoolClass, request.class_id, "Class")
        if request.course_id is not None:
            self._get_or_404(Course, request.course_id, "Course")

        record = self._upsert(
            student_id=request.student_id,
            class_id=request.class_id,
            course_id=request.course_id,
            attendance_date=request.attendance_date,
            status=request.status,
            remarks=request.remarks,
        )
        self.db.flush()
        self.db.refresh(record)
        return self._record_to_response(record)

    def mark_bulk_attendance(self, request: BulkAttendanceCreate) -> BulkAttendanceResponse:
        """Mark attendance for a class on one date."""
        self._get_or_404(SchoolClass, request.class_id, "Class")
        if request.course_id is not None:
            self._get_or_404(Course, request.course_id, "Course")

        student_ids = {s.id for s in self._get_students_by_class(request.class_id)}

        # Validate all student IDs before any DB operations
        errors = [
            {
                "student_id": record.student_id,
                "message": f"Student ID {record.student_id} not found in class {request.class_id}",
            }
            for record in request.records
            if record.student_id not in student_ids
        ]
        if errors:
            return BulkAttendanceResponse(
                total_records=len(request.records),
                successful=0,
                failed=len(errors),
                errors=errors,
                message="Validation failed. No records were saved.",
            )

        for record in request.records:
            self._upsert(
                student_id=record.student_id,
                class_id=request.class_id,
                course_id=request.course_id,
                attendance_date=request.attendance_date,
                status=record.status,
                remarks=record.remarks,
            )
        self.db.flush()

        logger.info(
            f"Marked attendance for {len(request.records)} students "
            f"in class {request.class_id} on {request.attendance_date}"
        )
        return BulkAttendanceResponse(
            total_records=len(request.records),
            successful=len(request.records),
            failed=0,
            errors=[],
            message=f"Successfully saved {len(request.records)} attendance records.",
        )

    def delete_record(self, record_id: int) -> None:
        """Delete an attendance record."""
        record = self._get_or_404(AttendanceRecord, record_id, "Attendance record")
        self.db.delete(record)
        self.db.flush()

    # ==========================================
    # Student Views
    # ==========================================

    def get_student_attendance(
        self,
        student_id: int,
        date_from: date | None = None,
        date_to: date | None = None,
        today: date | None = None,
    ) -> StudentAttendanceResponse:
        """A student's attendance in a date range, the last 30 days by default."""
        self._get_or_404(Student, student_id, "Student")
        today = today or date.today()

        if date_from is None and date_to is None:
            window = trailing_window(today, settings.DEFAULT_ATTENDANCE_WINDOW_DAYS)
        else:
            window = DateRange(date_from or date.min, date_to or date.max)
        self._check_window(window)

        records = self._get_student_records(student_id, window)
        responses = [self._record_to_response(r) for r in records]

        return StudentAttendanceResponse(
            student_id=student_id,
            date_from=window.start,
            date_to=window.end,
            records=responses,
            grouped_by_date={
                day.isoformat(): day_records
                for day, day_records in group_by(responses, lambda r: r.attendance_date).items()
            },
            stats=to_stats(aggregate_attendance(self._to_marks(records))),
        )

    def get_student_attendance_summary(
        self,
        student_id: int,
        today: date | None = None,
    ) -> StudentAttendanceSummary:
        """This month against last month, with recent absences."""
        self._get_or_404(Student, student_id, "Student")
        today = today or date.today()

        current_window = month_window(today)
        previous_window = previous_month_window(today)

        current_stat = aggregate_attendance(
            self._to_marks(self._get_student_records(student_id, current_window))
        )
        previous_stat = aggregate_attendance(
            self._to_marks(self._get_student_records(student_id, previous_window))
        )
        trend = evaluate_trend(current_stat, previous_stat)

        recent_window = trailing_window(today, settings.RECENT_ABSENCE_DAYS)
        recent_absences = [
            self._record_to_response(r)
            for r in self._get_student_records(student_id, recent_window)
            if r.status == AttendanceStatus.ABSENT
        ]

        return StudentAttendanceSummary(
            student_id=student_id,
            current_month=MonthAttendance(
                date_from=current_window.start,
                date_to=current_window.end,
                stats=to_stats(current_stat),
            ),
            previous_month=MonthAttendance(
                date_from=previous_window.start,
                date_to=previous_window.end,
                stats=to_stats(previous_stat),
            ),
            trend=trend.trend,
            has_prior_data=trend.has_prior_data,
            recent_absences=recent_absences,
        )

    # ==========================================
    # Class Views
    # ==========================================

    def get_attendance_statistics(
        self,
        class_id: int | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        today: date | None = None,
    ) -> AttendanceStatistics:
        """Overall and daily attendance, the current month by default."""
        if class_id is not None:
            self._get_or_404(SchoolClass, class_id, "Class")
        today = today or date.today()

        if date_from is None and date_to is None:
            window = month_window(today)
        else:
            window = DateRange(date_from or date.min, date_to or date.max)
        self._check_window(window)

        query = select(AttendanceRecord).where(
            AttendanceRecord.attendance_date >= window.start,
            AttendanceRecord.attendance_date <= window.end,
        )
        if class_id is not None:
            query = query.where(AttendanceRecord.class_id == class_id)

        marks = self._to_marks(self.db.execute(query).scalars().all())

        return AttendanceStatistics(
            class_id=class_id,
            date_from=window.start,
            date_to=window.end,
            overall=to_stats(aggregate_attendance(marks)),
            daily=[
                DailyAttendanceStats(date=day.date, stats=to_stats(day.stats))
                for day in daily_attendance(marks)
            ],
        )

    def get_class_attendance(
        self,
        class_id: int,
        attendance_date: date,
        course_id: int | None = None,
    ) -> ClassAttendanceResponse:
        """Every student of a class with their mark for one day."""
        school_class = self._get_or_404(SchoolClass, class_id, "Class")
        students = self._get_students_by_class(class_id)

        query = select(AttendanceRecord).where(
            AttendanceRecord.class_id == class_id,
            AttendanceRecord.attendance_date == attendance_date,
        )
        if course_id is not None:
            query = query.where(AttendanceRecord.course_id == course_id)
        else:
            query = query.where(AttendanceRecord.course_id.is_(None))
        records = {r.student_id: r for r in self.db.execute(query).scalars().all()}

        entries = []
        for student in students:
            record = records.get(student.id)
            entries.append(StudentDayStatus(
                student_id=student.id,
                student_name=student.full_name,
                registration_number=student.registration_number,
                status=record.status if record else None,
                record_id=record.id if record else None,
            ))

        marked = [records[s.id] for s in students if s.id in records]

        return ClassAttendanceResponse(
            class_id=class_id,
            class_name=school_class.name,
            attendance_date=attendance_date,
            students=entries,
            total_students=len(students),
            marked=len(marked),
            unmarked=len(students) - len(marked),
            stats=to_stats(aggregate_attendance(self._to_marks(marked))),
        )

    # ==========================================
    # Helper Methods
    # ==========================================

    def _get_or_404(self, model, record_id: int, resource: str):
        """Fetch a row by primary key or raise NotFoundError."""
        record = self.db.get(model, record_id)
        if not record:
            raise NotFoundError(resource, str(record_id))
        return record

    def _check_window(self, window: DateRange) -> None:
        if window.start > window.end:
            raise ValidationError(
                f"date_from ({window.start}) is after date_to ({window.end})"
            )

    def _to_marks(self, records) -> list[AttendanceMark]:
        return [AttendanceMark.model_validate(r) for r in records]

    def _upsert(
        self,
        student_id: int,
        class_id: int,
        course_id: int | None,
        attendance_date: date,
        status: AttendanceStatus,
        remarks: str | None,
    ) -> AttendanceRecord:
        """Update the mark on the upsert key, or add a new one."""
        query = select(AttendanceRecord).where(
            AttendanceRecord.student_id == student_id,
            AttendanceRecord.class_id == class_id,
            AttendanceRecord.attendance_date == attendance_date,
        )
        if course_id is None:
            query = query.where(AttendanceRecord.course_id.is_(None))
        else:
            query = query.where(AttendanceRecord.course_id == course_id)
        existing = self.db.execute(query).scalar_one_or_none()

        if existing:
            existing.status = status
            existing.remarks = remarks
            return existing

        record = AttendanceRecord(
            student_id=student_id,
            class_id=class_id,
            course_id=course_id,
            attendance_date=attendance_date,
            status=status,
            remarks=remarks,
        )
        self.db.add(record)
        return record

    def _get_student_records(self, student_id: int, window: DateRange) -> list[AttendanceRecord]:
        """Student's records within a window, newest first."""
        result = self.db.execute(
            select(AttendanceRecord)
            .where(
                AttendanceRecord.student_id == student_id,
                AttendanceRecord.attendance_date >= window.start,
                AttendanceRecord.attendance_date <= window.end,
            )
            .order_by(AttendanceRecord.attendance_date.desc(), AttendanceRecord.id)
        )
        return list(result.scalars().all())

    def _get_students_by_class(self, class_id: int) -> list[Student]:
        """Get all students in a class ordered by name."""
        result = self.db.execute(
            select(Student)
            .where(Student.class_id == class_id)
            .order_by(Student.last_name, Student.first_name)
        )
        return list(result.scalars().all())
