"""Attendance record model."""

from datetime import date

from sqlalchemy import Date, Enum, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from schoolhub.analytics.records import AttendanceStatus
from schoolhub.core.database import Base
from schoolhub.models.base import IDMixin, IdType, TimestampMixin


class AttendanceRecord(Base, IDMixin, TimestampMixin):
    """Daily attendance mark, upserted on student + class + course + date."""

    __tablename__ = "attendance_records"

    student_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    class_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("classes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    course_id: Mapped[int | None] = mapped_column(
        IdType,
        ForeignKey("courses.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    attendance_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    status: Mapped[AttendanceStatus] = mapped_column(
        Enum(AttendanceStatus),
        nullable=False,
        index=True,
    )
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    student: Mapped["Student"] = relationship("Student", lazy="selectin")

    __table_args__ = (
        UniqueConstraint(
            "student_id", "class_id", "course_id", "attendance_date",
            name="uq_attendance_student_class_course_date",
        ),
    )

    @property
    def student_name(self) -> str:
        """Get student name from relationship."""
        return self.student.full_name if self.student else ""

    def __repr__(self) -> str:
        return f"<AttendanceRecord(student_id={self.student_id}, date={self.attendance_date})>"
