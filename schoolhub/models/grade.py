"""Grade record model."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from schoolhub.core.database import Base
from schoolhub.models.base import IDMixin, IdType, TimestampMixin


class GradeRecord(Base, IDMixin, TimestampMixin):
    """A graded assessment, upserted on student + course + term + exam type."""

    __tablename__ = "grade_records"

    student_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    course_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    class_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("classes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    academic_year: Mapped[str] = mapped_column(String(9), nullable=False, index=True)
    term: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    exam_type: Mapped[str] = mapped_column(String(50), nullable=False)
    score: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    max_score: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    percentage: Mapped[float] = mapped_column(Numeric(6, 2, asdecimal=False), nullable=False)
    grade: Mapped[str] = mapped_column(String(5), nullable=False)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    graded_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    student: Mapped["Student"] = relationship("Student", lazy="selectin")
    course: Mapped["Course"] = relationship("Course", lazy="selectin")

    __table_args__ = (
        UniqueConstraint(
            "student_id", "course_id", "term", "exam_type",
            name="uq_grade_student_course_term_exam",
        ),
    )

    def __repr__(self) -> str:
        return f"<GradeRecord(student_id={self.student_id}, course_id={self.course_id}, term={self.term})>"
