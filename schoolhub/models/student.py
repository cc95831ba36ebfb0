"""Student model."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from schoolhub.core.database import Base
from schoolhub.models.base import IDMixin, IdType, TimestampMixin


class Student(Base, IDMixin, TimestampMixin):
    """Student model for managing student records."""

    __tablename__ = "students"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    registration_number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    class_id: Mapped[int | None] = mapped_column(
        IdType,
        ForeignKey("classes.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Relationships
    school_class: Mapped["SchoolClass"] = relationship(
        "SchoolClass",
        back_populates="students",
        lazy="selectin",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, name={self.full_name}, class_id={self.class_id})>"
