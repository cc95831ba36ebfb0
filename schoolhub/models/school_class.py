"""School class model."""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from schoolhub.core.database import Base
from schoolhub.models.base import IDMixin, TimestampMixin


class SchoolClass(Base, IDMixin, TimestampMixin):
    """A class (form/stream) for one academic year."""

    __tablename__ = "classes"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    academic_year: Mapped[str] = mapped_column(String(9), nullable=False, index=True)

    # Relationships
    students: Mapped[list["Student"]] = relationship(
        "Student",
        back_populates="school_class",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("name", "academic_year", name="uq_class_name_year"),
    )

    def __repr__(self) -> str:
        return f"<SchoolClass(id={self.id}, name={self.name}, year={self.academic_year})>"
