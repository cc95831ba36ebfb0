"""Course model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from schoolhub.core.database import Base
from schoolhub.models.base import IDMixin, TimestampMixin


class Course(Base, IDMixin, TimestampMixin):
    """Course catalog entry."""

    __tablename__ = "courses"

    course_code: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Course(id={self.id}, code={self.course_code})>"
