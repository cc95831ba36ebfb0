"""Academic-year, term and calendar-month period arithmetic.

Academic years travel through the system as ``"YYYY-YYYY"`` strings. They are
parsed into :class:`AcademicYear` here so the rest of the code compares
integers instead of strings.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from typing import NamedTuple

from schoolhub.analytics.records import TERMS

# Month (1-12) in which a new academic year starts
ACADEMIC_YEAR_START_MONTH = 7


@dataclass(frozen=True, order=True)
class AcademicYear:
    """An academic year spanning two calendar years, e.g. 2023-2024."""

    start_year: int
    end_year: int

    @classmethod
    def parse(cls, value: str) -> "AcademicYear":
        """Parse ``"YYYY-YYYY"``; raises ValueError on anything else."""
        parts = value.strip().split("-")
        if len(parts) != 2:
            raise ValueError(f"Invalid academic year: {value!r}")
        try:
            return cls(int(parts[0]), int(parts[1]))
        except ValueError:
            raise ValueError(f"Invalid academic year: {value!r}") from None

    @classmethod
    def try_parse(cls, value: str | None) -> "AcademicYear | None":
        if not value:
            return None
        try:
            return cls.parse(value)
        except ValueError:
            return None

    @classmethod
    def containing(cls, day: date) -> "AcademicYear":
        """Academic year a calendar day falls in."""
        if day.month >= ACADEMIC_YEAR_START_MONTH:
            return cls(day.year, day.year + 1)
        return cls(day.year - 1, day.year)

    def previous(self) -> "AcademicYear":
        return AcademicYear(self.start_year - 1, self.end_year - 1)

    def __str__(self) -> str:
        return f"{self.start_year}-{self.end_year}"


class AcademicPeriod(NamedTuple):
    """A term within an academic year."""

    academic_year: str
    term: str


class DateRange(NamedTuple):
    """Inclusive range of calendar days."""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def previous_period(academic_year: str, term: str) -> AcademicPeriod | None:
    """The term that precedes ``term`` of ``academic_year``.

    Term 1 rolls back to Term 3 of the previous academic year. Returns None
    when the term is unknown or the year cannot be parsed for a rollover.
    """
    if term not in TERMS:
        return None

    index = TERMS.index(term)
    if index > 0:
        return AcademicPeriod(academic_year, TERMS[index - 1])

    year = AcademicYear.try_parse(academic_year)
    if year is None:
        return None
    return AcademicPeriod(str(year.previous()), TERMS[-1])


def period_sort_key(period: AcademicPeriod) -> tuple:
    """Chronological ordering key; unparsable years sort by their raw text."""
    year = AcademicYear.try_parse(period.academic_year)
    year_key = (year.start_year, year.end_year) if year else (-1, -1)
    term_key = TERMS.index(period.term) if period.term in TERMS else -1
    return (year_key, period.academic_year, term_key, period.term)


def latest_period(periods: Iterable[AcademicPeriod]) -> AcademicPeriod | None:
    """Most recent period, or None for no periods."""
    return max(periods, key=period_sort_key, default=None)


def current_academic_year(today: date) -> str:
    return str(AcademicYear.containing(today))


def month_window(today: date) -> DateRange:
    """First day of the current month up to and including today."""
    return DateRange(today.replace(day=1), today)


def previous_month_window(today: date) -> DateRange:
    """The whole calendar month before the one containing today."""
    last_day = today.replace(day=1) - timedelta(days=1)
    return DateRange(last_day.replace(day=1), last_day)


def trailing_window(today: date, days: int) -> DateRange:
    """The ``days`` days before today, through today."""
    return DateRange(today - timedelta(days=days), today)
