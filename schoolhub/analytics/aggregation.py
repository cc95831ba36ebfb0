"""Grouping and per-group statistics over attendance and score records."""

import logging
import math
from collections.abc import Callable, Hashable, Iterable
from datetime import date
from typing import TypeVar

from schoolhub.analytics.grading import percentage_of
from schoolhub.analytics.records import (
    ATTENDED_STATUSES,
    AttendanceRecord,
    AttendanceStatus,
    ScoreRecord,
)
from schoolhub.schemas.common import BaseSchema

logger = logging.getLogger(__name__)

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


class AttendanceStat(BaseSchema):
    """Status counts and attendance rate for a set of attendance records."""

    total: int = 0
    present: int = 0
    absent: int = 0
    late: int = 0
    excused: int = 0
    attendance_rate: float = 0.0

    @property
    def value(self) -> float:
        return self.attendance_rate


class ScoreStat(BaseSchema):
    """Average percentage for a set of score records."""

    count: int = 0
    sum_percentage: float = 0.0
    average_percentage: float = 0.0

    @property
    def total(self) -> int:
        return self.count

    @property
    def value(self) -> float:
        return self.average_percentage


class DailyAttendance(BaseSchema):
    """Attendance counts for one calendar day."""

    date: date
    stats: AttendanceStat


def round_rate(value: float) -> float:
    """Round half-up to one decimal place for presentation."""
    return math.floor(value * 10 + 0.5) / 10


def rate(part: float, whole: float) -> float:
    """Percentage of part in whole, 0 when whole is empty."""
    if whole <= 0:
        return 0.0
    return part / whole * 100


def group_by(records: Iterable[T], key: Callable[[T], K]) -> dict[K, list[T]]:
    """Group records into an insertion-ordered multimap.

    Records are neither copied nor reordered; each group keeps input order.
    """
    groups: dict[K, list[T]] = {}
    for record in records:
        groups.setdefault(key(record), []).append(record)
    return groups


def aggregate_attendance(records: Iterable[AttendanceRecord]) -> AttendanceStat:
    """Count statuses and compute (present + late) / total as a percentage."""
    counts = {status: 0 for status in AttendanceStatus}
    total = 0
    for record in records:
        counts[record.status] += 1
        total += 1

    attended = sum(counts[status] for status in ATTENDED_STATUSES)
    return AttendanceStat(
        total=total,
        present=counts[AttendanceStatus.PRESENT],
        absent=counts[AttendanceStatus.ABSENT],
        late=counts[AttendanceStatus.LATE],
        excused=counts[AttendanceStatus.EXCUSED],
        attendance_rate=rate(attended, total),
    )


def aggregate_scores(records: Iterable[ScoreRecord]) -> ScoreStat:
    """Arithmetic mean of per-record percentages."""
    count = 0
    sum_percentage = 0.0
    for record in records:
        if record.max_score <= 0:
            logger.warning(
                "Skipping score record with non-positive max_score "
                f"(student={record.student_id}, course={record.course_id}, exam_type={record.exam_type})"
            )
            continue
        sum_percentage += percentage_of(record.score, record.max_score)
        count += 1

    return ScoreStat(
        count=count,
        sum_percentage=sum_percentage,
        average_percentage=sum_percentage / count if count else 0.0,
    )


def attendance_by(
    records: Iterable[AttendanceRecord],
    key: Callable[[AttendanceRecord], K],
) -> dict[K, AttendanceStat]:
    """Attendance stats per group."""
    return {
        group_key: aggregate_attendance(group)
        for group_key, group in group_by(records, key).items()
    }


def scores_by(
    records: Iterable[ScoreRecord],
    key: Callable[[ScoreRecord], K],
) -> dict[K, ScoreStat]:
    """Score stats per group."""
    return {
        group_key: aggregate_scores(group)
        for group_key, group in group_by(records, key).items()
    }


def daily_attendance(records: Iterable[AttendanceRecord]) -> list[DailyAttendance]:
    """Attendance stats per calendar day, oldest first."""
    per_day = attendance_by(records, lambda record: record.attendance_date)
    return [
        DailyAttendance(date=day, stats=stats)
        for day, stats in sorted(per_day.items())
    ]
