"""Directional change between a current and a previous aggregate period."""

from enum import Enum
from typing import Protocol

from schoolhub.schemas.common import BaseSchema

# Relative change required before a period counts as improving or declining
TREND_THRESHOLD = 0.05


class Trend(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class PeriodStat(Protocol):
    """Aggregate with a record count and a comparable value."""

    @property
    def total(self) -> int: ...

    @property
    def value(self) -> float: ...


class TrendResult(BaseSchema):
    """Trend label plus the values it was derived from."""

    trend: Trend = Trend.STABLE
    has_prior_data: bool = False
    current_value: float = 0.0
    previous_value: float | None = None


def compare_values(current: float, previous: float) -> Trend:
    """Classify current against previous with a relative threshold."""
    if current > previous * (1 + TREND_THRESHOLD):
        return Trend.IMPROVING
    if current < previous * (1 - TREND_THRESHOLD):
        return Trend.DECLINING
    return Trend.STABLE


def detect_trend(current: PeriodStat, previous: PeriodStat) -> Trend:
    """Trend between two aggregates; stable when there is no baseline."""
    if previous.total == 0:
        return Trend.STABLE
    return compare_values(current.value, previous.value)


def evaluate_trend(current: PeriodStat, previous: PeriodStat | None) -> TrendResult:
    """Like detect_trend, flagging whether a previous period had any data."""
    if previous is None or previous.total == 0:
        return TrendResult(
            trend=Trend.STABLE,
            has_prior_data=False,
            current_value=current.value,
        )
    return TrendResult(
        trend=detect_trend(current, previous),
        has_prior_data=True,
        current_value=current.value,
        previous_value=previous.value,
    )
