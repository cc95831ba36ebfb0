# tests/test_trends.py

import pytest

from schoolhub.analytics.aggregation import AttendanceStat, ScoreStat
from schoolhub.analytics.trends import Trend, compare_values, detect_trend, evaluate_trend


@pytest.mark.parametrize(
    "current, previous, expected",
    [
        (80.0, 70.0, Trend.IMPROVING),
        (60.0, 70.0, Trend.DECLINING),
        (72.0, 70.0, Trend.STABLE),
        (73.0, 70.0, Trend.STABLE),
        (67.0, 70.0, Trend.STABLE),
    ],
)
def test_compare_values_uses_relative_threshold(current, previous, expected):
    assert compare_values(current, previous) == expected


def test_detect_trend_without_baseline_is_stable():
    current = ScoreStat(count=3, sum_percentage=270.0, average_percentage=90.0)

    assert detect_trend(current, ScoreStat()) == Trend.STABLE


def test_detect_trend_on_attendance():
    current = AttendanceStat(total=10, present=9, absent=1, attendance_rate=90.0)
    previous = AttendanceStat(total=10, present=7, absent=3, attendance_rate=70.0)

    assert detect_trend(current, previous) == Trend.IMPROVING
    assert detect_trend(previous, current) == Trend.DECLINING


def test_evaluate_trend_flags_prior_data():
    current = ScoreStat(count=2, sum_percentage=120.0, average_percentage=60.0)
    previous = ScoreStat(count=2, sum_percentage=160.0, average_percentage=80.0)

    result = evaluate_trend(current, previous)

    assert result.trend == Trend.DECLINING
    assert result.has_prior_data
    assert result.current_value == 60.0
    assert result.previous_value == 80.0


@pytest.mark.parametrize("previous", [None, ScoreStat()])
def test_evaluate_trend_without_prior_data(previous):
    current = ScoreStat(count=1, sum_percentage=50.0, average_percentage=50.0)

    result = evaluate_trend(current, previous)

    assert result.trend == Trend.STABLE
    assert not result.has_prior_data
    assert result.previous_value is None
