# tests/test_aggregation.py

from datetime import date, datetime

import pytest

from schoolhub.analytics.aggregation import (
    aggregate_attendance,
    aggregate_scores,
    attendance_by,
    daily_attendance,
    group_by,
    round_rate,
    scores_by,
)
from schoolhub.analytics.records import AttendanceRecord, AttendanceStatus


def test_group_by_keeps_input_order():
    groups = group_by(["apple", "bean", "avocado", "beet", "cherry"], lambda s: s[0])

    assert list(groups) == ["a", "b", "c"]
    assert groups["a"] == ["apple", "avocado"]
    assert groups["b"] == ["bean", "beet"]


def test_group_by_empty():
    assert group_by([], lambda s: s) == {}


def test_aggregate_attendance_counts_late_as_attended(make_mark):
    marks = [
        make_mark("present"),
        make_mark("late"),
        make_mark("absent"),
        make_mark("excused"),
    ]

    stat = aggregate_attendance(marks)

    assert stat.total == 4
    assert (stat.present, stat.absent, stat.late, stat.excused) == (1, 1, 1, 1)
    assert stat.attendance_rate == 50.0


def test_aggregate_attendance_empty_has_zero_rate():
    stat = aggregate_attendance([])

    assert stat.total == 0
    assert stat.attendance_rate == 0.0


def test_attendance_counts_add_up(make_mark):
    marks = [make_mark(status) for status in ["present", "present", "absent", "late", "late"]]

    stat = aggregate_attendance(marks)

    assert stat.present + stat.absent + stat.late + stat.excused == stat.total
    assert 0 <= stat.attendance_rate <= 100


def test_aggregate_scores_mean_of_percentages(make_score):
    records = [make_score(1, 10, 45, 50), make_score(1, 20, 30, 60)]

    stat = aggregate_scores(records)

    assert stat.count == 2
    assert stat.average_percentage == pytest.approx(70.0)


def test_aggregate_scores_skips_non_positive_max_score(make_score, caplog):
    records = [make_score(1, 10, 40, 50), make_score(1, 20, 0, 0)]

    stat = aggregate_scores(records)

    assert stat.count == 1
    assert stat.average_percentage == pytest.approx(80.0)
    assert "non-positive max_score" in caplog.text


def test_aggregate_scores_empty():
    stat = aggregate_scores([])

    assert stat.count == 0
    assert stat.average_percentage == 0.0


def test_scores_by_term(make_score):
    records = [
        make_score(1, 10, 80, term="Term 1"),
        make_score(1, 20, 60, term="Term 1"),
        make_score(1, 10, 90, term="Term 2"),
    ]

    stats = scores_by(records, lambda r: r.term)

    assert stats["Term 1"].average_percentage == pytest.approx(70.0)
    assert stats["Term 2"].average_percentage == pytest.approx(90.0)


def test_attendance_by_student(make_mark):
    marks = [
        make_mark("present", student_id=1),
        make_mark("absent", student_id=1),
        make_mark("present", student_id=2),
    ]

    stats = attendance_by(marks, lambda m: m.student_id)

    assert stats[1].attendance_rate == 50.0
    assert stats[2].attendance_rate == 100.0


def test_daily_attendance_sorted_oldest_first(make_mark):
    marks = [
        make_mark("present", day=date(2024, 3, 5)),
        make_mark("absent", day=date(2024, 3, 4)),
        make_mark("late", day=date(2024, 3, 5)),
    ]

    days = daily_attendance(marks)

    assert [d.date for d in days] == [date(2024, 3, 4), date(2024, 3, 5)]
    assert days[0].stats.attendance_rate == 0.0
    assert days[1].stats.attendance_rate == 100.0


def test_attendance_record_truncates_datetime_to_day():
    record = AttendanceRecord(
        student_id=1,
        class_id=1,
        attendance_date=datetime(2024, 3, 4, 23, 30),
        status=AttendanceStatus.PRESENT,
    )

    assert record.attendance_date == date(2024, 3, 4)


@pytest.mark.parametrize(
    "value, expected",
    [(66.66, 66.7), (66.64, 66.6), (50.0, 50.0), (0.0, 0.0), (87.5, 87.5)],
)
def test_round_rate(value, expected):
    assert round_rate(value) == pytest.approx(expected)


@pytest.mark.parametrize("raw", ["P", "present", " Late ", "e"])
def test_attendance_status_from_string(raw):
    assert AttendanceStatus.from_string(raw) in set(AttendanceStatus)


def test_attendance_status_from_string_rejects_unknown():
    with pytest.raises(ValueError):
        AttendanceStatus.from_string("maybe")


def test_attendance_rate_example(make_mark):
    marks = [make_mark(s) for s in ["present", "present", "absent", "late"]]

    assert aggregate_attendance(marks).attendance_rate == 75.0
