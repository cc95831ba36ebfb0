# tests/test_grading.py

import pytest

from schoolhub.analytics.grading import classify, grade_for_percentage, percentage_of
from schoolhub.core.exceptions import InvalidInputError


@pytest.mark.parametrize(
    "percentage, letter",
    [
        (100, "A+"),
        (90, "A+"),
        (89.99, "A"),
        (80, "A"),
        (75, "B+"),
        (70, "B"),
        (65, "C+"),
        (60, "C"),
        (55, "D+"),
        (50, "D"),
        (49.99, "F"),
        (0, "F"),
    ],
)
def test_grade_for_percentage_boundaries(percentage, letter):
    assert grade_for_percentage(percentage) == letter


def test_classify_score():
    result = classify(45, 50)

    assert result.percentage == 90.0
    assert result.grade == "A+"


def test_classify_unrounded_percentage():
    percentage, grade = classify(2, 3)

    assert percentage == pytest.approx(66.6667, rel=1e-4)
    assert grade == "C+"


def test_score_above_max_is_not_clamped():
    result = classify(110, 100)

    assert result.percentage == pytest.approx(110.0)
    assert result.grade == "A+"


def test_zero_score_is_failing():
    assert classify(0, 80) == (0.0, "F")


@pytest.mark.parametrize("max_score", [0, -10])
def test_non_positive_max_score_is_rejected(max_score):
    with pytest.raises(InvalidInputError) as exc_info:
        percentage_of(10, max_score)

    assert exc_info.value.status_code == 422
    assert exc_info.value.code == "INVALID_INPUT"


def test_letters_never_get_worse_as_percentage_rises():
    order = ["F", "D", "D+", "C", "C+", "B", "B+", "A", "A+"]
    letters = [grade_for_percentage(p / 10) for p in range(0, 1001)]

    ranks = [order.index(letter) for letter in letters]
    assert ranks == sorted(ranks)
    assert set(letters) == set(order)


@pytest.mark.parametrize(
    "score, expected",
    [
        (0, (pytest.approx(0.0), "F")),
        (90, (pytest.approx(90.0), "A+")),
        (49.9, (pytest.approx(49.9), "F")),
        (50, (pytest.approx(50.0), "D")),
    ],
)
def test_classify_out_of_hundred(score, expected):
    percentage, grade = classify(score, 100)

    assert (percentage, grade) == expected
