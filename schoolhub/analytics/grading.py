"""Percentage and letter-grade classification."""

from typing import NamedTuple

from schoolhub.core.exceptions import InvalidInputError

# (lower_bound, letter), scanned top-down; first bound the percentage reaches wins
GRADE_BOUNDARIES: tuple[tuple[float, str], ...] = (
    (90, "A+"),
    (80, "A"),
    (75, "B+"),
    (70, "B"),
    (65, "C+"),
    (60, "C"),
    (55, "D+"),
    (50, "D"),
)
FAILING_GRADE = "F"


class Classification(NamedTuple):
    """Percentage and letter for a single score."""

    percentage: float
    grade: str


def percentage_of(score: float, max_score: float) -> float:
    """Score as a percentage of max_score.

    Scores above max_score are not clamped, bonus marks yield more than 100.
    """
    if max_score <= 0:
        raise InvalidInputError(
            f"max_score must be greater than 0, got {max_score}",
            details={"score": score, "max_score": max_score},
        )
    return (score / max_score) * 100


def grade_for_percentage(percentage: float) -> str:
    """Map a percentage onto the letter-grade boundary table."""
    for lower_bound, letter in GRADE_BOUNDARIES:
        if percentage >= lower_bound:
            return letter
    return FAILING_GRADE


def classify(score: float, max_score: float) -> Classification:
    """Classify a raw score into a percentage and letter grade."""
    percentage = percentage_of(score, max_score)
    return Classification(percentage=percentage, grade=grade_for_percentage(percentage))
