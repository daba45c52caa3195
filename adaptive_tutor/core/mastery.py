"""
Core Mastery Module.

Single source of truth for the mastery policy shared by grading,
remediation, reporting and teacher summaries.

Design:
- MASTERY_THRESHOLD: inclusive pass bar on the 0-100 aggregate score
- QUESTION_WEIGHT: points per question, equal for MCQ and coding questions
- MasteryLevel: Enum for categorizing aggregate scores
"""

from __future__ import annotations

import math
from enum import Enum

MASTERY_THRESHOLD = 90
QUESTION_WEIGHT = 10


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 rounding away from zero for positives."""
    return int(math.floor(value + 0.5))


def aggregate_score(question_scores: list[int], question_count: int) -> int:
    """
    Aggregate per-question scores into a 0-100 score.

    Args:
        question_scores: Per-question scores, each between 0 and QUESTION_WEIGHT
        question_count: Number of questions in the administered quiz

    Returns:
        round(100 * sum / (question_count * QUESTION_WEIGHT))
    """
    if question_count <= 0:
        return 0
    return round_half_up(100 * sum(question_scores) / (question_count * QUESTION_WEIGHT))


def is_mastered(score: int) -> bool:
    """Check an aggregate score against the mastery bar (inclusive)."""
    return score >= MASTERY_THRESHOLD


class MasteryLevel(str, Enum):
    """Mastery level categorization of an aggregate quiz score."""

    NOT_STARTED = "not_started"  # no attempts
    NOVICE = "novice"  # 0-39
    DEVELOPING = "developing"  # 40-69
    PROFICIENT = "proficient"  # 70 up to the mastery bar
    MASTERED = "mastered"  # MASTERY_THRESHOLD-100

    @classmethod
    def from_score(cls, score: int | None) -> MasteryLevel:
        """
        Convert a 0-100 aggregate score to a level.

        Args:
            score: Aggregate score, or None when the student has no attempts

        Returns:
            Corresponding MasteryLevel
        """
        if score is None:
            return cls.NOT_STARTED
        if score < 40:
            return cls.NOVICE
        if score < 70:
            return cls.DEVELOPING
        if score < MASTERY_THRESHOLD:
            return cls.PROFICIENT
        return cls.MASTERED

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        return self.value.replace("_", " ").title()

    @property
    def color(self) -> str:
        """Rich color for CLI display."""
        return {
            MasteryLevel.NOT_STARTED: "dim",
            MasteryLevel.NOVICE: "red",
            MasteryLevel.DEVELOPING: "yellow",
            MasteryLevel.PROFICIENT: "cyan",
            MasteryLevel.MASTERED: "green",
        }[self]
