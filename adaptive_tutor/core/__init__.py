"""Core policy constants, error taxonomy and logging setup."""

from adaptive_tutor.core.errors import (
    ContentNotReadyError,
    ExecutionError,
    GenerationError,
    NotEnrolledError,
    NotFoundError,
    RemediationError,
    SubmissionValidationError,
    TutorError,
)
from adaptive_tutor.core.mastery import MASTERY_THRESHOLD, QUESTION_WEIGHT, MasteryLevel

__all__ = [
    "MASTERY_THRESHOLD",
    "QUESTION_WEIGHT",
    "MasteryLevel",
    "TutorError",
    "NotFoundError",
    "NotEnrolledError",
    "GenerationError",
    "ContentNotReadyError",
    "RemediationError",
    "ExecutionError",
    "SubmissionValidationError",
]
