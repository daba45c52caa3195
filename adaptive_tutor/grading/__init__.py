"""
Quiz grading: submission parsing, per-type strategies and the mastery grader.
"""

from adaptive_tutor.grading.base import (
    FALLBACK_HINT,
    AnswerRecord,
    CodeSandbox,
    GradingContext,
    GradingStrategy,
    HintProvider,
    StrategyRegistry,
    TestCaseResult,
)
from adaptive_tutor.grading.grader import GradeReport, MasteryGrader
from adaptive_tutor.grading.runner import CodeRunner, CodeRunResult
from adaptive_tutor.grading.strategies import CodingStrategy, MCQStrategy
from adaptive_tutor.grading.submissions import SubmittedAnswer, parse_answers

__all__ = [
    "FALLBACK_HINT",
    "AnswerRecord",
    "CodeSandbox",
    "GradingContext",
    "GradingStrategy",
    "HintProvider",
    "StrategyRegistry",
    "TestCaseResult",
    "GradeReport",
    "MasteryGrader",
    "CodeRunner",
    "CodeRunResult",
    "CodingStrategy",
    "MCQStrategy",
    "SubmittedAnswer",
    "parse_answers",
]
