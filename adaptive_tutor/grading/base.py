"""
Base Grading Strategy.

Provides the abstract base for per-question grading strategies, the
records they produce, and a registry keyed by question type.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Protocol

from loguru import logger

from adaptive_tutor.content.schemas import CodingQuestion, MCQQuestion
from adaptive_tutor.grading.submissions import SubmittedAnswer
from adaptive_tutor.integrations.judge0_client import ExecutionResult

FALLBACK_HINT = (
    "Compare your program's output with the expected output for the failing input, "
    "and check edge cases and output formatting."
)


# =============================================================================
# Collaborators
# =============================================================================


class CodeSandbox(Protocol):
    """Runs one program against one stdin."""

    def run(self, language: str, source_code: str, stdin: str = "") -> ExecutionResult:
        ...


class HintProvider(Protocol):
    """Generates a hint for a failing coding submission."""

    def generate_hint(
        self,
        problem_statement: str,
        submitted_code: str,
        failed_case: dict[str, Any],
        language: str,
    ) -> str:
        ...


@dataclass
class GradingContext:
    """External services a strategy may call while grading."""

    sandbox: CodeSandbox | None = None
    hints: HintProvider | None = None


# =============================================================================
# Grading Records
# =============================================================================


@dataclass
class TestCaseResult:
    """Outcome of one coding test case."""

    __test__ = False  # not a pytest test class

    passed: bool
    input: str
    expected_output: str
    actual_output: str = ""
    status: str = ""
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "input": self.input,
            "expected_output": self.expected_output,
            "actual_output": self.actual_output,
            "status": self.status,
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TestCaseResult:
        return cls(
            passed=data.get("passed", False),
            input=data.get("input", ""),
            expected_output=data.get("expected_output", ""),
            actual_output=data.get("actual_output", ""),
            status=data.get("status", ""),
            error=data.get("error"),
        )


@dataclass
class AnswerRecord:
    """
    Graded answer to one question.

    Stored inside the Attempt; ``score`` is between 0 and QUESTION_WEIGHT.
    """

    question_id: str
    question_type: str
    correct: bool
    score: int
    chosen_index: int | None = None
    submitted_code: str | None = None
    test_case_results: list[TestCaseResult] = field(default_factory=list)
    generated_hint: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "question_id": self.question_id,
            "question_type": self.question_type,
            "correct": self.correct,
            "score": self.score,
            "chosen_index": self.chosen_index,
            "submitted_code": self.submitted_code,
            "test_case_results": [r.to_dict() for r in self.test_case_results],
            "generated_hint": self.generated_hint,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnswerRecord:
        return cls(
            question_id=data["question_id"],
            question_type=data.get("question_type", "mcq"),
            correct=data.get("correct", False),
            score=data.get("score", 0),
            chosen_index=data.get("chosen_index"),
            submitted_code=data.get("submitted_code"),
            test_case_results=[TestCaseResult.from_dict(r) for r in data.get("test_case_results", [])],
            generated_hint=data.get("generated_hint"),
        )


# =============================================================================
# Strategy Registry
# =============================================================================


class StrategyRegistry:
    """
    Registry for grading strategies, keyed by question type.

    Example:
        @StrategyRegistry.register("mcq")
        class MCQStrategy(GradingStrategy):
            ...

        strategy = StrategyRegistry.for_question(question)
    """

    _strategies: ClassVar[dict[str, type[GradingStrategy]]] = {}

    @classmethod
    def register(cls, question_type: str):
        """
        Decorator to register a grading strategy.

        Args:
            question_type: Discriminant value this strategy handles
        """

        def decorator(strategy_class: type[GradingStrategy]):
            cls._strategies[question_type] = strategy_class
            strategy_class.question_type = question_type
            logger.debug(f"Registered strategy: {question_type} -> {strategy_class.__name__}")
            return strategy_class

        return decorator

    @classmethod
    def get(cls, question_type: str) -> type[GradingStrategy]:
        """Get strategy class by question type."""
        if question_type not in cls._strategies:
            raise KeyError(f"No strategy registered for question type: {question_type}")
        return cls._strategies[question_type]

    @classmethod
    def for_question(cls, question: MCQQuestion | CodingQuestion) -> GradingStrategy:
        """Create a strategy instance for a question."""
        return cls.get(question.type)()

    @classmethod
    def list_strategies(cls) -> dict[str, type[GradingStrategy]]:
        return dict(cls._strategies)


# =============================================================================
# Base Grading Strategy
# =============================================================================


class GradingStrategy(ABC):
    """
    Abstract base class for grading strategies.

    Each strategy grades one question type and returns an AnswerRecord
    worth between 0 and QUESTION_WEIGHT points.
    """

    question_type: ClassVar[str] = ""

    @abstractmethod
    def grade(
        self,
        question: MCQQuestion | CodingQuestion,
        answer: SubmittedAnswer,
        context: GradingContext,
    ) -> AnswerRecord:
        """
        Grade one answer.

        Args:
            question: The administered question
            answer: The student's answer to it
            context: External services available to the strategy

        Returns:
            AnswerRecord with correctness and per-question score
        """
        ...
