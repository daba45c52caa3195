"""
Grading Strategy Implementations.

Concrete strategies for each question type. MCQ and coding questions are
both worth QUESTION_WEIGHT points, regardless of how many test cases a
coding question has.
"""

from __future__ import annotations

from loguru import logger

from adaptive_tutor.content.schemas import CodingQuestion, MCQQuestion
from adaptive_tutor.core.errors import ExecutionError
from adaptive_tutor.core.mastery import QUESTION_WEIGHT, round_half_up
from adaptive_tutor.grading.base import (
    FALLBACK_HINT,
    AnswerRecord,
    GradingContext,
    GradingStrategy,
    StrategyRegistry,
    TestCaseResult,
)
from adaptive_tutor.grading.submissions import SubmittedAnswer

# =============================================================================
# MCQ Strategy
# =============================================================================


@StrategyRegistry.register("mcq")
class MCQStrategy(GradingStrategy):
    """All-or-nothing comparison of the chosen index with the correct index."""

    def grade(
        self,
        question: MCQQuestion,
        answer: SubmittedAnswer,
        context: GradingContext,
    ) -> AnswerRecord:
        correct = answer.chosen_index is not None and answer.chosen_index == question.correct_index
        return AnswerRecord(
            question_id=question.id,
            question_type=question.type,
            correct=correct,
            score=QUESTION_WEIGHT if correct else 0,
            chosen_index=answer.chosen_index,
        )


# =============================================================================
# Coding Strategy
# =============================================================================


@StrategyRegistry.register("coding")
class CodingStrategy(GradingStrategy):
    """
    Run the submitted code against every test case, in order.

    A test case passes iff the sandbox accepts the run and the trimmed
    stdout equals the trimmed expected output. Sandbox errors fail the
    test case and grading continues with the next one.

    Score = round(QUESTION_WEIGHT * passed / total). When any test case
    fails, a hint for the first failing case is attached; hint failures
    fall back to FALLBACK_HINT.
    """

    def grade(
        self,
        question: CodingQuestion,
        answer: SubmittedAnswer,
        context: GradingContext,
    ) -> AnswerRecord:
        code = answer.submitted_code or ""
        results = [self._run_case(question, code, case.input, case.expected_output, context) for case in question.test_cases]

        passed_count = sum(1 for r in results if r.passed)
        total = len(results)
        score = round_half_up(QUESTION_WEIGHT * passed_count / total)
        correct = passed_count == total

        hint = None
        if not correct:
            first_failure = next(r for r in results if not r.passed)
            hint = self._request_hint(question, code, first_failure, context)

        return AnswerRecord(
            question_id=question.id,
            question_type=question.type,
            correct=correct,
            score=score,
            submitted_code=answer.submitted_code,
            test_case_results=results,
            generated_hint=hint,
        )

    def _run_case(
        self,
        question: CodingQuestion,
        code: str,
        stdin: str,
        expected: str,
        context: GradingContext,
    ) -> TestCaseResult:
        if not code.strip():
            return TestCaseResult(passed=False, input=stdin, expected_output=expected, error="No code submitted")
        if context.sandbox is None:
            return TestCaseResult(passed=False, input=stdin, expected_output=expected, error="No sandbox configured")

        try:
            execution = context.sandbox.run(question.language, code, stdin)
        except ExecutionError as e:
            logger.warning(f"Sandbox failed for question {question.id}: {e}")
            return TestCaseResult(passed=False, input=stdin, expected_output=expected, error=str(e))

        actual = execution.stdout.strip()
        passed = execution.accepted and actual == expected.strip()
        error = None
        if not execution.accepted:
            error = execution.compile_output or execution.stderr or execution.message or execution.status_description
        return TestCaseResult(
            passed=passed,
            input=stdin,
            expected_output=expected,
            actual_output=actual,
            status=execution.status_description,
            error=error or None,
        )

    def _request_hint(
        self,
        question: CodingQuestion,
        code: str,
        failure: TestCaseResult,
        context: GradingContext,
    ) -> str:
        if context.hints is None:
            return FALLBACK_HINT
        try:
            hint = context.hints.generate_hint(
                question.problem_statement,
                code,
                {
                    "input": failure.input,
                    "expected_output": failure.expected_output,
                    "actual_output": failure.actual_output or failure.error or "",
                },
                question.language,
            )
        except Exception as e:  # Hints never fail grading
            logger.warning(f"Hint generation failed for question {question.id}: {e}")
            return FALLBACK_HINT
        return hint or FALLBACK_HINT
