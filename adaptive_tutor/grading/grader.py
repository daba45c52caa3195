"""
Mastery Grader.

Grades a submission against the quiz actually administered and decides
pass/fail against MASTERY_THRESHOLD.

Submission handling:
- Answers referencing a question id not in the quiz are dropped
- When a question is answered more than once, the first answer wins
- Unanswered questions count as zero
- A type tag that contradicts the question's type is a validation error

Coding questions run on a thread pool (one question per worker); their
test cases run in order inside the worker. Records come back in quiz
order.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from loguru import logger

from config import get_settings
from adaptive_tutor.content.schemas import QuizPayload
from adaptive_tutor.core.errors import SubmissionValidationError
from adaptive_tutor.core.mastery import aggregate_score, is_mastered
from adaptive_tutor.grading import strategies  # noqa: F401  (registers strategies)
from adaptive_tutor.grading.base import (
    AnswerRecord,
    CodeSandbox,
    GradingContext,
    HintProvider,
    StrategyRegistry,
)
from adaptive_tutor.grading.submissions import SubmittedAnswer


@dataclass
class GradeReport:
    """Result of grading one submission."""

    answer_records: list[AnswerRecord] = field(default_factory=list)
    aggregate_score: int = 0
    passed: bool = False
    question_count: int = 0

    @property
    def correct_question_ids(self) -> set[str]:
        return {r.question_id for r in self.answer_records if r.correct}


class MasteryGrader:
    """Dispatches each answer to the strategy registered for its question type."""

    def __init__(
        self,
        sandbox: CodeSandbox | None = None,
        hints: HintProvider | None = None,
        max_workers: int | None = None,
    ):
        self.context = GradingContext(sandbox=sandbox, hints=hints)
        self.max_workers = max(1, max_workers or get_settings().grading_max_workers)

    def grade_submission(self, quiz: QuizPayload, answers: list[SubmittedAnswer]) -> GradeReport:
        """
        Grade answers against a quiz.

        Args:
            quiz: The quiz shown to the student (override or master)
            answers: Parsed submission

        Returns:
            GradeReport with per-question records, aggregate score and pass flag

        Raises:
            SubmissionValidationError: An answer's type tag contradicts its question
        """
        questions = quiz.question_by_id()
        selected: dict[str, SubmittedAnswer] = {}
        for answer in answers:
            question = questions.get(answer.question_id)
            if question is None:
                logger.debug(f"Dropping answer for unknown question {answer.question_id}")
                continue
            if answer.type is not None and answer.type != question.type:
                raise SubmissionValidationError(
                    f"Answer for question {answer.question_id} is tagged {answer.type!r}, "
                    f"but the question is {question.type!r}"
                )
            if answer.question_id in selected:
                logger.debug(f"Ignoring duplicate answer for question {answer.question_id}")
                continue
            selected[answer.question_id] = answer

        answered = [q for q in quiz.questions if q.id in selected]
        coding = [q for q in answered if q.type == "coding"]

        records: dict[str, AnswerRecord] = {}
        for question in answered:
            if question.type != "coding":
                records[question.id] = self._grade_one(question, selected[question.id])

        if len(coding) > 1 and self.max_workers > 1:
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(coding))) as pool:
                futures = {
                    q.id: pool.submit(self._grade_one, q, selected[q.id]) for q in coding
                }
                for question_id, future in futures.items():
                    records[question_id] = future.result()
        else:
            for question in coding:
                records[question.id] = self._grade_one(question, selected[question.id])

        ordered = [records[q.id] for q in answered]
        score = aggregate_score([r.score for r in ordered], len(quiz.questions))
        report = GradeReport(
            answer_records=ordered,
            aggregate_score=score,
            passed=is_mastered(score),
            question_count=len(quiz.questions),
        )
        logger.debug(
            f"Graded {len(ordered)}/{len(quiz.questions)} answered questions: "
            f"score={score} passed={report.passed}"
        )
        return report

    def _grade_one(self, question, answer: SubmittedAnswer) -> AnswerRecord:
        return StrategyRegistry.for_question(question).grade(question, answer, self.context)
