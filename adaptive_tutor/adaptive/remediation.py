"""
Remediation Orchestrator.

Records a quiz submission and applies its consequences to the student's
progress:

    submission -> validate -> grade against the quiz actually shown
               -> persist Attempt
               -> passed: mark module completed, drop the override
               -> failed: generate remedial lesson + quiz, install override

The Attempt commits before remedial generation starts, so grading results
survive a generator failure. The override is installed in a single
transaction (new Quiz + override row), so a failure leaves the previous
override untouched. Generation failures surface as RemediationError
carrying the attempt id; ``retry_remediation`` re-runs generation from the
latest failed attempt.

Progress changes (completion, override install) run in their own
transaction after the Attempt commits. Two submissions racing on the same
module are resolved by re-applying the loser's change on a fresh read.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, TypeVar
from uuid import UUID

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from adaptive_tutor.adaptive.progress_store import ProgressStore
from adaptive_tutor.adaptive.views import AttemptView
from adaptive_tutor.content.generator import ContentGenerator
from adaptive_tutor.content.schemas import QuizPayload
from adaptive_tutor.core.errors import (
    GenerationError,
    NotEnrolledError,
    NotFoundError,
    RemediationError,
)
from adaptive_tutor.db import queries
from adaptive_tutor.db.database import session_scope
from adaptive_tutor.db.models import Attempt, Module, Quiz, StudentProgress
from adaptive_tutor.grading.grader import MasteryGrader
from adaptive_tutor.grading.submissions import parse_answers

T = TypeVar("T")

# A concurrent submission for the same student and module can win the
# completion/override unique constraint; the retry re-reads its result.
PROGRESS_WRITE_ATTEMPTS = 3


@dataclass
class _ModuleContext:
    """Snapshot of what remediation needs, read before leaving the session."""

    module_id: UUID
    subject_id: UUID
    title: str
    language: str | None
    quiz_id: UUID
    quiz: QuizPayload


class RemediationOrchestrator:
    """Composes grading, attempt persistence and override management."""

    def __init__(
        self,
        generator: ContentGenerator,
        grader: MasteryGrader,
        session_factory: sessionmaker[Session] | None = None,
    ):
        self.generator = generator
        self.grader = grader
        self._session_factory = session_factory

    def record_attempt(self, student_id: str, module_id: UUID, answers: Any) -> AttemptView:
        """
        Grade a submission and update the student's progress.

        Args:
            student_id: Authenticated student id
            module_id: Module whose quiz was taken
            answers: Raw submitted answers (parsed JSON list)

        Returns:
            The recorded attempt; ``remedial_available`` is set when a new
            override was installed

        Raises:
            SubmissionValidationError: Malformed submission (nothing recorded)
            NotFoundError: Unknown module, or the module has no quiz yet
            NotEnrolledError: Student is not enrolled in the module's subject
            RemediationError: Attempt recorded, but remedial generation or the
                progress update failed
        """
        submitted = parse_answers(answers)

        with session_scope(self._session_factory) as session:
            ctx = self._module_context(session, student_id, module_id)

        report = self.grader.grade_submission(ctx.quiz, submitted)

        with session_scope(self._session_factory) as session:
            attempt = Attempt(
                student_id=student_id,
                module_id=module_id,
                quiz_id=ctx.quiz_id,
                answers=[r.to_dict() for r in report.answer_records],
                score=report.aggregate_score,
                passed=report.passed,
            )
            session.add(attempt)
            session.flush()
            view = AttemptView.from_model(attempt)

        logger.info(
            f"Recorded attempt {view.id} for student {student_id} on module {module_id}: "
            f"score={view.score} passed={view.passed}"
        )
        if view.passed:
            self._write_progress(student_id, ctx.subject_id, view.id, self._completer(student_id, module_id))
            return view

        failed_texts = [
            q.text for q in ctx.quiz.questions if q.id not in report.correct_question_ids
        ]
        self._remediate(student_id, ctx, failed_texts, view.id)
        view.remedial_available = True
        return view

    def retry_remediation(self, student_id: str, module_id: UUID) -> AttemptView:
        """
        Re-run remedial generation for the student's latest attempt on a module.

        Raises:
            NotFoundError: Unknown module, or the latest attempt is missing or passed
            NotEnrolledError: Student is not enrolled in the module's subject
            RemediationError: Remedial generation failed again
        """
        with session_scope(self._session_factory) as session:
            module = session.get(Module, module_id)
            if module is None:
                raise NotFoundError("Module", module_id)
            self._progress(session, student_id, module.subject_id)

            latest = session.scalar(queries.attempts_for_module(module_id, student_id).limit(1))
            if latest is None or latest.passed:
                raise NotFoundError("Failed attempt", f"{student_id}/{module_id}")

            quiz_row = session.get(Quiz, latest.quiz_id)
            if quiz_row is None:
                raise NotFoundError("Quiz", latest.quiz_id)
            ctx = _ModuleContext(
                module_id=module.id,
                subject_id=module.subject_id,
                title=module.title,
                language=module.subject.language,
                quiz_id=quiz_row.id,
                quiz=QuizPayload.from_storage(quiz_row.questions),
            )
            correct = {r["question_id"] for r in latest.answers if r.get("correct")}
            view = AttemptView.from_model(latest)

        failed_texts = [q.text for q in ctx.quiz.questions if q.id not in correct]
        logger.info(f"Retrying remediation for attempt {view.id}")
        self._remediate(student_id, ctx, failed_texts, view.id)
        view.remedial_available = True
        return view

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _remediate(
        self,
        student_id: str,
        ctx: _ModuleContext,
        failed_texts: list[str],
        attempt_id: UUID,
    ) -> None:
        try:
            lesson = self.generator.generate_remedial_lesson(failed_texts, ctx.title, ctx.language)
            quiz = self.generator.generate_quiz(lesson, ctx.language)
        except GenerationError as e:
            logger.error(f"Remedial generation failed for attempt {attempt_id}: {e}")
            raise RemediationError(attempt_id, e) from e

        content = lesson.model_dump(mode="json")

        def install(session: Session, progress: StudentProgress) -> None:
            quiz_row = Quiz(
                module_id=ctx.module_id,
                questions=quiz.to_storage(),
                origin="remedial",
                student_id=student_id,
            )
            session.add(quiz_row)
            session.flush()
            ProgressStore.put_override(progress, ctx.module_id, content, quiz_row.id)

        self._write_progress(student_id, ctx.subject_id, attempt_id, install)
        logger.info(
            f"Installed override for student {student_id} on module {ctx.module_id} "
            f"({len(failed_texts)} missed questions)"
        )

    @staticmethod
    def _completer(student_id: str, module_id: UUID) -> Callable[[Session, StudentProgress], None]:
        def complete(session: Session, progress: StudentProgress) -> None:
            if ProgressStore.mark_completed(progress, module_id):
                logger.info(f"Student {student_id} completed module {module_id}")
            if ProgressStore.clear_override(progress, module_id):
                logger.info(f"Cleared override for student {student_id} on module {module_id}")

        return complete

    def _write_progress(
        self,
        student_id: str,
        subject_id: UUID,
        attempt_id: UUID,
        apply: Callable[[Session, StudentProgress], T],
    ) -> T:
        """
        Apply a change to the student's progress in its own transaction.

        A unique-constraint conflict or a vanished row means another
        submission changed the same progress first; the change is re-applied
        on a fresh read.

        Raises:
            RemediationError: The change still conflicted after the last attempt
        """
        for attempt in range(1, PROGRESS_WRITE_ATTEMPTS + 1):
            try:
                with session_scope(self._session_factory) as session:
                    progress = self._progress(session, student_id, subject_id)
                    result = apply(session, progress)
                return result
            except (IntegrityError, StaleDataError) as e:
                if attempt == PROGRESS_WRITE_ATTEMPTS:
                    logger.error(f"Progress update for attempt {attempt_id} kept conflicting: {e}")
                    raise RemediationError(attempt_id, e) from e
                logger.warning(
                    f"Concurrent progress update for student {student_id} "
                    f"(attempt {attempt}/{PROGRESS_WRITE_ATTEMPTS}), re-reading"
                )

    def _module_context(self, session: Session, student_id: str, module_id: UUID) -> _ModuleContext:
        module = session.get(Module, module_id)
        if module is None:
            raise NotFoundError("Module", module_id)
        progress = self._progress(session, student_id, module.subject_id)

        override = progress.overrides.get(module_id)
        quiz_id = override.quiz_id if override is not None else module.quiz_id
        quiz_row = session.get(Quiz, quiz_id) if quiz_id is not None else None
        if quiz_row is None:
            raise NotFoundError("Quiz for module", module_id)

        return _ModuleContext(
            module_id=module.id,
            subject_id=module.subject_id,
            title=module.title,
            language=module.subject.language,
            quiz_id=quiz_row.id,
            quiz=QuizPayload.from_storage(quiz_row.questions),
        )

    @staticmethod
    def _progress(session: Session, student_id: str, subject_id: UUID) -> StudentProgress:
        progress = ProgressStore.load(session, student_id, subject_id)
        if progress is None:
            raise NotEnrolledError(student_id, subject_id)
        return progress
