"""
Module Content Resolver.

Returns the lesson and quiz a student should see for a module:

1. The student's override, when one exists (always wins)
2. Otherwise the shared master content, generated on first access

Master generation is serialized per module with a compare-and-set on
``Module.generation_state``:

    claim   empty -> generating   (UPDATE ... WHERE state='empty', committed)
    build   call the generator outside any transaction
    install insert Quiz + set content/quiz_id/state='ready' in ONE transaction,
            guarded by the claim token
    release generating -> empty on any failure

A reader that loses the claim polls until the module is ready, retries the
claim if the winner released it, and gives up with ContentNotReadyError
after ``generation_wait_seconds``. Claims older than
``generation_lease_seconds`` are considered abandoned and may be taken over;
the previous owner's install then matches no row and rolls back.
"""

from __future__ import annotations

import time
from datetime import timedelta
from typing import Any
from uuid import UUID, uuid4

from loguru import logger
from sqlalchemy.orm import Session, sessionmaker

from config import get_settings
from adaptive_tutor.adaptive.progress_store import ProgressStore
from adaptive_tutor.adaptive.views import ModuleView
from adaptive_tutor.content.generator import ContentGenerator
from adaptive_tutor.content.schemas import Lesson, QuizPayload
from adaptive_tutor.core.errors import (
    ContentNotReadyError,
    GenerationError,
    NotEnrolledError,
    NotFoundError,
)
from adaptive_tutor.db import queries
from adaptive_tutor.db.database import session_scope
from adaptive_tutor.db.models import GenerationState, Module, Quiz, utc_now


class ModuleContentResolver:
    """Resolves per-student module views and materializes master content."""

    def __init__(
        self,
        generator: ContentGenerator,
        session_factory: sessionmaker[Session] | None = None,
        lease_seconds: int | None = None,
        wait_seconds: float | None = None,
        poll_interval_seconds: float | None = None,
    ):
        settings = get_settings()
        self.generator = generator
        self._session_factory = session_factory
        self.lease = timedelta(
            seconds=lease_seconds if lease_seconds is not None else settings.generation_lease_seconds
        )
        self.wait_seconds = (
            wait_seconds if wait_seconds is not None else settings.generation_wait_seconds
        )
        self.poll_interval = (
            poll_interval_seconds
            if poll_interval_seconds is not None
            else settings.generation_poll_interval_seconds
        )

    def resolve_module_view(self, student_id: str, module_id: UUID) -> ModuleView:
        """
        Get the content and quiz a student should see for a module.

        Args:
            student_id: Authenticated student id
            module_id: Module to open

        Returns:
            ModuleView tagged with completion status and content source

        Raises:
            NotFoundError: Module (or a referenced quiz) does not exist
            NotEnrolledError: Student has no progress record for the module's subject
            GenerationError: Master content could not be generated
            ContentNotReadyError: Another request is still generating the content
        """
        with session_scope(self._session_factory) as session:
            module = self._get_module(session, module_id)
            progress = ProgressStore.load(session, student_id, module.subject_id)
            if progress is None:
                raise NotEnrolledError(student_id, module.subject_id)

            is_completed = module_id in progress.completions
            override = progress.overrides.get(module_id)
            if override is not None:
                quiz = self._get_quiz(session, override.quiz_id)
                return self._view(
                    module, override.content, override.quiz_id, quiz, is_completed, "override"
                )

            if module.is_ready:
                quiz = self._get_quiz(session, module.quiz_id)
                return self._view(module, module.content, module.quiz_id, quiz, is_completed, "master")

        self.ensure_master_content(module_id)

        with session_scope(self._session_factory) as session:
            module = self._get_module(session, module_id)
            quiz = self._get_quiz(session, module.quiz_id)
            return self._view(module, module.content, module.quiz_id, quiz, is_completed, "master")

    def ensure_master_content(self, module_id: UUID) -> None:
        """
        Make sure a module's master content exists, generating it at most once.

        Raises:
            NotFoundError: Unknown module
            GenerationError: This request owned generation and it failed
            ContentNotReadyError: Another request kept the claim past the wait budget
        """
        deadline = time.monotonic() + self.wait_seconds
        waited = False
        while True:
            state = self._generation_state(module_id)
            if state == GenerationState.READY.value:
                if waited:
                    logger.debug(f"Module {module_id} content became ready while waiting")
                return

            token = uuid4()
            if self._claim(module_id, token):
                logger.info(f"Claimed master content generation for module {module_id}")
                self._generate_and_install(module_id, token)
                return

            if time.monotonic() >= deadline:
                logger.warning(f"Gave up waiting for module {module_id} generation")
                raise ContentNotReadyError(module_id)
            if not waited:
                logger.debug(f"Module {module_id} is being generated elsewhere, waiting")
                waited = True
            time.sleep(self.poll_interval)

    # -------------------------------------------------------------------------
    # Generation protocol
    # -------------------------------------------------------------------------

    def _generation_state(self, module_id: UUID) -> str:
        with session_scope(self._session_factory) as session:
            return self._get_module(session, module_id).generation_state

    def _claim(self, module_id: UUID, token: UUID) -> bool:
        with session_scope(self._session_factory) as session:
            result = session.execute(
                queries.claim_generation(module_id, token, utc_now(), self.lease)
            )
            return result.rowcount == 1

    def _release(self, module_id: UUID, token: UUID) -> None:
        with session_scope(self._session_factory) as session:
            result = session.execute(queries.release_generation(module_id, token))
        if result.rowcount:
            logger.info(f"Released generation claim for module {module_id}")

    def _generate_and_install(self, module_id: UUID, token: UUID) -> None:
        with session_scope(self._session_factory) as session:
            module = self._get_module(session, module_id)
            topic = module.seed_topic
            language = module.subject.language
            context: dict[str, Any] = {
                "module_title": module.title,
                "subject": module.subject.title,
                "language": language,
            }

        try:
            lesson = self.generator.generate_lesson(topic, context)
            quiz = self.generator.generate_quiz(lesson, language)
            self._install(module_id, token, lesson, quiz)
        except Exception as e:
            logger.error(f"Master content generation failed for module {module_id}: {e}")
            self._release(module_id, token)
            if isinstance(e, GenerationError):
                raise
            raise GenerationError(f"Master content generation failed for module {module_id}: {e}") from e

        logger.info(f"Installed master content for module {module_id} ({len(quiz.questions)} questions)")

    def _install(self, module_id: UUID, token: UUID, lesson: Lesson, quiz: QuizPayload) -> None:
        """Insert the quiz and publish the content atomically, or not at all."""
        with session_scope(self._session_factory) as session:
            quiz_row = Quiz(module_id=module_id, questions=quiz.to_storage(), origin="master")
            session.add(quiz_row)
            session.flush()
            result = session.execute(
                queries.install_master_content(
                    module_id, token, lesson.model_dump(mode="json"), quiz_row.id
                )
            )
            if result.rowcount != 1:
                raise GenerationError(f"Generation claim for module {module_id} was lost")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _get_module(session: Session, module_id: UUID) -> Module:
        module = session.get(Module, module_id)
        if module is None:
            raise NotFoundError("Module", module_id)
        return module

    @staticmethod
    def _get_quiz(session: Session, quiz_id: UUID | None) -> QuizPayload:
        quiz = session.get(Quiz, quiz_id) if quiz_id is not None else None
        if quiz is None:
            raise NotFoundError("Quiz", quiz_id)
        return QuizPayload.from_storage(quiz.questions)

    @staticmethod
    def _view(
        module: Module,
        content: dict[str, Any] | None,
        quiz_id: UUID,
        quiz: QuizPayload,
        is_completed: bool,
        source: str,
    ) -> ModuleView:
        return ModuleView(
            module_id=module.id,
            subject_id=module.subject_id,
            title=module.title,
            order=module.order,
            content=dict(content or {}),
            quiz_id=quiz_id,
            quiz=quiz,
            is_completed=is_completed,
            source=source,
            video_links=list(module.video_links or []),
        )
