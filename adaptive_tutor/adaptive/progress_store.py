"""
Progress Store.

Enrollment and the per-student progress record: completed modules and
remedial overrides, each keyed by module id.

The session-level helpers (``load``, ``put_override``, ``clear_override``,
``mark_completed``) mutate a StudentProgress inside a caller's
transaction; the public methods open their own.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from adaptive_tutor.adaptive.views import ProgressView
from adaptive_tutor.core.errors import NotFoundError
from adaptive_tutor.db import queries
from adaptive_tutor.db.database import session_scope
from adaptive_tutor.db.models import (
    ModuleCompletion,
    ModuleOverride,
    StudentProgress,
    Subject,
)


class ProgressStore:
    """Owns StudentProgress records."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None):
        self._session_factory = session_factory

    def enroll(self, student_id: str, subject_id: UUID) -> ProgressView:
        """
        Create or return the student's progress for a subject.

        Enrolling twice returns the existing record unchanged. Concurrent
        enrollments are resolved by the (student, subject) unique constraint.

        Raises:
            NotFoundError: Unknown subject
        """
        try:
            with session_scope(self._session_factory) as session:
                if session.get(Subject, subject_id) is None:
                    raise NotFoundError("Subject", subject_id)
                progress = self.load(session, student_id, subject_id)
                if progress is not None:
                    logger.debug(f"Student {student_id} already enrolled in {subject_id}")
                    return ProgressView.from_model(progress)

                progress = StudentProgress(student_id=student_id, subject_id=subject_id)
                session.add(progress)
                session.flush()
                logger.info(f"Enrolled student {student_id} in subject {subject_id}")
                return ProgressView.from_model(progress)
        except IntegrityError:
            logger.debug(f"Concurrent enrollment for {student_id} in {subject_id}, re-reading")
            return self.get_progress(student_id, subject_id)

    def get_progress(self, student_id: str, subject_id: UUID) -> ProgressView:
        """
        Raises:
            NotFoundError: Student is not enrolled in the subject
        """
        with session_scope(self._session_factory) as session:
            progress = self.load(session, student_id, subject_id)
            if progress is None:
                raise NotFoundError("Progress", f"{student_id}/{subject_id}")
            return ProgressView.from_model(progress)

    def list_progress(self, student_id: str) -> list[ProgressView]:
        with session_scope(self._session_factory) as session:
            rows = session.scalars(
                queries.progress_for_student(student_id)
            ).all()
            return [ProgressView.from_model(p) for p in rows]

    # -------------------------------------------------------------------------
    # Session-level helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def load(session: Session, student_id: str, subject_id: UUID) -> StudentProgress | None:
        return session.scalar(queries.progress_for(student_id, subject_id))

    @staticmethod
    def put_override(
        progress: StudentProgress,
        module_id: UUID,
        content: dict[str, Any],
        quiz_id: UUID,
    ) -> ModuleOverride:
        """Insert the override for a module, or replace the existing one in place."""
        override = progress.overrides.get(module_id)
        if override is None:
            override = ModuleOverride(module_id=module_id, content=content, quiz_id=quiz_id)
            progress.overrides[module_id] = override
        else:
            override.content = content
            override.quiz_id = quiz_id
        return override

    @staticmethod
    def clear_override(progress: StudentProgress, module_id: UUID) -> bool:
        return progress.overrides.pop(module_id, None) is not None

    @staticmethod
    def mark_completed(progress: StudentProgress, module_id: UUID) -> bool:
        """Add a module to the completed set; no-op if already present."""
        if module_id in progress.completions:
            return False
        progress.completions[module_id] = ModuleCompletion(module_id=module_id)
        return True
