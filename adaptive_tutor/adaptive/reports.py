"""
Attempt history, generated performance reports and teacher summaries.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from loguru import logger
from sqlalchemy.orm import Session, sessionmaker

from adaptive_tutor.adaptive.views import AttemptView, ReportView, StudentSummary
from adaptive_tutor.content.generator import ContentGenerator
from adaptive_tutor.core.errors import NotFoundError
from adaptive_tutor.core.mastery import round_half_up
from adaptive_tutor.db import queries
from adaptive_tutor.db.database import session_scope
from adaptive_tutor.db.models import Report, Subject


class ReportService:
    """Read models over attempts, plus write-once generated reports."""

    def __init__(
        self,
        generator: ContentGenerator | None = None,
        session_factory: sessionmaker[Session] | None = None,
    ):
        self.generator = generator
        self._session_factory = session_factory

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def attempts_for_student(self, student_id: str) -> list[AttemptView]:
        """All attempts of a student, newest first."""
        with session_scope(self._session_factory) as session:
            rows = session.scalars(queries.attempts_for_student(student_id)).all()
            return [AttemptView.from_model(a) for a in rows]

    def attempts_for_module(self, module_id: UUID, student_id: str | None = None) -> list[AttemptView]:
        """Attempts on a module (optionally one student's), newest first."""
        with session_scope(self._session_factory) as session:
            rows = session.scalars(queries.attempts_for_module(module_id, student_id)).all()
            return [AttemptView.from_model(a) for a in rows]

    # -------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------

    def generate_report(self, student_id: str, subject_id: UUID) -> ReportView:
        """
        Generate and store a performance report for one subject.

        Raises:
            NotFoundError: Unknown subject, or no attempts in it
            GenerationError: The generator failed (nothing stored)
        """
        if self.generator is None:
            raise ValueError("A content generator is required to generate reports")

        with session_scope(self._session_factory) as session:
            subject = session.get(Subject, subject_id)
            if subject is None:
                raise NotFoundError("Subject", subject_id)
            rows = session.execute(queries.attempts_in_subject(student_id, subject_id)).all()
            if not rows:
                raise NotFoundError("Attempts", f"{student_id}/{subject.key}")
            summary = [self._attempt_summary(attempt, title, order) for attempt, title, order in rows]

        analysis = self.generator.generate_report(student_id, summary)

        with session_scope(self._session_factory) as session:
            report = Report(
                student_id=student_id,
                subject_id=subject_id,
                analysis=analysis.model_dump(mode="json"),
            )
            session.add(report)
            session.flush()
            view = ReportView.from_model(report)

        logger.info(f"Generated report {view.id} for student {student_id} ({len(summary)} attempts)")
        return view

    def reports_for_student(self, student_id: str) -> list[ReportView]:
        with session_scope(self._session_factory) as session:
            rows = session.scalars(queries.reports_for_student(student_id)).all()
            return [ReportView.from_model(r) for r in rows]

    # -------------------------------------------------------------------------
    # Teacher view
    # -------------------------------------------------------------------------

    def student_summaries(self) -> list[StudentSummary]:
        """Per-student attempt count, mean score, passed count and last attempt."""
        with session_scope(self._session_factory) as session:
            rows = session.execute(queries.student_summaries()).all()
        return [
            StudentSummary(
                student_id=row.student_id,
                attempts_count=row.attempts_count,
                average_score=round_half_up(float(row.average_score or 0)),
                passed_count=int(row.passed_count or 0),
                last_attempt_at=row.last_attempt_at,
            )
            for row in rows
        ]

    @staticmethod
    def _attempt_summary(attempt, module_title: str, module_order: int) -> dict[str, Any]:
        return {
            "module": module_title,
            "module_order": module_order,
            "score": attempt.score,
            "passed": attempt.passed,
            "questions_answered": len(attempt.answers),
            "questions_correct": sum(1 for r in attempt.answers if r.get("correct")),
            "created_at": attempt.created_at.isoformat() if attempt.created_at else None,
        }
