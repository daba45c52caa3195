"""
Plain data views returned by the adaptive services.

Services never hand out ORM instances: every result is built inside the
session and is safe to serialize after it closes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from adaptive_tutor.content.schemas import QuizPayload
from adaptive_tutor.core.mastery import MasteryLevel
from adaptive_tutor.db.models import Attempt, Report, StudentProgress
from adaptive_tutor.grading.base import AnswerRecord


@dataclass
class ModuleView:
    """What a student sees for one module: the lesson and the quiz to take."""

    module_id: UUID
    subject_id: UUID
    title: str
    order: int
    content: dict[str, Any]
    quiz_id: UUID
    quiz: QuizPayload
    is_completed: bool
    source: str  # "override" or "master"
    video_links: list[str] = field(default_factory=list)

    @property
    def is_remedial(self) -> bool:
        return self.source == "override"


@dataclass
class OverrideView:
    module_id: UUID
    quiz_id: UUID
    title: str | None
    updated_at: datetime | None


@dataclass
class ProgressView:
    id: UUID
    student_id: str
    subject_id: UUID
    completed_module_ids: set[UUID] = field(default_factory=set)
    overrides: dict[UUID, OverrideView] = field(default_factory=dict)
    created_at: datetime | None = None

    @classmethod
    def from_model(cls, progress: StudentProgress) -> ProgressView:
        return cls(
            id=progress.id,
            student_id=progress.student_id,
            subject_id=progress.subject_id,
            completed_module_ids=set(progress.completions),
            overrides={
                module_id: OverrideView(
                    module_id=module_id,
                    quiz_id=override.quiz_id,
                    title=(override.content or {}).get("title"),
                    updated_at=override.updated_at,
                )
                for module_id, override in progress.overrides.items()
            },
            created_at=progress.created_at,
        )


@dataclass
class AttemptView:
    """Immutable graded attempt, plus whether remedial content was installed."""

    id: UUID
    student_id: str
    module_id: UUID
    quiz_id: UUID
    answer_records: list[AnswerRecord]
    score: int
    passed: bool
    created_at: datetime | None = None
    remedial_available: bool = False

    @property
    def mastery_level(self) -> MasteryLevel:
        return MasteryLevel.from_score(self.score)

    @classmethod
    def from_model(cls, attempt: Attempt, remedial_available: bool = False) -> AttemptView:
        return cls(
            id=attempt.id,
            student_id=attempt.student_id,
            module_id=attempt.module_id,
            quiz_id=attempt.quiz_id,
            answer_records=[AnswerRecord.from_dict(r) for r in attempt.answers],
            score=attempt.score,
            passed=attempt.passed,
            created_at=attempt.created_at,
            remedial_available=remedial_available,
        )


@dataclass
class ReportView:
    id: UUID
    student_id: str
    subject_id: UUID
    analysis: dict[str, Any]
    created_at: datetime | None = None

    @classmethod
    def from_model(cls, report: Report) -> ReportView:
        return cls(
            id=report.id,
            student_id=report.student_id,
            subject_id=report.subject_id,
            analysis=dict(report.analysis),
            created_at=report.created_at,
        )


@dataclass
class StudentSummary:
    """Per-student aggregate over all attempts (teacher dashboard row)."""

    student_id: str
    attempts_count: int
    average_score: int
    passed_count: int
    last_attempt_at: datetime | None
