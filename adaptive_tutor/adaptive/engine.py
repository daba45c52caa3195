"""
Tutor Engine.

Main orchestration layer: wires the content generator, the sandbox and the
database into the adaptive services and exposes the operations the web
layer calls.

Usage:
    engine = TutorEngine.from_settings()
    view = engine.resolve_module_view(student_id, module_id)
    attempt = engine.record_attempt(student_id, module_id, answers)
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session, sessionmaker

from config import get_settings
from adaptive_tutor.adaptive.content_resolver import ModuleContentResolver
from adaptive_tutor.adaptive.progress_store import ProgressStore
from adaptive_tutor.adaptive.remediation import RemediationOrchestrator
from adaptive_tutor.adaptive.reports import ReportService
from adaptive_tutor.adaptive.views import (
    AttemptView,
    ModuleView,
    ProgressView,
    ReportView,
    StudentSummary,
)
from adaptive_tutor.content.generator import ContentGenerator, GeminiContentGenerator
from adaptive_tutor.curriculum.service import CurriculumService, SubjectView
from adaptive_tutor.db.database import get_session_factory
from adaptive_tutor.grading.base import CodeSandbox
from adaptive_tutor.grading.grader import MasteryGrader
from adaptive_tutor.grading.runner import CodeRunner, CodeRunResult
from adaptive_tutor.integrations.judge0_client import Judge0Client


class TutorEngine:
    """Facade over the adaptive services sharing one generator, sandbox and database."""

    def __init__(
        self,
        generator: ContentGenerator,
        sandbox: CodeSandbox,
        session_factory: sessionmaker[Session] | None = None,
        grading_max_workers: int | None = None,
    ):
        self.generator = generator
        self.sandbox = sandbox
        self.session_factory = session_factory or get_session_factory()

        self.curriculum = CurriculumService(self.session_factory)
        self.progress = ProgressStore(self.session_factory)
        self.resolver = ModuleContentResolver(generator, self.session_factory)
        self.grader = MasteryGrader(sandbox=sandbox, hints=generator, max_workers=grading_max_workers)
        self.remediation = RemediationOrchestrator(generator, self.grader, self.session_factory)
        self.reports = ReportService(generator, self.session_factory)
        self.runner = CodeRunner(sandbox)

    @classmethod
    def from_settings(cls) -> TutorEngine:
        """Build an engine backed by Gemini and Judge0 from environment settings."""
        settings = get_settings()
        return cls(
            generator=GeminiContentGenerator(),
            sandbox=Judge0Client(),
            grading_max_workers=settings.grading_max_workers,
        )

    # Curriculum
    def list_subjects(self) -> list[SubjectView]:
        return self.curriculum.list_subjects()

    def get_subject(self, subject_id: UUID) -> SubjectView:
        return self.curriculum.get_subject(subject_id)

    # Progress
    def enroll(self, student_id: str, subject_id: UUID) -> ProgressView:
        return self.progress.enroll(student_id, subject_id)

    def get_progress(self, student_id: str, subject_id: UUID) -> ProgressView:
        return self.progress.get_progress(student_id, subject_id)

    # Content and attempts
    def resolve_module_view(self, student_id: str, module_id: UUID) -> ModuleView:
        return self.resolver.resolve_module_view(student_id, module_id)

    def record_attempt(self, student_id: str, module_id: UUID, answers: Any) -> AttemptView:
        return self.remediation.record_attempt(student_id, module_id, answers)

    def retry_remediation(self, student_id: str, module_id: UUID) -> AttemptView:
        return self.remediation.retry_remediation(student_id, module_id)

    def run_code(self, language: str, source: str, stdin: str = "") -> CodeRunResult:
        return self.runner.run(language, source, stdin)

    # History and reports
    def attempts_for_student(self, student_id: str) -> list[AttemptView]:
        return self.reports.attempts_for_student(student_id)

    def attempts_for_module(self, module_id: UUID, student_id: str | None = None) -> list[AttemptView]:
        return self.reports.attempts_for_module(module_id, student_id)

    def generate_report(self, student_id: str, subject_id: UUID) -> ReportView:
        return self.reports.generate_report(student_id, subject_id)

    def reports_for_student(self, student_id: str) -> list[ReportView]:
        return self.reports.reports_for_student(student_id)

    def student_summaries(self) -> list[StudentSummary]:
        return self.reports.student_summaries()
