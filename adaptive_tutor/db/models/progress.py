"""
Per-student models: enrollment progress, overrides, attempts and reports.

Implements:
- StudentProgress: one row per (student, subject), created at enrollment
- ModuleCompletion: modules mastered by the student (grow-only set)
- ModuleOverride: student-specific remedial lesson + quiz for one module
- Attempt: immutable graded record of one quiz submission
- Report: write-once generated performance analysis

Completions and overrides are exposed on StudentProgress as dicts keyed by
module_id, and each table carries a unique (progress_id, module_id)
constraint, so "at most one per module" holds both in memory and in storage.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Text, UniqueConstraint, Uuid, event
from sqlalchemy.orm import Mapped, attribute_keyed_dict, mapped_column, relationship

from .base import Base, JSONType, utc_now


class StudentProgress(Base):
    """A student's enrollment in a subject; the unit of personalization."""

    __tablename__ = "student_progress"
    __table_args__ = (UniqueConstraint("student_id", "subject_id", name="uq_progress_student_subject"),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    student_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    subject_id: Mapped[UUID] = mapped_column(
        ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    completions: Mapped[dict[UUID, ModuleCompletion]] = relationship(
        collection_class=attribute_keyed_dict("module_id"),
        cascade="all, delete-orphan",
        back_populates="progress",
        lazy="selectin",
    )
    overrides: Mapped[dict[UUID, ModuleOverride]] = relationship(
        collection_class=attribute_keyed_dict("module_id"),
        cascade="all, delete-orphan",
        back_populates="progress",
        lazy="selectin",
    )

    @property
    def completed_module_ids(self) -> set[UUID]:
        return set(self.completions)

    def __repr__(self) -> str:
        return f"<StudentProgress {self.student_id} @ {self.subject_id}>"


class ModuleCompletion(Base):
    """A module the student has mastered."""

    __tablename__ = "module_completions"
    __table_args__ = (UniqueConstraint("progress_id", "module_id", name="uq_completion_module"),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    progress_id: Mapped[UUID] = mapped_column(
        ForeignKey("student_progress.id", ondelete="CASCADE"), nullable=False
    )
    module_id: Mapped[UUID] = mapped_column(
        ForeignKey("modules.id", ondelete="CASCADE"), nullable=False
    )
    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    progress: Mapped[StudentProgress] = relationship(back_populates="completions")


class ModuleOverride(Base):
    """Student-specific remedial content; takes precedence over master content."""

    __tablename__ = "module_overrides"
    __table_args__ = (UniqueConstraint("progress_id", "module_id", name="uq_override_module"),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    progress_id: Mapped[UUID] = mapped_column(
        ForeignKey("student_progress.id", ondelete="CASCADE"), nullable=False
    )
    module_id: Mapped[UUID] = mapped_column(
        ForeignKey("modules.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False)
    quiz_id: Mapped[UUID] = mapped_column(ForeignKey("quizzes.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    progress: Mapped[StudentProgress] = relationship(back_populates="overrides")


class Attempt(Base):
    """
    Immutable graded record of one quiz submission.

    ``quiz_id`` is the quiz actually administered (override or master).
    ``answers`` holds the serialized per-question AnswerRecords.
    """

    __tablename__ = "attempts"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    student_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    module_id: Mapped[UUID] = mapped_column(
        ForeignKey("modules.id", ondelete="CASCADE"), nullable=False, index=True
    )
    quiz_id: Mapped[UUID] = mapped_column(ForeignKey("quizzes.id"), nullable=False)
    answers: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    passed: Mapped[bool] = mapped_column(Boolean, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)


@event.listens_for(Attempt, "before_update")
def _reject_attempt_update(mapper, connection, target: Attempt) -> None:
    raise ValueError(f"Attempt {target.id} is immutable")


class Report(Base):
    """Write-once generated performance report."""

    __tablename__ = "reports"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    student_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    subject_id: Mapped[UUID] = mapped_column(
        ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False
    )
    analysis: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)


@event.listens_for(Report, "before_update")
def _reject_report_update(mapper, connection, target: Report) -> None:
    raise ValueError(f"Report {target.id} is write-once")
