"""
Centralized Queries for the Tutor Engine.

Reusable SQLAlchemy statements shared by the adaptive services. The
generation statements implement the compare-and-set protocol on
``Module.generation_state``; callers inspect ``result.rowcount`` to learn
whether the transition applied.

Usage:
    from adaptive_tutor.db import queries

    result = session.execute(queries.claim_generation(module_id, token, now, lease))
    won = result.rowcount == 1
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

from sqlalchemy import Select, Update, and_, case, func, or_, select, update

from adaptive_tutor.db.models import (
    Attempt,
    GenerationState,
    Module,
    Report,
    StudentProgress,
)

# =============================================================================
# MASTER CONTENT GENERATION (compare-and-set)
# =============================================================================


def claim_generation(module_id: UUID, token: UUID, now: datetime, lease: timedelta) -> Update:
    """empty -> generating, or take over a generating claim older than ``lease``."""
    return (
        update(Module)
        .where(
            Module.id == module_id,
            or_(
                Module.generation_state == GenerationState.EMPTY.value,
                and_(
                    Module.generation_state == GenerationState.GENERATING.value,
                    Module.generation_started_at < now - lease,
                ),
            ),
        )
        .values(
            generation_state=GenerationState.GENERATING.value,
            generation_token=token,
            generation_started_at=now,
        )
        .execution_options(synchronize_session=False)
    )


def install_master_content(
    module_id: UUID, token: UUID, content: dict[str, Any], quiz_id: UUID
) -> Update:
    """generating -> ready, only while ``token`` still owns the claim."""
    return (
        update(Module)
        .where(
            Module.id == module_id,
            Module.generation_token == token,
            Module.generation_state == GenerationState.GENERATING.value,
        )
        .values(
            content=content,
            quiz_id=quiz_id,
            generation_state=GenerationState.READY.value,
            generation_token=None,
        )
        .execution_options(synchronize_session=False)
    )


def release_generation(module_id: UUID, token: UUID) -> Update:
    """generating -> empty, only while ``token`` still owns the claim."""
    return (
        update(Module)
        .where(
            Module.id == module_id,
            Module.generation_token == token,
            Module.generation_state == GenerationState.GENERATING.value,
        )
        .values(
            generation_state=GenerationState.EMPTY.value,
            generation_token=None,
            generation_started_at=None,
        )
        .execution_options(synchronize_session=False)
    )


# =============================================================================
# PROGRESS
# =============================================================================


def progress_for(student_id: str, subject_id: UUID) -> Select:
    return select(StudentProgress).where(
        StudentProgress.student_id == student_id,
        StudentProgress.subject_id == subject_id,
    )


def progress_for_student(student_id: str) -> Select:
    return (
        select(StudentProgress)
        .where(StudentProgress.student_id == student_id)
        .order_by(StudentProgress.created_at)
    )


# =============================================================================
# ATTEMPT HISTORY & REPORTS
# =============================================================================


def attempts_for_student(student_id: str) -> Select:
    return (
        select(Attempt)
        .where(Attempt.student_id == student_id)
        .order_by(Attempt.created_at.desc())
    )


def attempts_for_module(module_id: UUID, student_id: str | None = None) -> Select:
    stmt = select(Attempt).where(Attempt.module_id == module_id)
    if student_id is not None:
        stmt = stmt.where(Attempt.student_id == student_id)
    return stmt.order_by(Attempt.created_at.desc())


def attempts_in_subject(student_id: str, subject_id: UUID) -> Select:
    """A student's attempts on any module of a subject, oldest first."""
    return (
        select(Attempt, Module.title, Module.order)
        .join(Module, Module.id == Attempt.module_id)
        .where(Attempt.student_id == student_id, Module.subject_id == subject_id)
        .order_by(Attempt.created_at.asc())
    )


def reports_for_student(student_id: str) -> Select:
    return (
        select(Report)
        .where(Report.student_id == student_id)
        .order_by(Report.created_at.desc())
    )


def student_summaries() -> Select:
    """Per-student attempt aggregates (average score is the raw mean)."""
    return (
        select(
            Attempt.student_id,
            func.count(Attempt.id).label("attempts_count"),
            func.avg(Attempt.score).label("average_score"),
            func.sum(case((Attempt.passed.is_(True), 1), else_=0)).label("passed_count"),
            func.max(Attempt.created_at).label("last_attempt_at"),
        )
        .group_by(Attempt.student_id)
        .order_by(Attempt.student_id)
    )
