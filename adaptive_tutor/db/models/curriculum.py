"""
Curriculum models: the shared master records.

Implements:
- Subject: ordered sequence of modules (e.g. "C++ Programming")
- Module: one step in a subject, with lazily generated lesson + quiz
- Quiz: ordered questions (JSON list of tagged-union question objects)

Module generation state machine:
    empty --claim--> generating --install--> ready
      ^                  |
      +----release-------+   (generation failed, or lease expired and re-claimed)

``content`` and ``quiz_id`` are only ever written together with the
transition to ``ready``, inside one transaction.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, JSONType, utc_now


class GenerationState(str, Enum):
    """Master content generation state of a Module."""

    EMPTY = "empty"
    GENERATING = "generating"
    READY = "ready"


class Subject(Base):
    """Top-level course (e.g. "cpp", "dsa")."""

    __tablename__ = "subjects"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    key: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    # Sandbox language for coding questions; None for non-programming subjects
    language: Mapped[str | None] = mapped_column(Text)
    display_order: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    modules: Mapped[list[Module]] = relationship(
        back_populates="subject",
        order_by="Module.order",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Subject {self.key}>"


class Module(Base):
    """
    One module of a subject.

    Master record shared by every student in the subject. Written only by
    the master content generation protocol; students' remedial content
    lives in ModuleOverride.
    """

    __tablename__ = "modules"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    subject_id: Mapped[UUID] = mapped_column(
        ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    order: Mapped[int] = mapped_column("module_order", Integer, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    seed_topic: Mapped[str] = mapped_column(Text, nullable=False)
    video_links: Mapped[list[str]] = mapped_column(JSONType, default=list)

    # Generated master content
    content: Mapped[dict[str, Any] | None] = mapped_column(JSONType)
    # Not a foreign key: quizzes.module_id already points back here
    quiz_id: Mapped[UUID | None] = mapped_column(Uuid)

    # Generation compare-and-set fields
    generation_state: Mapped[str] = mapped_column(
        Text, nullable=False, default=GenerationState.EMPTY.value
    )
    generation_token: Mapped[UUID | None] = mapped_column(Uuid)
    generation_started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    subject: Mapped[Subject] = relationship(back_populates="modules")

    @property
    def is_ready(self) -> bool:
        return (
            self.generation_state == GenerationState.READY.value
            and self.content is not None
            and self.quiz_id is not None
        )

    def __repr__(self) -> str:
        return f"<Module {self.order}: {self.title} ({self.generation_state})>"


class Quiz(Base):
    """
    Quiz record.

    ``questions`` holds the serialized QuizPayload questions. Master quizzes
    have ``student_id = None``; remedial quizzes belong to one student.
    """

    __tablename__ = "quizzes"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    module_id: Mapped[UUID] = mapped_column(
        ForeignKey("modules.id", ondelete="CASCADE"), nullable=False, index=True
    )
    questions: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False)
    origin: Mapped[str] = mapped_column(Text, nullable=False, default="master")  # master, remedial
    student_id: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    def __repr__(self) -> str:
        return f"<Quiz {self.id} ({self.origin}, {len(self.questions or [])} questions)>"
