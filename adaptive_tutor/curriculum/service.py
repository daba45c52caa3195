"""
Curriculum service: subject listing and idempotent seeding.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from uuid import UUID

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from adaptive_tutor.core.errors import NotFoundError
from adaptive_tutor.curriculum.catalog import DEFAULT_CATALOG, SubjectSeed
from adaptive_tutor.db.database import session_scope
from adaptive_tutor.db.models import Module, Subject


@dataclass
class ModuleSummary:
    id: UUID
    order: int
    title: str
    seed_topic: str
    video_links: list[str] = field(default_factory=list)
    generation_state: str = "empty"

    @classmethod
    def from_model(cls, module: Module) -> ModuleSummary:
        return cls(
            id=module.id,
            order=module.order,
            title=module.title,
            seed_topic=module.seed_topic,
            video_links=list(module.video_links or []),
            generation_state=module.generation_state,
        )


@dataclass
class SubjectView:
    id: UUID
    key: str
    title: str
    language: str | None
    modules: list[ModuleSummary] = field(default_factory=list)

    @classmethod
    def from_model(cls, subject: Subject) -> SubjectView:
        return cls(
            id=subject.id,
            key=subject.key,
            title=subject.title,
            language=subject.language,
            modules=[ModuleSummary.from_model(m) for m in subject.modules],
        )


class CurriculumService:
    """Read access to subjects and modules, plus catalog seeding."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None):
        self._session_factory = session_factory

    def list_subjects(self) -> list[SubjectView]:
        with session_scope(self._session_factory) as session:
            subjects = session.scalars(
                select(Subject).order_by(Subject.display_order, Subject.title)
            ).all()
            return [SubjectView.from_model(s) for s in subjects]

    def get_subject(self, subject_id: UUID) -> SubjectView:
        """
        Get one subject with its modules in order.

        Raises:
            NotFoundError: Unknown subject id
        """
        with session_scope(self._session_factory) as session:
            subject = session.get(Subject, subject_id)
            if subject is None:
                raise NotFoundError("Subject", subject_id)
            return SubjectView.from_model(subject)

    def get_subject_by_key(self, key: str) -> SubjectView:
        with session_scope(self._session_factory) as session:
            subject = session.scalar(select(Subject).where(Subject.key == key))
            if subject is None:
                raise NotFoundError("Subject", key)
            return SubjectView.from_model(subject)

    def seed_subjects(self, catalog: Iterable[SubjectSeed] = DEFAULT_CATALOG) -> list[str]:
        """
        Create catalog subjects that do not exist yet.

        Subjects are matched by key; existing subjects are left untouched.

        Returns:
            Keys of the subjects created by this call
        """
        created = []
        with session_scope(self._session_factory) as session:
            existing = set(session.scalars(select(Subject.key)).all())
            for seed in catalog:
                if seed.key in existing:
                    logger.debug(f"Subject {seed.key} already exists, skipping")
                    continue
                subject = Subject(
                    key=seed.key,
                    title=seed.title,
                    language=seed.language,
                    display_order=seed.display_order,
                )
                subject.modules = [
                    Module(
                        order=m.order,
                        title=m.title,
                        seed_topic=m.seed_topic,
                        video_links=list(m.video_links),
                    )
                    for m in seed.modules
                ]
                session.add(subject)
                existing.add(seed.key)
                created.append(seed.key)
                logger.info(f"Seeded subject {seed.key} with {len(seed.modules)} modules")
        return created
