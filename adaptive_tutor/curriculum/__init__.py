"""Curriculum catalog and subject access."""

from adaptive_tutor.curriculum.catalog import DEFAULT_CATALOG, ModuleSeed, SubjectSeed
from adaptive_tutor.curriculum.service import CurriculumService, ModuleSummary, SubjectView

__all__ = [
    "DEFAULT_CATALOG",
    "ModuleSeed",
    "SubjectSeed",
    "CurriculumService",
    "ModuleSummary",
    "SubjectView",
]
