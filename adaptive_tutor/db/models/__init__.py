# SQLAlchemy models
from .base import Base, JSONType, utc_now
from .curriculum import GenerationState, Module, Quiz, Subject
from .progress import (
    Attempt,
    ModuleCompletion,
    ModuleOverride,
    Report,
    StudentProgress,
)

__all__ = [
    # Base
    "Base",
    "JSONType",
    "utc_now",
    # Curriculum (shared master records)
    "GenerationState",
    "Subject",
    "Module",
    "Quiz",
    # Per-student
    "StudentProgress",
    "ModuleCompletion",
    "ModuleOverride",
    "Attempt",
    "Report",
]
