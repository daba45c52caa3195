"""
Adaptive Learning Engine.

Mastery-gated content delivery with per-student remediation.

Components:
- ProgressStore: enrollment, completed modules and overrides
- ModuleContentResolver: override-or-master module views, lazy master generation
- RemediationOrchestrator: grades attempts, installs or clears overrides
- ReportService: attempt history, generated reports, teacher summaries
- TutorEngine: main orchestration layer
"""

from adaptive_tutor.adaptive.content_resolver import ModuleContentResolver
from adaptive_tutor.adaptive.engine import TutorEngine
from adaptive_tutor.adaptive.progress_store import ProgressStore
from adaptive_tutor.adaptive.remediation import RemediationOrchestrator
from adaptive_tutor.adaptive.reports import ReportService
from adaptive_tutor.adaptive.views import (
    AttemptView,
    ModuleView,
    OverrideView,
    ProgressView,
    ReportView,
    StudentSummary,
)

__all__ = [
    # Main engine
    "TutorEngine",
    # Component classes
    "ModuleContentResolver",
    "ProgressStore",
    "RemediationOrchestrator",
    "ReportService",
    # Views
    "AttemptView",
    "ModuleView",
    "OverrideView",
    "ProgressView",
    "ReportView",
    "StudentSummary",
]
