"""
Ad-hoc code runs ("run my code" without grading).
"""

from __future__ import annotations

from dataclasses import dataclass

from adaptive_tutor.content.schemas import normalize_language
from adaptive_tutor.core.errors import SubmissionValidationError
from adaptive_tutor.grading.base import CodeSandbox
from adaptive_tutor.integrations.judge0_client import LANGUAGE_IDS


@dataclass
class CodeRunResult:
    output: str
    status: str
    accepted: bool
    time: str | None = None
    memory: int | None = None


class CodeRunner:
    """Runs a program once in the sandbox and reports its combined output."""

    def __init__(self, sandbox: CodeSandbox):
        self.sandbox = sandbox

    def run(self, language: str, source: str, stdin: str = "") -> CodeRunResult:
        """
        Raises:
            SubmissionValidationError: Unsupported language or empty source
            ExecutionError: Sandbox unreachable or errored
        """
        normalized = normalize_language(language or "")
        if normalized not in LANGUAGE_IDS:
            raise SubmissionValidationError(f"Unsupported language: {language}")
        if not source or not source.strip():
            raise SubmissionValidationError("Source code is empty")

        result = self.sandbox.run(normalized, source, stdin)
        return CodeRunResult(
            output=result.combined_output,
            status=result.status_description,
            accepted=result.accepted,
            time=result.time,
            memory=result.memory,
        )
