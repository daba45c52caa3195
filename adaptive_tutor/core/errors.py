"""
Error taxonomy for the tutor engine.

Provider-specific failures (httpx, Gemini, JSON/schema parsing) are
translated into these types at the component boundary so callers only
ever see:

- NotFoundError: module/subject/quiz/progress missing (not retried)
- NotEnrolledError: no enrollment for (student, subject) (not retried)
- GenerationError: generator output malformed or timed out (retryable)
- ExecutionError: sandbox unreachable or errored (retryable)
- SubmissionValidationError: malformed quiz submission (not retried)
"""

from __future__ import annotations

from uuid import UUID


class TutorError(Exception):
    """Base class for all tutor engine errors."""

    retryable: bool = False


class NotFoundError(TutorError):
    """Raised when a referenced record does not exist."""

    def __init__(self, entity: str, identifier: object | None = None):
        self.entity = entity
        self.identifier = identifier
        message = f"{entity} not found" if identifier is None else f"{entity} not found: {identifier}"
        super().__init__(message)


class NotEnrolledError(TutorError):
    """Raised when a student accesses a subject without an enrollment record."""

    def __init__(self, student_id: str, subject_id: UUID):
        self.student_id = student_id
        self.subject_id = subject_id
        super().__init__(f"Student {student_id} is not enrolled in subject {subject_id}")


class GenerationError(TutorError):
    """Raised when the content generator fails, times out or returns malformed output."""

    retryable = True


class ContentNotReadyError(GenerationError):
    """Raised when another request is still generating the module content."""

    def __init__(self, module_id: UUID):
        self.module_id = module_id
        super().__init__(f"Content for module {module_id} is not ready, retry shortly")


class RemediationError(GenerationError):
    """
    Raised when remedial generation, or the progress update that follows a
    recorded attempt, fails.

    The attempt is durable; only the override update was skipped, and the
    student's previous override (if any) is left untouched.
    """

    def __init__(self, attempt_id: UUID, cause: Exception):
        self.attempt_id = attempt_id
        self.cause = cause
        super().__init__(f"Remediation failed for attempt {attempt_id}: {cause}")


class ExecutionError(TutorError):
    """Raised when the code execution sandbox is unreachable or errors."""

    retryable = True


class SubmissionValidationError(TutorError):
    """Raised for malformed submissions, before any grading side effects."""
