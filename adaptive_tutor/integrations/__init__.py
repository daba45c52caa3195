"""External service clients (code execution sandbox)."""

from adaptive_tutor.integrations.judge0_client import (
    ACCEPTED_STATUS_ID,
    LANGUAGE_IDS,
    ExecutionResult,
    Judge0Client,
)

__all__ = [
    "ACCEPTED_STATUS_ID",
    "LANGUAGE_IDS",
    "ExecutionResult",
    "Judge0Client",
]
