"""
Judge0 API client for sandboxed code execution.

Runs one (language, source, stdin) triple per call against a hosted Judge0
instance and returns the decoded execution result. Transport failures are
retried with exponential backoff and finally surfaced as ExecutionError;
provider error shapes never leave this module.
"""

from __future__ import annotations

import base64
import binascii
import time
from dataclasses import dataclass
from typing import Any

import httpx
from loguru import logger

from config import get_settings
from adaptive_tutor.core.errors import ExecutionError

# Judge0 CE language ids
LANGUAGE_IDS = {
    "cpp": 54,  # C++ (GCC 9.2.0)
    "java": 62,  # Java (OpenJDK 13.0.1)
    "python": 71,  # Python (3.8.1)
}

ACCEPTED_STATUS_ID = 3


def _decode(value: str | None) -> str:
    """Decode a base64 field, falling back to the raw value if it is not base64."""
    if not value:
        return ""
    try:
        return base64.b64decode(value, validate=True).decode("utf-8", errors="replace")
    except (binascii.Error, ValueError):
        return value


def _encode(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


@dataclass
class ExecutionResult:
    """Decoded result of one sandbox run."""

    stdout: str = ""
    stderr: str = ""
    compile_output: str = ""
    message: str = ""
    status_id: int = 0
    status_description: str = ""
    time: str | None = None
    memory: int | None = None

    @property
    def accepted(self) -> bool:
        """True when the sandbox reports successful execution."""
        return self.status_id == ACCEPTED_STATUS_ID

    @property
    def combined_output(self) -> str:
        """Stdout followed by any error-like output, for display."""
        output = self.stdout
        if self.stderr:
            output += f"\nRuntime Error:\n{self.stderr}"
        if self.compile_output:
            output += f"\nCompilation Error:\n{self.compile_output}"
        if self.message:
            output += f"\nMessage:\n{self.message}"
        return output.strip()

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> ExecutionResult:
        """Parse a base64-encoded Judge0 submission response."""
        status = data.get("status") or {}
        return cls(
            stdout=_decode(data.get("stdout")),
            stderr=_decode(data.get("stderr")),
            compile_output=_decode(data.get("compile_output")),
            message=_decode(data.get("message")),
            status_id=int(status.get("id", 0) or 0),
            status_description=status.get("description", ""),
            time=data.get("time"),
            memory=data.get("memory"),
        )


class Judge0Client:
    """HTTP client for the Judge0 code execution sandbox."""

    def __init__(
        self,
        api_url: str | None = None,
        api_key: str | None = None,
        api_host: str | None = None,
        timeout_ms: int | None = None,
        retry_attempts: int | None = None,
        backoff_seconds: float = 1.0,
        http_client: httpx.Client | None = None,
    ):
        """
        Initialize Judge0 client.

        Args:
            api_url: Base URL for the Judge0 API (uses settings if not provided)
            api_key: RapidAPI key (uses settings if not provided)
            api_host: RapidAPI host header (uses settings if not provided)
            timeout_ms: Request timeout in milliseconds
            retry_attempts: Number of attempts on timeouts and 5xx errors
            backoff_seconds: Base delay for exponential backoff between attempts
            http_client: Preconfigured httpx client (tests inject a MockTransport)
        """
        settings = get_settings()
        self.api_url = (api_url or settings.judge0_api_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.rapidapi_key
        self.api_host = api_host or settings.rapidapi_host
        self.timeout_seconds = (timeout_ms or settings.sandbox_timeout_ms) / 1000.0
        self.retry_attempts = max(1, retry_attempts or settings.sandbox_retry_attempts)
        self.backoff_seconds = backoff_seconds
        self.client = http_client or httpx.Client(
            timeout=httpx.Timeout(self.timeout_seconds),
            follow_redirects=True,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self) -> Judge0Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def run(self, language: str, source_code: str, stdin: str = "") -> ExecutionResult:
        """
        Execute source code synchronously with retry logic.

        Args:
            language: Canonical language name (cpp, java, python)
            source_code: Program source
            stdin: Standard input fed to the program

        Returns:
            Decoded execution result

        Raises:
            ExecutionError: Unsupported language, client error, or retries exhausted
        """
        language_id = LANGUAGE_IDS.get(language)
        if language_id is None:
            raise ExecutionError(f"Unsupported language: {language}")

        payload = {
            "language_id": language_id,
            "source_code": _encode(source_code),
            "stdin": _encode(stdin or ""),
        }
        headers = {
            "Content-Type": "application/json",
            "X-RapidAPI-Key": self.api_key,
            "X-RapidAPI-Host": self.api_host,
        }
        last_error: Exception | None = None

        for attempt in range(self.retry_attempts):
            try:
                response = self.client.post(
                    f"{self.api_url}/submissions",
                    params={"base64_encoded": "true", "wait": "true"},
                    json=payload,
                    headers=headers,
                )
                response.raise_for_status()
                return ExecutionResult.from_response(response.json())

            except httpx.TimeoutException as e:
                last_error = e
                logger.warning(f"Judge0 timeout on attempt {attempt + 1}/{self.retry_attempts}")

            except httpx.HTTPStatusError as e:
                last_error = e
                if e.response.status_code < 500:
                    logger.error(f"Judge0 client error: {e.response.status_code}")
                    raise ExecutionError(
                        f"Sandbox rejected the submission ({e.response.status_code})"
                    ) from e
                logger.warning(
                    f"Judge0 server error {e.response.status_code} on attempt "
                    f"{attempt + 1}/{self.retry_attempts}"
                )

            except httpx.RequestError as e:
                last_error = e
                logger.warning(f"Judge0 request error on attempt {attempt + 1}/{self.retry_attempts}: {e}")

            except ValueError as e:
                # Non-JSON body
                last_error = e
                logger.warning(f"Judge0 returned an unreadable response: {e}")

            if attempt < self.retry_attempts - 1:
                time.sleep(self.backoff_seconds * 2**attempt)

        error_msg = f"Code execution failed after {self.retry_attempts} attempts"
        logger.error(f"{error_msg}: {last_error}")
        raise ExecutionError(f"{error_msg}: {last_error}") from last_error
