"""
Content Generator.

Produces lessons, quizzes, remedial lessons, hints and reports from an
LLM. The engine depends only on the ``ContentGenerator`` protocol; the
Gemini implementation below is the production backend.

Pipeline per call:
1. Build a prompt for the requested artifact
2. Call Gemini with a timeout (retrying transient failures)
3. Extract the JSON object from the response text
4. Validate it against the pydantic schema (and quiz count/mix policy)

Any failure in steps 2-4 surfaces as GenerationError.
"""

from __future__ import annotations

import json
import re
import time
from typing import Any, Protocol

from loguru import logger
from pydantic import ValidationError

from config import get_settings
from adaptive_tutor.content import prompts
from adaptive_tutor.content.schemas import (
    CodingQuestion,
    Lesson,
    QuizPayload,
    ReportAnalysis,
    normalize_language,
)
from adaptive_tutor.core.errors import GenerationError
from adaptive_tutor.integrations.judge0_client import LANGUAGE_IDS


class ContentGenerator(Protocol):
    """Contract of the external content generation service."""

    def generate_lesson(self, topic: str, context: dict[str, Any] | None = None) -> Lesson:
        """Produce a lesson for a seed topic."""
        ...

    def generate_quiz(self, lesson: Lesson, language_hint: str | None = None) -> QuizPayload:
        """Produce a quiz with exactly N questions from a lesson."""
        ...

    def generate_remedial_lesson(
        self,
        failed_question_texts: list[str],
        module_title: str,
        language_hint: str | None = None,
    ) -> Lesson:
        """Produce a lesson tailored to the questions a student failed."""
        ...

    def generate_hint(
        self,
        problem_statement: str,
        submitted_code: str,
        failed_case: dict[str, Any],
        language: str,
    ) -> str:
        """Produce a short hint for the first failing test case."""
        ...

    def generate_report(self, student_id: str, attempts: list[dict[str, Any]]) -> ReportAnalysis:
        """Produce a performance analysis from an attempt summary."""
        ...


def quiz_mix(language_hint: str | None, total: int, coding: int) -> tuple[int, int]:
    """
    Decide the MCQ/coding split for a subject.

    Programming-language subjects get ``coding`` coding questions; every
    other subject is MCQ-only.

    Returns:
        (mcq_count, coding_count)
    """
    language = normalize_language(language_hint) if language_hint else None
    if language in LANGUAGE_IDS:
        coding = max(0, min(coding, total))
        return total - coding, coding
    return total, 0


def extract_json_object(text: str | None) -> dict[str, Any]:
    """
    Extract a JSON object from a possibly chatty LLM response.

    Tries a fenced code block first, then the span between the first ``{``
    and the last ``}``.

    Raises:
        GenerationError: No parseable JSON object found
    """
    if not text or not text.strip():
        raise GenerationError("Empty LLM response")

    candidates = []
    code_match = re.search(r"```(?:json)?\s*([\s\S]*?)```", text)
    if code_match:
        candidates.append(code_match.group(1).strip())
    first, last = text.find("{"), text.rfind("}")
    if first != -1 and last > first:
        candidates.append(text[first : last + 1])

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data

    raise GenerationError("No JSON object found in LLM output")


class GeminiContentGenerator:
    """
    Gemini-backed content generator.

    One GenerativeModel is created lazily per system prompt. Every call is
    bounded by ``generation_timeout_seconds`` and retried up to
    ``generation_retry_attempts`` times before raising GenerationError.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        timeout_seconds: float | None = None,
        retry_attempts: int | None = None,
        question_count: int | None = None,
        coding_question_count: int | None = None,
        backoff_seconds: float = 1.0,
    ):
        """
        Initialize the generator.

        Args:
            api_key: Gemini API key (uses settings if not provided)
            model_name: Model to use (uses settings if not provided)
            timeout_seconds: Per-request timeout
            retry_attempts: Attempts per call before giving up
            question_count: Exact number of questions per quiz
            coding_question_count: Coding questions per programming quiz
            backoff_seconds: Base delay for exponential backoff between attempts
        """
        settings = get_settings()
        self.api_key = api_key or settings.gemini_api_key
        self.model_name = model_name or settings.ai_model
        self.temperature = settings.generation_temperature
        self.timeout_seconds = timeout_seconds or settings.generation_timeout_seconds
        self.retry_attempts = max(1, retry_attempts or settings.generation_retry_attempts)
        self.question_count = question_count or settings.quiz_question_count
        self.coding_question_count = (
            coding_question_count
            if coding_question_count is not None
            else settings.quiz_coding_question_count
        )
        self.backoff_seconds = backoff_seconds

        if not self.api_key:
            raise ValueError("Gemini API key required")

        self._models: dict[str, Any] = {}

    def _model(self, system_prompt: str):
        """Lazy-load a Gemini model for a system prompt."""
        if system_prompt not in self._models:
            import google.generativeai as genai

            genai.configure(api_key=self.api_key)
            self._models[system_prompt] = genai.GenerativeModel(
                model_name=self.model_name,
                system_instruction=system_prompt,
            )
        return self._models[system_prompt]

    def _call_llm(self, system_prompt: str, prompt: str, json_output: bool = True) -> str:
        """Call Gemini with timeout and retries; returns the response text."""
        generation_config: dict[str, Any] = {
            "temperature": self.temperature,
            "max_output_tokens": 8192,
        }
        if json_output:
            generation_config["response_mime_type"] = "application/json"

        last_error: Exception | None = None
        for attempt in range(self.retry_attempts):
            try:
                response = self._model(system_prompt).generate_content(
                    prompt,
                    generation_config=generation_config,
                    request_options={"timeout": self.timeout_seconds},
                )
                if response.text:
                    return response.text
                last_error = GenerationError("Empty response from Gemini")
            except Exception as e:  # Provider errors vary by transport; translated below
                last_error = e
            logger.warning(f"Gemini call failed on attempt {attempt + 1}/{self.retry_attempts}: {last_error}")
            if attempt < self.retry_attempts - 1:
                time.sleep(self.backoff_seconds * 2**attempt)

        raise GenerationError(f"Gemini generation failed: {last_error}") from last_error

    def _generate(self, system_prompt: str, prompt: str, schema: type, label: str):
        data = extract_json_object(self._call_llm(system_prompt, prompt))
        try:
            return schema.model_validate(data)
        except ValidationError as e:
            logger.error(f"Malformed {label} from Gemini: {e}")
            raise GenerationError(f"Malformed {label}: {e.error_count()} validation errors") from e

    def generate_lesson(self, topic: str, context: dict[str, Any] | None = None) -> Lesson:
        return self._generate(
            prompts.LESSON_SYSTEM_PROMPT,
            prompts.lesson_prompt(topic, context),
            Lesson,
            "lesson",
        )

    def generate_quiz(self, lesson: Lesson, language_hint: str | None = None) -> QuizPayload:
        mcq_count, coding_count = quiz_mix(
            language_hint, self.question_count, self.coding_question_count
        )
        language = normalize_language(language_hint) if coding_count else None
        quiz = self._generate(
            prompts.QUIZ_SYSTEM_PROMPT,
            prompts.quiz_prompt(lesson.model_dump(mode="json"), mcq_count, coding_count, language),
            QuizPayload,
            "quiz",
        )
        validate_quiz_shape(quiz, self.question_count, allow_coding=bool(coding_count))
        if quiz.coding_count != coding_count:
            logger.warning(
                f"Quiz mix differs from policy: {quiz.mcq_count} MCQ / {quiz.coding_count} coding "
                f"(expected {mcq_count} / {coding_count})"
            )
        return quiz

    def generate_remedial_lesson(
        self,
        failed_question_texts: list[str],
        module_title: str,
        language_hint: str | None = None,
    ) -> Lesson:
        return self._generate(
            prompts.REMEDIAL_SYSTEM_PROMPT,
            prompts.remedial_prompt(failed_question_texts, module_title, language_hint),
            Lesson,
            "remedial lesson",
        )

    def generate_hint(
        self,
        problem_statement: str,
        submitted_code: str,
        failed_case: dict[str, Any],
        language: str,
    ) -> str:
        text = self._call_llm(
            prompts.HINT_SYSTEM_PROMPT,
            prompts.hint_prompt(problem_statement, submitted_code, failed_case, language),
            json_output=False,
        )
        hint = text.strip()
        if not hint:
            raise GenerationError("Empty hint")
        return hint

    def generate_report(self, student_id: str, attempts: list[dict[str, Any]]) -> ReportAnalysis:
        return self._generate(
            prompts.REPORT_SYSTEM_PROMPT,
            prompts.report_prompt(student_id, attempts),
            ReportAnalysis,
            "report",
        )


def validate_quiz_shape(quiz: QuizPayload, expected_count: int, allow_coding: bool) -> None:
    """
    Enforce the quiz policy on a schema-valid quiz.

    Raises:
        GenerationError: Wrong question count, coding questions for a
            non-programming subject, or a coding language the sandbox cannot run
    """
    if len(quiz.questions) != expected_count:
        raise GenerationError(
            f"Quiz has {len(quiz.questions)} questions, expected exactly {expected_count}"
        )
    for question in quiz.questions:
        if not isinstance(question, CodingQuestion):
            continue
        if not allow_coding:
            raise GenerationError("Coding question generated for a non-programming subject")
        if question.language not in LANGUAGE_IDS:
            raise GenerationError(f"Coding question uses unsupported language: {question.language}")
