"""
LLM Prompts for Lesson, Quiz, Remedial, Hint and Report Generation.

Each system prompt fixes the JSON shape the generator must return; the
builder functions fill in the per-request context. Output is parsed and
validated by ``adaptive_tutor.content.generator``.
"""
from __future__ import annotations

import json
from typing import Any

# =============================================================================
# System Prompts
# =============================================================================

LESSON_SYSTEM_PROMPT = """You are an expert Computer Science tutor.
Produce a single JSON object ONLY (no extra text) with keys:
- title (string)
- sections (array of {"heading": string, "body": string, "code_sample": string or null})
- key_takeaways (array of strings)
- code_samples (array of strings)

Keep the lesson concise (approx 500-800 words).
When the topic is tied to a programming language, code samples MUST be valid
code in that language."""

QUIZ_SYSTEM_PROMPT = """You are a quiz generator.
Output ONLY valid JSON with key "questions", an array of question objects.

Multiple choice question object:
  {"type": "mcq", "text": string, "options": [3-4 strings],
   "correct_index": integer 0..n-1, "explanation": string}

Coding question object:
  {"type": "coding", "text": string, "problem_statement": string,
   "language": string, "starter_code": string,
   "test_cases": [{"input": string, "expected_output": string}],
   "explanation": string, "hint": string}

Coding questions read from standard input and write to standard output.
Every expected_output must be exactly what a correct program prints."""

REMEDIAL_SYSTEM_PROMPT = """You are a patient tutor.
Produce a JSON object ONLY with keys: title, sections, key_takeaways, code_samples
(same shapes as a regular lesson).
This must be a simpler, remedial lesson focused on the student's mistakes:
explain common misconceptions, walk through step-by-step examples and
finish with two micro-exercises."""

HINT_SYSTEM_PROMPT = """You are a programming tutor giving a single short hint.
Never reveal the full solution. Point the student at the bug or the missing
case in two or three sentences of plain text."""

REPORT_SYSTEM_PROMPT = """You are an educational analyst.
Produce a JSON object ONLY with keys:
title, summary, strengths (array), weaknesses (array), recommendations (array)."""


# =============================================================================
# Prompt Builders
# =============================================================================


def lesson_prompt(topic: str, context: dict[str, Any] | None = None) -> str:
    """Prompt for a master lesson on ``topic``."""
    lines = [f'Create a lesson for the topic: "{topic}".']
    if context:
        lines.append(f"Context: {json.dumps(context, default=str)}")
    lines.append("Output must be valid JSON ONLY with the schema described above.")
    return "\n".join(lines)


def quiz_prompt(lesson: dict[str, Any], mcq_count: int, coding_count: int, language: str | None) -> str:
    """Prompt for a quiz of exactly ``mcq_count + coding_count`` questions."""
    total = mcq_count + coding_count
    lines = [
        f'Create exactly {total} questions for the lesson titled: "{lesson.get("title", "")}".',
        f"- {mcq_count} multiple choice questions (type \"mcq\")",
    ]
    if coding_count:
        lines.append(f'- {coding_count} coding questions (type "coding") in language "{language}"')
    lines.append("Use the lesson sections and code samples to create practical questions.")
    lines.append(f"Lesson: {json.dumps(lesson)}")
    lines.append("Return JSON only.")
    return "\n".join(lines)


def remedial_prompt(failed_question_texts: list[str], module_title: str, language: str | None) -> str:
    """Prompt for a remedial lesson targeting the failed questions."""
    lines = [
        f'The student failed the quiz for the module "{module_title}".',
        "Questions the student got wrong:",
    ]
    lines.extend(f"- {text}" for text in failed_question_texts)
    if language:
        lines.append(f"Programming language context: {language}.")
    lines.append("Output plain JSON as described.")
    return "\n".join(lines)


def hint_prompt(
    problem_statement: str,
    submitted_code: str,
    failed_case: dict[str, Any],
    language: str,
) -> str:
    """Prompt for a hint on the first failing test case."""
    return "\n".join(
        [
            f"Problem ({language}):",
            problem_statement,
            "",
            "Student code:",
            submitted_code,
            "",
            "First failing test case:",
            f"  input: {failed_case.get('input', '')!r}",
            f"  expected output: {failed_case.get('expected_output', '')!r}",
            f"  actual output: {failed_case.get('actual_output', '')!r}",
        ]
    )


def report_prompt(student_id: str, attempts: list[dict[str, Any]]) -> str:
    """Prompt for a performance report over an attempt summary."""
    return "\n".join(
        [
            f"Create a performance report for student: {student_id}.",
            f"Attempts summary: {json.dumps(attempts, default=str)}",
            "Output JSON only.",
        ]
    )
