"""
Pydantic Schemas for Generated Learning Content.

Defines the shapes the content generator must produce and the engine
stores:

- Lesson: title, sections [{heading, body, code_sample?}], key takeaways
- Question: closed tagged union on ``type``
    - mcq: text, 3-4 options, correct_index, explanation
    - coding: text, problem_statement, language, starter_code, test_cases
- QuizPayload: ordered list of questions (at least one)
- ReportAnalysis: performance report for a student in a subject

Generator output may use camelCase keys (``correctIndex``,
``keyTakeaways``); stored JSON always uses snake_case.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Languages the sandbox can execute, keyed by the name stored on questions/subjects
LANGUAGE_ALIASES = {
    "c++": "cpp",
    "cpp": "cpp",
    "java": "java",
    "python": "python",
    "python3": "python",
    "py": "python",
}


def normalize_language(value: str) -> str:
    """Map a free-form language label to its canonical sandbox name."""
    key = value.strip().lower()
    return LANGUAGE_ALIASES.get(key, key)


def _new_question_id() -> str:
    return uuid4().hex


class ContentModel(BaseModel):
    """Base model accepting snake_case or camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# Lessons
# =============================================================================


class LessonSection(ContentModel):
    heading: str = Field(min_length=1)
    body: str = Field(min_length=1)
    code_sample: str | None = None


class Lesson(ContentModel):
    """A generated lesson (master content or remedial override)."""

    title: str = Field(min_length=1)
    sections: list[LessonSection] = Field(min_length=1)
    key_takeaways: list[str] = Field(default_factory=list)
    code_samples: list[str] = Field(default_factory=list)


# =============================================================================
# Questions (tagged union)
# =============================================================================


class TestCase(ContentModel):
    """One stdin/expected-stdout pair for a coding question."""

    __test__ = False  # not a pytest test class

    input: str = ""
    expected_output: str

    @field_validator("input", "expected_output", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)):
            return str(value)
        return value


class MCQQuestion(ContentModel):
    """Multiple choice question with a single correct option."""

    id: str = Field(default_factory=_new_question_id)
    type: Literal["mcq"] = "mcq"
    text: str = Field(min_length=1)
    options: list[str] = Field(min_length=3, max_length=4)
    correct_index: int
    explanation: str = ""

    @model_validator(mode="after")
    def _check_correct_index(self) -> MCQQuestion:
        if not 0 <= self.correct_index < len(self.options):
            raise ValueError(
                f"correct_index {self.correct_index} out of range for {len(self.options)} options"
            )
        return self


class CodingQuestion(ContentModel):
    """Free-form coding question graded by running test cases in the sandbox."""

    id: str = Field(default_factory=_new_question_id)
    type: Literal["coding"] = "coding"
    text: str = Field(min_length=1)
    problem_statement: str = Field(min_length=1)
    language: str = Field(min_length=1)
    starter_code: str = ""
    test_cases: list[TestCase] = Field(min_length=1)
    explanation: str | None = None
    hint: str | None = None

    @field_validator("language")
    @classmethod
    def _normalize_language(cls, value: str) -> str:
        return normalize_language(value)


Question = Annotated[MCQQuestion | CodingQuestion, Field(discriminator="type")]

QUESTION_ADAPTER: TypeAdapter[MCQQuestion | CodingQuestion] = TypeAdapter(Question)


class QuizPayload(ContentModel):
    """Ordered questions of a quiz, as generated and as stored."""

    questions: list[Question] = Field(min_length=1)

    @model_validator(mode="after")
    def _unique_question_ids(self) -> QuizPayload:
        ids = [q.id for q in self.questions]
        if len(ids) != len(set(ids)):
            raise ValueError("question ids must be unique within a quiz")
        return self

    @property
    def mcq_count(self) -> int:
        return sum(1 for q in self.questions if isinstance(q, MCQQuestion))

    @property
    def coding_count(self) -> int:
        return sum(1 for q in self.questions if isinstance(q, CodingQuestion))

    def question_by_id(self) -> dict[str, MCQQuestion | CodingQuestion]:
        return {q.id: q for q in self.questions}

    def to_storage(self) -> list[dict[str, Any]]:
        """Serialize questions for the Quiz JSON column."""
        return [q.model_dump(mode="json") for q in self.questions]

    @classmethod
    def from_storage(cls, questions: list[dict[str, Any]]) -> QuizPayload:
        return cls.model_validate({"questions": questions})


# =============================================================================
# Reports
# =============================================================================


class ReportAnalysis(ContentModel):
    """Generated performance analysis for one student in one subject."""

    title: str = Field(min_length=1)
    summary: str = Field(min_length=1)
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
