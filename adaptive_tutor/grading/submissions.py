"""
Quiz submission parsing.

Raw submissions arrive as already-parsed JSON from the web layer:

    [{"questionId": "...", "chosenIndex": 2}, {"questionId": "...", "submittedCode": "..."}]

``parse_answers`` turns them into SubmittedAnswer models or raises
SubmissionValidationError before any grading or generation happens.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from adaptive_tutor.core.errors import SubmissionValidationError


class SubmittedAnswer(BaseModel):
    """One answer of a submission, referencing a question by id."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    question_id: str = Field(min_length=1)
    type: Literal["mcq", "coding"] | None = None
    chosen_index: int | None = None
    submitted_code: str | None = None

    @field_validator("question_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


def parse_answers(raw: Any) -> list[SubmittedAnswer]:
    """
    Validate a raw submission.

    Args:
        raw: Parsed JSON body field ``answers``

    Returns:
        Submitted answers in submission order

    Raises:
        SubmissionValidationError: Not a list, non-object item, missing
            question id, unknown question type, or non-integer chosen index
    """
    if not isinstance(raw, list):
        raise SubmissionValidationError("answers must be an array")

    answers = []
    for position, item in enumerate(raw):
        if isinstance(item, SubmittedAnswer):
            answers.append(item)
            continue
        if not isinstance(item, dict):
            raise SubmissionValidationError(f"answers[{position}] must be an object")
        try:
            answers.append(SubmittedAnswer.model_validate(item))
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise SubmissionValidationError(f"answers[{position}] is invalid: {problems}") from e
    return answers
