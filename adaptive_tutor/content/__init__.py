"""
Content generation: schemas, prompts and the generator contract.
"""

from adaptive_tutor.content.generator import (
    ContentGenerator,
    GeminiContentGenerator,
    extract_json_object,
    quiz_mix,
    validate_quiz_shape,
)
from adaptive_tutor.content.schemas import (
    CodingQuestion,
    Lesson,
    LessonSection,
    MCQQuestion,
    Question,
    QuizPayload,
    ReportAnalysis,
    TestCase,
)

__all__ = [
    "ContentGenerator",
    "GeminiContentGenerator",
    "extract_json_object",
    "quiz_mix",
    "validate_quiz_shape",
    "CodingQuestion",
    "Lesson",
    "LessonSection",
    "MCQQuestion",
    "Question",
    "QuizPayload",
    "ReportAnalysis",
    "TestCase",
]
