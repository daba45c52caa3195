"""
Unit tests for the Gemini content generator.

The Gemini model is replaced by a scripted stand-in so no network calls
are made.
"""

import json

import pytest

from adaptive_tutor.content import prompts
from adaptive_tutor.content.generator import (
    GeminiContentGenerator,
    extract_json_object,
    quiz_mix,
    validate_quiz_shape,
)
from adaptive_tutor.content.schemas import CodingQuestion, Lesson, QuizPayload
from adaptive_tutor.core.errors import GenerationError
from config import Settings
from factories import make_coding_question, make_lesson, make_mcq_quiz


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModel:
    """Returns scripted responses in order; Exception instances are raised."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def generate_content(self, prompt, generation_config=None, request_options=None):
        self.calls.append({"prompt": prompt, "config": generation_config, "options": request_options})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return FakeResponse(response)


def make_generator(model: FakeModel, system_prompt: str, **kwargs) -> GeminiContentGenerator:
    kwargs.setdefault("retry_attempts", 2)
    generator = GeminiContentGenerator(api_key="test-key", backoff_seconds=0, **kwargs)
    generator._models[system_prompt] = model
    return generator


def lesson_json() -> str:
    return json.dumps(
        {
            "title": "Loops",
            "sections": [{"heading": "For loops", "body": "Repeat a block.", "codeSample": "for(;;){}"}],
            "keyTakeaways": ["Loops repeat work"],
        }
    )


def mcq_json(i: int) -> dict:
    return {"type": "mcq", "text": f"Q{i}?", "options": ["a", "b", "c", "d"], "correctIndex": 1}


class TestExtractJsonObject:
    def test_fenced_block(self):
        assert extract_json_object('Here you go:\n```json\n{"a": 1}\n```\nEnjoy') == {"a": 1}

    def test_surrounding_prose(self):
        assert extract_json_object('Sure! {"a": {"b": 2}} Hope it helps.') == {"a": {"b": 2}}

    @pytest.mark.parametrize("text", [None, "", "   ", "no json here", "[1, 2, 3]", "{not: json}"])
    def test_rejects_unparseable(self, text):
        with pytest.raises(GenerationError):
            extract_json_object(text)


class TestQuizMix:
    def test_programming_subject_gets_coding_questions(self):
        assert quiz_mix("C++", 10, 3) == (7, 3)

    def test_theory_subject_is_mcq_only(self):
        assert quiz_mix(None, 10, 3) == (10, 0)
        assert quiz_mix("sql", 10, 3) == (10, 0)

    def test_coding_count_clamped(self):
        assert quiz_mix("python", 2, 5) == (0, 2)


class TestValidateQuizShape:
    def test_exact_count_required(self):
        with pytest.raises(GenerationError, match="expected exactly 10"):
            validate_quiz_shape(make_mcq_quiz(9), 10, allow_coding=False)

    def test_coding_rejected_for_theory_subject(self):
        quiz = QuizPayload(questions=[make_coding_question()])
        with pytest.raises(GenerationError, match="non-programming"):
            validate_quiz_shape(quiz, 1, allow_coding=False)

    def test_unsupported_coding_language(self):
        quiz = QuizPayload(questions=[make_coding_question(language="rust")])
        with pytest.raises(GenerationError, match="unsupported language"):
            validate_quiz_shape(quiz, 1, allow_coding=True)

    def test_valid_quiz(self):
        validate_quiz_shape(make_mcq_quiz(10), 10, allow_coding=False)


class TestGeminiContentGenerator:
    def test_requires_api_key(self, monkeypatch):
        monkeypatch.setattr(
            "adaptive_tutor.content.generator.get_settings",
            lambda: Settings(_env_file=None, gemini_api_key=None),
        )
        with pytest.raises(ValueError, match="API key"):
            GeminiContentGenerator()

    def test_generate_lesson(self):
        model = FakeModel(lesson_json())
        generator = make_generator(model, prompts.LESSON_SYSTEM_PROMPT)

        lesson = generator.generate_lesson("Loops", {"subject": "C++"})

        assert isinstance(lesson, Lesson)
        assert lesson.sections[0].code_sample == "for(;;){}"
        assert model.calls[0]["config"]["response_mime_type"] == "application/json"
        assert model.calls[0]["options"] == {"timeout": generator.timeout_seconds}

    def test_retries_then_succeeds(self):
        model = FakeModel(RuntimeError("deadline exceeded"), lesson_json())
        lesson = make_generator(model, prompts.LESSON_SYSTEM_PROMPT).generate_lesson("Loops")
        assert lesson.title == "Loops"
        assert len(model.calls) == 2

    def test_provider_failure_becomes_generation_error(self):
        model = FakeModel(RuntimeError("quota"), RuntimeError("quota"))
        with pytest.raises(GenerationError, match="quota"):
            make_generator(model, prompts.LESSON_SYSTEM_PROMPT).generate_lesson("Loops")

    def test_malformed_lesson(self):
        model = FakeModel(json.dumps({"title": "Loops", "sections": []}))
        with pytest.raises(GenerationError, match="Malformed lesson"):
            make_generator(model, prompts.LESSON_SYSTEM_PROMPT).generate_lesson("Loops")

    def test_generate_quiz_with_coding_mix(self):
        questions = [mcq_json(i) for i in range(2)] + [
            {
                "type": "coding",
                "text": "Echo",
                "problemStatement": "Print the input",
                "language": "python3",
                "testCases": [{"input": "1", "expectedOutput": "1"}],
            }
        ]
        model = FakeModel(json.dumps({"questions": questions}))
        generator = make_generator(
            model, prompts.QUIZ_SYSTEM_PROMPT, question_count=3, coding_question_count=1
        )

        quiz = generator.generate_quiz(make_lesson("Loops"), language_hint="python")

        assert quiz.mcq_count == 2
        assert isinstance(quiz.questions[2], CodingQuestion)
        assert quiz.questions[2].language == "python"

    def test_generate_quiz_wrong_count(self):
        model = FakeModel(json.dumps({"questions": [mcq_json(i) for i in range(4)]}))
        generator = make_generator(model, prompts.QUIZ_SYSTEM_PROMPT, question_count=5)
        with pytest.raises(GenerationError):
            generator.generate_quiz(make_lesson(), language_hint=None)

    def test_generate_hint_plain_text(self):
        model = FakeModel("  Check the loop bound.  ")
        generator = make_generator(model, prompts.HINT_SYSTEM_PROMPT)

        hint = generator.generate_hint("Sum", "print(0)", {"input": "1 2", "expected_output": "3"}, "python")

        assert hint == "Check the loop bound."
        assert "response_mime_type" not in model.calls[0]["config"]

    def test_generate_report(self):
        payload = {"title": "Progress", "summary": "Solid", "strengths": ["Loops"], "weaknesses": [], "recommendations": []}
        model = FakeModel(json.dumps(payload))
        report = make_generator(model, prompts.REPORT_SYSTEM_PROMPT).generate_report("s1", [{"module": "Loops", "score": 90}])
        assert report.strengths == ["Loops"]
