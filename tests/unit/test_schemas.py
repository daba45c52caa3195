"""
Unit tests for generated content schemas.
"""

import pytest
from pydantic import ValidationError

from adaptive_tutor.content.schemas import (
    QUESTION_ADAPTER,
    CodingQuestion,
    Lesson,
    MCQQuestion,
    QuizPayload,
    TestCase,
    normalize_language,
)


class TestLesson:
    def test_accepts_camel_case(self):
        lesson = Lesson.model_validate(
            {
                "title": "Pointers",
                "sections": [{"heading": "Basics", "body": "A pointer holds an address.", "codeSample": "int* p;"}],
                "keyTakeaways": ["Pointers store addresses"],
            }
        )
        assert lesson.sections[0].code_sample == "int* p;"
        assert lesson.key_takeaways == ["Pointers store addresses"]

    def test_requires_a_section(self):
        with pytest.raises(ValidationError):
            Lesson(title="Empty", sections=[])


class TestMCQQuestion:
    def test_option_count_bounds(self):
        with pytest.raises(ValidationError):
            MCQQuestion(text="?", options=["a", "b"], correct_index=0)
        with pytest.raises(ValidationError):
            MCQQuestion(text="?", options=["a", "b", "c", "d", "e"], correct_index=0)

    def test_correct_index_must_point_at_an_option(self):
        with pytest.raises(ValidationError):
            MCQQuestion(text="?", options=["a", "b", "c"], correct_index=3)

    def test_generates_id(self):
        q1 = MCQQuestion(text="?", options=["a", "b", "c"], correct_index=1)
        q2 = MCQQuestion(text="?", options=["a", "b", "c"], correct_index=1)
        assert q1.id and q1.id != q2.id


class TestCodingQuestion:
    def test_normalizes_language(self):
        question = CodingQuestion(
            text="Sum",
            problem_statement="Add two numbers",
            language="C++",
            test_cases=[{"input": "1 2", "expectedOutput": 3}],
        )
        assert question.language == "cpp"
        assert question.test_cases[0].expected_output == "3"

    def test_requires_test_cases(self):
        with pytest.raises(ValidationError):
            CodingQuestion(text="Sum", problem_statement="Add", language="python", test_cases=[])

    def test_test_case_input_defaults_empty(self):
        assert TestCase(expected_output="ok").input == ""


class TestQuestionUnion:
    def test_dispatches_on_type(self):
        mcq = QUESTION_ADAPTER.validate_python(
            {"type": "mcq", "text": "?", "options": ["a", "b", "c"], "correctIndex": 2}
        )
        coding = QUESTION_ADAPTER.validate_python(
            {
                "type": "coding",
                "text": "Echo",
                "problemStatement": "Echo stdin",
                "language": "python3",
                "testCases": [{"input": "x", "expectedOutput": "x"}],
            }
        )
        assert isinstance(mcq, MCQQuestion)
        assert isinstance(coding, CodingQuestion)
        assert coding.language == "python"

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            QUESTION_ADAPTER.validate_python({"type": "essay", "text": "?"})

    def test_mcq_without_options_rejected(self):
        with pytest.raises(ValidationError):
            QUESTION_ADAPTER.validate_python({"type": "mcq", "text": "?", "correctIndex": 0})


class TestQuizPayload:
    def _mcq(self, qid):
        return {"id": qid, "type": "mcq", "text": "?", "options": ["a", "b", "c"], "correct_index": 0}

    def test_requires_questions(self):
        with pytest.raises(ValidationError):
            QuizPayload(questions=[])

    def test_rejects_duplicate_ids(self):
        with pytest.raises(ValidationError):
            QuizPayload.model_validate({"questions": [self._mcq("a"), self._mcq("a")]})

    def test_storage_keeps_ids_and_order(self):
        quiz = QuizPayload.model_validate({"questions": [self._mcq("a"), self._mcq("b")]})
        stored = quiz.to_storage()
        assert [q["id"] for q in stored] == ["a", "b"]
        assert "correct_index" in stored[0]
        assert QuizPayload.from_storage(stored) == quiz

    def test_counts(self):
        quiz = QuizPayload.model_validate(
            {
                "questions": [
                    self._mcq("a"),
                    {
                        "id": "b",
                        "type": "coding",
                        "text": "Echo",
                        "problem_statement": "Echo",
                        "language": "java",
                        "test_cases": [{"expected_output": "1"}],
                    },
                ]
            }
        )
        assert quiz.mcq_count == 1
        assert quiz.coding_count == 1
        assert set(quiz.question_by_id()) == {"a", "b"}


def test_normalize_language():
    assert normalize_language(" Python3 ") == "python"
    assert normalize_language("c++") == "cpp"
    assert normalize_language("rust") == "rust"
