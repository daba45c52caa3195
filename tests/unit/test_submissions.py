"""
Unit tests for submission parsing.
"""

import pytest

from adaptive_tutor.core.errors import SubmissionValidationError
from adaptive_tutor.grading.submissions import SubmittedAnswer, parse_answers


class TestParseAnswers:
    def test_parses_camel_case(self):
        answers = parse_answers(
            [
                {"questionId": "q1", "chosenIndex": 2},
                {"questionId": "q2", "type": "coding", "submittedCode": "print(1)"},
            ]
        )
        assert answers == [
            SubmittedAnswer(question_id="q1", chosen_index=2),
            SubmittedAnswer(question_id="q2", type="coding", submitted_code="print(1)"),
        ]

    def test_coerces_numeric_strings(self):
        (answer,) = parse_answers([{"questionId": 7, "chosenIndex": "3"}])
        assert answer.question_id == "7"
        assert answer.chosen_index == 3

    def test_empty_list_is_valid(self):
        assert parse_answers([]) == []

    @pytest.mark.parametrize("raw", [None, "answers", {"questionId": "q1"}, 3])
    def test_non_list_rejected(self, raw):
        with pytest.raises(SubmissionValidationError):
            parse_answers(raw)

    def test_non_object_item_rejected(self):
        with pytest.raises(SubmissionValidationError, match=r"answers\[1\]"):
            parse_answers([{"questionId": "q1"}, "q2"])

    def test_missing_question_id_rejected(self):
        with pytest.raises(SubmissionValidationError):
            parse_answers([{"chosenIndex": 1}])

    def test_unknown_type_rejected(self):
        with pytest.raises(SubmissionValidationError):
            parse_answers([{"questionId": "q1", "type": "essay"}])

    def test_non_integer_index_rejected(self):
        with pytest.raises(SubmissionValidationError):
            parse_answers([{"questionId": "q1", "chosenIndex": "second"}])
