"""
Test factories: content builders and scripted collaborators.
"""
import threading
import time

from adaptive_tutor.content.schemas import (
    CodingQuestion,
    Lesson,
    LessonSection,
    MCQQuestion,
    QuizPayload,
    ReportAnalysis,
    TestCase,
)
from adaptive_tutor.core.errors import GenerationError
from adaptive_tutor.integrations.judge0_client import ExecutionResult

# =============================================================================
# Content builders
# =============================================================================


def make_lesson(title: str = "Intro to C++") -> Lesson:
    return Lesson(
        title=title,
        sections=[LessonSection(heading="Overview", body=f"All about {title}.")],
        key_takeaways=["Practice makes perfect"],
    )


def make_mcq_quiz(count: int = 10, label: str = "Q") -> QuizPayload:
    """Quiz of ``count`` MCQs whose correct option is always index 0."""
    return QuizPayload(
        questions=[
            MCQQuestion(
                text=f"{label} {i + 1}?",
                options=["right", "wrong", "also wrong", "nope"],
                correct_index=0,
            )
            for i in range(count)
        ]
    )


def make_coding_question(cases: int = 3, language: str = "python") -> CodingQuestion:
    return CodingQuestion(
        text="Echo the number",
        problem_statement="Read an integer and print it.",
        language=language,
        test_cases=[TestCase(input=str(i), expected_output=str(i)) for i in range(cases)],
    )


def answers_for(quiz: QuizPayload, correct: int) -> list[dict]:
    """MCQ answers with the first ``correct`` questions right and the rest wrong."""
    answers = []
    for i, question in enumerate(quiz.questions):
        chosen = question.correct_index if i < correct else (question.correct_index + 1) % len(question.options)
        answers.append({"questionId": question.id, "chosenIndex": chosen})
    return answers


def accepted(stdout: str) -> ExecutionResult:
    return ExecutionResult(stdout=stdout, status_id=3, status_description="Accepted")


def wrong_answer(stdout: str) -> ExecutionResult:
    return ExecutionResult(stdout=stdout, status_id=4, status_description="Wrong Answer")


# =============================================================================
# Fake collaborators
# =============================================================================


class FakeContentGenerator:
    """
    Scripted ContentGenerator.

    Counts calls per method. ``fail`` names methods that raise
    GenerationError; ``delay`` slows down lesson generation so concurrent
    readers overlap.
    """

    def __init__(self, question_count: int = 10, delay: float = 0.0):
        self.question_count = question_count
        self.delay = delay
        self.fail: set[str] = set()
        self.hint_text: str | None = "Check your loop bounds."
        self.calls: dict[str, int] = {}
        self.remedial_requests: list[list[str]] = []
        self._lock = threading.Lock()

    def _record(self, name: str) -> None:
        with self._lock:
            self.calls[name] = self.calls.get(name, 0) + 1
        if name in self.fail:
            raise GenerationError(f"{name} failed")

    def generate_lesson(self, topic, context=None):
        self._record("generate_lesson")
        if self.delay:
            time.sleep(self.delay)
        return make_lesson(topic)

    def generate_quiz(self, lesson, language_hint=None):
        self._record("generate_quiz")
        return make_mcq_quiz(self.question_count, label=lesson.title)

    def generate_remedial_lesson(self, failed_question_texts, module_title, language_hint=None):
        self._record("generate_remedial_lesson")
        with self._lock:
            self.remedial_requests.append(list(failed_question_texts))
            n = len(self.remedial_requests)
        return make_lesson(f"Remedial {n}: {module_title}")

    def generate_hint(self, problem_statement, submitted_code, failed_case, language):
        self._record("generate_hint")
        return self.hint_text

    def generate_report(self, student_id, attempts):
        self._record("generate_report")
        return ReportAnalysis(
            title=f"Report for {student_id}",
            summary=f"{len(attempts)} attempts analysed",
            strengths=["Consistency"],
            weaknesses=["Pointers"],
            recommendations=["Review module 5"],
        )


class FakeSandbox:
    """
    Scripted sandbox.

    ``results`` is consumed in call order; an Exception instance is raised
    instead of returned. When exhausted, the program's stdin is echoed back.
    """

    def __init__(self, results=None):
        self.results = list(results or [])
        self.calls: list[tuple[str, str, str]] = []
        self._lock = threading.Lock()

    def run(self, language, source_code, stdin=""):
        with self._lock:
            self.calls.append((language, source_code, stdin))
            result = self.results.pop(0) if self.results else accepted(stdin)
        if isinstance(result, Exception):
            raise result
        return result


