"""
Integration tests for attempt history, reports, teacher summaries and the
curriculum catalog.
"""

from uuid import uuid4

import pytest

from adaptive_tutor.adaptive.reports import ReportService
from adaptive_tutor.core.errors import GenerationError, NotFoundError
from adaptive_tutor.curriculum import DEFAULT_CATALOG, CurriculumService
from factories import answers_for


@pytest.fixture
def history(engine, enrolled):
    """s1: a failed then a passed attempt; s2: one perfect attempt."""
    master = engine.resolve_module_view("s1", enrolled["module_id"])
    engine.record_attempt("s1", enrolled["module_id"], answers_for(master.quiz, 8))
    remedial = engine.resolve_module_view("s1", enrolled["module_id"])
    engine.record_attempt("s1", enrolled["module_id"], answers_for(remedial.quiz, 9))

    engine.enroll("s2", enrolled["subject_id"])
    engine.record_attempt("s2", enrolled["module_id"], answers_for(master.quiz, 10))
    return enrolled


class TestAttemptHistory:
    def test_student_history_newest_first(self, engine, history):
        attempts = engine.attempts_for_student("s1")

        assert [a.score for a in attempts] == [90, 80]
        assert [a.passed for a in attempts] == [True, False]
        assert attempts[0].created_at >= attempts[1].created_at
        assert attempts[0].mastery_level.value == "mastered"

    def test_module_history_filters_by_student(self, engine, history):
        assert len(engine.attempts_for_module(history["module_id"])) == 3
        assert [a.student_id for a in engine.attempts_for_module(history["module_id"], "s2")] == ["s2"]
        assert engine.attempts_for_module(history["second_module_id"]) == []

    def test_unknown_student_has_no_history(self, engine, history):
        assert engine.attempts_for_student("nobody") == []


class TestReports:
    def test_generate_report(self, engine, history, generator):
        report = engine.generate_report("s1", history["subject_id"])

        assert report.student_id == "s1"
        assert report.subject_id == history["subject_id"]
        assert report.analysis["summary"] == "2 attempts analysed"
        assert generator.calls["generate_report"] == 1
        assert [r.id for r in engine.reports_for_student("s1")] == [report.id]

    def test_requires_attempts(self, engine, enrolled):
        with pytest.raises(NotFoundError):
            engine.generate_report("s1", enrolled["subject_id"])

    def test_unknown_subject(self, engine, history):
        with pytest.raises(NotFoundError):
            engine.generate_report("s1", uuid4())

    def test_generation_failure_stores_nothing(self, engine, history, generator):
        generator.fail.add("generate_report")
        with pytest.raises(GenerationError):
            engine.generate_report("s1", history["subject_id"])
        assert engine.reports_for_student("s1") == []

    def test_requires_generator(self, session_factory, history):
        with pytest.raises(ValueError):
            ReportService(None, session_factory).generate_report("s1", history["subject_id"])


class TestStudentSummaries:
    def test_aggregates_per_student(self, engine, history):
        summaries = {s.student_id: s for s in engine.student_summaries()}

        assert summaries["s1"].attempts_count == 2
        assert summaries["s1"].average_score == 85
        assert summaries["s1"].passed_count == 1
        assert summaries["s2"].attempts_count == 1
        assert summaries["s2"].average_score == 100
        assert summaries["s2"].last_attempt_at is not None

    def test_empty(self, engine, curriculum):
        assert engine.student_summaries() == []


class TestCurriculum:
    def test_seed_is_idempotent(self, session_factory):
        service = CurriculumService(session_factory)

        created = service.seed_subjects()
        assert created == [seed.key for seed in DEFAULT_CATALOG]
        assert service.seed_subjects() == []

        listed = service.list_subjects()
        assert len(listed) == len(DEFAULT_CATALOG)
        expected = sorted(DEFAULT_CATALOG, key=lambda s: (s.display_order, s.title))
        assert [s.key for s in listed] == [seed.key for seed in expected]

    def test_seeded_modules_in_order(self, session_factory):
        service = CurriculumService(session_factory)
        service.seed_subjects()

        cpp = service.get_subject_by_key("cpp")
        assert cpp.language == "cpp"
        assert [m.order for m in cpp.modules] == sorted(m.order for m in cpp.modules)
        assert all(m.generation_state == "empty" for m in cpp.modules)
        assert service.get_subject_by_key("dbms").language is None

    def test_get_subject(self, engine, curriculum):
        subject = engine.get_subject(curriculum["subject_id"])
        assert [m.title for m in subject.modules] == ["Intro to C++", "Pointers"]

        with pytest.raises(NotFoundError):
            engine.get_subject(uuid4())
        with pytest.raises(NotFoundError):
            engine.curriculum.get_subject_by_key("klingon")
