"""
Integration tests for enrollment and the progress record helpers.
"""

from uuid import uuid4

import pytest
from sqlalchemy import func, select

from adaptive_tutor.adaptive.progress_store import ProgressStore
from adaptive_tutor.core.errors import NotFoundError
from adaptive_tutor.db.database import session_scope
from adaptive_tutor.db.models import ModuleOverride, Quiz, StudentProgress


@pytest.fixture
def store(session_factory):
    return ProgressStore(session_factory)


class TestEnroll:
    def test_creates_empty_progress(self, store, curriculum):
        progress = store.enroll("s1", curriculum["subject_id"])

        assert progress.student_id == "s1"
        assert progress.subject_id == curriculum["subject_id"]
        assert progress.completed_module_ids == set()
        assert progress.overrides == {}

    def test_enrolling_twice_returns_same_record(self, store, curriculum, session_factory):
        first = store.enroll("s1", curriculum["subject_id"])
        second = store.enroll("s1", curriculum["subject_id"])

        assert first.id == second.id
        with session_scope(session_factory) as session:
            assert session.scalar(select(func.count(StudentProgress.id))) == 1

    def test_unknown_subject(self, store):
        with pytest.raises(NotFoundError):
            store.enroll("s1", uuid4())

    def test_get_progress_requires_enrollment(self, store, curriculum):
        with pytest.raises(NotFoundError):
            store.get_progress("s1", curriculum["subject_id"])

    def test_list_progress(self, store, curriculum):
        store.enroll("s1", curriculum["subject_id"])
        assert [p.subject_id for p in store.list_progress("s1")] == [curriculum["subject_id"]]
        assert store.list_progress("someone-else") == []


class TestProgressHelpers:
    def _quiz(self, session, module_id):
        quiz = Quiz(module_id=module_id, questions=[], origin="remedial", student_id="s1")
        session.add(quiz)
        session.flush()
        return quiz.id

    def test_put_override_replaces_in_place(self, store, curriculum, session_factory):
        store.enroll("s1", curriculum["subject_id"])
        module_id = curriculum["module_id"]

        with session_scope(session_factory) as session:
            progress = ProgressStore.load(session, "s1", curriculum["subject_id"])
            ProgressStore.put_override(progress, module_id, {"title": "first"}, self._quiz(session, module_id))

        with session_scope(session_factory) as session:
            progress = ProgressStore.load(session, "s1", curriculum["subject_id"])
            second_quiz = self._quiz(session, module_id)
            ProgressStore.put_override(progress, module_id, {"title": "second"}, second_quiz)

        view = store.get_progress("s1", curriculum["subject_id"])
        assert list(view.overrides) == [module_id]
        assert view.overrides[module_id].title == "second"
        assert view.overrides[module_id].quiz_id == second_quiz
        with session_scope(session_factory) as session:
            assert session.scalar(select(func.count(ModuleOverride.id))) == 1

    def test_clear_override(self, store, curriculum, session_factory):
        store.enroll("s1", curriculum["subject_id"])
        module_id = curriculum["module_id"]

        with session_scope(session_factory) as session:
            progress = ProgressStore.load(session, "s1", curriculum["subject_id"])
            assert ProgressStore.clear_override(progress, module_id) is False
            ProgressStore.put_override(progress, module_id, {"title": "x"}, self._quiz(session, module_id))

        with session_scope(session_factory) as session:
            progress = ProgressStore.load(session, "s1", curriculum["subject_id"])
            assert ProgressStore.clear_override(progress, module_id) is True

        assert store.get_progress("s1", curriculum["subject_id"]).overrides == {}
        with session_scope(session_factory) as session:
            assert session.scalar(select(func.count(ModuleOverride.id))) == 0

    def test_mark_completed_is_idempotent(self, store, curriculum, session_factory):
        store.enroll("s1", curriculum["subject_id"])
        module_id = curriculum["module_id"]

        for expected in (True, False):
            with session_scope(session_factory) as session:
                progress = ProgressStore.load(session, "s1", curriculum["subject_id"])
                assert ProgressStore.mark_completed(progress, module_id) is expected

        view = store.get_progress("s1", curriculum["subject_id"])
        assert view.completed_module_ids == {module_id}
