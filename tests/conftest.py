"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests:
a throwaway SQLite database, a scripted content generator and a scripted
code sandbox.
"""
import sys
from pathlib import Path
from uuid import UUID

import pytest

# Add project root (and this directory, for the factories module) to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))
sys.path.insert(0, str(Path(__file__).parent))

from adaptive_tutor.db.database import create_db_engine, init_db, make_session_factory, session_scope  # noqa: E402
from adaptive_tutor.db.models import Module, Subject  # noqa: E402
from factories import FakeContentGenerator, FakeSandbox  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (SQLite database)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        path = str(item.fspath)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        elif "integration" in path:
            item.add_marker(pytest.mark.integration)
        elif "smoke" in path:
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def session_factory(tmp_path):
    """Session factory bound to a fresh SQLite file database."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'tutor.db'}")
    init_db(engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture
def curriculum(session_factory) -> dict[str, UUID]:
    """A C++ subject with two modules; returns their ids."""
    with session_scope(session_factory) as session:
        subject = Subject(key="cpp", title="C++ Programming", language="cpp", display_order=1)
        subject.modules = [
            Module(order=1, title="Intro to C++", seed_topic="Structure of a C++ program"),
            Module(order=2, title="Pointers", seed_topic="Pointers and references"),
        ]
        session.add(subject)
        session.flush()
        return {
            "subject_id": subject.id,
            "module_id": subject.modules[0].id,
            "second_module_id": subject.modules[1].id,
        }


@pytest.fixture
def generator():
    return FakeContentGenerator()


@pytest.fixture
def sandbox():
    return FakeSandbox()


@pytest.fixture
def engine(generator, sandbox, session_factory):
    from adaptive_tutor.adaptive.engine import TutorEngine

    return TutorEngine(generator, sandbox, session_factory, grading_max_workers=2)


@pytest.fixture
def enrolled(engine, curriculum):
    """Student "s1" enrolled in the C++ subject."""
    engine.enroll("s1", curriculum["subject_id"])
    return curriculum
