"""Persistence: engine/session management and ORM models."""

from adaptive_tutor.db.database import (
    configure_database,
    get_engine,
    get_session_factory,
    init_db,
    make_session_factory,
    session_scope,
)

__all__ = [
    "configure_database",
    "get_engine",
    "get_session_factory",
    "init_db",
    "make_session_factory",
    "session_scope",
]
