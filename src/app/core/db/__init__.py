"""Database utilities - engine, session and migrations."""

from src.app.core.db.engine import dispose_engine, get_engine
from src.app.core.db.migrations import run_migrations_sync
from src.app.core.db.session import get_session

__all__ = [
    "dispose_engine",
    "get_engine",
    "get_session",
    "run_migrations_sync",
]
