"""PostgreSQL fixtures.

Overrides the root `storage` fixture so the shared `services` and
`create_user` fixtures run against SqlStorage. Every test is skipped when
DATABASE_URL does not accept connections.
"""

import asyncio
from collections.abc import AsyncGenerator, Callable

import pytest
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from src.app.core import db
from src.app.core.config import get_settings
from src.app.core.db import run_migrations_sync
from src.app.storage import SqlStorage
from tests.helpers import FakeGenerator, Services


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Create a test engine, skip without a database, and apply migrations."""
    await db.dispose_engine()

    settings = get_settings()
    test_engine = create_async_engine(settings.database_url, poolclass=NullPool)
    try:
        async with test_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (OSError, SQLAlchemyError) as e:
        await test_engine.dispose()
        pytest.skip(f"PostgreSQL is not reachable: {e}")

    await asyncio.to_thread(run_migrations_sync)

    yield test_engine

    tables = ", ".join(table.name for table in SQLModel.metadata.sorted_tables)
    async with test_engine.begin() as conn:
        await conn.execute(text(f"TRUNCATE {tables} CASCADE"))
    await test_engine.dispose()


@pytest.fixture
async def storage(engine: AsyncEngine) -> AsyncGenerator[SqlStorage]:
    """One unit of work on its own session."""
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield SqlStorage(session)


@pytest.fixture
async def open_services(engine: AsyncEngine) -> AsyncGenerator[Callable[[], Services]]:
    """Build services over a new session, the way a concurrent request would."""
    sessions: list[AsyncSession] = []

    def _open() -> Services:
        session = AsyncSession(engine, expire_on_commit=False)
        sessions.append(session)
        return Services(SqlStorage(session), FakeGenerator())

    yield _open

    for session in sessions:
        await session.close()
