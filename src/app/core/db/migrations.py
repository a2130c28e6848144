"""Alembic migration runner for deployments and the PostgreSQL test suite."""

from alembic.config import Config

from alembic import command


def run_migrations_sync(revision: str = "head") -> None:
    """Upgrade the configured database to `revision`.

    Blocking; call it through asyncio.to_thread from async code.
    """
    alembic_cfg = Config("alembic.ini")
    command.upgrade(alembic_cfg, revision)
