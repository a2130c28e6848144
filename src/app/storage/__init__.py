"""Storage backends selected once at process start."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from src.app.core.config import get_settings
from src.app.core.db import get_session
from src.app.storage.base import LayoutFilter, Storage, TagMatch
from src.app.storage.memory import MemoryArena, MemoryStorage
from src.app.storage.sql import SqlStorage

_memory_arena: MemoryArena | None = None


def get_memory_arena() -> MemoryArena:
    """Get or create the process-wide in-memory arena."""
    global _memory_arena
    if _memory_arena is None:
        _memory_arena = MemoryArena()
    return _memory_arena


def reset_memory_arena() -> None:
    """Drop every row of the in-memory backend (tests)."""
    global _memory_arena
    _memory_arena = None


@asynccontextmanager
async def open_storage() -> AsyncGenerator[Storage]:
    """Open a unit of work on the configured backend."""
    settings = get_settings()
    if settings.storage_backend == "memory":
        storage = MemoryStorage(get_memory_arena())
        try:
            yield storage
        finally:
            await storage.close()
        return

    async with get_session() as session:
        yield SqlStorage(session)


__all__ = [
    "LayoutFilter",
    "MemoryArena",
    "MemoryStorage",
    "SqlStorage",
    "Storage",
    "TagMatch",
    "get_memory_arena",
    "open_storage",
    "reset_memory_arena",
]
