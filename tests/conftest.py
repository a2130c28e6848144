"""Root test fixtures shared across all test types.

Tests run against the in-memory storage backend with a fresh arena,
so no external services are needed. HTTP fixtures live in
tests/integration/conftest.py; tests/integration/postgres/ swaps in SqlStorage.
"""

import os

# Set environment before any app imports: testing disables rate limiting,
# memory storage needs no database, cheap argon2 keeps hashing fast.
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-at-least-32-characters")
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "8192")
os.environ["OPENAI_API_KEY"] = ""

# ruff: noqa: E402 - Imports must be after env var setup
from collections.abc import Callable, Generator

import pytest

from src.app.core.config import get_settings

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()

from src.app.core.health import reset_health_cache
from src.app.models import User
from src.app.storage import MemoryStorage, get_memory_arena, reset_memory_arena
from tests.factories import UserFactory
from tests.helpers import FakeGenerator, Services


@pytest.fixture(autouse=True)
def _fresh_arena() -> Generator[None]:
    """Every test starts with empty in-memory tables."""
    reset_memory_arena()
    reset_health_cache()
    yield
    reset_memory_arena()


@pytest.fixture
def storage() -> MemoryStorage:
    """One unit of work over the test arena."""
    return MemoryStorage(get_memory_arena())


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def services(storage: MemoryStorage, generator: FakeGenerator) -> Callable[[], Services]:
    """Build a fresh service set, the way one request would see it.

    Call it again after a permission change: the access resolver memoizes
    roles for the lifetime of a request.
    """

    def _build() -> Services:
        return Services(storage, generator)

    return _build


@pytest.fixture
def create_user(storage: MemoryStorage) -> Callable[..., object]:
    """Persist a user built by UserFactory."""

    async def _create(**kwargs: object) -> User:
        user = UserFactory.build(**kwargs)
        storage.users.add(user)
        await storage.commit()
        return user

    return _create
