"""HTTP client fixtures.

The app runs on the in-memory backend with the fake generator injected
through dependency overrides.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable, Generator
from uuid import uuid4

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.app.api.dependencies import get_generator
from src.app.main import app as application
from tests.factories import DEFAULT_TEST_PASSWORD
from tests.helpers import FakeGenerator

type Headers = dict[str, str]


@pytest.fixture
def app(generator: FakeGenerator) -> Generator[FastAPI]:
    application.dependency_overrides[get_generator] = lambda: generator
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
def register(client: AsyncClient) -> Callable[..., Awaitable[tuple[dict, Headers]]]:
    """Register a user through the API and log in. Returns (user, auth headers)."""

    async def _register(username: str | None = None) -> tuple[dict, Headers]:
        username = username or f"user_{uuid4().hex[:8]}"
        email = f"{username}@example.com"
        response = await client.post(
            "/api/v1/auth/register",
            json={"username": username, "email": email, "password": DEFAULT_TEST_PASSWORD},
        )
        assert response.status_code == 201, response.text

        response = await client.post(
            "/api/v1/auth/login", json={"email": email, "password": DEFAULT_TEST_PASSWORD}
        )
        assert response.status_code == 200, response.text
        return (
            (await client.get("/api/v1/auth/me", headers=_bearer(response))).json(),
            _bearer(response),
        )

    return _register


def _bearer(login_response) -> Headers:
    return {"Authorization": f"Bearer {login_response.json()['access_token']}"}
