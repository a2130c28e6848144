"""Tests for the OpenAI client wrapper with a mocked SDK."""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from openai import APITimeoutError, BadRequestError

from src.app.core.exceptions import DependencyFailureError
from src.app.core.generation import LayoutGenerator

pytestmark = pytest.mark.unit

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _completion(content: str) -> SimpleNamespace:
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=10, completion_tokens=20),
    )


@pytest.fixture
def client_mock() -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock()
    return client


@pytest.fixture
def generator(client_mock: MagicMock) -> LayoutGenerator:
    gen = LayoutGenerator(api_key="sk-test", max_retries=3)
    gen._client = client_mock
    return gen


@pytest.fixture(autouse=True)
def no_backoff():
    with patch("src.app.core.generation.client.asyncio.sleep", new=AsyncMock()) as sleep:
        yield sleep


async def test_generate_parses_json(generator, client_mock):
    client_mock.chat.completions.create.return_value = _completion(
        json.dumps({"html": "<main/>", "title": "Shop", "description": "Store front"})
    )

    code = await generator.generate_from_description("a shop", "green")

    assert (code.html, code.title, code.description) == ("<main/>", "Shop", "Store front")
    kwargs = client_mock.chat.completions.create.call_args.kwargs
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["max_tokens"] == generator.max_tokens
    assert "green" in kwargs["messages"][1]["content"]


async def test_missing_fields_use_defaults(generator, client_mock):
    client_mock.chat.completions.create.return_value = _completion(json.dumps({"html": "<p/>"}))

    code = await generator.generate_from_description("anything")

    assert (code.title, code.description) == ("Generated Layout", "AI-generated layout")


@pytest.mark.parametrize("reply", [{}, {"html": "   ", "title": "Empty"}, {"html": None}])
@pytest.mark.parametrize("method", ["generate_from_description", "generate_from_image"])
async def test_generation_without_html_fails(generator, client_mock, reply, method):
    client_mock.chat.completions.create.return_value = _completion(json.dumps(reply))

    with pytest.raises(DependencyFailureError):
        await getattr(generator, method)("aGVsbG8=")


async def test_improve_keeps_code_when_model_omits_html(generator, client_mock):
    client_mock.chat.completions.create.return_value = _completion("{}")

    code = await generator.improve_layout("<main>old</main>")

    assert code.html == "<main>old</main>"


async def test_retries_timeouts_with_backoff(generator, client_mock, no_backoff):
    client_mock.chat.completions.create.side_effect = [
        APITimeoutError(request=REQUEST),
        APITimeoutError(request=REQUEST),
        _completion(json.dumps({"html": "<p/>"})),
    ]

    await generator.generate_from_description("retry me")

    assert client_mock.chat.completions.create.await_count == 3
    assert [c.args[0] for c in no_backoff.await_args_list] == [1.0, 2.0]


async def test_exhausted_retries_raise_dependency_failure(generator, client_mock):
    client_mock.chat.completions.create.side_effect = APITimeoutError(request=REQUEST)

    with pytest.raises(DependencyFailureError):
        await generator.generate_from_description("never")
    assert client_mock.chat.completions.create.await_count == 3


async def test_api_errors_are_not_retried(generator, client_mock):
    response = httpx.Response(400, request=REQUEST)
    client_mock.chat.completions.create.side_effect = BadRequestError(
        "bad", response=response, body=None
    )

    with pytest.raises(DependencyFailureError):
        await generator.generate_from_description("bad")
    assert client_mock.chat.completions.create.await_count == 1


async def test_invalid_json_is_dependency_failure(generator, client_mock):
    client_mock.chat.completions.create.return_value = _completion("<html>not json</html>")

    with pytest.raises(DependencyFailureError):
        await generator.generate_from_description("x")


async def test_unconfigured_generator_fails_fast():
    with pytest.raises(DependencyFailureError):
        await LayoutGenerator(api_key=None).explain_code("<p/>")


async def test_assistant_history_is_trimmed(generator, client_mock):
    client_mock.chat.completions.create.return_value = _completion(json.dumps({"response": "hi"}))
    history = [{"role": "user", "content": str(n)} for n in range(8)]

    await generator.assistant_chat("latest", history)

    messages = client_mock.chat.completions.create.call_args.kwargs["messages"]
    assert [m["content"] for m in messages[1:-1]] == ["3", "4", "5", "6", "7"]
    assert messages[-1] == {"role": "user", "content": "latest"}
