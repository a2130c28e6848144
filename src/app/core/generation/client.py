"""OpenAI-backed layout generator.

Chat completions in JSON mode, with exponential-backoff retry on rate-limit,
timeout and connection errors. Every failure surfaces as
DependencyFailureError so callers handle one error type.
"""

import asyncio
import json
import time
from dataclasses import dataclass
from typing import Any

from openai import APIConnectionError, APIError, APITimeoutError, AsyncOpenAI, RateLimitError

from src.app.core.exceptions import DependencyFailureError
from src.app.core.generation import prompts
from src.app.core.logging import get_logger

logger = get_logger(__name__)

INITIAL_BACKOFF = 1.0  # seconds
BACKOFF_MULTIPLIER = 2.0

_RETRYABLE_ERRORS = (RateLimitError, APITimeoutError, APIConnectionError)


@dataclass(frozen=True)
class GeneratedCode:
    html: str
    title: str
    description: str


class LayoutGenerator:
    """Thin wrapper over the chat completions API."""

    def __init__(
        self,
        api_key: str | None,
        model: str = "gpt-4o",
        timeout: float = 60.0,
        max_retries: int = 3,
        temperature: float = 0.5,
        max_tokens: int = 3000,
    ) -> None:
        self.model = model
        self.timeout = timeout
        self.max_retries = max_retries
        self.temperature = temperature
        self.max_tokens = max_tokens
        # SDK retries are disabled; _call_with_retry owns the policy
        self._client = (
            AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0) if api_key else None
        )

    # Layout generation

    async def generate_from_description(
        self, description: str, additional_context: str | None = None
    ) -> GeneratedCode:
        result = await self._complete_json(
            [
                {"role": "system", "content": prompts.GENERATE_SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": prompts.with_context(f"Create: {description}", additional_context),
                },
            ],
            max_tokens=self.max_tokens,
        )
        return GeneratedCode(
            html=_required_html(result),
            title=_text(result, "title", "Generated Layout"),
            description=_text(result, "description", "AI-generated layout"),
        )

    async def generate_from_image(
        self,
        image_base64: str,
        additional_context: str | None = None,
        media_type: str = "image/jpeg",
    ) -> GeneratedCode:
        result = await self._complete_json(
            [
                {"role": "system", "content": prompts.IMAGE_SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "text",
                            "text": prompts.with_context(
                                "Create HTML from this image", additional_context
                            ),
                        },
                        {
                            "type": "image_url",
                            "image_url": {"url": f"data:{media_type};base64,{image_base64}"},
                        },
                    ],
                },
            ],
            max_tokens=self.max_tokens,
        )
        return GeneratedCode(
            html=_required_html(result),
            title=_text(result, "title", "Generated Layout from Image"),
            description=_text(result, "description", "AI-generated layout from uploaded image"),
        )

    async def improve_layout(self, html_code: str, feedback: str | None = None) -> GeneratedCode:
        instructions = feedback or prompts.DEFAULT_IMPROVE_FEEDBACK
        result = await self._complete_json(
            [
                {"role": "system", "content": prompts.IMPROVE_SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": (
                        f"Improve layout: {instructions}\n\n"
                        f"{html_code[: prompts.IMPROVE_CODE_LIMIT]}"
                    ),
                },
            ],
            max_tokens=self.max_tokens,
        )
        return GeneratedCode(
            html=_text(result, "html", html_code),
            title=_text(result, "title", "Improved Layout"),
            description=_text(
                result,
                "description",
                "AI-improved layout with better design and accessibility",
            ),
        )

    # Assistant

    async def explain_code(self, html_code: str) -> str:
        text = await self._call_with_retry(
            {
                "model": self.model,
                "messages": [
                    {"role": "system", "content": prompts.EXPLAIN_SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": (
                            "Please explain this HTML code, focusing on the structure, Tailwind "
                            "CSS classes used, responsive design patterns, and any notable "
                            f"features:\n\n{html_code}"
                        ),
                    },
                ],
                "temperature": 0.3,
            }
        )
        return text or "Unable to explain the code."

    async def assistant_chat(
        self,
        message: str,
        history: list[dict[str, str]],
        has_current_layout: bool = False,
    ) -> dict[str, Any]:
        """Raw assistant JSON; the caller validates the action payload."""
        layout_context = (
            "User has a current layout loaded" if has_current_layout else "No current layout"
        )
        return await self._complete_json(
            [
                {
                    "role": "system",
                    "content": prompts.ASSISTANT_SYSTEM_PROMPT.format(
                        layout_context=layout_context
                    ),
                },
                *history[-prompts.ASSISTANT_HISTORY_TURNS :],
                {"role": "user", "content": message},
            ],
            temperature=0.7,
            max_tokens=1000,
        )

    async def recommend_framework(self, requirements: str) -> dict[str, Any]:
        return await self._complete_json(
            [
                {"role": "system", "content": prompts.FRAMEWORK_SYSTEM_PROMPT},
                {"role": "user", "content": f"Project requirements: {requirements}"},
            ],
            temperature=0.3,
        )

    async def analyze_layout(self, html_code: str) -> dict[str, Any]:
        return await self._complete_json(
            [
                {"role": "system", "content": prompts.ANALYZE_SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": (
                        "Analyze this HTML layout and suggest improvements:\n\n"
                        f"{html_code[: prompts.ANALYZE_CODE_LIMIT]}"
                    ),
                },
            ],
            temperature=0.4,
        )

    # Internal helpers

    async def _complete_json(
        self,
        messages: list[dict[str, Any]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> dict[str, Any]:
        """Run a JSON-mode completion and decode the object it returns."""
        create_kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature if temperature is None else temperature,
            "response_format": {"type": "json_object"},
        }
        if max_tokens is not None:
            create_kwargs["max_tokens"] = max_tokens

        text = await self._call_with_retry(create_kwargs)
        try:
            result = json.loads(text or "{}")
        except json.JSONDecodeError as e:
            logger.warning("Generation returned invalid JSON", model=self.model)
            raise DependencyFailureError("Generation service returned malformed output") from e
        if not isinstance(result, dict):
            raise DependencyFailureError("Generation service returned malformed output")
        return result

    async def _call_with_retry(self, create_kwargs: dict[str, Any]) -> str:
        if self._client is None:
            raise DependencyFailureError("Generation service is not configured")

        backoff = INITIAL_BACKOFF
        for attempt in range(1, self.max_retries + 1):
            try:
                start = time.monotonic()
                response = await self._client.chat.completions.create(**create_kwargs)
                elapsed = time.monotonic() - start

                usage = response.usage
                logger.info(
                    "Generation call completed",
                    model=create_kwargs["model"],
                    tokens_in=usage.prompt_tokens if usage else 0,
                    tokens_out=usage.completion_tokens if usage else 0,
                    latency_seconds=round(elapsed, 2),
                )
                return response.choices[0].message.content or ""

            except _RETRYABLE_ERRORS as e:
                if attempt == self.max_retries:
                    logger.error(
                        "Generation retries exhausted",
                        attempts=self.max_retries,
                        error=type(e).__name__,
                    )
                    raise DependencyFailureError("Generation service is unavailable") from e
                logger.warning(
                    "Generation call failed, retrying",
                    error=type(e).__name__,
                    attempt=attempt,
                    max_retries=self.max_retries,
                    backoff_seconds=backoff,
                )
                await asyncio.sleep(backoff)
                backoff *= BACKOFF_MULTIPLIER

            except APIError as e:
                logger.error("Generation API error", error=str(e))
                raise DependencyFailureError("Generation service rejected the request") from e

        raise DependencyFailureError("Generation service is unavailable")


def _text(result: dict[str, Any], key: str, default: str = "") -> str:
    value = result.get(key)
    return value if isinstance(value, str) and value else default


def _required_html(result: dict[str, Any]) -> str:
    html = _text(result, "html")
    if not html.strip():
        logger.error("Generation returned no html", keys=sorted(result))
        raise DependencyFailureError("Generation service returned no code")
    return html
