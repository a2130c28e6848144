from functools import lru_cache

from src.app.core.config import get_settings
from src.app.core.generation.client import GeneratedCode, LayoutGenerator


@lru_cache
def get_layout_generator() -> LayoutGenerator:
    """Process-wide generator configured from settings."""
    settings = get_settings()
    return LayoutGenerator(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        timeout=settings.openai_timeout_seconds,
        max_retries=settings.openai_max_retries,
        temperature=settings.generation_temperature,
        max_tokens=settings.generation_max_tokens,
    )


__all__ = ["GeneratedCode", "LayoutGenerator", "get_layout_generator"]
