"""Rate limiting for credential and generation endpoints.

Uses slowapi with per-process in-memory storage. Endpoint decorators read
their limits from settings so deployments can tune them without code changes.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from src.app.core.config import get_settings
from src.app.core.logging import get_logger

logger = get_logger(__name__)


def get_rate_limit_key(request: Request) -> str:
    """Generate rate limit key from client IP only.

    Never include user-controlled headers here; rotating header values would
    create unlimited fresh buckets.
    """
    return get_remote_address(request) or "unknown"


def login_limit() -> str:
    return get_settings().login_rate_limit


def generation_limit() -> str:
    return get_settings().generation_rate_limit


def create_limiter() -> Limiter:
    """Create the rate limiter, disabled in the testing environment."""
    settings = get_settings()

    if settings.app_env == "testing":
        logger.info("Rate limiter disabled (testing environment)")
        return Limiter(key_func=get_rate_limit_key, enabled=False)

    logger.info("Rate limiter using in-memory backend (not distributed)")
    return Limiter(key_func=get_rate_limit_key)


# Reads settings at import time; reconfiguration requires a restart.
limiter = create_limiter()
