"""Tests for rate limiting configuration (src/app/core/rate_limit.py)."""

from unittest.mock import MagicMock, patch

import pytest
from starlette.requests import Request

from src.app.core.rate_limit import (
    create_limiter,
    generation_limit,
    get_rate_limit_key,
    login_limit,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def mock_request() -> MagicMock:
    request = MagicMock(spec=Request)
    request.headers = {"X-Forwarded-For": "203.0.113.9"}
    return request


class TestGetRateLimitKey:
    def test_uses_client_ip(self, mock_request: MagicMock) -> None:
        with patch("src.app.core.rate_limit.get_remote_address", return_value="192.168.1.100"):
            assert get_rate_limit_key(mock_request) == "192.168.1.100"

    def test_falls_back_to_unknown(self, mock_request: MagicMock) -> None:
        with patch("src.app.core.rate_limit.get_remote_address", return_value=None):
            assert get_rate_limit_key(mock_request) == "unknown"


class TestDynamicLimits:
    def test_limits_read_from_settings(self) -> None:
        settings = MagicMock()
        settings.login_rate_limit = "3/minute"
        settings.generation_rate_limit = "7/hour"

        with patch("src.app.core.rate_limit.get_settings", return_value=settings):
            assert login_limit() == "3/minute"
            assert generation_limit() == "7/hour"


class TestCreateLimiter:
    def test_disabled_in_testing(self) -> None:
        settings = MagicMock()
        settings.app_env = "testing"

        with patch("src.app.core.rate_limit.get_settings", return_value=settings):
            assert create_limiter().enabled is False

    def test_enabled_elsewhere(self) -> None:
        settings = MagicMock()
        settings.app_env = "production"

        with patch("src.app.core.rate_limit.get_settings", return_value=settings):
            assert create_limiter().enabled is True
