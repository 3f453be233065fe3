"""Pytest configuration and fixtures."""

import os

import pytest

from agent_hub.core.config import get_settings


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ["SUPABASE_URL"] = "https://test.supabase.co"
    os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "test-key"
    os.environ["ANTHROPIC_API_KEY"] = "test-anthropic-key"
    os.environ["AGENT_HUB_ENV"] = "test"
    os.environ.pop("RESEND_API_KEY", None)
    os.environ.pop("BUILD_SERVICE_URL", None)
    os.environ.pop("CRON_SECRET", None)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
