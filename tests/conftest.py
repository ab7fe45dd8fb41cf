"""
Test Configuration and Fixtures

Keeps cached settings isolated between tests.
"""

import pytest

from shiftpay.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Clear the settings cache so each test sees its own environment."""
    monkeypatch.delenv("LOCAL_TIMEZONE", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def local_timezone(monkeypatch):
    """Set the local timezone used for punch calendar dates."""

    def _set(zone: str):
        monkeypatch.setenv("LOCAL_TIMEZONE", zone)
        get_settings.cache_clear()
        return get_settings()

    return _set
