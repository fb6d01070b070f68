"""Shared pytest fixtures and configuration."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from wholesale.core.config import Settings, get_settings

FIXED_NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation time so date-window checks are deterministic."""
    return FIXED_NOW


@pytest.fixture
def settings() -> Settings:
    """Settings with explicit defaults, independent of the environment."""
    return Settings(
        currency_symbol="£",
        pricing_strict_inputs=False,
        offers_strict_parsing=False,
        log_file_path=None,
    )


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Drop cached settings between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
