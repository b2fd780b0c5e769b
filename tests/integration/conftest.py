"""Fixtures for the live tests (GitHub + Meterian service)."""

from pathlib import Path

import pytest

from core.config import HarnessSettings


@pytest.fixture
def live_settings() -> HarnessSettings:
    settings = HarnessSettings()
    if not settings.api_token or not settings.github_token:
        pytest.skip("METERIAN_API_TOKEN / METERIAN_GITHUB_TOKEN not set")
    return settings


@pytest.fixture
def target_dir() -> Path:
    return Path.cwd() / "target"
