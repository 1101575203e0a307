"""Pytest configuration for the no_thanks test-suite.

Keeps process-wide settings isolated: every test starts from a fresh
settings cache with the ``NO_THANKS_*`` environment variables cleared, and
the cache is dropped again afterwards so later tests do not observe
monkeypatched values.
"""

from __future__ import annotations

from typing import Iterator

import pytest

from no_thanks.config import reset_settings_cache
from no_thanks.config.env import CONFIG_FILE_ENV, ENV_FIELD_MAP


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear ``NO_THANKS_*`` variables and the settings cache around a test."""

    for name in (*ENV_FIELD_MAP.values(), CONFIG_FILE_ENV):
        monkeypatch.delenv(name, raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()
