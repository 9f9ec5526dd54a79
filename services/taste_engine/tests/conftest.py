"""
Shared test fixtures for the taste engine test suite.

Provides:
- a fixed evaluation time (`now`) so decay and trajectory stamps are reproducible
- a Settings instance isolated from the process environment
"""

from __future__ import annotations

import os

import pytest

# Ensure defaults before any settings import
for _key in (
    "TASTE_DEFAULT_HALF_LIFE_DAYS",
    "TASTE_RECENT_WINDOW_DAYS",
    "TASTE_HISTORICAL_WINDOW_DAYS",
    "TASTE_MIN_WINDOW_SIGNALS",
):
    os.environ.pop(_key, None)

from services.taste_engine.config import Settings  # noqa: E402
from services.taste_engine.tests.helpers.factories import NOW  # noqa: E402


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def engine_settings():
    return Settings(_env_file=None)
