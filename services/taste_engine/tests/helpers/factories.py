"""
Factory functions for engine value objects and raw producer records.

Usage in any test module:
    from services.taste_engine.tests.helpers.factories import make_signal, NOW
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from services.taste_engine.signals.types import AntiSignal, Signal

# Fixed evaluation time so every decay computation is reproducible
NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def days_ago(days: float, now: datetime = NOW) -> datetime:
    return now - timedelta(days=days)


def make_signal(**overrides: Any) -> Signal:
    """Factory for Signal values. Defaults to a fresh Food signal."""
    base: dict[str, Any] = {
        "domain": "Food",
        "tag": "natural_wine",
        "confidence": 0.8,
        "extracted_at": NOW,
        "corroborated": False,
    }
    base.update(overrides)
    return Signal(**base)


def make_anti_signal(**overrides: Any) -> AntiSignal:
    """Factory for AntiSignal values."""
    base: dict[str, Any] = {
        "domain": "Design Language",
        "tag": "generic_chain_decor",
        "confidence": 1.0,
    }
    base.update(overrides)
    return AntiSignal(**base)


def make_signal_record(**overrides: Any) -> dict:
    """Factory for raw place-enrichment signal records (producer dialect)."""
    base: dict[str, Any] = {
        "dimension": "Design Language",
        "signal": "brutalist_concrete",
        "confidence": 0.9,
        "review_corroborated": False,
        "source_type": "editorial",
    }
    base.update(overrides)
    return base


def make_window(domain: str, tags: list[str], confidence: float = 0.8, age_days: float = 0) -> list[Signal]:
    """One signal per tag, same domain / confidence / age."""
    return [
        make_signal(domain=domain, tag=tag, confidence=confidence, extracted_at=days_ago(age_days))
        for tag in tags
    ]
