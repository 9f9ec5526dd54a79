"""
Signal decay engine.

Implements a 180-day half-life exponential decay model for taste signals:

    decayed = original x 0.5 ** (age_days / half_life_days)

At 180 days a signal keeps 50% of its confidence, at 360 days 25%, at 540
days 12.5%. Below AGED_OUT_THRESHOLD (0.05) a signal is considered aged out.

Decay is always recomputed against "now"; nothing here mutates a signal.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from datetime import datetime

from services.taste_engine.signals.taxonomy import CORE_DOMAINS, resolve_domain
from services.taste_engine.signals.types import (
    DecayedSignal,
    Signal,
    TasteDomain,
    as_utc,
    clamp_confidence,
    utc_now,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_HALF_LIFE_DAYS = 180.0

# Fixed system-wide; not configurable per call.
AGED_OUT_THRESHOLD = 0.05

_SECONDS_PER_DAY = 60 * 60 * 24


def _age_seconds(extracted_at: datetime | str, now: datetime | str | None) -> float:
    """Seconds between extraction and `now`; 0.0 when either timestamp is unreadable."""
    try:
        reference = utc_now() if now is None else as_utc(now)
        extracted = as_utc(extracted_at)
    except (TypeError, ValueError):
        logger.warning(
            "decay: unreadable timestamp extracted_at=%r now=%r, treating signal as fresh",
            extracted_at,
            now,
        )
        return 0.0
    return (reference - extracted).total_seconds()


# ---------------------------------------------------------------------------
# Core functions
# ---------------------------------------------------------------------------


def decay_confidence(
    original: float,
    extracted_at: datetime | str,
    half_life_days: float = DEFAULT_HALF_LIFE_DAYS,
    now: datetime | str | None = None,
) -> float:
    """
    Decayed confidence of a signal at `now` (defaults to the current time).

    Returns the (clamped) original unchanged when now <= extracted_at, so
    clock skew never inflates a value.
    """
    original = clamp_confidence(original)

    if half_life_days is None or not math.isfinite(half_life_days) or half_life_days <= 0:
        logger.warning(
            "decay_confidence: invalid half_life_days=%r, using %.0f",
            half_life_days,
            DEFAULT_HALF_LIFE_DAYS,
        )
        half_life_days = DEFAULT_HALF_LIFE_DAYS

    age_seconds = _age_seconds(extracted_at, now)
    if age_seconds <= 0:
        return original

    age_days = age_seconds / _SECONDS_PER_DAY
    return clamp_confidence(original * math.pow(0.5, age_days / half_life_days))


def compute_signal_age(
    extracted_at: datetime | str,
    now: datetime | str | None = None,
) -> int:
    """Whole days since extraction, floored at 0. For display and bucketing."""
    return max(0, math.floor(_age_seconds(extracted_at, now) / _SECONDS_PER_DAY))


def is_aged_out(
    original: float,
    extracted_at: datetime | str,
    half_life_days: float = DEFAULT_HALF_LIFE_DAYS,
    now: datetime | str | None = None,
) -> bool:
    """True once the decayed confidence drops below AGED_OUT_THRESHOLD."""
    return decay_confidence(original, extracted_at, half_life_days, now) < AGED_OUT_THRESHOLD


# ---------------------------------------------------------------------------
# Bulk helpers
# ---------------------------------------------------------------------------


def decay_signal(
    signal: Signal,
    now: datetime | str | None = None,
    half_life_days: float = DEFAULT_HALF_LIFE_DAYS,
) -> DecayedSignal:
    """View a signal at `now`. Signals without a timestamp are treated as fresh."""
    if signal.extracted_at is None:
        decayed = signal.confidence
        age = 0
    else:
        decayed = decay_confidence(signal.confidence, signal.extracted_at, half_life_days, now)
        age = compute_signal_age(signal.extracted_at, now)

    return DecayedSignal(
        signal=signal,
        age_in_days=age,
        decayed_confidence=decayed,
        is_aged_out=decayed < AGED_OUT_THRESHOLD,
    )


def decay_signals(
    signals: Iterable[Signal],
    now: datetime | str | None = None,
    half_life_days: float = DEFAULT_HALF_LIFE_DAYS,
) -> list[DecayedSignal]:
    """Decay every signal against a single shared `now`."""
    reference = utc_now() if now is None else as_utc(now)
    return [decay_signal(s, reference, half_life_days) for s in signals or ()]


def domain_decayed_confidences(
    signals: Iterable[Signal],
    now: datetime | str | None = None,
    domains: Iterable[TasteDomain | str] = CORE_DOMAINS,
    half_life_days: float = DEFAULT_HALF_LIFE_DAYS,
) -> dict[str, float]:
    """
    Mean decayed confidence per domain, rounded to 3 places.

    Domains with no signals report 0.0 so they count as weak when fed to
    check_reprofiling_triggers(). Signals in unknown domains are ignored.
    """
    decayed_by_domain: dict[TasteDomain, list[float]] = {}
    for ds in decay_signals(signals, now, half_life_days):
        domain = resolve_domain(ds.domain)
        if domain is not None:
            decayed_by_domain.setdefault(domain, []).append(ds.decayed_confidence)

    result: dict[str, float] = {}
    for value in domains:
        domain = resolve_domain(value)
        if domain is None:
            continue
        values = decayed_by_domain.get(domain)
        result[domain.value] = round(math.fsum(values) / len(values), 3) if values else 0.0
    return result


def contradiction_ratio(contradictions: int, total_signals: int) -> float:
    """Fraction of signals that conflicted with earlier ones. 0 with no signals."""
    if total_signals <= 0:
        return 0.0
    return max(0.0, contradictions / total_signals)
