"""
services.taste_engine.decay -- confidence decay and re-profiling triggers.

Usage:
    from services.taste_engine.decay import decay_confidence, check_reprofiling_triggers

    decayed = decay_confidence(0.9, signal.extracted_at, now=now)
"""

from __future__ import annotations

from services.taste_engine.decay.engine import (
    AGED_OUT_THRESHOLD,
    DEFAULT_HALF_LIFE_DAYS,
    compute_signal_age,
    contradiction_ratio,
    decay_confidence,
    decay_signal,
    decay_signals,
    domain_decayed_confidences,
    is_aged_out,
)
from services.taste_engine.decay.reprofiling import (
    REPROFILING_RULES,
    ReprofilingCheck,
    ReprofilingInput,
    ReprofilingRule,
    ReprofilingUrgency,
    check_reprofiling_triggers,
)

__all__ = [
    "AGED_OUT_THRESHOLD",
    "DEFAULT_HALF_LIFE_DAYS",
    "REPROFILING_RULES",
    "ReprofilingCheck",
    "ReprofilingInput",
    "ReprofilingRule",
    "ReprofilingUrgency",
    "check_reprofiling_triggers",
    "compute_signal_age",
    "contradiction_ratio",
    "decay_confidence",
    "decay_signal",
    "decay_signals",
    "domain_decayed_confidences",
    "is_aged_out",
]
