"""
Assemble a ReprofilingInput from raw user state and evaluate it.

The caller supplies what it read from storage (signals, last synthesis time,
counts); this module derives per-domain decayed confidence and the
contradiction ratio, then runs the trigger rules. DB-free.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from services.taste_engine.config import Settings, settings as default_settings
from services.taste_engine.decay.engine import contradiction_ratio, domain_decayed_confidences
from services.taste_engine.decay.reprofiling import (
    ReprofilingCheck,
    ReprofilingInput,
    check_reprofiling_triggers,
)
from services.taste_engine.signals.types import Signal, as_utc, utc_now

logger = logging.getLogger(__name__)


def build_reprofiling_input(
    signals: Iterable[Signal],
    last_synthesized_at: datetime | str | None,
    new_events_since_synthesis: int = 0,
    contradiction_count: int = 0,
    now: datetime | str | None = None,
    config: Settings | None = None,
) -> ReprofilingInput:
    cfg = config or default_settings
    reference = utc_now() if now is None else as_utc(now)
    signal_list = list(signals or ())

    return ReprofilingInput(
        last_synthesized_at=last_synthesized_at,
        # Events only count against an existing synthesis
        new_events_since_synthesis=new_events_since_synthesis if last_synthesized_at else 0,
        domain_confidences=domain_decayed_confidences(
            signal_list, reference, half_life_days=cfg.default_half_life_days
        ),
        contradiction_ratio=contradiction_ratio(contradiction_count, len(signal_list)),
        now=reference,
    )


def run_reprofiling_check(
    signals: Iterable[Signal],
    last_synthesized_at: datetime | str | None,
    new_events_since_synthesis: int = 0,
    contradiction_count: int = 0,
    now: datetime | str | None = None,
    config: Settings | None = None,
) -> ReprofilingCheck:
    """Derive the trigger input from raw user state and evaluate every rule."""
    data = build_reprofiling_input(
        signals,
        last_synthesized_at,
        new_events_since_synthesis,
        contradiction_count,
        now,
        config,
    )
    result = check_reprofiling_triggers(data)
    logger.info(
        "run_reprofiling_check: should_reprofile=%s urgency=%s triggers=%d",
        result.should_reprofile,
        result.urgency.value,
        len(result.triggers),
    )
    return result
