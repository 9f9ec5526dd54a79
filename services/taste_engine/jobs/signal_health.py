"""
Signal health: the per-user computation behind the nightly decay pass.

Given a user's full active signal set, this:
  1. Decays every signal against one shared "now"
  2. Summarises the decayed set (total, aged out, mean decayed confidence)
  3. Splits signals into a recent window and an older window by age
  4. Runs trajectory analysis when both windows have enough evidence

This module is intentionally DB-free. Callers persist the decayed values and
any returned trajectory shifts.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime

from services.taste_engine.config import Settings, settings as default_settings
from services.taste_engine.decay.engine import decay_signals
from services.taste_engine.signals.types import (
    DecayedSignal,
    Signal,
    TrajectoryAnalysis,
    as_utc,
    utc_now,
)
from services.taste_engine.trajectory.detector import analyze_trajectory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignalHealthSummary:
    total: int
    aged_out: int
    avg_decayed_confidence: float


@dataclass(frozen=True)
class SignalHealthReport:
    signals: list[DecayedSignal] = field(default_factory=list)
    summary: SignalHealthSummary = field(
        default_factory=lambda: SignalHealthSummary(total=0, aged_out=0, avg_decayed_confidence=0.0)
    )
    trajectory: TrajectoryAnalysis | None = None


def summarize_decayed(decayed: list[DecayedSignal]) -> SignalHealthSummary:
    if not decayed:
        return SignalHealthSummary(total=0, aged_out=0, avg_decayed_confidence=0.0)
    avg = math.fsum(d.decayed_confidence for d in decayed) / len(decayed)
    return SignalHealthSummary(
        total=len(decayed),
        aged_out=sum(1 for d in decayed if d.is_aged_out),
        avg_decayed_confidence=round(avg, 3),
    )


def partition_signal_windows(
    decayed: Iterable[DecayedSignal],
    recent_window_days: int = default_settings.recent_window_days,
    historical_window_days: int = default_settings.historical_window_days,
) -> tuple[list[Signal], list[Signal]]:
    """
    Split decayed signals into (recent, historical) by age in days.

    recent:     age <= recent_window_days
    historical: recent_window_days < age <= historical_window_days

    Returned signals carry their original (undecayed) confidence.
    """
    recent: list[Signal] = []
    historical: list[Signal] = []
    for ds in decayed:
        if ds.age_in_days <= recent_window_days:
            recent.append(ds.signal)
        elif ds.age_in_days <= historical_window_days:
            historical.append(ds.signal)
    return recent, historical


def build_signal_health(
    signals: Iterable[Signal],
    now: datetime | str | None = None,
    config: Settings | None = None,
) -> SignalHealthReport:
    """
    Decay, summarise and (when there is enough history) analyse a signal set.

    Args:
        signals: All active signals for one user.
        now:     Evaluation time, shared by every computation in the report.
        config:  Settings override; defaults to the module settings.

    Returns:
        SignalHealthReport. `trajectory` is None unless both windows hold at
        least `min_window_signals` signals.
    """
    cfg = config or default_settings
    reference = utc_now() if now is None else as_utc(now)

    # Reported values are rounded to 3 places; aged-out flags keep the exact value
    decayed = [
        replace(d, decayed_confidence=round(d.decayed_confidence, 3))
        for d in decay_signals(signals, reference, cfg.default_half_life_days)
    ]
    if not decayed:
        return SignalHealthReport()

    summary = summarize_decayed(decayed)
    recent, historical = partition_signal_windows(
        decayed, cfg.recent_window_days, cfg.historical_window_days
    )

    trajectory: TrajectoryAnalysis | None = None
    if len(recent) >= cfg.min_window_signals and len(historical) >= cfg.min_window_signals:
        trajectory = analyze_trajectory(recent, historical, now=reference)
    else:
        logger.debug(
            "build_signal_health: skipping trajectory recent=%d historical=%d min=%d",
            len(recent),
            len(historical),
            cfg.min_window_signals,
        )

    logger.info(
        "build_signal_health: signals=%d aged_out=%d avg=%.3f trajectory=%s",
        summary.total,
        summary.aged_out,
        summary.avg_decayed_confidence,
        trajectory.direction.value if trajectory else None,
    )

    return SignalHealthReport(signals=decayed, summary=summary, trajectory=trajectory)
