"""
Re-profiling trigger evaluation.

Decides whether a user's taste profile is stale or contradictory enough to
re-run extraction. Each rule is a pure, independent callable that inspects a
ReprofilingInput and returns a RuleOutcome (or None when it does not fire).
Rules run in REPROFILING_RULES order; new rules are appended to the tuple
without touching existing ones.

Rule registry:
  no_profile        -> no synthesis on record, full onboarding
  profile_age       -> 6+ months since synthesis, full refresh
  behavioral_events -> 3+ new behavioral events, behavioral update
  weak_domains      -> any domain's decayed confidence < 0.5, adaptive phases
  contradictions    -> contradiction ratio > 0.3, contradiction resolution
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from services.taste_engine.signals.types import as_utc, utc_now

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------

PROFILE_MAX_AGE_MONTHS = 6
DAYS_PER_MONTH = 30
BEHAVIORAL_EVENT_THRESHOLD = 3
WEAK_DOMAIN_CONFIDENCE = 0.5
CONTRADICTION_RATIO_LIMIT = 0.3

HIGH_URGENCY_TRIGGERS = 3
HIGH_URGENCY_WEAK_DOMAINS = 3
MEDIUM_URGENCY_TRIGGERS = 2


class ReprofilingUrgency(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class ReprofilingInput:
    """
    Signal-health snapshot for one user.

    Attributes:
        last_synthesized_at:  When the profile was last synthesized (None or "" = never).
        new_events_since_synthesis: Behavioral events (saves, bookings) since then.
        domain_confidences:   domain -> mean decayed confidence.
        contradiction_ratio:  Fraction of signals that conflicted with earlier ones.
        now:                  Evaluation time; None uses the current time.
    """

    last_synthesized_at: datetime | str | None
    new_events_since_synthesis: int = 0
    domain_confidences: Mapping[str, float] = field(default_factory=dict)
    contradiction_ratio: float = 0.0
    now: datetime | str | None = None


@dataclass(frozen=True)
class RuleOutcome:
    trigger: str
    phases: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ReprofilingRule:
    name: str
    evaluate: Callable[[ReprofilingInput], RuleOutcome | None]


@dataclass(frozen=True)
class ReprofilingCheck:
    should_reprofile: bool
    urgency: ReprofilingUrgency
    triggers: list[str] = field(default_factory=list)
    suggested_phases: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def weak_domains(data: ReprofilingInput) -> list[str]:
    """Domains whose decayed confidence is below WEAK_DOMAIN_CONFIDENCE, input order."""
    return [
        str(domain)
        for domain, confidence in (data.domain_confidences or {}).items()
        if confidence is not None and confidence < WEAK_DOMAIN_CONFIDENCE
    ]


def _no_profile(data: ReprofilingInput) -> RuleOutcome | None:
    if data.last_synthesized_at:
        return None
    return RuleOutcome("No profile on record", ["full-onboarding"])


def _profile_age(data: ReprofilingInput) -> RuleOutcome | None:
    if not data.last_synthesized_at:
        return None
    now = utc_now() if data.now is None else as_utc(data.now)
    try:
        synthesized_at = as_utc(data.last_synthesized_at)
    except ValueError:
        logger.warning(
            "_profile_age: unreadable last_synthesized_at=%r, skipping",
            data.last_synthesized_at,
        )
        return None
    elapsed_days = (now - synthesized_at).total_seconds() / 86400
    months = elapsed_days / DAYS_PER_MONTH
    if months < PROFILE_MAX_AGE_MONTHS:
        return None
    return RuleOutcome(
        f"{math.floor(months)} months since last profile synthesis",
        ["full-refresh"],
    )


def _behavioral_events(data: ReprofilingInput) -> RuleOutcome | None:
    if data.new_events_since_synthesis < BEHAVIORAL_EVENT_THRESHOLD:
        return None
    return RuleOutcome(
        f"{data.new_events_since_synthesis} new behavioral events since last synthesis",
        ["behavioral-update"],
    )


def _weak_domains(data: ReprofilingInput) -> RuleOutcome | None:
    weak = weak_domains(data)
    if not weak:
        return None
    return RuleOutcome(
        f"Low confidence in {', '.join(weak)} (below 50%)",
        [f"adaptive-{d.lower()}" for d in weak],
    )


def _contradictions(data: ReprofilingInput) -> RuleOutcome | None:
    if data.contradiction_ratio <= CONTRADICTION_RATIO_LIMIT:
        return None
    percent = math.floor(data.contradiction_ratio * 100 + 0.5)
    return RuleOutcome(
        f"Contradiction ratio {percent}% (exceeds 30%)",
        ["contradiction-resolution"],
    )


REPROFILING_RULES: tuple[ReprofilingRule, ...] = (
    ReprofilingRule("no_profile", _no_profile),
    ReprofilingRule("profile_age", _profile_age),
    ReprofilingRule("behavioral_events", _behavioral_events),
    ReprofilingRule("weak_domains", _weak_domains),
    ReprofilingRule("contradictions", _contradictions),
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def _urgency(trigger_count: int, weak_count: int) -> ReprofilingUrgency:
    if trigger_count >= HIGH_URGENCY_TRIGGERS or weak_count >= HIGH_URGENCY_WEAK_DOMAINS:
        return ReprofilingUrgency.HIGH
    if trigger_count >= MEDIUM_URGENCY_TRIGGERS:
        return ReprofilingUrgency.MEDIUM
    return ReprofilingUrgency.LOW


def check_reprofiling_triggers(
    data: ReprofilingInput,
    rules: Sequence[ReprofilingRule] = REPROFILING_RULES,
) -> ReprofilingCheck:
    """
    Run every rule and fold the outcomes into a ReprofilingCheck.

    Suggested phases are de-duplicated, first occurrence wins.
    """
    triggers: list[str] = []
    phases: list[str] = []

    for rule in rules:
        outcome = rule.evaluate(data)
        if outcome is None:
            continue
        logger.debug("check_reprofiling_triggers: rule=%s fired: %s", rule.name, outcome.trigger)
        triggers.append(outcome.trigger)
        phases.extend(outcome.phases)

    urgency = _urgency(len(triggers), len(weak_domains(data)))

    return ReprofilingCheck(
        should_reprofile=bool(triggers),
        urgency=urgency,
        triggers=triggers,
        suggested_phases=list(dict.fromkeys(phases)),
    )
