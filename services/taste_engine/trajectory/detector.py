"""
Taste trajectory detection.

Compares a recent signal window against an older one, domain by domain, to
classify how a user's taste is moving:

  REFINING  -- same domains, stronger convictions
  EXPANDING -- new domains gaining presence
  SHIFTING  -- dominant tags within domains changed character
  STABLE    -- minimal change

Window selection is the caller's job (see jobs.signal_health); the detector
only compares two already-partitioned signal sets.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from datetime import datetime

from services.taste_engine.signals.taxonomy import CORE_DOMAINS, resolve_domain, resolve_domains
from services.taste_engine.signals.types import (
    DomainCluster,
    Signal,
    TasteDomain,
    TrajectoryAnalysis,
    TrajectoryDirection,
    TrajectoryShift,
    as_utc,
    utc_now,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

NO_PATTERN = "(none)"
DORMANT_PATTERN = "(dormant)"

TOP_TAGS = 3
MIN_SIGNALS_FOR_SHIFT = 2
OVERLAP_SHIFT_THRESHOLD = 0.3
CONFIDENCE_DELTA = 0.1
FULL_CONFIDENCE_SIGNALS = 20

_DESCRIPTIONS: dict[TrajectoryDirection, str] = {
    TrajectoryDirection.REFINING: "Your taste is deepening: same preferences, stronger convictions.",
    TrajectoryDirection.EXPANDING: (
        "Your palate is broadening: new domains are emerging in your taste profile."
    ),
    TrajectoryDirection.SHIFTING: "Your preferences are evolving across {count} {noun}.",
    TrajectoryDirection.STABLE: "Your taste profile is consistent: strong signal stability.",
}


# ---------------------------------------------------------------------------
# Clustering
# ---------------------------------------------------------------------------


def cluster_by_domain(signals: Iterable[Signal]) -> dict[TasteDomain, DomainCluster]:
    """
    Group signals by domain and summarise each group.

    Ranking is by confidence descending with the tag as tie-break, so the
    result does not depend on input order. Unknown domains are ignored.
    """
    grouped: dict[TasteDomain, list[Signal]] = {}
    for sig in signals or ():
        domain = resolve_domain(sig.domain)
        if domain is None:
            continue
        grouped.setdefault(domain, []).append(sig)

    clusters: dict[TasteDomain, DomainCluster] = {}
    for domain, sigs in grouped.items():
        ranked = sorted(sigs, key=lambda s: (-s.confidence, s.tag))
        clusters[domain] = DomainCluster(
            domain=domain,
            top_tags=[s.tag for s in ranked[:TOP_TAGS]],
            avg_confidence=math.fsum(s.confidence for s in sigs) / len(sigs),
            signal_count=len(sigs),
        )
    return clusters


def signal_overlap(a: Sequence[str], b: Sequence[str]) -> float:
    """Case-insensitive Jaccard index of two tag lists. Both empty -> 1.0."""
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    set_a = {t.lower() for t in a}
    set_b = {t.lower() for t in b}
    union = set_a | set_b
    return len(set_a & set_b) / len(union) if union else 0.0


def _pattern(cluster: DomainCluster) -> str:
    return ", ".join(cluster.top_tags)


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------


def detect_trajectory_shifts(
    current_signals: Iterable[Signal],
    historical_signals: Iterable[Signal],
    domains: Iterable[TasteDomain | str] = CORE_DOMAINS,
    now: datetime | str | None = None,
) -> list[TrajectoryShift]:
    """
    Candidate shifts per domain, evaluated independently.

    Emerging:  present now, absent before, >= 2 current signals
    Dormant:   present before, no current signals
    Changed:   present in both, top-tag overlap < 0.3, >= 2 signals each side
    """
    current = cluster_by_domain(current_signals)
    historical = cluster_by_domain(historical_signals)
    detected_at = utc_now() if now is None else as_utc(now)

    shifts: list[TrajectoryShift] = []
    for domain in resolve_domains(domains):
        cur = current.get(domain)
        hist = historical.get(domain)

        if cur is None and hist is None:
            continue

        if cur is not None and hist is None:
            if cur.signal_count >= MIN_SIGNALS_FOR_SHIFT:
                shifts.append(TrajectoryShift(domain, NO_PATTERN, _pattern(cur), detected_at))
            continue

        if cur is None:
            shifts.append(TrajectoryShift(domain, _pattern(hist), DORMANT_PATTERN, detected_at))
            continue

        overlap = signal_overlap(cur.top_tags, hist.top_tags)
        if (
            overlap < OVERLAP_SHIFT_THRESHOLD
            and cur.signal_count >= MIN_SIGNALS_FOR_SHIFT
            and hist.signal_count >= MIN_SIGNALS_FOR_SHIFT
        ):
            shifts.append(TrajectoryShift(domain, _pattern(hist), _pattern(cur), detected_at))

    return shifts


def classify_trajectory(
    current_signals: Iterable[Signal],
    historical_signals: Iterable[Signal],
    shifts: Sequence[TrajectoryShift],
) -> TrajectoryDirection:
    """Overall direction from the shift list plus cluster statistics."""
    current = cluster_by_domain(current_signals)
    historical = cluster_by_domain(historical_signals)

    domains_gained = 0
    confidence_up = 0
    confidence_down = 0
    for domain, cur in current.items():
        hist = historical.get(domain)
        if hist is None:
            domains_gained += 1
            continue
        if cur.avg_confidence > hist.avg_confidence + CONFIDENCE_DELTA:
            confidence_up += 1
        if cur.avg_confidence < hist.avg_confidence - CONFIDENCE_DELTA:
            confidence_down += 1
    domains_lost = sum(1 for domain in historical if domain not in current)

    if not shifts:
        return TrajectoryDirection.STABLE

    if domains_gained > domains_lost and any(s.from_pattern == NO_PATTERN for s in shifts):
        return TrajectoryDirection.EXPANDING

    if confidence_up > confidence_down and domains_gained <= 1:
        return TrajectoryDirection.REFINING

    if len(shifts) >= 2:
        return TrajectoryDirection.SHIFTING

    return TrajectoryDirection.STABLE


def describe_trajectory(direction: TrajectoryDirection, shift_count: int) -> str:
    template = _DESCRIPTIONS.get(direction, _DESCRIPTIONS[TrajectoryDirection.STABLE])
    if direction is TrajectoryDirection.SHIFTING:
        noun = "domains" if shift_count > 1 else "domain"
        return template.format(count=shift_count, noun=noun)
    return template


def analyze_trajectory(
    current_signals: Iterable[Signal],
    historical_signals: Iterable[Signal],
    domains: Iterable[TasteDomain | str] = CORE_DOMAINS,
    now: datetime | str | None = None,
) -> TrajectoryAnalysis:
    """
    Full trajectory analysis: detect shifts, classify, describe.

    Args:
        current_signals:    Recent window (e.g. last 90 days).
        historical_signals: Older window (e.g. 90-270 days back).
        domains:            Domains to check for shifts; unknown entries ignored.
        now:                Stamp for detected shifts; None uses the current time.

    Returns:
        TrajectoryAnalysis. Confidence grows with total evidence, reaching 1.0
        at 20 signals across both windows.
    """
    current = list(current_signals or ())
    historical = list(historical_signals or ())

    shifts = detect_trajectory_shifts(current, historical, domains, now)
    direction = classify_trajectory(current, historical, shifts)
    confidence = min(1.0, (len(current) + len(historical)) / FULL_CONFIDENCE_SIGNALS)

    logger.debug(
        "analyze_trajectory: direction=%s shifts=%d confidence=%.2f",
        direction.value,
        len(shifts),
        confidence,
    )

    return TrajectoryAnalysis(
        direction=direction,
        shifts=shifts,
        description=describe_trajectory(direction, len(shifts)),
        confidence=confidence,
    )
