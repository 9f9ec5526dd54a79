"""
Domain match scorer: how well a place's enrichment evidence matches a user.

Scoring logic (signal path):
  - Bucket place signals by canonical domain (DIMENSION_TO_DOMAIN)
  - Domain with no signals -> neutral 50 (unknown, not bad)
  - Otherwise: avg corroboration-boosted confidence x 0.6 + density x 0.4,
    where density saturates at 20 signals
  - Each anti-signal subtracts round(confidence x 5), floored at 0
  - Overall = mean of domain scores weighted by the user's domain weights

Also carries the profile path used when a place only has a precomputed
per-domain affinity profile and no raw signals.

Pure functions. Nothing here raises on sparse input.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping

from services.taste_engine.signals.taxonomy import (
    CORE_DOMAINS,
    DEFAULT_USER_PROFILE,
    domain_weight,
    normalize_profile,
    resolve_domain,
)
from services.taste_engine.signals.types import (
    AntiSignal,
    DomainBreakdown,
    Signal,
    TasteDomain,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

NEUTRAL_SCORE = 50
CORROBORATION_BONUS = 0.05
DENSITY_SATURATION = 20
CONFIDENCE_SHARE = 0.6
DENSITY_SHARE = 0.4
ANTI_SIGNAL_MAX_PENALTY = 5

STRETCH_AXES = 2


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _bucket(signals: Iterable[Signal]) -> tuple[dict[TasteDomain, list[Signal]], int]:
    buckets: dict[TasteDomain, list[Signal]] = {d: [] for d in CORE_DOMAINS}
    dropped = 0
    for sig in signals or ():
        domain = resolve_domain(sig.domain)
        if domain is None or domain not in buckets:
            dropped += 1
            continue
        buckets[domain].append(sig)
    return buckets, dropped


def _domain_score(domain_signals: list[Signal]) -> int:
    if not domain_signals:
        return NEUTRAL_SCORE

    boosted = [
        min(s.confidence + (CORROBORATION_BONUS if s.corroborated else 0.0), 1.0)
        for s in domain_signals
    ]
    avg_confidence = math.fsum(boosted) / len(boosted)
    density = min(len(domain_signals) / DENSITY_SATURATION, 1.0)
    strength = avg_confidence * CONFIDENCE_SHARE + density * DENSITY_SHARE
    return _round_half_up(strength * 100)


def _weighted_overall(
    scores: Mapping[TasteDomain, int],
    weights: Mapping[TasteDomain, float],
) -> int:
    total_weight = math.fsum(domain_weight(weights, d) for d in scores)
    if total_weight <= 0:
        return NEUTRAL_SCORE
    weighted_sum = math.fsum(domain_weight(weights, d) * s for d, s in scores.items())
    return _round_half_up(weighted_sum / total_weight)


def _top_domain(scores: Mapping[TasteDomain, int]) -> TasteDomain | None:
    best: TasteDomain | None = None
    for domain in CORE_DOMAINS:
        if domain not in scores:
            continue
        if best is None or scores[domain] > scores[best]:
            best = domain
    return best


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def score(
    signals: Iterable[Signal],
    anti_signals: Iterable[AntiSignal] = (),
    user_profile: Mapping[TasteDomain | str, float] | None = None,
) -> DomainBreakdown:
    """
    Score a place's signal evidence against a user's domain weights.

    Args:
        signals:      Place signals; unmapped dimensions are dropped.
        anti_signals: Negative evidence; each one penalises its domain.
        user_profile: Domain -> weight. None uses DEFAULT_USER_PROFILE;
                      a domain missing from a supplied profile weighs 0.5.

    Returns:
        DomainBreakdown with every core domain scored 0-100.
    """
    buckets, dropped = _bucket(signals)
    if dropped:
        logger.debug("score: dropped %d signal(s) with unmapped dimensions", dropped)

    scores: dict[TasteDomain, int] = {
        domain: _domain_score(domain_signals) for domain, domain_signals in buckets.items()
    }

    for anti in anti_signals or ():
        domain = resolve_domain(anti.domain)
        if domain is None or domain not in scores:
            continue
        penalty = _round_half_up(anti.confidence * ANTI_SIGNAL_MAX_PENALTY)
        scores[domain] = max(0, scores[domain] - penalty)

    weights = DEFAULT_USER_PROFILE if user_profile is None else normalize_profile(user_profile)
    overall = _weighted_overall(scores, weights)

    return DomainBreakdown(scores=scores, overall=overall, top_domain=_top_domain(scores))


def compute_match_score(
    user_profile: Mapping[TasteDomain | str, float] | None,
    place_profile: Mapping[TasteDomain | str, float] | None,
) -> int:
    """
    Profile-to-profile match: the place's per-domain affinity (0-1) averaged
    with the user's weights, scaled to 0-100. Zero total weight -> 50.
    """
    user = normalize_profile(user_profile)
    place = normalize_profile(place_profile)
    domains = [d for d in TasteDomain if d in user or d in place]
    if not domains:
        return NEUTRAL_SCORE

    total_weight = math.fsum(domain_weight(user, d) for d in domains)
    if total_weight <= 0:
        return NEUTRAL_SCORE
    weighted = math.fsum(domain_weight(user, d) * domain_weight(place, d) for d in domains)
    return _round_half_up(weighted / total_weight * 100)


def get_top_axes(
    profile: Mapping[TasteDomain | str, float] | None,
    count: int = 3,
) -> list[TasteDomain]:
    """Domains in the profile ordered by weight, highest first (enum order on ties)."""
    normalized = normalize_profile(profile)
    ordered = sorted(
        normalized,
        key=lambda d: (-normalized[d], list(TasteDomain).index(d)),
    )
    return ordered[: max(count, 0)]


def is_stretch_pick(
    user_profile: Mapping[TasteDomain | str, float] | None,
    place_profile: Mapping[TasteDomain | str, float] | None,
) -> bool:
    """True when the place leads on none of the user's strongest axes."""
    user_top = set(get_top_axes(user_profile, STRETCH_AXES))
    place_top = set(get_top_axes(place_profile, STRETCH_AXES))
    return not (user_top & place_top)


def compute_match(
    user_profile: Mapping[TasteDomain | str, float] | None,
    *,
    signals: Iterable[Signal] | None = None,
    anti_signals: Iterable[AntiSignal] | None = None,
    place_profile: Mapping[TasteDomain | str, float] | None = None,
) -> DomainBreakdown:
    """
    Score a place from whatever evidence it has.

    Raw signals win over a precomputed place profile. With neither, the
    result is a neutral 50 with an empty breakdown.
    """
    signal_list = list(signals or ())
    if signal_list:
        return score(signal_list, list(anti_signals or ()), user_profile)

    if place_profile:
        top = get_top_axes(place_profile, 1)
        return DomainBreakdown(
            scores={},
            overall=compute_match_score(user_profile, place_profile),
            top_domain=top[0] if top else None,
        )

    logger.debug("compute_match: no signals or profile, returning neutral score")
    return DomainBreakdown(scores={}, overall=NEUTRAL_SCORE, top_domain=None)
