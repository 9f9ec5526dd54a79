"""
Taste taxonomy: the closed domain vocabulary shared by every component.

DIMENSION_TO_DOMAIN collapses the raw dimension labels emitted by the place
enrichment pipeline onto canonical TasteDomain values. Several labels map to
the same domain (e.g. "Scale & Intimacy" and "Culture & Character" are both
Character). Legacy labels from older pipeline runs are kept so historical
place evidence still scores.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from services.taste_engine.signals.types import TasteDomain, clamp_confidence

# ---------------------------------------------------------------------------
# Domain sets
# ---------------------------------------------------------------------------

# Domains scored by the match scorer and analysed by default
CORE_DOMAINS: tuple[TasteDomain, ...] = (
    TasteDomain.DESIGN,
    TasteDomain.CHARACTER,
    TasteDomain.SERVICE,
    TasteDomain.FOOD,
    TasteDomain.LOCATION,
    TasteDomain.WELLNESS,
)

ALL_DOMAINS: tuple[TasteDomain, ...] = tuple(TasteDomain)

# ---------------------------------------------------------------------------
# Pipeline dimension -> domain
# ---------------------------------------------------------------------------

DIMENSION_TO_DOMAIN: dict[str, TasteDomain] = {
    "Design Language": TasteDomain.DESIGN,
    "Character & Identity": TasteDomain.CHARACTER,
    "Service Philosophy": TasteDomain.SERVICE,
    "Food & Drink Identity": TasteDomain.FOOD,
    "Location & Context": TasteDomain.LOCATION,
    "Wellness & Body": TasteDomain.WELLNESS,
    # Legacy dimension names
    "Design & Aesthetic": TasteDomain.DESIGN,
    "Scale & Intimacy": TasteDomain.CHARACTER,
    "Culture & Character": TasteDomain.CHARACTER,
    "Food & Drink": TasteDomain.FOOD,
    "Location & Setting": TasteDomain.LOCATION,
    "Rhythm & Pace": TasteDomain.CHARACTER,
}

_DOMAIN_BY_VALUE: dict[str, TasteDomain] = {d.value: d for d in TasteDomain}

# ---------------------------------------------------------------------------
# User weights
# ---------------------------------------------------------------------------

NEUTRAL_WEIGHT = 0.5

DEFAULT_USER_PROFILE: dict[TasteDomain, float] = {
    TasteDomain.DESIGN: 0.85,
    TasteDomain.CHARACTER: 0.80,
    TasteDomain.SERVICE: 0.60,
    TasteDomain.FOOD: 0.75,
    TasteDomain.LOCATION: 0.70,
    TasteDomain.WELLNESS: 0.40,
    TasteDomain.RHYTHM: 0.50,
    TasteDomain.CULTURAL_ENGAGEMENT: 0.50,
}


def resolve_domain(value: TasteDomain | str | None) -> TasteDomain | None:
    """
    Map a canonical domain, its string value, or a pipeline dimension label
    to a TasteDomain. Returns None for anything outside the vocabulary.
    """
    if value is None:
        return None
    if isinstance(value, TasteDomain):
        return value
    return _DOMAIN_BY_VALUE.get(value) or DIMENSION_TO_DOMAIN.get(value)


def resolve_domains(values: Iterable[TasteDomain | str]) -> list[TasteDomain]:
    """Resolve a domain list, dropping unknown entries and duplicates (order kept)."""
    resolved: list[TasteDomain] = []
    for value in values:
        domain = resolve_domain(value)
        if domain is not None and domain not in resolved:
            resolved.append(domain)
    return resolved


def normalize_profile(
    profile: Mapping[TasteDomain | str, float] | None,
) -> dict[TasteDomain, float]:
    """
    Re-key a profile by TasteDomain and clamp weights to [0, 1].

    Unknown keys are dropped. Values that cannot be read as floats are
    dropped too, so the domain falls back to the neutral weight.
    """
    if not profile:
        return {}

    normalized: dict[TasteDomain, float] = {}
    for key, weight in profile.items():
        domain = resolve_domain(key)
        if domain is None or weight is None:
            continue
        try:
            normalized[domain] = clamp_confidence(weight)
        except (TypeError, ValueError):
            continue
    return normalized


def resolve_user_profile(
    explicit: Mapping[TasteDomain | str, float] | None = None,
) -> dict[TasteDomain, float]:
    """Overlay a user's explicitly set weights on DEFAULT_USER_PROFILE."""
    merged = dict(DEFAULT_USER_PROFILE)
    merged.update(normalize_profile(explicit))
    return merged


def domain_weight(profile: Mapping[TasteDomain, float], domain: TasteDomain) -> float:
    """Weight for a domain in a normalized profile. Absent -> NEUTRAL_WEIGHT."""
    weight = profile.get(domain)
    return NEUTRAL_WEIGHT if weight is None else weight
