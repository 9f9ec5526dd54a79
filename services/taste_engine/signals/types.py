"""
Canonical value types for the taste signal engine.

Every component (scorer, decay engine, trajectory detector) speaks in these
types. They are plain frozen dataclasses: derived views such as DecayedSignal
and DomainCluster are recomputed per call and never stored by the engine.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class TasteDomain(str, Enum):
    DESIGN = "Design"
    CHARACTER = "Character"
    SERVICE = "Service"
    FOOD = "Food"
    LOCATION = "Location"
    WELLNESS = "Wellness"
    RHYTHM = "Rhythm"
    CULTURAL_ENGAGEMENT = "CulturalEngagement"

    def __str__(self) -> str:
        return self.value


class TrajectoryDirection(str, Enum):
    STABLE = "STABLE"
    REFINING = "REFINING"
    EXPANDING = "EXPANDING"
    SHIFTING = "SHIFTING"


def clamp_confidence(value: float) -> float:
    """Clamp a confidence to [0.0, 1.0]. NaN carries no evidence and maps to 0.0."""
    value = float(value)
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


def as_utc(value: datetime | str) -> datetime:
    """Coerce a datetime or ISO 8601 string to an aware UTC datetime."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Signal:
    """
    A single taste observation.

    domain:       canonical domain name ("Food") or a raw pipeline dimension
                  label ("Food & Drink Identity"); resolved by the taxonomy
    tag:          short preference label, e.g. "artisan_ceramics"
    confidence:   extraction confidence, clamped to 0.0-1.0
    extracted_at: when the observation was recorded (None for place evidence
                  that carries no timestamp)
    corroborated: an independent source reinforced the same tag
    source_type:  provenance label from the producer, informational only
    """

    domain: str
    tag: str
    confidence: float
    extracted_at: datetime | None = None
    corroborated: bool = False
    source_type: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "confidence", clamp_confidence(self.confidence))


@dataclass(frozen=True)
class AntiSignal(Signal):
    """Negative evidence for a domain at a place. Same shape as Signal."""


@dataclass(frozen=True)
class DomainBreakdown:
    """Per-domain 0-100 scores for a single place plus the weighted overall."""

    scores: dict[TasteDomain, int]
    overall: int
    top_domain: TasteDomain | None = None


@dataclass(frozen=True)
class DecayedSignal:
    """A Signal viewed at a point in time."""

    signal: Signal
    age_in_days: int
    decayed_confidence: float
    is_aged_out: bool

    @property
    def domain(self) -> str:
        return self.signal.domain

    @property
    def tag(self) -> str:
        return self.signal.tag

    @property
    def original_confidence(self) -> float:
        return self.signal.confidence


@dataclass(frozen=True)
class DomainCluster:
    domain: TasteDomain
    top_tags: list[str]
    avg_confidence: float
    signal_count: int


@dataclass(frozen=True)
class TrajectoryShift:
    """A candidate shift for the caller to persist (append-only)."""

    domain: TasteDomain
    from_pattern: str
    to_pattern: str
    detected_at: datetime


@dataclass(frozen=True)
class TrajectoryAnalysis:
    direction: TrajectoryDirection
    shifts: list[TrajectoryShift] = field(default_factory=list)
    description: str = ""
    confidence: float = 0.0
