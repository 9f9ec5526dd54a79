"""
Taste signal vocabulary.

Modules
-------
types       TasteDomain enum and the engine's value objects
taxonomy    Dimension -> domain table, domain sets, default user weights
records     Validation of raw producer records into Signal / AntiSignal
"""

from __future__ import annotations

from services.taste_engine.signals.records import parse_anti_signals, parse_signals
from services.taste_engine.signals.taxonomy import (
    CORE_DOMAINS,
    DEFAULT_USER_PROFILE,
    DIMENSION_TO_DOMAIN,
    resolve_domain,
    resolve_user_profile,
)
from services.taste_engine.signals.types import (
    AntiSignal,
    DecayedSignal,
    DomainBreakdown,
    DomainCluster,
    Signal,
    TasteDomain,
    TrajectoryAnalysis,
    TrajectoryDirection,
    TrajectoryShift,
)

__all__ = [
    "AntiSignal",
    "CORE_DOMAINS",
    "DEFAULT_USER_PROFILE",
    "DIMENSION_TO_DOMAIN",
    "DecayedSignal",
    "DomainBreakdown",
    "DomainCluster",
    "Signal",
    "TasteDomain",
    "TrajectoryAnalysis",
    "TrajectoryDirection",
    "TrajectoryShift",
    "parse_anti_signals",
    "parse_signals",
    "resolve_domain",
    "resolve_user_profile",
]
