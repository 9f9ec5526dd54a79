"""services.taste_engine.trajectory -- taste trajectory detection."""

from __future__ import annotations

from services.taste_engine.trajectory.detector import (
    analyze_trajectory,
    classify_trajectory,
    cluster_by_domain,
    detect_trajectory_shifts,
    signal_overlap,
)

__all__ = [
    "analyze_trajectory",
    "classify_trajectory",
    "cluster_by_domain",
    "detect_trajectory_shifts",
    "signal_overlap",
]
