"""services.taste_engine.matching -- place match scoring."""

from __future__ import annotations

from services.taste_engine.matching.scorer import (
    compute_match,
    compute_match_score,
    get_top_axes,
    is_stretch_pick,
    score,
)

__all__ = [
    "compute_match",
    "compute_match_score",
    "get_top_axes",
    "is_stretch_pick",
    "score",
]
