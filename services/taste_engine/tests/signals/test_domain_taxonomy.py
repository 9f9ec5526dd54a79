"""Tests for the taste taxonomy -- domain resolution, profiles, defaults."""

from __future__ import annotations

import pytest

from services.taste_engine.signals.taxonomy import (
    CORE_DOMAINS,
    DEFAULT_USER_PROFILE,
    DIMENSION_TO_DOMAIN,
    NEUTRAL_WEIGHT,
    domain_weight,
    normalize_profile,
    resolve_domain,
    resolve_domains,
    resolve_user_profile,
)
from services.taste_engine.signals.types import AntiSignal, Signal, TasteDomain


class TestResolveDomain:
    """resolve_domain accepts enums, canonical names and dimension labels."""

    @pytest.mark.parametrize("label, expected", [
        ("Design Language", TasteDomain.DESIGN),
        ("Scale & Intimacy", TasteDomain.CHARACTER),
        ("Culture & Character", TasteDomain.CHARACTER),
        ("Rhythm & Pace", TasteDomain.CHARACTER),
        ("Food & Drink", TasteDomain.FOOD),
        ("Wellness & Body", TasteDomain.WELLNESS),
    ])
    def test_pipeline_dimension_labels(self, label, expected):
        assert resolve_domain(label) is expected

    def test_canonical_names(self):
        for domain in TasteDomain:
            assert resolve_domain(domain.value) is domain

    def test_enum_member_passthrough(self):
        assert resolve_domain(TasteDomain.SERVICE) is TasteDomain.SERVICE

    @pytest.mark.parametrize("label", ["Nightlife", "food", "", None])
    def test_unknown_returns_none(self, label):
        assert resolve_domain(label) is None

    def test_every_dimension_maps_to_a_core_domain(self):
        assert set(DIMENSION_TO_DOMAIN.values()) <= set(CORE_DOMAINS)


class TestResolveDomains:
    """resolve_domains de-duplicates and keeps order."""

    def test_drops_unknown_and_duplicates_keeping_order(self):
        result = resolve_domains(["Food", "Bogus", TasteDomain.DESIGN, "Food & Drink"])
        assert result == [TasteDomain.FOOD, TasteDomain.DESIGN]


class TestProfiles:
    """User profile defaults, normalisation and weight lookup."""

    def test_default_profile_covers_every_domain(self):
        assert set(DEFAULT_USER_PROFILE) == set(TasteDomain)
        assert len(DEFAULT_USER_PROFILE) == 8

    def test_documented_defaults(self):
        assert DEFAULT_USER_PROFILE[TasteDomain.DESIGN] == 0.85
        assert DEFAULT_USER_PROFILE[TasteDomain.CHARACTER] == 0.80
        assert DEFAULT_USER_PROFILE[TasteDomain.SERVICE] == 0.60
        assert DEFAULT_USER_PROFILE[TasteDomain.FOOD] == 0.75
        assert DEFAULT_USER_PROFILE[TasteDomain.LOCATION] == 0.70
        assert DEFAULT_USER_PROFILE[TasteDomain.WELLNESS] == 0.40

    def test_default_weights_in_unit_range(self):
        assert all(0.0 <= w <= 1.0 for w in DEFAULT_USER_PROFILE.values())

    def test_normalize_rekeys_and_clamps(self):
        result = normalize_profile({"Food": 1.4, "Design": -0.2, "Nope": 0.9})
        assert result == {TasteDomain.FOOD: 1.0, TasteDomain.DESIGN: 0.0}

    def test_normalize_drops_unreadable_weights(self):
        assert normalize_profile({"Food": "lots"}) == {}

    def test_normalize_none(self):
        assert normalize_profile(None) == {}

    def test_resolve_user_profile_overlays_explicit(self):
        merged = resolve_user_profile({"Wellness": 0.95})
        assert merged[TasteDomain.WELLNESS] == 0.95
        assert merged[TasteDomain.DESIGN] == 0.85

    def test_resolve_user_profile_does_not_mutate_defaults(self):
        resolve_user_profile({TasteDomain.DESIGN: 0.1})
        assert DEFAULT_USER_PROFILE[TasteDomain.DESIGN] == 0.85

    def test_domain_weight_absent_is_neutral(self):
        assert domain_weight({}, TasteDomain.FOOD) == NEUTRAL_WEIGHT == 0.5

    def test_domain_weight_explicit_zero_kept(self):
        assert domain_weight({TasteDomain.FOOD: 0.0}, TasteDomain.FOOD) == 0.0


class TestSignalValues:
    """Signal value objects clamp and stay immutable."""

    def test_confidence_clamped_on_construction(self):
        assert Signal(domain="Food", tag="a", confidence=1.7).confidence == 1.0
        assert Signal(domain="Food", tag="a", confidence=-0.3).confidence == 0.0

    def test_nan_confidence_clamped_to_zero(self):
        assert Signal(domain="Food", tag="a", confidence=float("nan")).confidence == 0.0

    def test_signals_are_immutable(self):
        sig = Signal(domain="Food", tag="a", confidence=0.5)
        with pytest.raises(AttributeError):
            sig.extracted_at = None  # type: ignore[misc]

    def test_anti_signal_shares_shape(self):
        anti = AntiSignal(domain="Food", tag="a", confidence=2.0, corroborated=True)
        assert isinstance(anti, Signal)
        assert anti.confidence == 1.0

    def test_domain_str_is_value(self):
        assert str(TasteDomain.CULTURAL_ENGAGEMENT) == "CulturalEngagement"
