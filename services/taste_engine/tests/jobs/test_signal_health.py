"""Tests for the signal health job -- decay, summary, windows, trajectory gating."""

from __future__ import annotations

import logging
import math

import pytest

from services.taste_engine.config import Settings
from services.taste_engine.decay.engine import decay_signals
from services.taste_engine.jobs.signal_health import (
    SignalHealthReport,
    build_signal_health,
    partition_signal_windows,
    summarize_decayed,
)
from services.taste_engine.signals.types import TrajectoryDirection
from services.taste_engine.tests.helpers.factories import NOW, days_ago, make_signal, make_window


def _history(recent_tags: list[str], older_tags: list[str], domain: str = "Food"):
    return make_window(domain, recent_tags, age_days=10) + make_window(domain, older_tags, age_days=150)


class TestPartitionWindows:
    """partition_signal_windows splits by age into recent and historical."""

    def test_boundaries(self):
        signals = [
            make_signal(tag="fresh", extracted_at=NOW),
            make_signal(tag="edge_recent", extracted_at=days_ago(90)),
            make_signal(tag="older", extracted_at=days_ago(91)),
            make_signal(tag="edge_old", extracted_at=days_ago(270)),
            make_signal(tag="ancient", extracted_at=days_ago(271)),
        ]
        recent, historical = partition_signal_windows(decay_signals(signals, NOW))
        assert [s.tag for s in recent] == ["fresh", "edge_recent"]
        assert [s.tag for s in historical] == ["older", "edge_old"]

    def test_original_confidence_carried(self):
        signals = [make_signal(confidence=0.9, extracted_at=days_ago(200))]
        _, historical = partition_signal_windows(decay_signals(signals, NOW))
        assert historical[0].confidence == 0.9

    def test_custom_windows(self):
        signals = [make_signal(tag="a", extracted_at=days_ago(20))]
        recent, historical = partition_signal_windows(decay_signals(signals, NOW), 14, 60)
        assert recent == []
        assert [s.tag for s in historical] == ["a"]


class TestSummary:
    """summarize_decayed counts and averages a decayed set."""

    def test_empty(self):
        summary = summarize_decayed([])
        assert (summary.total, summary.aged_out, summary.avg_decayed_confidence) == (0, 0, 0.0)

    def test_counts_and_average(self):
        decayed = decay_signals(
            [
                make_signal(confidence=0.8, extracted_at=days_ago(180)),
                make_signal(confidence=0.6, extracted_at=NOW),
                make_signal(confidence=0.1, extracted_at=days_ago(900)),
            ],
            NOW,
        )
        summary = summarize_decayed(decayed)
        assert summary.total == 3
        assert summary.aged_out == 1
        assert summary.avg_decayed_confidence == round((0.4 + 0.6 + 0.1 * 0.5 ** 5) / 3, 3)


class TestBuildSignalHealth:
    """build_signal_health decays, summarises and gates trajectory analysis."""

    def test_no_signals(self):
        assert build_signal_health([], NOW) == SignalHealthReport()

    def test_trajectory_skipped_when_windows_thin(self, engine_settings):
        signals = _history(["a", "b", "c"], ["x", "y"])
        report = build_signal_health(signals, NOW, engine_settings)
        assert report.trajectory is None
        assert report.summary.total == 5

    def test_trajectory_runs_with_enough_history(self, engine_settings):
        signals = _history(["a", "b", "c"], ["x", "y", "z"]) + _history(
            ["p", "q", "r"], ["i", "j", "k"], domain="Design"
        )
        report = build_signal_health(signals, NOW, engine_settings)
        assert report.trajectory is not None
        assert report.trajectory.direction is TrajectoryDirection.SHIFTING
        assert all(s.detected_at == NOW for s in report.trajectory.shifts)

    def test_stable_history(self, engine_settings):
        signals = _history(["a", "b", "c"], ["a", "b", "c"])
        report = build_signal_health(signals, NOW, engine_settings)
        assert report.trajectory.direction is TrajectoryDirection.STABLE

    def test_min_window_setting_respected(self):
        signals = _history(["a"], ["x"])
        report = build_signal_health(signals, NOW, Settings(_env_file=None, min_window_signals=1))
        assert report.trajectory is not None

    def test_half_life_setting_respected(self):
        signals = [make_signal(confidence=0.8, extracted_at=days_ago(30))]
        report = build_signal_health(signals, NOW, Settings(_env_file=None, default_half_life_days=30))
        assert report.signals[0].decayed_confidence == pytest.approx(0.4)

    def test_decayed_signals_returned_in_order(self, engine_settings):
        signals = _history(["a", "b"], ["c"])
        report = build_signal_health(signals, NOW, engine_settings)
        assert [d.tag for d in report.signals] == ["a", "b", "c"]

    def test_logs_outcome(self, caplog, engine_settings):
        with caplog.at_level(logging.INFO, logger="services.taste_engine.jobs.signal_health"):
            build_signal_health(_history(["a"], ["b"]), NOW, engine_settings)
        assert any("build_signal_health" in r.message for r in caplog.records)

    def test_decayed_confidence_rounded_to_three_places(self, engine_settings):
        signals = [make_signal(confidence=0.9, extracted_at=days_ago(100))]
        report = build_signal_health(signals, NOW, engine_settings)
        assert report.signals[0].decayed_confidence == round(0.9 * 0.5 ** (100 / 180), 3)

    def test_aged_out_flag_uses_unrounded_value(self, engine_settings):
        # decays to ~0.0498, which rounds up to the threshold
        age = 180 * math.log2(0.8 / 0.0498)
        signals = [make_signal(confidence=0.8, extracted_at=days_ago(age))]
        report = build_signal_health(signals, NOW, engine_settings)
        assert report.signals[0].decayed_confidence == 0.05
        assert report.signals[0].is_aged_out is True
        assert report.summary.aged_out == 1
