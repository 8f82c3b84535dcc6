"""Tests for shared detector helpers and the abstain contract."""

import math

import numpy as np
import pytest

from chain_radar.core.types import PatternType, SignalDirection
from chain_radar.detectors.base import (
    PatternDetector,
    clamp_confidence,
    make_signal,
    pct_change,
    range_pct,
)
from chain_radar.detectors.registry import default_detectors, enabled_detectors


class TestHelpers:
    def test_clamp_confidence(self):
        assert clamp_confidence(120.0) == 100.0
        assert clamp_confidence(-5.0) == 0.0
        assert clamp_confidence(math.nan) == 0.0
        assert clamp_confidence(70.0, cap=60.0) == 60.0

    def test_pct_change_zero_base(self):
        assert pct_change(0.0, 100.0) == 0.0
        assert pct_change(100.0, 120.0) == pytest.approx(20.0)

    def test_range_pct(self):
        assert range_pct(np.array([])) is None
        assert range_pct(np.array([0.0, 0.0])) is None
        assert range_pct(np.array([99.0, 101.0])) == pytest.approx(2.0)

    def test_make_signal_id_is_deterministic(self, window, make_point, ts):
        p = make_point(ts(11, 0))
        window.add_point(p)
        a = make_signal(SignalDirection.BULLISH, PatternType.MAX_PAIN_SHIFT, "m", p, window, 50.0, {})
        b = make_signal(SignalDirection.BULLISH, PatternType.MAX_PAIN_SHIFT, "m", p, window, 50.0, {})
        assert a.id == b.id
        assert a.id == f"MAX_PAIN_SHIFT_{window.clock.to_ns(p.timestamp) // 1_000_000}"
        assert a.details["current_price"] == p.spot_price
        assert a.details["volume"] == p.volume


class TestRegistry:
    def test_default_order(self):
        patterns = [d.pattern for d in default_detectors()]
        assert patterns == list(PatternType)

    def test_all_satisfy_protocol(self):
        for detector in default_detectors():
            assert isinstance(detector, PatternDetector)

    def test_toggle_ids_unique(self):
        ids = [d.toggle_id for d in default_detectors()]
        assert ids == ["D01", "D02", "D03", "D04", "D05", "D06", "D07"]

    def test_enabled_filter(self):
        detectors = enabled_detectors(lambda tid: tid != "D03")
        assert len(detectors) == 6
        assert PatternType.OI_PRICE_DIVERGENCE not in {d.pattern for d in detectors}


@pytest.mark.parametrize("detector", default_detectors(), ids=lambda d: d.pattern.value)
class TestAbstainBelowMinimumHistory:
    def test_abstains(self, detector, window, breakout_config, make_point, ts):
        # Data that would otherwise look extreme
        for i in range(detector.min_history - 1):
            window.add_point(make_point(
                ts(11, i),
                spot=22400.0 + 300 * i,
                volume=1000.0 * (10 ** i),
                atm_call_oi=1000.0 * (i + 1) ** 3,
                atm_put_oi=1000.0 / (i + 1) ** 3,
                atm_call_iv=30.0 / (i + 1),
            ))
        assert detector.detect(window.latest(), window, breakout_config) is None
