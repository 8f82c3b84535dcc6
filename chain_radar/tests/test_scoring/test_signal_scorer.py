"""Tests for SignalScorer — grading, filtering, summary and market state."""

import pytest

from chain_radar.core.data_types import Signal
from chain_radar.core.types import (
    Bias,
    PatternType,
    SignalDirection,
    SignalPriority,
    SignalStrength,
    Trend,
    VolatilityLevel,
    VolumeProfile,
)
from chain_radar.scoring.signal_scorer import (
    SignalScorer,
    find_resistance,
    find_support,
    grade_confidence,
)


def _signal(confidence, direction=SignalDirection.BULLISH, pattern=PatternType.MAX_PAIN_SHIFT, ts=None):
    return Signal(
        id=f"{pattern.value}_{int(confidence)}",
        direction=direction,
        pattern=pattern,
        confidence=confidence,
        timestamp=ts,
        spot_price=22400.0,
        message="test",
    )


@pytest.fixture
def filled_window(window, make_point, ts):
    for i in range(10):
        window.add_point(make_point(ts(11, i), spot=22410.0, volume=1000.0))
    return window


class TestGrading:
    @pytest.mark.parametrize("confidence,strength,priority", [
        (95.0, SignalStrength.STRONG, SignalPriority.HIGH),
        (80.0, SignalStrength.STRONG, SignalPriority.HIGH),
        (79.9, SignalStrength.MODERATE, SignalPriority.MEDIUM),
        (60.0, SignalStrength.MODERATE, SignalPriority.MEDIUM),
        (59.9, SignalStrength.WEAK, SignalPriority.LOW),
        (0.0, SignalStrength.WEAK, SignalPriority.LOW),
    ])
    def test_grade_confidence(self, confidence, strength, priority):
        assert grade_confidence(confidence) == (strength, priority)

    def test_grade_is_monotonic(self):
        order = [SignalStrength.WEAK, SignalStrength.MODERATE, SignalStrength.STRONG]
        ranks = [order.index(grade_confidence(c)[0]) for c in range(0, 101)]
        assert ranks == sorted(ranks)


class TestSignalScorer:
    def test_filters_below_minimum(self, filled_window, breakout_config):
        scorer = SignalScorer()
        result = scorer.score([_signal(85.0), _signal(45.0)], filled_window, breakout_config)
        assert [s.confidence for s in result.signals] == [85.0]
        assert result.signals[0].strength == SignalStrength.STRONG
        assert [s.confidence for s in scorer.last_filtered] == [45.0]

    def test_summary_and_bias(self, filled_window, breakout_config):
        signals = [
            _signal(85.0),
            _signal(65.0, SignalDirection.BEARISH, PatternType.IV_CRUSH_BREAKOUT),
            _signal(70.0, pattern=PatternType.FIRST_HOUR_BREAKOUT),
        ]
        result = SignalScorer().score(signals, filled_window, breakout_config)
        summary = result.summary
        assert summary.total_signals == 3
        assert summary.bullish_signals == 2
        assert summary.bearish_signals == 1
        assert summary.strong_signals == 1
        assert summary.high_priority_signals == 1
        assert summary.overall_bias == Bias.BULLISH
        assert summary.confidence_score == pytest.approx((85 + 65 + 70) / 3)

    def test_tie_is_neutral(self, filled_window, breakout_config):
        signals = [_signal(70.0), _signal(70.0, SignalDirection.BEARISH)]
        result = SignalScorer().score(signals, filled_window, breakout_config)
        assert result.summary.overall_bias == Bias.NEUTRAL

    def test_key_levels(self, filled_window, breakout_config):
        result = SignalScorer().score([], filled_window, breakout_config)
        levels = result.market_state.key_levels
        assert levels.support == 22400.0
        assert levels.resistance == 22500.0
        assert levels.vwap == 22410.0
        assert levels.max_pain == 22400.0
        assert result.analyzed_at == filled_window.latest().timestamp

    def test_empty_result_below_five_points(self, window, breakout_config, make_point, ts):
        for i in range(4):
            window.add_point(make_point(ts(11, i)))
        result = SignalScorer().score([_signal(90.0)], window, breakout_config)
        assert result.signals == ()
        assert result.summary.overall_bias == Bias.NEUTRAL
        assert result.market_state.current_trend == Trend.SIDEWAYS
        assert result.market_state.volatility_level == VolatilityLevel.MEDIUM
        assert result.market_state.volume_profile == VolumeProfile.NORMAL
        assert result.market_state.key_levels.support is None
        assert result.market_state.key_levels.max_pain is None

    def test_trend(self, window, make_point, ts):
        for i in range(10):
            window.add_point(make_point(ts(11, i), spot=22000.0 + 20 * i))
        # 180 / 22000 = 0.82%
        assert SignalScorer.determine_trend(window) == Trend.BULLISH

    def test_trend_needs_ten_points(self, window, make_point, ts):
        for i in range(9):
            window.add_point(make_point(ts(11, i), spot=22000.0 - 100 * i))
        assert SignalScorer.determine_trend(window) == Trend.SIDEWAYS

    @pytest.mark.parametrize("iv,level", [
        (25.0, VolatilityLevel.HIGH),
        (18.0, VolatilityLevel.MEDIUM),
        (15.0, VolatilityLevel.LOW),
    ])
    def test_volatility(self, make_point, ts, iv, level):
        p = make_point(ts(11), atm_call_iv=iv, atm_put_iv=iv)
        assert SignalScorer.determine_volatility(p) == level

    def test_volume_profile(self, filled_window, make_point, ts):
        assert SignalScorer.determine_volume_profile(
            make_point(ts(12), volume=3000.0), filled_window) == VolumeProfile.HIGH
        assert SignalScorer.determine_volume_profile(
            make_point(ts(12), volume=400.0), filled_window) == VolumeProfile.LOW
        assert SignalScorer.determine_volume_profile(
            make_point(ts(12), volume=1000.0), filled_window) == VolumeProfile.NORMAL

    def test_support_resistance_on_level(self):
        assert find_support(22400.0) == 22400.0
        assert find_resistance(22400.0) == 22400.0
        assert find_resistance(22401.0) == 22500.0
