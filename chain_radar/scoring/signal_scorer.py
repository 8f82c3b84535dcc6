"""Signal Scorer — grades raw detector output and assembles the cycle result.

Pure computation, NO I/O. The only state kept is ``last_filtered``, the
signals dropped by the confidence filter on the most recent call.

Execution order:
  1. Strength/priority grading from confidence
  2. Minimum-confidence filter
  3. Summary counts + overall bias
  4. Market state: trend, volatility, volume profile, key levels
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Iterable

from chain_radar.analytics.max_pain import coarse_max_pain
from chain_radar.config.breakout_config import BreakoutConfig
from chain_radar.core.data_types import (
    AnalysisResult,
    KeyLevels,
    MarketDataPoint,
    MarketState,
    Signal,
    SignalSummary,
)
from chain_radar.core.types import (
    Bias,
    SignalDirection,
    SignalPriority,
    SignalStrength,
    Trend,
    VolatilityLevel,
    VolumeProfile,
)
from chain_radar.structure.rolling_window import RollingWindowStore

MIN_ANALYSIS_POINTS = 5
TREND_PERIODS = 10
TREND_THRESHOLD_PCT = 0.5
LEVEL_STEP = 100.0


def grade_confidence(confidence: float) -> tuple[SignalStrength, SignalPriority]:
    """>= 80 STRONG/HIGH, >= 60 MODERATE/MEDIUM, else WEAK/LOW."""
    if confidence >= 80:
        return SignalStrength.STRONG, SignalPriority.HIGH
    if confidence >= 60:
        return SignalStrength.MODERATE, SignalPriority.MEDIUM
    return SignalStrength.WEAK, SignalPriority.LOW


def empty_result(analyzed_at=None) -> AnalysisResult:
    """Neutral result: no signals, SIDEWAYS/MEDIUM/NORMAL, no key levels."""
    return AnalysisResult(analyzed_at=analyzed_at)


class SignalScorer:
    """Turns one cycle's detector output into an AnalysisResult."""

    def __init__(self) -> None:
        self.last_filtered: tuple[Signal, ...] = ()

    def score(
        self,
        raw_signals: Iterable[Signal],
        window: RollingWindowStore,
        config: BreakoutConfig,
    ) -> AnalysisResult:
        current = window.latest()
        if len(window) < MIN_ANALYSIS_POINTS or current is None:
            self.last_filtered = ()
            return empty_result(current.timestamp if current is not None else None)

        graded = [self.grade(s) for s in raw_signals]
        kept = tuple(s for s in graded if s.confidence >= config.min_confidence_threshold)
        self.last_filtered = tuple(s for s in graded if s.confidence < config.min_confidence_threshold)

        return AnalysisResult(
            signals=kept,
            summary=self.summarize(kept),
            market_state=MarketState(
                current_trend=self.determine_trend(window),
                volatility_level=self.determine_volatility(current),
                volume_profile=self.determine_volume_profile(current, window),
                key_levels=KeyLevels(
                    support=find_support(current.spot_price),
                    resistance=find_resistance(current.spot_price),
                    vwap=window.vwap(),
                    max_pain=coarse_max_pain(current.spot_price, config.max_pain_rounding),
                ),
            ),
            analyzed_at=current.timestamp,
        )

    @staticmethod
    def grade(signal: Signal) -> Signal:
        strength, priority = grade_confidence(signal.confidence)
        return replace(signal, strength=strength, priority=priority)

    @staticmethod
    def summarize(signals: tuple[Signal, ...]) -> SignalSummary:
        bullish = sum(1 for s in signals if s.direction == SignalDirection.BULLISH)
        bearish = sum(1 for s in signals if s.direction == SignalDirection.BEARISH)

        if bullish > bearish:
            bias = Bias.BULLISH
        elif bearish > bullish:
            bias = Bias.BEARISH
        else:
            bias = Bias.NEUTRAL

        avg_confidence = sum(s.confidence for s in signals) / len(signals) if signals else 0.0
        return SignalSummary(
            total_signals=len(signals),
            bullish_signals=bullish,
            bearish_signals=bearish,
            strong_signals=sum(1 for s in signals if s.strength == SignalStrength.STRONG),
            high_priority_signals=sum(1 for s in signals if s.priority == SignalPriority.HIGH),
            overall_bias=bias,
            confidence_score=avg_confidence,
        )

    @staticmethod
    def determine_trend(window: RollingWindowStore) -> Trend:
        """Percentage move across the last 10 prices (+/-0.5%)."""
        if len(window) < TREND_PERIODS:
            return Trend.SIDEWAYS
        prices = window.column("spot_price", TREND_PERIODS)
        first, last = float(prices[0]), float(prices[-1])
        if first <= 0 or last <= 0:
            return Trend.SIDEWAYS
        change = (last - first) / first * 100.0
        if change > TREND_THRESHOLD_PCT:
            return Trend.BULLISH
        if change < -TREND_THRESHOLD_PCT:
            return Trend.BEARISH
        return Trend.SIDEWAYS

    @staticmethod
    def determine_volatility(point: MarketDataPoint) -> VolatilityLevel:
        avg_iv = (point.atm_call_iv + point.atm_put_iv) / 2
        if avg_iv > 20:
            return VolatilityLevel.HIGH
        if avg_iv > 15:
            return VolatilityLevel.MEDIUM
        return VolatilityLevel.LOW

    @staticmethod
    def determine_volume_profile(point: MarketDataPoint, window: RollingWindowStore) -> VolumeProfile:
        avg_volume = window.average_volume()
        if avg_volume == 0:
            return VolumeProfile.NORMAL
        ratio = point.volume / avg_volume
        if ratio > 2:
            return VolumeProfile.HIGH
        if ratio < 0.5:
            return VolumeProfile.LOW
        return VolumeProfile.NORMAL


def find_support(price: float) -> float:
    return math.floor(price / LEVEL_STEP) * LEVEL_STEP


def find_resistance(price: float) -> float:
    return math.ceil(price / LEVEL_STEP) * LEVEL_STEP
