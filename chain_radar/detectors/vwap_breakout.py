"""VWAP & Volume Breakout — tight consolidation released away from VWAP on heavy volume."""

from __future__ import annotations

from chain_radar.config.breakout_config import BreakoutConfig
from chain_radar.core.data_types import MarketDataPoint, Signal
from chain_radar.core.types import PatternType, SignalDirection
from chain_radar.detectors.base import make_signal, range_pct, volume_ratio
from chain_radar.structure.rolling_window import RollingWindowStore

CONSOLIDATION_PERIODS = 10


class VWAPBreakoutDetector:
    """Three simultaneous conditions:
    1. Last 10 prices within vwap_consolidation_pct of their mean
    2. |distance from VWAP| > vwap_distance_threshold (%)
    3. Volume > volume_multiplier × 10-point average
    """

    pattern = PatternType.VWAP_VOLUME_BREAKOUT
    toggle_id = "D02"
    min_history = CONSOLIDATION_PERIODS

    def detect(
        self,
        point: MarketDataPoint,
        window: RollingWindowStore,
        config: BreakoutConfig,
    ) -> Signal | None:
        if len(window) < self.min_history or window.vwap_samples < self.min_history:
            return None

        vwap = window.vwap()
        if vwap == 0:
            return None

        vwap_distance = (point.spot_price - vwap) / vwap * 100.0
        ratio = volume_ratio(point, window)

        consolidation = range_pct(window.column("spot_price", CONSOLIDATION_PERIODS))
        if consolidation is None or consolidation >= config.vwap_consolidation_pct:
            return None
        if abs(vwap_distance) <= config.vwap_distance_threshold:
            return None
        if ratio <= config.volume_multiplier:
            return None

        direction = SignalDirection.BULLISH if vwap_distance > 0 else SignalDirection.BEARISH
        return make_signal(
            direction,
            self.pattern,
            f"VWAP breakout {direction.value.lower()} with {ratio:.1f}x volume",
            point,
            window,
            confidence=min(90.0, 40.0 + ratio * 8.0 + abs(vwap_distance) * 20.0),
            details={
                "vwap": vwap,
                "vwap_distance": vwap_distance,
                "volume_ratio": ratio,
                "consolidation_range_pct": consolidation,
                "vwap_breakout_confirmed": True,
            },
        )
