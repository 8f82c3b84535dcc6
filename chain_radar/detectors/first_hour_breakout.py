"""First Hour Breakout — break of the locked opening-hour range on volume."""

from __future__ import annotations

from chain_radar.config.breakout_config import BreakoutConfig
from chain_radar.core.data_types import MarketDataPoint, Signal
from chain_radar.core.types import PatternType, SignalDirection
from chain_radar.detectors.base import make_signal, volume_ratio
from chain_radar.structure.rolling_window import RollingWindowStore


class FirstHourBreakoutDetector:
    pattern = PatternType.FIRST_HOUR_BREAKOUT
    toggle_id = "D04"
    min_history = 5

    def detect(
        self,
        point: MarketDataPoint,
        window: RollingWindowStore,
        config: BreakoutConfig,
    ) -> Signal | None:
        if len(window) < self.min_history:
            return None
        first_hour = window.first_hour
        if first_hour is None:
            return None
        # Only once the first hour is complete
        if not window.clock.after_first_hour(point.timestamp, config.first_hour_minutes):
            return None

        ratio = volume_ratio(point, window)
        if ratio <= config.volume_multiplier:
            return None

        if point.spot_price > first_hour.high:
            direction = SignalDirection.BULLISH
            level = first_hour.high
            message = f"Breakout above first hour high ({first_hour.high:g})"
        elif point.spot_price < first_hour.low:
            direction = SignalDirection.BEARISH
            level = first_hour.low
            message = f"Breakdown below first hour low ({first_hour.low:g})"
        else:
            return None

        return make_signal(
            direction,
            self.pattern,
            message,
            point,
            window,
            confidence=min(85.0, ratio * 20),
            details={
                "first_hour_high": first_hour.high,
                "first_hour_low": first_hour.low,
                "breakout_level": level,
                "volume_ratio": ratio,
            },
        )
