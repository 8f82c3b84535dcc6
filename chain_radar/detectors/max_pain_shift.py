"""Max Pain Shift — coarse max pain moved by at least the shift threshold since last cycle."""

from __future__ import annotations

from chain_radar.analytics.max_pain import coarse_max_pain
from chain_radar.config.breakout_config import BreakoutConfig
from chain_radar.core.data_types import MarketDataPoint, Signal
from chain_radar.core.types import PatternType, SignalDirection
from chain_radar.detectors.base import make_signal
from chain_radar.structure.rolling_window import RollingWindowStore


class MaxPainShiftDetector:
    pattern = PatternType.MAX_PAIN_SHIFT
    toggle_id = "D05"
    min_history = 3

    def detect(
        self,
        point: MarketDataPoint,
        window: RollingWindowStore,
        config: BreakoutConfig,
    ) -> Signal | None:
        if len(window) < self.min_history:
            return None
        previous = window.previous_max_pain
        if previous is None:
            return None

        current = coarse_max_pain(point.spot_price, config.max_pain_rounding)
        shift = current - previous
        if abs(shift) < config.max_pain_shift_threshold:
            return None

        direction = SignalDirection.BULLISH if shift > 0 else SignalDirection.BEARISH
        return make_signal(
            direction,
            self.pattern,
            f"Max Pain shifted {'higher' if shift > 0 else 'lower'} by {abs(shift):g} points",
            point,
            window,
            confidence=min(80.0, abs(shift) / 2),
            details={
                "max_pain": current,
                "previous_max_pain": previous,
                "max_pain_shift": shift,
            },
        )
