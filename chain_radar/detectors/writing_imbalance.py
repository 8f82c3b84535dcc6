"""Call/Put Writing Imbalance — opposite, outsized ATM OI moves between consecutive points."""

from __future__ import annotations

from chain_radar.config.breakout_config import BreakoutConfig
from chain_radar.core.data_types import MarketDataPoint, Signal
from chain_radar.core.types import PatternType, SignalDirection
from chain_radar.detectors.base import make_signal, pct_change
from chain_radar.structure.rolling_window import RollingWindowStore


class WritingImbalanceDetector:
    """Call OI up and put OI down → call writers in control (bearish), and vice versa."""

    pattern = PatternType.CALL_PUT_WRITING_IMBALANCE
    toggle_id = "D01"
    min_history = 3

    def detect(
        self,
        point: MarketDataPoint,
        window: RollingWindowStore,
        config: BreakoutConfig,
    ) -> Signal | None:
        if len(window) < self.min_history:
            return None
        previous = window.previous_point()
        if previous is None:
            return None

        call_change = pct_change(previous.atm_call_oi, point.atm_call_oi)
        put_change = pct_change(previous.atm_put_oi, point.atm_put_oi)
        threshold = config.oi_change_threshold

        if call_change > threshold and put_change < -threshold:
            direction = SignalDirection.BEARISH
            message = "Strong Call writing detected - Bearish signal"
        elif put_change > threshold and call_change < -threshold:
            direction = SignalDirection.BULLISH
            message = "Strong Put writing detected - Bullish signal"
        else:
            return None

        return make_signal(
            direction,
            self.pattern,
            message,
            point,
            window,
            confidence=min(95.0, abs(call_change - put_change) * 2),
            details={
                "call_oi": point.atm_call_oi,
                "put_oi": point.atm_put_oi,
                "oi_change": {"call": call_change, "put": put_change},
            },
        )
