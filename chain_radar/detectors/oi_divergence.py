"""OI + Price Divergence — short covering and fresh short build-up."""

from __future__ import annotations

from chain_radar.config.breakout_config import BreakoutConfig
from chain_radar.core.data_types import MarketDataPoint, Signal
from chain_radar.core.types import PatternType, SignalDirection
from chain_radar.detectors.base import make_signal, pct_change
from chain_radar.structure.rolling_window import RollingWindowStore


class OIPriceDivergenceDetector:
    pattern = PatternType.OI_PRICE_DIVERGENCE
    toggle_id = "D03"
    min_history = 5

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

        price_change = pct_change(previous.spot_price, point.spot_price)
        oi_change = pct_change(previous.total_oi, point.total_oi)
        price_min = config.divergence_price_change_pct
        oi_min = config.divergence_oi_change_pct

        # Price rising while OI unwinds
        if price_change > price_min and oi_change < -oi_min:
            direction = SignalDirection.BULLISH
            message = "Short covering rally detected - Bullish divergence"
        # Price falling while OI builds
        elif price_change < -price_min and oi_change > oi_min:
            direction = SignalDirection.BEARISH
            message = "Fresh short build-up detected - Bearish divergence"
        else:
            return None

        return make_signal(
            direction,
            self.pattern,
            message,
            point,
            window,
            confidence=min(90.0, abs(price_change) * 10 + abs(oi_change) * 5),
            details={
                "price_change": price_change,
                "total_oi_change": oi_change,
                "total_oi": point.total_oi,
            },
        )
