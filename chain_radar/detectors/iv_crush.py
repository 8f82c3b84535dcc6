"""IV Crush Breakout — implied volatility collapses while price holds still."""

from __future__ import annotations

import numpy as np

from chain_radar.config.breakout_config import BreakoutConfig
from chain_radar.core.data_types import MarketDataPoint, Signal
from chain_radar.core.types import PatternType, SignalDirection
from chain_radar.detectors.base import make_signal, range_pct
from chain_radar.structure.rolling_window import RollingWindowStore

IV_PERIODS = 5


def _iv_drop_pct(recent_iv: np.ndarray, current_iv: float) -> float:
    mean_iv = float(np.mean(recent_iv))
    if mean_iv <= 0:
        return 0.0
    return (mean_iv - current_iv) / mean_iv * 100.0


class IVCrushDetector:
    """Crush on either leg with a flat tape is read as a pre-breakout setup (always BULLISH)."""

    pattern = PatternType.IV_CRUSH_BREAKOUT
    toggle_id = "D06"
    min_history = IV_PERIODS

    def detect(
        self,
        point: MarketDataPoint,
        window: RollingWindowStore,
        config: BreakoutConfig,
    ) -> Signal | None:
        if len(window) < self.min_history:
            return None

        call_drop = _iv_drop_pct(window.column("atm_call_iv", IV_PERIODS), point.atm_call_iv)
        put_drop = _iv_drop_pct(window.column("atm_put_iv", IV_PERIODS), point.atm_put_iv)
        stability = range_pct(window.column("spot_price", IV_PERIODS))

        if max(call_drop, put_drop) <= config.iv_drop_threshold:
            return None
        if stability is None or stability >= config.iv_stability_threshold:
            return None

        return make_signal(
            SignalDirection.BULLISH,
            self.pattern,
            (
                "IV crush detected - Potential breakout setup "
                f"(Call IV: {call_drop:.1f}%, Put IV: {put_drop:.1f}%)"
            ),
            point,
            window,
            confidence=min(85.0, 50.0 + max(call_drop, put_drop) * 1.5),
            details={
                "atm_call_iv": point.atm_call_iv,
                "atm_put_iv": point.atm_put_iv,
                "iv_change": {"call": -call_drop, "put": -put_drop},
                "price_range_pct": stability,
            },
        )
