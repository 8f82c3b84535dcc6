"""Volume Spike at Key Levels — outsized volume within reach of a round-number level."""

from __future__ import annotations

from chain_radar.config.breakout_config import BreakoutConfig
from chain_radar.core.data_types import MarketDataPoint, Signal
from chain_radar.core.types import LevelType, PatternType, SignalDirection
from chain_radar.detectors.base import make_signal, volume_ratio
from chain_radar.structure.rolling_window import RollingWindowStore


def nearest_level(price: float, levels: tuple[float, ...]) -> float | None:
    """Closest level to ``price``; the lower one wins a tie."""
    if not levels:
        return None
    return min(levels, key=lambda level: (abs(price - level), level))


class KeyLevelVolumeDetector:
    pattern = PatternType.VOLUME_SPIKE_KEY_LEVELS
    toggle_id = "D07"
    min_history = 5

    def detect(
        self,
        point: MarketDataPoint,
        window: RollingWindowStore,
        config: BreakoutConfig,
    ) -> Signal | None:
        if len(window) < self.min_history:
            return None

        level = nearest_level(point.spot_price, config.round_number_levels)
        if level is None or abs(point.spot_price - level) > config.level_proximity_threshold:
            return None

        ratio = volume_ratio(point, window)
        if ratio <= config.high_volume_multiplier:
            return None

        above = point.spot_price > level
        direction = SignalDirection.BULLISH if above else SignalDirection.BEARISH
        action = "breakout above" if above else "rejection at"
        return make_signal(
            direction,
            self.pattern,
            f"High volume {action} key level {level:g} ({ratio:.1f}x volume)",
            point,
            window,
            confidence=min(90.0, 40.0 + ratio * 5),
            details={
                "key_level": level,
                "level_type": LevelType.ROUND_NUMBER.value,
                "volume_ratio": ratio,
            },
        )
