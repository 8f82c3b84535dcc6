"""Shared detector capability and helpers.

Every detector is a pure function of (current point, read-only window, config).
Detectors never mutate the window and abstain (return None) when their
minimum history is not met.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

import numpy as np

from chain_radar.config.breakout_config import BreakoutConfig
from chain_radar.core.data_types import MarketDataPoint, Signal
from chain_radar.core.types import PatternType, SignalDirection
from chain_radar.structure.rolling_window import RollingWindowStore


@runtime_checkable
class PatternDetector(Protocol):
    pattern: PatternType
    toggle_id: str
    min_history: int

    def detect(
        self,
        point: MarketDataPoint,
        window: RollingWindowStore,
        config: BreakoutConfig,
    ) -> Signal | None:
        ...


def clamp_confidence(value: float, cap: float = 100.0) -> float:
    """Clamp to [0, cap] (cap itself never above 100). NaN → 0."""
    if value != value:
        return 0.0
    return max(0.0, min(min(cap, 100.0), float(value)))


def pct_change(previous: float, current: float) -> float:
    """Percentage change; 0 when the base is not positive."""
    if previous <= 0:
        return 0.0
    return (current - previous) / previous * 100.0


def range_pct(values: np.ndarray) -> float | None:
    """(max - min) / mean as a percentage. None for empty or zero-mean input."""
    if len(values) == 0:
        return None
    mean = float(np.mean(values))
    if mean == 0:
        return None
    return float(np.max(values) - np.min(values)) / mean * 100.0


def volume_ratio(point: MarketDataPoint, window: RollingWindowStore) -> float:
    avg_volume = window.average_volume()
    if avg_volume <= 0:
        return 0.0
    return point.volume / avg_volume


def make_signal(
    direction: SignalDirection,
    pattern: PatternType,
    message: str,
    point: MarketDataPoint,
    window: RollingWindowStore,
    confidence: float,
    details: Mapping[str, Any],
) -> Signal:
    """Build an unscored signal. Strength and priority are set by the scorer."""
    timestamp_ms = window.clock.to_ns(point.timestamp) // 1_000_000
    return Signal(
        id=f"{pattern.value}_{timestamp_ms}",
        direction=direction,
        pattern=pattern,
        confidence=clamp_confidence(confidence),
        timestamp=point.timestamp,
        spot_price=point.spot_price,
        message=message,
        details={
            "current_price": point.spot_price,
            "volume": point.volume,
            **details,
        },
    )
