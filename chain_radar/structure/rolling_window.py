"""Rolling Window Store — bounded point history plus derived session state.

Owns, per engine instance:
  - the point history (ring buffer, 2 × lookback before compaction to lookback)
  - session VWAP and the first-hour lock (via SessionProfiler)
  - the previous cycle's coarse max pain

add_point() is the ONLY mutator. Detectors get read-only access.
"""

from __future__ import annotations

import logging

import numpy as np

from chain_radar.analytics.max_pain import coarse_max_pain
from chain_radar.core.data_types import MarketDataPoint
from chain_radar.core.ring_buffer import POINT_DTYPE, RingBuffer
from chain_radar.core.session_clock import SessionClock
from chain_radar.structure.session_profiler import FirstHourRange, SessionProfiler

logger = logging.getLogger(__name__)

AVERAGE_VOLUME_PERIODS = 10
AVERAGE_VOLUME_MIN_POINTS = 5


class RollingWindowStore:
    """Bounded history of MarketDataPoints for one tracked index."""

    def __init__(
        self,
        clock: SessionClock | None = None,
        lookback_periods: int = 20,
        first_hour_minutes: int = 60,
        max_pain_rounding: float = 50.0,
    ) -> None:
        self._clock = clock or SessionClock()
        self._lookback = lookback_periods
        self._first_hour_minutes = first_hour_minutes
        self._max_pain_rounding = max_pain_rounding
        # One slot over 2 × lookback so the overflow is observable before compaction
        self._buffer = RingBuffer(capacity=2 * lookback_periods + 1, dtype=POINT_DTYPE)
        # Caller points kept as given; the structured buffer is for arithmetic only
        self._points = RingBuffer(capacity=2 * lookback_periods + 1, dtype=object)
        self._session = SessionProfiler(self._clock)
        self._previous_max_pain: float | None = None

    # ── Mutation ──

    def add_point(self, point: MarketDataPoint) -> None:
        """Append one point and update VWAP, first-hour lock and previous max pain."""
        latest = self._buffer.latest()
        if latest is not None:
            self._previous_max_pain = coarse_max_pain(
                float(latest["spot_price"]), self._max_pain_rounding
            )

        self._buffer.push((
            self._clock.to_ns(point.timestamp),
            point.spot_price,
            point.volume,
            point.atm_call_oi,
            point.atm_put_oi,
            point.atm_call_iv,
            point.atm_put_iv,
            point.atm_call_volume,
            point.atm_put_volume,
            point.total_call_oi,
            point.total_put_oi,
        ))
        self._points.push(point)
        if self._buffer.count > 2 * self._lookback:
            self._buffer.compact(self._lookback)
            self._points.compact(self._lookback)
            logger.debug("Window compacted to %d points", self._lookback)

        self._session.update(
            point.timestamp, point.spot_price, point.volume, self._first_hour_minutes
        )

    def configure(
        self,
        lookback_periods: int,
        first_hour_minutes: int,
        max_pain_rounding: float,
    ) -> None:
        """Apply new window settings between cycles, keeping retained history."""
        self._first_hour_minutes = first_hour_minutes
        self._max_pain_rounding = max_pain_rounding
        if lookback_periods == self._lookback:
            return
        history = self._buffer.ordered()[-2 * lookback_periods:]
        points = self._points.ordered()[-2 * lookback_periods:]
        self._lookback = lookback_periods
        self._buffer = RingBuffer(capacity=2 * lookback_periods + 1, dtype=POINT_DTYPE)
        self._points = RingBuffer(capacity=2 * lookback_periods + 1, dtype=object)
        for record, point in zip(history, points):
            self._buffer.push(record)
            self._points.push(point)

    # ── Read-only access ──

    @property
    def clock(self) -> SessionClock:
        return self._clock

    @property
    def lookback_periods(self) -> int:
        return self._lookback

    @property
    def first_hour_minutes(self) -> int:
        return self._first_hour_minutes

    @property
    def first_hour(self) -> FirstHourRange | None:
        return self._session.first_hour

    @property
    def previous_max_pain(self) -> float | None:
        return self._previous_max_pain

    @property
    def vwap_samples(self) -> int:
        """Points folded into today's VWAP."""
        return self._session.vwap_samples

    def __len__(self) -> int:
        return self._buffer.count

    def vwap(self) -> float:
        return self._session.vwap

    def average_volume(self) -> float:
        """Mean volume of the last 10 points, 0 with fewer than 5 points."""
        if self._buffer.count < AVERAGE_VOLUME_MIN_POINTS:
            return 0.0
        return float(np.mean(self.column("volume", AVERAGE_VOLUME_PERIODS)))

    def column(self, name: str, n: int | None = None) -> np.ndarray:
        """One field over the last ``n`` points (all when None), oldest first."""
        data = self._buffer.ordered() if n is None else self._buffer.tail(n)
        return data[name].astype(np.float64, copy=True)

    def latest(self) -> MarketDataPoint | None:
        return self.point(-1)

    def previous_point(self) -> MarketDataPoint | None:
        return self.point(-2)

    def point(self, offset: int) -> MarketDataPoint | None:
        return self._points.at(offset)

    def historical_points(self) -> tuple[MarketDataPoint, ...]:
        """All retained points, oldest first, exactly as they were added."""
        return tuple(self._points.ordered())
