"""Session Profiler — session VWAP accumulator and the locked first-hour range.

Both reset when a point arrives on a new exchange-local session date.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime

from chain_radar.core.session_clock import SessionClock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FirstHourRange:
    high: float
    low: float
    started_at: datetime
    updated_at: datetime


class SessionProfiler:
    """Calculates session-level state: VWAP and the first-hour high/low lock."""

    def __init__(self, clock: SessionClock) -> None:
        self._clock = clock
        self._session_date: date | None = None
        self._vwap_cum_vol: float = 0.0
        self._vwap_anchor: float | None = None
        self._vwap_cum_dpv: float = 0.0
        self._vwap_samples: int = 0
        self._first_hour: FirstHourRange | None = None

    @property
    def vwap(self) -> float:
        if self._vwap_cum_vol <= 0:
            return 0.0
        return self._vwap_anchor + self._vwap_cum_dpv / self._vwap_cum_vol

    @property
    def vwap_samples(self) -> int:
        return self._vwap_samples

    @property
    def session_date(self) -> date | None:
        return self._session_date

    @property
    def first_hour(self) -> FirstHourRange | None:
        return self._first_hour

    def update(self, timestamp: datetime, price: float, volume: float, first_hour_minutes: int) -> None:
        """Fold one point into session state. Call once per point."""
        current_date = self._clock.session_date(timestamp)
        if current_date != self._session_date:
            if self._session_date is not None:
                logger.debug(
                    "Session rollover %s -> %s: VWAP %.2f over %d samples discarded",
                    self._session_date, current_date, self.vwap, self._vwap_samples,
                )
            self.reset_session()
            self._session_date = current_date

        self.update_vwap(price, volume)

        if self._clock.in_first_hour(timestamp, first_hour_minutes):
            self._extend_first_hour(timestamp, price)

    def update_vwap(self, price: float, volume: float) -> None:
        """Accumulate (price - anchor) x volume, anchored on the session's first price.

        Repeated prices add exact zeros, so a flat session reports its price exactly.
        """
        if self._vwap_anchor is None:
            self._vwap_anchor = price
        self._vwap_cum_vol += volume
        self._vwap_cum_dpv += (price - self._vwap_anchor) * volume
        self._vwap_samples += 1

    def reset_session(self) -> None:
        """Reset VWAP and first-hour lock at session open."""
        self._vwap_cum_vol = 0.0
        self._vwap_anchor = None
        self._vwap_cum_dpv = 0.0
        self._vwap_samples = 0
        self._first_hour = None

    def _extend_first_hour(self, timestamp: datetime, price: float) -> None:
        fh = self._first_hour
        if fh is None:
            self._first_hour = FirstHourRange(
                high=price, low=price, started_at=timestamp, updated_at=timestamp,
            )
            return
        self._first_hour = FirstHourRange(
            high=max(fh.high, price),
            low=min(fh.low, price),
            started_at=fh.started_at,
            updated_at=timestamp,
        )
