"""Session Clock — exchange-local wall clock for session dates and the first-hour window.

Market hours: 09:30 to 15:30 exchange time, Monday-Friday.
Pre-market from 09:00, post-market until 16:00.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

import pytz

from chain_radar.core.types import MarketStatus

_NS_PER_SECOND = 1_000_000_000


def _parse_hhmm(value: str | time) -> time:
    if isinstance(value, time):
        return value
    hours, minutes = str(value).split(":")
    return time(int(hours), int(minutes))


class SessionClock:
    """Converts point timestamps into exchange-local session terms."""

    def __init__(
        self,
        timezone_name: str = "Asia/Kolkata",
        market_open: str | time = "09:30",
        market_close: str | time = "15:30",
        pre_market_open: str | time = "09:00",
        post_market_close: str | time = "16:00",
    ) -> None:
        self._tz = pytz.timezone(timezone_name)
        self._open = _parse_hhmm(market_open)
        self._close = _parse_hhmm(market_close)
        self._pre_open = _parse_hhmm(pre_market_open)
        self._post_close = _parse_hhmm(post_market_close)

    @property
    def tz(self):
        return self._tz

    @property
    def market_open(self) -> time:
        return self._open

    def local(self, ts: datetime) -> datetime:
        """Timestamp in exchange time. Naive timestamps are taken as exchange-local."""
        if ts.tzinfo is None:
            return self._tz.localize(ts)
        return ts.astimezone(self._tz)

    def session_date(self, ts: datetime) -> date:
        return self.local(ts).date()

    def first_hour_window(self, ts: datetime, minutes: int) -> tuple[datetime, datetime]:
        """(open, open + minutes) on the session date of ``ts``."""
        local = self.local(ts)
        start = self._tz.localize(datetime.combine(local.date(), self._open))
        return start, start + timedelta(minutes=minutes)

    def in_first_hour(self, ts: datetime, minutes: int) -> bool:
        start, end = self.first_hour_window(ts, minutes)
        return start <= self.local(ts) <= end

    def after_first_hour(self, ts: datetime, minutes: int) -> bool:
        _, end = self.first_hour_window(ts, minutes)
        return self.local(ts) > end

    def market_status(self, ts: datetime) -> MarketStatus:
        local = self.local(ts)
        if local.weekday() >= 5:
            return MarketStatus.CLOSED

        now = local.time()
        if self._pre_open <= now < self._open:
            return MarketStatus.PRE_MARKET
        if self._open <= now <= self._close:
            return MarketStatus.OPEN
        if self._close < now <= self._post_close:
            return MarketStatus.POST_MARKET
        return MarketStatus.CLOSED

    def is_market_open(self, ts: datetime) -> bool:
        return self.market_status(ts) == MarketStatus.OPEN

    def to_ns(self, ts: datetime) -> int:
        """Epoch nanoseconds without float rounding."""
        local = self.local(ts)
        epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
        delta = local - epoch
        return (delta.days * 86_400 + delta.seconds) * _NS_PER_SECOND + delta.microseconds * 1_000
