"""Shared fixtures for chain_radar tests."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from chain_radar.config.breakout_config import BreakoutConfig
from chain_radar.config.config_manager import DEFAULT_CONFIG_PATH, ConfigManager
from chain_radar.core.data_types import MarketDataPoint, MarketSnapshot, OptionQuote, StrikeQuotes
from chain_radar.core.session_clock import SessionClock
from chain_radar.structure.rolling_window import RollingWindowStore

# Monday, exchange-local (naive timestamps are read as Asia/Kolkata)
SESSION_DAY = datetime(2024, 1, 15)


def at(hour: int, minute: int = 0, day_offset: int = 0) -> datetime:
    return SESSION_DAY + timedelta(days=day_offset, hours=hour, minutes=minute)


def point(ts: datetime, spot: float = 22400.0, volume: float = 1000.0, **fields) -> MarketDataPoint:
    values = dict(
        atm_call_oi=50_000.0,
        atm_put_oi=50_000.0,
        atm_call_iv=15.0,
        atm_put_iv=15.0,
        atm_call_volume=volume / 2,
        atm_put_volume=volume / 2,
        total_call_oi=500_000.0,
        total_put_oi=500_000.0,
    )
    values.update(fields)
    return MarketDataPoint(timestamp=ts, spot_price=spot, volume=volume, **values)


def snapshot(
    strikes: dict[float, tuple[float, float, float, float]],
    spot: float = 22400.0,
    atm: float = 22400.0,
    ts: datetime | None = None,
) -> MarketSnapshot:
    """``strikes`` maps strike -> (call_oi, put_oi, call_iv, put_iv)."""
    options = {
        float(k): StrikeQuotes(
            strike=float(k),
            ce=OptionQuote(oi=c_oi, iv=c_iv, volume=100.0),
            pe=OptionQuote(oi=p_oi, iv=p_iv, volume=100.0),
        )
        for k, (c_oi, p_oi, c_iv, p_iv) in strikes.items()
    }
    return MarketSnapshot(
        spot_price=spot,
        atm_strike=atm,
        expiry="2024-01-18",
        timestamp=ts or at(11),
        options=options,
    )


@pytest.fixture
def clock():
    return SessionClock()


@pytest.fixture
def breakout_config():
    return BreakoutConfig()


@pytest.fixture
def window(clock):
    return RollingWindowStore(clock=clock, lookback_periods=20)


@pytest.fixture
def make_point():
    return point


@pytest.fixture
def make_snapshot():
    return snapshot


@pytest.fixture
def ts():
    return at


@pytest.fixture
def config():
    """Loaded ConfigManager with the NIFTY profile."""
    ConfigManager.reset()
    cm = ConfigManager()
    cm.load(DEFAULT_CONFIG_PATH, profile="nifty")
    yield cm
    ConfigManager.reset()


@pytest.fixture
def flat_chain(make_snapshot):
    """Nine strikes around 22400 with identical OI and IV."""
    return make_snapshot({
        22200.0 + 50 * i: (10_000.0, 10_000.0, 15.0, 15.0) for i in range(9)
    })
