"""Tests for RollingWindowStore — compaction, accessors, previous max pain."""

from datetime import datetime, timezone

import pytest

from chain_radar.structure.rolling_window import RollingWindowStore


class TestRollingWindow:
    def test_ten_identical_points_vwap_is_price(self, window, make_point, ts):
        for i in range(10):
            window.add_point(make_point(ts(11, i), spot=22400.0, volume=1000.0))
        assert window.vwap() == 22400.0
        assert window.vwap_samples == 10

    @pytest.mark.parametrize("price,volume", [
        (22412.35, 1234.5),
        (22417.1, 333.3),
        (19999.95, 0.1),
        (48123.45, 7.0),
    ])
    def test_identical_points_vwap_exact_for_any_price(self, window, make_point, ts, price, volume):
        for i in range(10):
            window.add_point(make_point(ts(11, i), spot=price, volume=volume))
        assert window.vwap() == price

    def test_empty_window(self, window):
        assert len(window) == 0
        assert window.vwap() == 0.0
        assert window.latest() is None
        assert window.previous_point() is None
        assert window.average_volume() == 0.0
        assert window.previous_max_pain is None

    def test_compaction_to_lookback(self, clock, make_point, ts):
        store = RollingWindowStore(clock=clock, lookback_periods=3)
        for i in range(7):
            store.add_point(make_point(ts(11, i), spot=22400.0 + i))
        assert len(store) == 3
        assert [p.spot_price for p in store.historical_points()] == [22404.0, 22405.0, 22406.0]

    def test_length_never_exceeds_twice_lookback(self, clock, make_point, ts):
        store = RollingWindowStore(clock=clock, lookback_periods=5)
        for i in range(40):
            store.add_point(make_point(ts(11, i)))
            assert len(store) <= 10

    def test_average_volume_needs_five_points(self, window, make_point, ts):
        for i in range(4):
            window.add_point(make_point(ts(11, i), volume=1000.0))
        assert window.average_volume() == 0.0
        window.add_point(make_point(ts(11, 4), volume=2000.0))
        assert window.average_volume() == pytest.approx(1200.0)

    def test_average_volume_uses_last_ten(self, window, make_point, ts):
        for i in range(15):
            window.add_point(make_point(ts(11, i), volume=100.0 if i < 5 else 1000.0))
        assert window.average_volume() == pytest.approx(1000.0)

    def test_previous_max_pain_tracks_prior_point(self, window, make_point, ts):
        window.add_point(make_point(ts(11, 0), spot=22412.0))
        assert window.previous_max_pain is None
        window.add_point(make_point(ts(11, 1), spot=22480.0))
        assert window.previous_max_pain == 22400.0
        window.add_point(make_point(ts(11, 2), spot=22490.0))
        assert window.previous_max_pain == 22500.0

    def test_accessors(self, window, make_point, ts):
        window.add_point(make_point(ts(11, 0), spot=22400.0))
        window.add_point(make_point(ts(11, 1), spot=22410.0, atm_call_iv=14.0))
        assert window.latest().spot_price == 22410.0
        assert window.latest().atm_call_iv == 14.0
        assert window.previous_point().spot_price == 22400.0
        assert list(window.column("spot_price")) == [22400.0, 22410.0]
        assert list(window.column("spot_price", 1)) == [22410.0]

    def test_points_keep_caller_timestamps(self, window, make_point, ts):
        naive = make_point(ts(11, 5))
        window.add_point(naive)
        assert window.latest().timestamp == ts(11, 5)
        assert window.latest().timestamp.tzinfo is None

        utc = make_point(datetime(2024, 1, 15, 6, 0, tzinfo=timezone.utc))
        window.add_point(utc)
        assert window.latest() is utc
        assert window.historical_points()[-1].timestamp.tzinfo is timezone.utc
        assert window.previous_point() is naive

    def test_compaction_keeps_point_identity(self, clock, make_point, ts):
        store = RollingWindowStore(clock=clock, lookback_periods=2)
        points = [make_point(ts(11, i), spot=22400.0 + i) for i in range(5)]
        for p in points:
            store.add_point(p)
        assert store.historical_points() == tuple(points[-2:])
        assert store.latest() is points[-1]

    def test_column_is_a_copy(self, window, make_point, ts):
        window.add_point(make_point(ts(11, 0), spot=22400.0))
        col = window.column("spot_price")
        col[0] = 0.0
        assert window.latest().spot_price == 22400.0

    def test_configure_shrinks_history(self, window, make_point, ts):
        for i in range(30):
            window.add_point(make_point(ts(11, i), spot=22000.0 + i))
        window.configure(lookback_periods=5, first_hour_minutes=30, max_pain_rounding=100.0)
        assert len(window) == 10
        assert window.latest().spot_price == 22029.0
        assert window.first_hour_minutes == 30
