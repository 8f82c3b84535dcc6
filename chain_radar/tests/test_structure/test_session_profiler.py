"""Tests for SessionProfiler — VWAP accumulation and the first-hour lock."""

import pytest

from chain_radar.structure.session_profiler import SessionProfiler


class TestSessionProfiler:
    def test_vwap_update(self, clock):
        sp = SessionProfiler(clock)
        sp.update_vwap(22400.0, 100.0)
        assert sp.vwap == 22400.0

        sp.update_vwap(22410.0, 200.0)
        expected = (22400.0 * 100 + 22410.0 * 200) / 300
        assert sp.vwap == pytest.approx(expected)
        assert sp.vwap_samples == 2

    def test_vwap_zero_volume(self, clock):
        sp = SessionProfiler(clock)
        sp.update_vwap(22400.0, 0.0)
        assert sp.vwap == 0.0

    def test_first_hour_lock_widens(self, clock, ts):
        sp = SessionProfiler(clock)
        for moment, price in [(ts(9, 30), 22400.0), (ts(9, 45), 22450.0), (ts(10, 30), 22350.0)]:
            sp.update(moment, price, 100.0, 60)
        fh = sp.first_hour
        assert (fh.high, fh.low) == (22450.0, 22350.0)
        assert fh.started_at == ts(9, 30)

    def test_first_hour_untouched_outside_window(self, clock, ts):
        sp = SessionProfiler(clock)
        sp.update(ts(9, 15), 22000.0, 100.0, 60)
        assert sp.first_hour is None
        sp.update(ts(9, 45), 22400.0, 100.0, 60)
        sp.update(ts(11), 23000.0, 100.0, 60)
        assert (sp.first_hour.high, sp.first_hour.low) == (22400.0, 22400.0)

    def test_new_session_resets(self, clock, ts):
        sp = SessionProfiler(clock)
        sp.update(ts(9, 45), 22400.0, 100.0, 60)
        sp.update(ts(11), 22500.0, 100.0, 60)
        assert sp.vwap_samples == 2

        sp.update(ts(9, 40, day_offset=1), 22600.0, 50.0, 60)
        assert sp.vwap == 22600.0
        assert sp.vwap_samples == 1
        assert sp.first_hour.high == 22600.0
        assert sp.session_date == ts(9, 40, day_offset=1).date()

    def test_reset_session(self, clock, ts):
        sp = SessionProfiler(clock)
        sp.update(ts(9, 45), 22400.0, 100.0, 60)
        sp.reset_session()
        assert sp.vwap == 0.0
        assert sp.first_hour is None
