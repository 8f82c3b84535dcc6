"""Tests for SimplifiedBlackScholes."""

import math

import pytest

from chain_radar.analytics.pricing import SimplifiedBlackScholes
from chain_radar.core.types import OptionType


class TestSimplifiedBlackScholes:
    def test_atm_gamma(self):
        model = SimplifiedBlackScholes()
        sigma, t = 0.15, 0.02
        d1 = (0.05 + 0.5 * sigma ** 2) * t / (sigma * math.sqrt(t))
        expected = math.exp(-0.5 * d1 ** 2) / math.sqrt(2 * math.pi) / (22400.0 * sigma * math.sqrt(t))
        assert model.gamma(22400.0, 22400.0, 15.0) == pytest.approx(expected)
        assert type(model.gamma(22400.0, 22400.0, 15.0)) is float

    def test_gamma_peaks_near_the_money(self):
        model = SimplifiedBlackScholes()
        atm = model.gamma(22400.0, 22400.0, 15.0)
        assert atm > model.gamma(22400.0, 23400.0, 15.0)
        assert atm > model.gamma(22400.0, 21400.0, 15.0)

    @pytest.mark.parametrize("spot,strike,iv", [
        (22400.0, 22400.0, 0.0),
        (0.0, 22400.0, 15.0),
        (22400.0, 0.0, 15.0),
    ])
    def test_degenerate_inputs(self, spot, strike, iv):
        assert SimplifiedBlackScholes().gamma(spot, strike, iv) == 0.0

    def test_delta_steps(self):
        model = SimplifiedBlackScholes()
        assert model.delta(22400.0, 22000.0, OptionType.CALL) == 0.6
        assert model.delta(22400.0, 22800.0, OptionType.CALL) == 0.5
        assert model.delta(22400.0, 24000.0, OptionType.CALL) == 0.3
        assert model.delta(22400.0, 22800.0, OptionType.PUT) == -0.6
        assert model.delta(22400.0, 22000.0, OptionType.PUT) == -0.5
        assert model.delta(22400.0, 21000.0, OptionType.PUT) == -0.3
