"""Pricing models for per-strike greeks.

The analytics engine only needs gamma and a rough delta. Swap in a full
model by implementing ``PricingModel``.
"""

from __future__ import annotations

import math
from typing import Protocol

from scipy.stats import norm

from chain_radar.core.types import OptionType


class PricingModel(Protocol):
    def gamma(self, spot: float, strike: float, iv_pct: float) -> float:
        ...

    def delta(self, spot: float, strike: float, option_type: OptionType) -> float:
        ...


class SimplifiedBlackScholes:
    """Black-Scholes gamma at a fixed rate and time to expiry.

    IV is quoted in percent (15.0 means 15%). Delta is a moneyness step
    function rather than N(d1).
    """

    def __init__(self, risk_free_rate: float = 0.05, time_to_expiry: float = 0.02) -> None:
        self.risk_free_rate = risk_free_rate
        self.time_to_expiry = time_to_expiry

    def d1(self, spot: float, strike: float, sigma: float) -> float:
        t = self.time_to_expiry
        return (
            math.log(spot / strike) + (self.risk_free_rate + 0.5 * sigma * sigma) * t
        ) / (sigma * math.sqrt(t))

    def gamma(self, spot: float, strike: float, iv_pct: float) -> float:
        """phi(d1) / (S * sigma * sqrt(T)). Zero for non-positive inputs."""
        sigma = iv_pct / 100.0
        if spot <= 0 or strike <= 0 or sigma <= 0 or self.time_to_expiry <= 0:
            return 0.0
        d1 = self.d1(spot, strike, sigma)
        return float(norm.pdf(d1) / (spot * sigma * math.sqrt(self.time_to_expiry)))

    def delta(self, spot: float, strike: float, option_type: OptionType) -> float:
        if strike <= 0:
            return 0.0
        moneyness = spot / strike
        if option_type == OptionType.CALL:
            if moneyness > 1:
                return 0.6
            return 0.5 if moneyness > 0.95 else 0.3
        if moneyness < 1:
            return -0.6
        return -0.5 if moneyness < 1.05 else -0.3
