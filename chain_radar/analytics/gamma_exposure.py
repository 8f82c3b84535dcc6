"""Gamma exposure (GEX) — per-strike dealer gamma, zero-gamma level and dominant zone.

GEX formula:
    call_gex = CE OI * gamma * multiplier
    put_gex  = -PE OI * gamma * multiplier   (dealers short puts carry negative gamma)
    net      = call_gex + put_gex
"""

from __future__ import annotations

from chain_radar.analytics.max_pain import full_max_pain
from chain_radar.analytics.pricing import PricingModel, SimplifiedBlackScholes
from chain_radar.core.data_types import GEXMetrics, GreeksData, MarketSnapshot
from chain_radar.core.types import GammaZone, OptionType


def find_zero_gamma(gamma_by_strike: tuple[GreeksData, ...], spot_price: float) -> float:
    """Midpoint of the adjacent strike pair whose GEX changes sign, nearest to spot.

    Returns spot when no sign change exists.
    """
    crossings = [
        (lower.strike + upper.strike) / 2
        for lower, upper in zip(gamma_by_strike, gamma_by_strike[1:])
        if lower.gamma_exposure * upper.gamma_exposure < 0
    ]
    if not crossings:
        return spot_price
    return min(crossings, key=lambda level: (abs(level - spot_price), level))


def dominant_zone(total_gex: float, threshold: float = 50_000.0) -> GammaZone:
    if total_gex > threshold:
        return GammaZone.LONG
    if total_gex < -threshold:
        return GammaZone.SHORT
    return GammaZone.NEUTRAL


class GammaExposureCalculator:
    def __init__(
        self,
        pricing: PricingModel | None = None,
        contract_multiplier: float = 100.0,
        zone_threshold: float = 50_000.0,
    ) -> None:
        self.pricing = pricing or SimplifiedBlackScholes()
        self.contract_multiplier = contract_multiplier
        self.zone_threshold = zone_threshold

    def strike_greeks(self, spot: float, strike: float, call_oi: float, put_oi: float,
                      call_iv: float, put_iv: float) -> GreeksData:
        call_gamma = self.pricing.gamma(spot, strike, call_iv)
        put_gamma = self.pricing.gamma(spot, strike, put_iv)
        call_gex = call_oi * call_gamma * self.contract_multiplier
        put_gex = -put_oi * put_gamma * self.contract_multiplier
        return GreeksData(
            strike=strike,
            call_gamma=call_gamma,
            put_gamma=put_gamma,
            call_delta=self.pricing.delta(spot, strike, OptionType.CALL),
            put_delta=self.pricing.delta(spot, strike, OptionType.PUT),
            net_gamma=call_gamma + put_gamma,
            gamma_exposure=call_gex + put_gex,
        )

    def calculate(self, snapshot: MarketSnapshot) -> GEXMetrics:
        spot = snapshot.spot_price
        gamma_by_strike = tuple(
            self.strike_greeks(
                spot,
                quotes.strike,
                quotes.call.oi,
                quotes.put.oi,
                quotes.call.iv,
                quotes.put.iv,
            )
            for quotes in snapshot.sorted_strikes()
        )
        total = sum(g.gamma_exposure for g in gamma_by_strike)

        return GEXMetrics(
            total_gex=total,
            zero_gamma_level=find_zero_gamma(gamma_by_strike, spot),
            max_pain_level=full_max_pain(snapshot),
            gamma_by_strike=gamma_by_strike,
            dominant_gamma_zone=dominant_zone(total, self.zone_threshold),
        )
