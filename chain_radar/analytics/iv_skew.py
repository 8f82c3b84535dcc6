"""IV skew across the three strikes either side of ATM, with skew velocity."""

from __future__ import annotations

import numpy as np

from chain_radar.core.data_types import IVSkewMetrics, MarketSnapshot
from chain_radar.core.ring_buffer import RingBuffer

SKEW_DEPTH = 3


def iv_difference(snapshot: MarketSnapshot, strike: float, reference: float, leg: str) -> float:
    """IV at ``strike`` minus IV at ``reference`` for one leg. 0 if either strike is missing."""
    quotes = snapshot.strike(strike)
    ref_quotes = snapshot.strike(reference)
    if quotes is None or ref_quotes is None:
        return 0.0
    if leg == "CE":
        return quotes.call.iv - ref_quotes.call.iv
    return quotes.put.iv - ref_quotes.put.iv


class IVSkewAnalyzer:
    """Owns the skew history used for velocity."""

    def __init__(self, strike_step: float = 50.0, history_size: int = 100) -> None:
        self.strike_step = strike_step
        self._history = RingBuffer(capacity=history_size, dtype=np.float64)

    @property
    def history(self) -> np.ndarray:
        return self._history.ordered()

    def calculate(self, snapshot: MarketSnapshot) -> IVSkewMetrics:
        metrics = self.evaluate(snapshot)
        self.record(metrics)
        return metrics

    def evaluate(self, snapshot: MarketSnapshot) -> IVSkewMetrics:
        """Skew metrics for one snapshot without touching the history."""
        atm = snapshot.atm_strike
        atm_quotes = snapshot.strike(atm)
        atm_iv = (atm_quotes.call.iv + atm_quotes.put.iv) / 2 if atm_quotes is not None else 0.0

        offsets = [self.strike_step * i for i in range(1, SKEW_DEPTH + 1)]
        call_skew = tuple(iv_difference(snapshot, atm + off, atm, "CE") for off in offsets)
        put_skew = tuple(iv_difference(snapshot, atm - off, atm, "PE") for off in offsets)

        # Put wing minus call wing at two strikes out
        overall = put_skew[1] - call_skew[1]

        return IVSkewMetrics(
            atm_iv=atm_iv,
            call_skew=call_skew,
            put_skew=put_skew,
            overall_skew=overall,
            skew_velocity=self._velocity(overall),
        )

    def record(self, metrics: IVSkewMetrics) -> None:
        self._history.push(metrics.overall_skew)

    def _velocity(self, skew: float) -> float:
        previous = self._history.latest()
        if previous is None:
            return 0.0
        return skew - float(previous)

    def reset(self) -> None:
        self._history.clear()
