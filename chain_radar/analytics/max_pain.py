"""Max pain — two deliberately separate computations.

coarse_max_pain: spot rounded to the nearest step. Drives the max-pain shift
detector and the key levels of the analysis result.

full_max_pain: the strike minimising total option-writer payout across the
whole chain. Reported by the analytics engine.

The two can disagree on the same snapshot. Both are kept as-is.
"""

from __future__ import annotations

import math

import numpy as np

from chain_radar.core.data_types import MarketSnapshot


def coarse_max_pain(spot_price: float, rounding: float = 50.0) -> float:
    """Spot rounded half-up to the nearest ``rounding`` points."""
    if rounding <= 0:
        return spot_price
    return math.floor(spot_price / rounding + 0.5) * rounding


def full_max_pain(snapshot: MarketSnapshot) -> float:
    """Strike with the smallest aggregate in-the-money payout at expiry.

    For each candidate expiry price K:
        calls: sum over strikes k < K of (K - k) * call_oi[k]
        puts:  sum over strikes k > K of (k - K) * put_oi[k]
    Ties resolve to the lowest strike. Empty chain → 0.
    """
    quotes = snapshot.sorted_strikes()
    if not quotes:
        return 0.0

    strikes = np.array([q.strike for q in quotes], dtype=np.float64)
    call_oi = np.array([q.call.oi for q in quotes], dtype=np.float64)
    put_oi = np.array([q.put.oi for q in quotes], dtype=np.float64)

    # diff[i, j] = candidate_i - strike_j
    diff = strikes[:, None] - strikes[None, :]
    call_pain = np.clip(diff, 0.0, None) @ call_oi
    put_pain = np.clip(-diff, 0.0, None) @ put_oi
    total_pain = call_pain + put_pain

    return float(strikes[int(np.argmin(total_pain))])
