"""Snapshot Normalizer — reduces a full chain snapshot to an ATM-centred data point."""

from __future__ import annotations

import logging

from chain_radar.core.data_types import EMPTY_QUOTE, MarketDataPoint, MarketSnapshot

logger = logging.getLogger(__name__)


def normalize_snapshot(snapshot: MarketSnapshot) -> MarketDataPoint:
    """Project ``snapshot`` onto its ATM strike.

    Missing legs or a missing ATM strike contribute zeros.
    """
    atm = snapshot.strike(snapshot.atm_strike)
    if atm is None:
        logger.warning(
            "ATM strike %s missing from chain at %s, ATM fields default to 0",
            snapshot.atm_strike, snapshot.timestamp,
        )
    call = atm.call if atm is not None else EMPTY_QUOTE
    put = atm.put if atm is not None else EMPTY_QUOTE

    total_call_oi = 0.0
    total_put_oi = 0.0
    for quotes in snapshot.options.values():
        total_call_oi += quotes.call.oi
        total_put_oi += quotes.put.oi

    return MarketDataPoint(
        timestamp=snapshot.timestamp,
        spot_price=snapshot.spot_price,
        volume=call.volume + put.volume,
        atm_call_oi=call.oi,
        atm_put_oi=put.oi,
        atm_call_iv=call.iv,
        atm_put_iv=put.iv,
        atm_call_volume=call.volume,
        atm_put_volume=put.volume,
        total_call_oi=total_call_oi,
        total_put_oi=total_put_oi,
    )
