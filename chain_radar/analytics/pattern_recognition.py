"""Motif and discord detection on the spot-price history.

motif:   Pearson correlation of the last window vs the window before > threshold
discord: |current - mean(last window)| > sigma * population stdev(last window)
"""

from __future__ import annotations

import numpy as np

from chain_radar.core.data_types import PatternMetrics
from chain_radar.core.ring_buffer import RingBuffer

FLAGGED_CONFIDENCE = 0.7
NORMAL_CONFIDENCE = 0.3


def pearson(a: np.ndarray, b: np.ndarray) -> float:
    """Correlation of two equal-length series. 0 when either is constant."""
    if len(a) != len(b) or len(a) < 2:
        return 0.0
    if np.ptp(a) == 0 or np.ptp(b) == 0:
        return 0.0
    return float(np.corrcoef(a, b)[0, 1])


class PatternRecognizer:
    def __init__(
        self,
        window: int = 10,
        motif_correlation: float = 0.8,
        discord_sigma: float = 2.0,
        history_size: int = 100,
    ) -> None:
        self.window = window
        self.motif_correlation = motif_correlation
        self.discord_sigma = discord_sigma
        self._prices = RingBuffer(capacity=history_size, dtype=np.float64)

    @property
    def history(self) -> np.ndarray:
        return self._prices.ordered()

    def calculate(self, spot_price: float) -> PatternMetrics:
        metrics = self.evaluate(spot_price)
        self.record(spot_price)
        return metrics

    def evaluate(self, spot_price: float) -> PatternMetrics:
        """Metrics as if ``spot_price`` were appended, without appending it."""
        prices = np.append(self._prices.ordered(), spot_price)[-self._prices.capacity:]

        motif = self.detect_motif(prices)
        discord = self.detect_discord(prices, spot_price)

        if motif:
            pattern_type = "recurring_pattern"
        elif discord:
            pattern_type = "anomaly"
        else:
            pattern_type = "normal"

        return PatternMetrics(
            motif_detected=motif,
            discord_detected=discord,
            pattern_type=pattern_type,
            confidence=FLAGGED_CONFIDENCE if motif or discord else NORMAL_CONFIDENCE,
        )

    def record(self, spot_price: float) -> None:
        self._prices.push(spot_price)

    def detect_motif(self, prices: np.ndarray) -> bool:
        w = self.window
        if len(prices) < 2 * w:
            return False
        return pearson(prices[-w:], prices[-2 * w:-w]) > self.motif_correlation

    def detect_discord(self, prices: np.ndarray, current: float) -> bool:
        w = self.window
        if len(prices) < w:
            return False
        recent = prices[-w:]
        return abs(current - float(recent.mean())) > self.discord_sigma * float(recent.std())

    def reset(self) -> None:
        self._prices.clear()
