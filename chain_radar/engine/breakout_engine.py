"""Breakout Engine — one instance per tracked index.

Owns the rolling window, the detector list and the scorer. Hosts call
add_snapshot()/add_point() once per poll, then analyze(). Not thread-safe:
serialise calls per instance.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from chain_radar.config.breakout_config import BreakoutConfig
from chain_radar.core.data_types import AnalysisResult, MarketDataPoint, MarketSnapshot, Signal
from chain_radar.core.session_clock import SessionClock
from chain_radar.detectors.base import PatternDetector
from chain_radar.detectors.registry import default_detectors
from chain_radar.ingest.snapshot_normalizer import normalize_snapshot
from chain_radar.scoring.signal_scorer import SignalScorer
from chain_radar.structure.rolling_window import RollingWindowStore

logger = logging.getLogger(__name__)


class BreakoutEngine:
    def __init__(
        self,
        config: BreakoutConfig | None = None,
        detectors: Iterable[PatternDetector] | None = None,
        clock: SessionClock | None = None,
    ) -> None:
        self._config = config or BreakoutConfig()
        self._detectors: list[PatternDetector] = (
            default_detectors() if detectors is None else list(detectors)
        )
        self._window = RollingWindowStore(
            clock=clock,
            lookback_periods=self._config.lookback_periods,
            first_hour_minutes=self._config.first_hour_minutes,
            max_pain_rounding=self._config.max_pain_rounding,
        )
        self._scorer = SignalScorer()

    @property
    def config(self) -> BreakoutConfig:
        return self._config

    @property
    def window(self) -> RollingWindowStore:
        return self._window

    @property
    def detectors(self) -> tuple[PatternDetector, ...]:
        return tuple(self._detectors)

    @property
    def scorer(self) -> SignalScorer:
        return self._scorer

    def add_snapshot(self, snapshot: MarketSnapshot) -> MarketDataPoint:
        """Normalise a chain snapshot and append it to the window."""
        point = normalize_snapshot(snapshot)
        self.add_point(point)
        return point

    def add_point(self, point: MarketDataPoint) -> None:
        self._window.add_point(point)

    def detect(self) -> list[Signal]:
        """Raw, ungraded signals from every detector for the latest point."""
        point = self._window.latest()
        if point is None:
            return []
        signals = []
        for detector in self._detectors:
            signal = detector.detect(point, self._window, self._config)
            if signal is not None:
                logger.debug(
                    "%s fired %s at %.2f (confidence %.1f)",
                    detector.pattern.value, signal.direction.value,
                    point.spot_price, signal.confidence,
                )
                signals.append(signal)
        return signals

    def analyze(self) -> AnalysisResult:
        """Score the latest point. Idempotent until the next add_point()."""
        result = self._scorer.score(self.detect(), self._window, self._config)
        logger.debug(
            "Analysis at %s: %d signals (bias %s)",
            result.analyzed_at, result.summary.total_signals, result.summary.overall_bias.value,
        )
        return result

    def update_config(self, **changes: Any) -> BreakoutConfig:
        """Replace thresholds. History is kept; window settings follow the new config."""
        self._config = self._config.with_overrides(**changes)
        self._window.configure(
            lookback_periods=self._config.lookback_periods,
            first_hour_minutes=self._config.first_hour_minutes,
            max_pain_rounding=self._config.max_pain_rounding,
        )
        logger.info("Breakout config updated: %s", ", ".join(sorted(changes)))
        return self._config

    def historical_points(self) -> tuple[MarketDataPoint, ...]:
        return self._window.historical_points()
