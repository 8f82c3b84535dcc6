"""Signal Pipeline — one call per poll: snapshot in, signals and analytics out."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from chain_radar.analytics.analytics_engine import AdvancedAnalyticsEngine
from chain_radar.config.breakout_config import (
    AnalyticsConfig,
    BreakoutConfig,
    session_clock_from_config,
)
from chain_radar.config.config_manager import ConfigManager
from chain_radar.core.data_types import AdvancedMetrics, AnalysisResult, MarketDataPoint, MarketSnapshot, to_dict
from chain_radar.detectors.registry import enabled_detectors
from chain_radar.engine.breakout_engine import BreakoutEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CycleResult:
    analysis: AnalysisResult
    metrics: AdvancedMetrics | None
    data_point: MarketDataPoint

    def to_dict(self) -> dict[str, Any]:
        return to_dict(self)


class SignalPipeline:
    """Wires a BreakoutEngine and an optional analytics engine for one index."""

    def __init__(
        self,
        engine: BreakoutEngine,
        analytics: AdvancedAnalyticsEngine | None = None,
    ) -> None:
        self.engine = engine
        self.analytics = analytics

    @classmethod
    def from_config_manager(cls, cm: ConfigManager) -> SignalPipeline:
        """Build engines from loaded config, honouring detector and analytics toggles."""
        for error in cm.validate_toggles():
            logger.warning("Toggle config: %s", error)
        detectors = enabled_detectors(cm.is_toggle_enabled)
        engine = BreakoutEngine(
            config=BreakoutConfig.from_config_manager(cm),
            detectors=detectors,
            clock=session_clock_from_config(cm),
        )
        analytics = None
        if cm.is_toggle_enabled("A01"):
            analytics = AdvancedAnalyticsEngine(AnalyticsConfig.from_config_manager(cm))
        logger.info(
            "Pipeline ready for %s: %d detectors, analytics %s",
            cm.get("system.index", "unknown"), len(detectors), "on" if analytics else "off",
        )
        return cls(engine, analytics)

    def process(self, snapshot: MarketSnapshot) -> CycleResult:
        point = self.engine.add_snapshot(snapshot)
        analysis = self.engine.analyze()
        metrics = self.analytics.calculate(snapshot) if self.analytics is not None else None
        return CycleResult(analysis=analysis, metrics=metrics, data_point=point)
