"""Advanced Analytics Engine — per-cycle IV skew, GEX, OI clusters and price patterns.

Stateful across cycles (skew history, cluster history, spot history), each
bounded at ``history_size``. Every enabled stage is evaluated first and
histories are only recorded once all of them succeed, so a failure in any
stage degrades that cycle to AdvancedMetrics.empty() and records nothing.
"""

from __future__ import annotations

import logging

from chain_radar.analytics.gamma_exposure import GammaExposureCalculator
from chain_radar.analytics.iv_skew import IVSkewAnalyzer
from chain_radar.analytics.oi_clusters import OIClusterAnalyzer
from chain_radar.analytics.pattern_recognition import PatternRecognizer
from chain_radar.analytics.pricing import PricingModel, SimplifiedBlackScholes
from chain_radar.config.breakout_config import AnalyticsConfig
from chain_radar.core.data_types import (
    AdvancedMetrics,
    GEXMetrics,
    IVSkewMetrics,
    MarketSnapshot,
    OIClusterMetrics,
    PatternMetrics,
)

logger = logging.getLogger(__name__)


class AdvancedAnalyticsEngine:
    def __init__(
        self,
        config: AnalyticsConfig | None = None,
        pricing: PricingModel | None = None,
    ) -> None:
        self.config = config or AnalyticsConfig()
        cfg = self.config
        self.iv_skew = IVSkewAnalyzer(cfg.strike_step, cfg.history_size)
        self.gex = GammaExposureCalculator(
            pricing or SimplifiedBlackScholes(cfg.risk_free_rate, cfg.time_to_expiry_years),
            contract_multiplier=cfg.contract_multiplier,
            zone_threshold=cfg.gex_zone_threshold,
        )
        self.oi_clusters = OIClusterAnalyzer(
            oi_multiple=cfg.cluster_oi_multiple,
            type_ratio=cfg.cluster_type_ratio,
            break_strength=cfg.cluster_break_strength,
            migration_min_distance=cfg.migration_min_distance,
            history_size=cfg.history_size,
        )
        self.patterns = PatternRecognizer(
            window=cfg.pattern_window,
            motif_correlation=cfg.motif_correlation,
            discord_sigma=cfg.discord_sigma,
            history_size=cfg.history_size,
        )
        self.failures = 0

    def calculate(self, snapshot: MarketSnapshot) -> AdvancedMetrics:
        """Run every enabled stage on one snapshot. Never raises."""
        try:
            return self._calculate(snapshot)
        except Exception:
            self.failures += 1
            logger.exception(
                "Advanced analytics failed for snapshot at %s (failure #%d)",
                snapshot.timestamp, self.failures,
            )
            return AdvancedMetrics.empty(snapshot.timestamp)

    def _calculate(self, snapshot: MarketSnapshot) -> AdvancedMetrics:
        cfg = self.config
        logger.debug(
            "Analytics cycle: spot=%.2f atm=%s strikes=%d",
            snapshot.spot_price, snapshot.atm_strike, len(snapshot.options),
        )
        iv_skew = self.iv_skew.evaluate(snapshot) if cfg.iv_skew_enabled else IVSkewMetrics()
        gex = self.gex.calculate(snapshot) if cfg.gex_enabled else GEXMetrics()
        clusters = self.oi_clusters.evaluate(snapshot) if cfg.oi_clusters_enabled else OIClusterMetrics()
        patterns = (
            self.patterns.evaluate(snapshot.spot_price) if cfg.patterns_enabled else PatternMetrics()
        )

        # Commit only once every stage has produced its metrics
        if cfg.iv_skew_enabled:
            self.iv_skew.record(iv_skew)
        if cfg.oi_clusters_enabled:
            self.oi_clusters.record(clusters)
        if cfg.patterns_enabled:
            self.patterns.record(snapshot.spot_price)

        return AdvancedMetrics(
            iv_skew=iv_skew,
            gex=gex,
            oi_clusters=clusters,
            patterns=patterns,
            timestamp=snapshot.timestamp,
        )

    def reset(self) -> None:
        self.iv_skew.reset()
        self.oi_clusters.reset()
        self.patterns.reset()
        self.failures = 0
