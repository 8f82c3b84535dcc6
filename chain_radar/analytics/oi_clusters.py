"""OI clustering — contiguous strike runs with concentrated open interest.

A run is every consecutive strike whose total (CE + PE) OI exceeds
``oi_multiple`` times the chain average. A run that reaches the last strike
is closed like any other.
"""

from __future__ import annotations

from collections import deque

import numpy as np

from chain_radar.core.data_types import ClusterMigration, MarketSnapshot, OICluster, OIClusterMetrics
from chain_radar.core.types import ClusterType


def classify_cluster(call_oi: float, put_oi: float, ratio: float = 1.2) -> ClusterType:
    if call_oi > put_oi * ratio:
        return ClusterType.CALL_HEAVY
    if put_oi > call_oi * ratio:
        return ClusterType.PUT_HEAVY
    return ClusterType.BALANCED


def find_clusters(
    snapshot: MarketSnapshot,
    oi_multiple: float = 1.5,
    type_ratio: float = 1.2,
) -> tuple[OICluster, ...]:
    quotes = snapshot.sorted_strikes()
    if not quotes:
        return ()

    strikes = np.array([q.strike for q in quotes], dtype=np.float64)
    call_oi = np.array([q.call.oi for q in quotes], dtype=np.float64)
    put_oi = np.array([q.put.oi for q in quotes], dtype=np.float64)
    total_oi = call_oi + put_oi

    avg_oi = float(np.mean(total_oi))
    if avg_oi <= 0:
        return ()
    hot = total_oi > avg_oi * oi_multiple

    clusters: list[OICluster] = []
    start = None
    # Sentinel False closes a run ending at the last strike
    for i, flag in enumerate(np.append(hot, False)):
        if flag and start is None:
            start = i
        elif not flag and start is not None:
            run = slice(start, i)
            run_oi = float(total_oi[run].sum())
            center = float(np.dot(strikes[run], total_oi[run])) / run_oi
            clusters.append(OICluster(
                center_strike=float(round(center)),
                total_oi=run_oi,
                strikes=tuple(float(s) for s in strikes[run]),
                strength=run_oi / avg_oi,
                type=classify_cluster(float(call_oi[run].sum()), float(put_oi[run].sum()), type_ratio),
            ))
            start = None
    return tuple(clusters)


def strongest(clusters: tuple[OICluster, ...]) -> OICluster:
    """Highest strength; the earliest cluster wins ties."""
    best = clusters[0]
    for cluster in clusters[1:]:
        if cluster.strength > best.strength:
            best = cluster
    return best


class OIClusterAnalyzer:
    """Clusters the chain and tracks migration of the strongest cluster across cycles."""

    def __init__(
        self,
        oi_multiple: float = 1.5,
        type_ratio: float = 1.2,
        break_strength: float = 2.0,
        migration_min_distance: float = 50.0,
        history_size: int = 100,
    ) -> None:
        self.oi_multiple = oi_multiple
        self.type_ratio = type_ratio
        self.break_strength = break_strength
        self.migration_min_distance = migration_min_distance
        self._history: deque[tuple[OICluster, ...]] = deque(maxlen=history_size)

    @property
    def history(self) -> tuple[tuple[OICluster, ...], ...]:
        return tuple(self._history)

    def calculate(self, snapshot: MarketSnapshot) -> OIClusterMetrics:
        metrics = self.evaluate(snapshot)
        self.record(metrics)
        return metrics

    def evaluate(self, snapshot: MarketSnapshot) -> OIClusterMetrics:
        """Clusters and migration against the last recorded cycle, history untouched."""
        clusters = find_clusters(snapshot, self.oi_multiple, self.type_ratio)
        return OIClusterMetrics(
            clusters=clusters,
            cluster_migration=self._migration(clusters),
            cluster_break_alert=all(c.strength < self.break_strength for c in clusters),
        )

    def record(self, metrics: OIClusterMetrics) -> None:
        self._history.append(metrics.clusters)

    def _migration(self, clusters: tuple[OICluster, ...]) -> ClusterMigration | None:
        if not clusters or not self._history or not self._history[-1]:
            return None
        current = strongest(clusters)
        previous = strongest(self._history[-1])
        distance = abs(current.center_strike - previous.center_strike)
        if distance <= self.migration_min_distance:
            return None
        return ClusterMigration(
            previous_center=previous.center_strike,
            current_center=current.center_strike,
            migration_distance=distance,
            migration_strength=current.strength / previous.strength if previous.strength else 0.0,
        )

    def reset(self) -> None:
        self._history.clear()
