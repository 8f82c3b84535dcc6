"""Immutable threshold sets handed to the engines once per cycle.

Values mirror chain_radar_base.toml; the dataclass defaults are used when no
ConfigManager is involved (tests, embedded hosts).
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

from chain_radar.config.config_manager import ConfigManager
from chain_radar.core.session_clock import SessionClock


def generate_round_levels(start: float, end: float, step: float) -> tuple[float, ...]:
    """Round-number levels from start to end inclusive."""
    if step <= 0 or end < start:
        return ()
    count = int((end - start) // step) + 1
    return tuple(float(start + i * step) for i in range(count))


def _checked_kwargs(cls, mapping: Mapping[str, Any]) -> dict[str, Any]:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(mapping) - known)
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} keys: {', '.join(unknown)}")
    return dict(mapping)


@dataclass(frozen=True)
class BreakoutConfig:
    """Pattern detector and scorer thresholds."""

    # Volume
    volume_multiplier: float = 2.5
    high_volume_multiplier: float = 5.0

    # OI
    oi_change_threshold: float = 15.0
    oi_imbalance_ratio: float = 2.0  # reserved, not read by any detector

    # VWAP
    vwap_distance_threshold: float = 0.1
    vwap_consolidation_pct: float = 0.5
    vwap_consolidation_minutes: int = 20  # reserved, consolidation spans 10 points

    # IV
    iv_drop_threshold: float = 10.0
    iv_stability_threshold: float = 2.0

    # Max pain
    max_pain_shift_threshold: float = 50.0
    max_pain_rounding: float = 50.0

    # Key levels
    round_number_levels: tuple[float, ...] = field(
        default_factory=lambda: generate_round_levels(20000, 25000, 100)
    )
    level_proximity_threshold: float = 25.0

    # OI/price divergence
    divergence_price_change_pct: float = 0.2
    divergence_oi_change_pct: float = 2.0

    # Windows
    first_hour_minutes: int = 60
    lookback_periods: int = 20

    # Scoring
    min_confidence_threshold: float = 60.0

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> BreakoutConfig:
        """Build from a flat mapping. ``round_levels = {start, end, step}`` is expanded."""
        data = dict(mapping)
        levels = data.pop("round_levels", None)
        if isinstance(levels, Mapping):
            data["round_number_levels"] = generate_round_levels(
                levels["start"], levels["end"], levels["step"]
            )
        if "round_number_levels" in data:
            data["round_number_levels"] = tuple(float(v) for v in data["round_number_levels"])
        return cls(**_checked_kwargs(cls, data))

    @classmethod
    def from_config_manager(cls, cm: ConfigManager) -> BreakoutConfig:
        return cls.from_mapping(cm.section("breakout"))

    def with_overrides(self, **changes: Any) -> BreakoutConfig:
        _checked_kwargs(type(self), changes)
        if "round_number_levels" in changes:
            changes["round_number_levels"] = tuple(float(v) for v in changes["round_number_levels"])
        return replace(self, **changes)


@dataclass(frozen=True)
class AnalyticsConfig:
    """Analytics engine constants."""

    strike_step: float = 50.0
    risk_free_rate: float = 0.05
    time_to_expiry_years: float = 0.02
    contract_multiplier: float = 100.0
    history_size: int = 100
    cluster_oi_multiple: float = 1.5
    cluster_type_ratio: float = 1.2
    cluster_break_strength: float = 2.0
    migration_min_distance: float = 50.0
    gex_zone_threshold: float = 50_000.0
    pattern_window: int = 10
    motif_correlation: float = 0.8
    discord_sigma: float = 2.0

    # Stage switches (toggles A02-A05)
    iv_skew_enabled: bool = True
    gex_enabled: bool = True
    oi_clusters_enabled: bool = True
    patterns_enabled: bool = True

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> AnalyticsConfig:
        return cls(**_checked_kwargs(cls, mapping))

    @classmethod
    def from_config_manager(cls, cm: ConfigManager) -> AnalyticsConfig:
        data = cm.section("analytics")
        data.update(
            iv_skew_enabled=cm.is_toggle_enabled("A02"),
            gex_enabled=cm.is_toggle_enabled("A03"),
            oi_clusters_enabled=cm.is_toggle_enabled("A04"),
            patterns_enabled=cm.is_toggle_enabled("A05"),
        )
        return cls.from_mapping(data)


def session_clock_from_config(cm: ConfigManager) -> SessionClock:
    session = cm.section("session")
    return SessionClock(
        timezone_name=session.get("timezone", "Asia/Kolkata"),
        market_open=session.get("market_open", "09:30"),
        market_close=session.get("market_close", "15:30"),
        pre_market_open=session.get("pre_market_open", "09:00"),
        post_market_close=session.get("post_market_close", "16:00"),
    )
