"""Frozen dataclasses for chain_radar data structures."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping

from chain_radar.core.types import (
    Bias,
    ClusterType,
    GammaZone,
    PatternType,
    SignalDirection,
    SignalPriority,
    SignalStrength,
    Trend,
    VolatilityLevel,
    VolumeProfile,
)


def to_dict(obj: Any) -> Any:
    """Convert a result object into plain JSON-compatible data.

    Enums become their values, datetimes ISO strings, tuples lists.
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_dict(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Mapping):
        return {k: to_dict(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_dict(v) for v in obj]
    return obj


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


# ── Market snapshot (input) ──


@dataclass(frozen=True)
class OptionQuote:
    """One leg (CE or PE) of a strike on the chain."""

    last_price: float = 0.0
    volume: float = 0.0
    oi: float = 0.0
    change: float = 0.0
    iv: float = 0.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> OptionQuote | None:
        if data is None:
            return None
        return cls(
            last_price=float(data.get("last_price") or 0.0),
            volume=float(data.get("volume") or 0.0),
            oi=float(data.get("oi") or 0.0),
            change=float(data.get("change") or 0.0),
            iv=float(data.get("iv") or 0.0),
        )


EMPTY_QUOTE = OptionQuote()


@dataclass(frozen=True)
class StrikeQuotes:
    strike: float
    ce: OptionQuote | None = None
    pe: OptionQuote | None = None

    @property
    def call(self) -> OptionQuote:
        return self.ce if self.ce is not None else EMPTY_QUOTE

    @property
    def put(self) -> OptionQuote:
        return self.pe if self.pe is not None else EMPTY_QUOTE

    @property
    def total_oi(self) -> float:
        return self.call.oi + self.put.oi


@dataclass(frozen=True)
class MarketSnapshot:
    """Immutable option-chain snapshot, one per poll."""

    spot_price: float
    atm_strike: float
    expiry: str
    timestamp: datetime
    options: Mapping[float, StrikeQuotes] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MarketSnapshot:
        """Build from the broker-style mapping ``{strike: {"CE": {...}, "PE": {...}}}``."""
        options: dict[float, StrikeQuotes] = {}
        for strike_key, legs in (data.get("options") or {}).items():
            strike = float(strike_key)
            legs = legs or {}
            options[strike] = StrikeQuotes(
                strike=strike,
                ce=OptionQuote.from_dict(legs.get("CE")),
                pe=OptionQuote.from_dict(legs.get("PE")),
            )
        return cls(
            spot_price=float(data.get("spot_price") or 0.0),
            atm_strike=float(data.get("atm_strike") or 0.0),
            expiry=str(data.get("expiry") or ""),
            timestamp=_parse_timestamp(data["timestamp"]),
            options=options,
        )

    def strike(self, strike: float) -> StrikeQuotes | None:
        return self.options.get(float(strike))

    def sorted_strikes(self) -> list[StrikeQuotes]:
        return [self.options[k] for k in sorted(self.options)]


@dataclass(frozen=True)
class MarketDataPoint:
    """ATM-centred projection of a snapshot."""

    timestamp: datetime
    spot_price: float
    volume: float = 0.0
    atm_call_oi: float = 0.0
    atm_put_oi: float = 0.0
    atm_call_iv: float = 0.0
    atm_put_iv: float = 0.0
    atm_call_volume: float = 0.0
    atm_put_volume: float = 0.0
    total_call_oi: float = 0.0
    total_put_oi: float = 0.0

    @property
    def total_oi(self) -> float:
        return self.total_call_oi + self.total_put_oi


# ── Detection output ──


@dataclass(frozen=True)
class Signal:
    """Scored signal produced by a pattern detector."""

    id: str
    direction: SignalDirection
    pattern: PatternType
    confidence: float
    timestamp: datetime
    spot_price: float
    message: str
    details: Mapping[str, Any] = field(default_factory=dict)
    strength: SignalStrength = SignalStrength.MODERATE
    priority: SignalPriority = SignalPriority.MEDIUM
    actionable: bool = True


@dataclass(frozen=True)
class SignalSummary:
    total_signals: int = 0
    bullish_signals: int = 0
    bearish_signals: int = 0
    strong_signals: int = 0
    high_priority_signals: int = 0
    overall_bias: Bias = Bias.NEUTRAL
    confidence_score: float = 0.0


@dataclass(frozen=True)
class KeyLevels:
    support: float | None = None
    resistance: float | None = None
    vwap: float | None = None
    max_pain: float | None = None


@dataclass(frozen=True)
class MarketState:
    current_trend: Trend = Trend.SIDEWAYS
    volatility_level: VolatilityLevel = VolatilityLevel.MEDIUM
    volume_profile: VolumeProfile = VolumeProfile.NORMAL
    key_levels: KeyLevels = field(default_factory=KeyLevels)


@dataclass(frozen=True)
class AnalysisResult:
    signals: tuple[Signal, ...] = ()
    summary: SignalSummary = field(default_factory=SignalSummary)
    market_state: MarketState = field(default_factory=MarketState)
    analyzed_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return to_dict(self)


# ── Analytics output ──


@dataclass(frozen=True)
class IVSkewMetrics:
    atm_iv: float = 0.0
    call_skew: tuple[float, float, float] = (0.0, 0.0, 0.0)  # ATM+1, +2, +3
    put_skew: tuple[float, float, float] = (0.0, 0.0, 0.0)   # ATM-1, -2, -3
    overall_skew: float = 0.0
    skew_velocity: float = 0.0


@dataclass(frozen=True)
class GreeksData:
    strike: float
    call_gamma: float
    put_gamma: float
    call_delta: float
    put_delta: float
    net_gamma: float
    gamma_exposure: float


@dataclass(frozen=True)
class GEXMetrics:
    total_gex: float = 0.0
    zero_gamma_level: float = 0.0
    max_pain_level: float = 0.0
    gamma_by_strike: tuple[GreeksData, ...] = ()
    dominant_gamma_zone: GammaZone = GammaZone.NEUTRAL


@dataclass(frozen=True)
class OICluster:
    center_strike: float
    total_oi: float
    strikes: tuple[float, ...]
    strength: float
    type: ClusterType


@dataclass(frozen=True)
class ClusterMigration:
    previous_center: float
    current_center: float
    migration_distance: float
    migration_strength: float


@dataclass(frozen=True)
class OIClusterMetrics:
    clusters: tuple[OICluster, ...] = ()
    cluster_migration: ClusterMigration | None = None
    cluster_break_alert: bool = True


@dataclass(frozen=True)
class PatternMetrics:
    motif_detected: bool = False
    discord_detected: bool = False
    pattern_type: str = "normal"
    confidence: float = 0.0


@dataclass(frozen=True)
class AdvancedMetrics:
    iv_skew: IVSkewMetrics
    gex: GEXMetrics
    oi_clusters: OIClusterMetrics
    patterns: PatternMetrics
    timestamp: datetime | None = None

    @classmethod
    def empty(cls, timestamp: datetime | None = None) -> AdvancedMetrics:
        """Neutral metrics used when a cycle's analytics fail."""
        return cls(
            iv_skew=IVSkewMetrics(),
            gex=GEXMetrics(),
            oi_clusters=OIClusterMetrics(),
            patterns=PatternMetrics(pattern_type="error"),
            timestamp=timestamp,
        )

    def to_dict(self) -> dict[str, Any]:
        return to_dict(self)
