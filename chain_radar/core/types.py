"""Core enums used across the chain_radar system."""

from enum import Enum


class SignalDirection(Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"


class PatternType(Enum):
    CALL_PUT_WRITING_IMBALANCE = "CALL_PUT_WRITING_IMBALANCE"
    VWAP_VOLUME_BREAKOUT = "VWAP_VOLUME_BREAKOUT"
    OI_PRICE_DIVERGENCE = "OI_PRICE_DIVERGENCE"
    FIRST_HOUR_BREAKOUT = "FIRST_HOUR_BREAKOUT"
    MAX_PAIN_SHIFT = "MAX_PAIN_SHIFT"
    IV_CRUSH_BREAKOUT = "IV_CRUSH_BREAKOUT"
    VOLUME_SPIKE_KEY_LEVELS = "VOLUME_SPIKE_KEY_LEVELS"


class SignalStrength(Enum):
    WEAK = "WEAK"
    MODERATE = "MODERATE"
    STRONG = "STRONG"


class SignalPriority(Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Bias(Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"


class Trend(Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    SIDEWAYS = "SIDEWAYS"


class VolatilityLevel(Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class VolumeProfile(Enum):
    HIGH = "HIGH"
    NORMAL = "NORMAL"
    LOW = "LOW"


class LevelType(Enum):
    ROUND_NUMBER = "ROUND_NUMBER"
    SUPPORT = "SUPPORT"
    RESISTANCE = "RESISTANCE"


class OptionType(Enum):
    CALL = "call"
    PUT = "put"


class GammaZone(Enum):
    LONG = "long"
    SHORT = "short"
    NEUTRAL = "neutral"


class ClusterType(Enum):
    CALL_HEAVY = "call_heavy"
    PUT_HEAVY = "put_heavy"
    BALANCED = "balanced"


class MarketStatus(Enum):
    PRE_MARKET = "PRE_MARKET"
    OPEN = "OPEN"
    POST_MARKET = "POST_MARKET"
    CLOSED = "CLOSED"
