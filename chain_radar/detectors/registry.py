"""Detector registry — the ordered list the engine runs every cycle."""

from __future__ import annotations

from typing import Callable, Iterable

from chain_radar.detectors.base import PatternDetector
from chain_radar.detectors.first_hour_breakout import FirstHourBreakoutDetector
from chain_radar.detectors.iv_crush import IVCrushDetector
from chain_radar.detectors.key_level_volume import KeyLevelVolumeDetector
from chain_radar.detectors.max_pain_shift import MaxPainShiftDetector
from chain_radar.detectors.oi_divergence import OIPriceDivergenceDetector
from chain_radar.detectors.vwap_breakout import VWAPBreakoutDetector
from chain_radar.detectors.writing_imbalance import WritingImbalanceDetector


def default_detectors() -> list[PatternDetector]:
    """All seven detectors in evaluation order."""
    return [
        WritingImbalanceDetector(),
        VWAPBreakoutDetector(),
        OIPriceDivergenceDetector(),
        FirstHourBreakoutDetector(),
        MaxPainShiftDetector(),
        IVCrushDetector(),
        KeyLevelVolumeDetector(),
    ]


def enabled_detectors(
    is_enabled: Callable[[str], bool],
    detectors: Iterable[PatternDetector] | None = None,
) -> list[PatternDetector]:
    """Filter detectors by their feature toggle (e.g. ConfigManager.is_toggle_enabled)."""
    candidates = default_detectors() if detectors is None else list(detectors)
    return [d for d in candidates if is_enabled(d.toggle_id)]
