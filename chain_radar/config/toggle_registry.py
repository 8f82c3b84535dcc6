"""Toggle dependency tree for chain_radar feature toggles.

    D01..D07 — one toggle per pattern detector, no dependencies
    A01 → A02, A03, A04, A05  (analytics engine gates each analytics stage)

Rule: Parent OFF → all children forced OFF.
"""

from __future__ import annotations

# Maps toggle_id → list of parent toggle_ids that ALL must be ON.
TOGGLE_DEPENDENCIES: dict[str, list[str]] = {
    "A02": ["A01"],
    "A03": ["A01"],
    "A04": ["A01"],
    "A05": ["A01"],
}

# Map toggle IDs (e.g. "D01") to their TOML key paths
TOGGLE_KEY_MAP: dict[str, str] = {
    "D01": "toggles.detectors.D01_writing_imbalance",
    "D02": "toggles.detectors.D02_vwap_volume_breakout",
    "D03": "toggles.detectors.D03_oi_price_divergence",
    "D04": "toggles.detectors.D04_first_hour_breakout",
    "D05": "toggles.detectors.D05_max_pain_shift",
    "D06": "toggles.detectors.D06_iv_crush_breakout",
    "D07": "toggles.detectors.D07_volume_spike_key_levels",
    "A01": "toggles.analytics.A01_analytics_engine",
    "A02": "toggles.analytics.A02_iv_skew",
    "A03": "toggles.analytics.A03_gamma_exposure",
    "A04": "toggles.analytics.A04_oi_clustering",
    "A05": "toggles.analytics.A05_motif_discord",
}


class ToggleRegistry:
    """Evaluates toggle states respecting dependency chains."""

    def __init__(self, config_getter, default: bool = True):
        """
        Args:
            config_getter: Callable that takes a dotted key and returns the value.
            default: State of a toggle whose key is absent from the config.
        """
        self._get = config_getter
        self._default = default

    def is_enabled(self, toggle_id: str) -> bool:
        """Check if a toggle is enabled, respecting the dependency chain."""
        key = TOGGLE_KEY_MAP.get(toggle_id)
        if key is None:
            return False
        if not self._get(key, self._default):
            return False

        # AND logic: all parents must be ON
        for parent_id in TOGGLE_DEPENDENCIES.get(toggle_id, []):
            if not self.is_enabled(parent_id):
                return False

        return True

    def enabled_ids(self, prefix: str = "") -> list[str]:
        return [tid for tid in TOGGLE_KEY_MAP if tid.startswith(prefix) and self.is_enabled(tid)]

    def validate(self) -> list[str]:
        """Return list of validation errors (empty = valid)."""
        errors = []
        for toggle_id, key in TOGGLE_KEY_MAP.items():
            val = self._get(key, None)
            if val is not None and not isinstance(val, bool):
                errors.append(f"{toggle_id} ({key}): expected bool, got {type(val).__name__}")

        # Orphan children enabled without parent
        for child_id, parent_ids in TOGGLE_DEPENDENCIES.items():
            if self._get(TOGGLE_KEY_MAP[child_id], self._default):
                for parent_id in parent_ids:
                    if not self._get(TOGGLE_KEY_MAP[parent_id], self._default):
                        errors.append(
                            f"{child_id} is ON but parent {parent_id} is OFF "
                            f"(will be forced OFF at runtime)"
                        )
        return errors
