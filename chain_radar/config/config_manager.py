"""ConfigManager — 3-layer TOML config with deep merge, dot-notation access, and toggle support."""

from __future__ import annotations

import copy
import logging
import sys
from pathlib import Path
from typing import Any

from chain_radar.config.toggle_registry import ToggleRegistry

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "chain_radar_base.toml"


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge override into base (last wins). Returns new dict."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _get_nested(d: dict, dotted_key: str, default: Any = None) -> Any:
    """Get a value from a nested dict using dot notation."""
    current = d
    for part in dotted_key.split("."):
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            return default
    return current


class ConfigManager:
    """Singleton config manager with 3-layer TOML merge and toggle support.

    Merge order (last wins): base → profile → instrument
    """

    _instance: ConfigManager | None = None

    def __new__(cls) -> ConfigManager:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        if self._initialized:
            return
        self._config: dict[str, Any] = {}
        self._base_path: Path | None = None
        self._profile: str | None = None
        self._instrument: str | None = None
        self._toggle_registry: ToggleRegistry | None = None
        self._initialized = True

    @classmethod
    def reset(cls) -> None:
        """Reset singleton (for testing)."""
        cls._instance = None

    def load(
        self,
        base_path: str | Path = DEFAULT_CONFIG_PATH,
        profile: str | None = None,
        instrument: str | None = None,
    ) -> None:
        """Load and merge config layers.

        Args:
            base_path: Path to chain_radar_base.toml
            profile: Index profile (e.g. 'banknifty') — loads profiles/profile_{name}.toml
            instrument: Per-expiry override — loads instruments/constants.{name}.toml
        """
        self._base_path = Path(base_path)
        self._profile = profile
        self._instrument = instrument

        # Layer 1: Base
        self._config = self._load_toml(self._base_path)

        # Layer 2: Profile override
        if profile:
            profile_path = self._base_path.parent / "profiles" / f"profile_{profile}.toml"
            if profile_path.exists():
                self._config = _deep_merge(self._config, self._load_toml(profile_path))
            else:
                logger.warning("Profile %s not found at %s", profile, profile_path)

        # Layer 3: Instrument override
        if instrument:
            instrument_path = (
                self._base_path.parent / "instruments" / f"constants.{instrument}.toml"
            )
            if instrument_path.exists():
                self._config = _deep_merge(self._config, self._load_toml(instrument_path))

        self._toggle_registry = ToggleRegistry(self.get)
        logger.info(
            "Config loaded from %s (profile=%s, instrument=%s, index=%s)",
            self._base_path, profile, instrument, self.get("system.index"),
        )

    def _load_toml(self, path: Path) -> dict[str, Any]:
        with open(path, "rb") as f:
            return tomllib.load(f)

    def get(self, dotted_key: str, default: Any = None) -> Any:
        """Get config value using dot notation. E.g. get('breakout.volume_multiplier')."""
        return _get_nested(self._config, dotted_key, default)

    def section(self, dotted_key: str) -> dict[str, Any]:
        """Copy of a config table, empty if missing."""
        value = self.get(dotted_key, {})
        return copy.deepcopy(value) if isinstance(value, dict) else {}

    def is_toggle_enabled(self, toggle_id: str) -> bool:
        """Check if a toggle is enabled, respecting the dependency chain."""
        if self._toggle_registry is None:
            raise RuntimeError("ConfigManager not loaded. Call load() first.")
        return self._toggle_registry.is_enabled(toggle_id)

    def validate_toggles(self) -> list[str]:
        """Return list of toggle validation errors."""
        if self._toggle_registry is None:
            raise RuntimeError("ConfigManager not loaded. Call load() first.")
        return self._toggle_registry.validate()

    def reload(self) -> None:
        """Re-read every layer from disk."""
        if self._base_path is not None:
            self.load(self._base_path, self._profile, self._instrument)

    @property
    def raw(self) -> dict[str, Any]:
        """Access the raw merged config dict."""
        return self._config
