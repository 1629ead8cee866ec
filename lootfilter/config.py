"""
Configuration management for the loot filter rarity extractor.
Handles the rarity source selection, database location and logging flags.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Where card rarities come from
RARITY_SOURCE_POE_NINJA = "poe.ninja"
RARITY_SOURCE_FILTER = "filter"
RARITY_SOURCE_PROHIBITED_LIBRARY = "prohibited-library"

VALID_RARITY_SOURCES = (
    RARITY_SOURCE_POE_NINJA,
    RARITY_SOURCE_FILTER,
    RARITY_SOURCE_PROHIBITED_LIBRARY,
)


def get_config_dir() -> Path:
    """
    Get the application config directory.

    Returns:
        Path to the config directory (~/.poe_filter_rarity/)
    """
    config_dir = Path.home() / ".poe_filter_rarity"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


class Config:
    """
    Application configuration with JSON persistence.

    The backing store is a JSON file on disk. Missing keys are filled from
    DEFAULT_CONFIG so older files keep working when new settings appear.
    """

    # NOTE: This structure is treated as immutable. Always use
    # _default_config_deepcopy() when you need a fresh copy of defaults.
    DEFAULT_CONFIG: Dict[str, Any] = {
        "rarity": {
            # "poe.ninja" (price-derived), "filter", or "prohibited-library"
            "source": RARITY_SOURCE_POE_NINJA,
            # Filter id (see lootfilter.filter_header.generate_filter_id)
            "selected_filter_id": None,
        },
        "database": {
            # None = ~/.poe_filter_rarity/data.db
            "path": None,
        },
        "logging": {
            "debug": False,
        },
    }

    def __init__(self, config_file: Optional[Path] = None) -> None:
        """
        Initialize configuration.

        Args:
            config_file: Optional path to config JSON file. When omitted,
                         ~/.poe_filter_rarity/config.json is used.
        """
        self.config_file: Path = self._resolve_config_path(config_file)
        self.config_file.parent.mkdir(parents=True, exist_ok=True)

        self.data: Dict[str, Any] = self._load()
        logger.info(f"Config loaded from {self.config_file}")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve_config_path(config_file: Optional[Path]) -> Path:
        if config_file is not None:
            return config_file
        return get_config_dir() / "config.json"

    def _load(self) -> Dict[str, Any]:
        """Load configuration from JSON file, merging with defaults."""
        if not self.config_file.exists():
            logger.info("No config file found, using defaults")
            return self._default_config_deepcopy()

        try:
            with self.config_file.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as exc:
            logger.error(f"Failed to load config: {exc}. Using defaults.")
            return self._default_config_deepcopy()

        if not isinstance(raw, dict):
            logger.error("Config file is not a JSON object. Using defaults.")
            return self._default_config_deepcopy()

        return self._merge_with_defaults(raw)

    @classmethod
    def _default_config_deepcopy(cls) -> Dict[str, Any]:
        return copy.deepcopy(cls.DEFAULT_CONFIG)

    def _merge_with_defaults(self, user_config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge user config with defaults.

        Nested sections are merged key by key so new default keys appear
        without discarding user-provided values.
        """
        merged = self._default_config_deepcopy()

        for key, value in user_config.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key].update(value)
            else:
                merged[key] = value

        return merged

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> None:
        """Persist the current configuration to the config file."""
        try:
            with self.config_file.open("w", encoding="utf-8") as f:
                json.dump(self.data, f, indent=2, ensure_ascii=False)
            logger.info("Configuration saved")
        except OSError as exc:
            logger.error(f"Failed to save config: {exc}")

    def reset_to_defaults(self) -> None:
        """Reset all settings to defaults and persist."""
        self.data = self._default_config_deepcopy()
        self.save()

    # ------------------------------------------------------------------
    # Rarity source
    # ------------------------------------------------------------------

    @property
    def rarity_source(self) -> str:
        source = self.data["rarity"].get("source", RARITY_SOURCE_POE_NINJA)
        if source not in VALID_RARITY_SOURCES:
            return RARITY_SOURCE_POE_NINJA
        return source

    @rarity_source.setter
    def rarity_source(self, value: str) -> None:
        if value not in VALID_RARITY_SOURCES:
            raise ValueError(f"Invalid rarity source: {value}")
        self.data["rarity"]["source"] = value
        self.save()

    @property
    def selected_filter_id(self) -> Optional[str]:
        return self.data["rarity"].get("selected_filter_id")

    @selected_filter_id.setter
    def selected_filter_id(self, value: Optional[str]) -> None:
        self.data["rarity"]["selected_filter_id"] = value
        self.save()

    # ------------------------------------------------------------------
    # Database / logging
    # ------------------------------------------------------------------

    @property
    def database_path(self) -> Optional[Path]:
        """Configured database file, or None for the default location."""
        raw = self.data["database"].get("path")
        return Path(raw) if raw else None

    @database_path.setter
    def database_path(self, value: Optional[Path]) -> None:
        self.data["database"]["path"] = str(value) if value else None
        self.save()

    @property
    def debug_logging(self) -> bool:
        return bool(self.data["logging"].get("debug", False))

    @debug_logging.setter
    def debug_logging(self, enabled: bool) -> None:
        self.data["logging"]["debug"] = bool(enabled)
        self.save()
