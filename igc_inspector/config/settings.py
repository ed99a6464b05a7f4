"""
Settings for IGC Inspector.
These are configurable parameters that can be changed by the user.
"""

import os
import json
import logging
from typing import Dict, Any

from .constants import (
    MAX_VALID_SPEED_KMH,
    DEFAULT_PROXIMITY_RADIUS_METERS,
)

logger = logging.getLogger("igc_inspector.settings")


class Settings:
    """
    Application settings that can be loaded from and saved to a configuration file.
    Uses a singleton pattern to ensure only one settings instance exists.
    """
    _instance = None

    DEFAULTS: Dict[str, Any] = {
        # Parsing
        "max_valid_speed_kmh": MAX_VALID_SPEED_KMH,
        "proximity_radius_m": DEFAULT_PROXIMITY_RADIUS_METERS,
        "include_raw": False,

        # Output
        "output_directory": ".",
        "json_indent": 2,
        "log_level": "INFO",
    }

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Settings, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._settings = dict(self.DEFAULTS)

        # Load settings from file if it exists
        self._config_dir = self._get_config_dir()
        self._config_file = os.path.join(self._config_dir, "settings.json")
        self._load_settings()

        self._initialized = True

    @staticmethod
    def _get_config_dir() -> str:
        """Get the configuration directory for the application"""
        override = os.environ.get('IGC_INSPECTOR_CONFIG_DIR')
        if override:
            return override

        # Use platform-specific config locations
        if os.name == 'nt':  # Windows
            return os.path.join(os.environ.get('APPDATA', ''), 'IGCInspector')
        home_dir = os.path.expanduser("~")
        return os.path.join(home_dir, '.config', 'igc-inspector')

    @property
    def config_file(self) -> str:
        return self._config_file

    def _load_settings(self) -> None:
        """Load settings from the configuration file"""
        if not os.path.exists(self._config_file):
            logger.debug("No settings file found, using defaults")
            return
        try:
            with open(self._config_file, 'r') as f:
                loaded_settings = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error loading settings from {self._config_file}: {e}")
            return
        if not isinstance(loaded_settings, dict):
            logger.error(f"Ignoring settings file {self._config_file}: not a JSON object")
            return
        self._settings.update(loaded_settings)
        logger.debug(f"Settings loaded from {self._config_file}")

    def load_from(self, config_file: str) -> None:
        """
        Point the settings at another file and merge its values over the current ones.

        Args:
            config_file: Path to a JSON settings file
        """
        self._config_file = config_file
        self._config_dir = os.path.dirname(config_file)
        self._load_settings()

    def save_settings(self) -> bool:
        """Save current settings to the configuration file"""
        try:
            if self._config_dir:
                os.makedirs(self._config_dir, exist_ok=True)
            with open(self._config_file, 'w') as f:
                json.dump(self._settings, f, indent=4)
            logger.info(f"Settings saved to {self._config_file}")
            return True
        except OSError as e:
            logger.error(f"Error saving settings: {e}")
            return False

    def get(self, key: str, default: Any = None) -> Any:
        """Get a setting value by key"""
        return self._settings.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a setting value by key"""
        self._settings[key] = value

    def get_all(self) -> Dict[str, Any]:
        """Get all settings as a dictionary"""
        return self._settings.copy()

    def reset_to_defaults(self) -> None:
        """Reset all settings to their default values"""
        self._settings = dict(self.DEFAULTS)
        logger.info("Settings reset to defaults")


# Create a global settings instance
settings = Settings()
