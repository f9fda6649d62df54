"""
Application settings and configuration.

Settings are stored as JSON in the persistent data directory (see
formbind.infrastructure.paths) and are read by the demo application only;
the binding core takes its options as plain arguments.

Example:
    from formbind.config.settings import get_settings, get_settings_manager

    settings = get_settings()
    print(settings.buffered_by_default)

    # Update settings (auto-saves)
    get_settings_manager().update(theme="light_teal.xml")
"""

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Optional

from ..infrastructure.paths import get_settings_file_path


@dataclass
class AppSettings:
    """Application-wide settings."""

    # Logging settings
    log_level: int = logging.INFO
    log_to_file: bool = True
    log_file_path: Optional[Path] = None  # None = log.txt in the data directory

    # UI settings
    theme: str = "dark_teal.xml"  # Any qt_material theme file name
    window_width: int = 480
    window_height: int = 360

    # Binding defaults
    buffered_by_default: bool = True


class SettingsManager:
    """
    Manages loading and saving application settings.
    """

    def __init__(self, config_file: Optional[Path] = None):
        """
        Initialize the settings manager.

        Args:
            config_file: Path to configuration file. If None, uses default location.
        """
        self.config_file = config_file if config_file is not None else get_settings_file_path()
        self._settings = AppSettings()
        self._logger = logging.getLogger(__name__)

    def load(self) -> AppSettings:
        """
        Load settings from the configuration file.

        Unknown keys are ignored; a missing or unreadable file leaves the
        defaults in place.

        Returns:
            The loaded settings object.
        """
        if not self.config_file.exists():
            self._logger.info(f"Settings file not found at {self.config_file}, using defaults")
            return self._settings

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            self._logger.error(f"Failed to parse settings file: {e}. Using defaults.")
            return self._settings
        except OSError as e:
            self._logger.error(f"Failed to read settings file: {e}. Using defaults.")
            return self._settings

        if data.get('log_file_path'):
            data['log_file_path'] = Path(data['log_file_path'])

        known = {f.name for f in fields(AppSettings)}
        for key, value in data.items():
            if key in known:
                setattr(self._settings, key, value)

        self._logger.info(f"Settings loaded from {self.config_file}")
        return self._settings

    def save(self, settings: Optional[AppSettings] = None) -> None:
        """
        Save settings to the configuration file.

        Args:
            settings: Settings object to save. If None, saves current settings.
        """
        if settings is not None:
            self._settings = settings

        data = asdict(self._settings)
        if data.get('log_file_path'):
            data['log_file_path'] = Path(data['log_file_path']).as_posix()

        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)

            # Atomic write: write to temp file, then rename
            temp_file = self.config_file.with_suffix('.tmp')
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_file.replace(self.config_file)

            self._logger.info(f"Settings saved to {self.config_file}")
        except OSError as e:
            self._logger.error(f"Failed to save settings: {e}")

    def get(self) -> AppSettings:
        """Get the current settings."""
        return self._settings

    def update(self, **kwargs) -> None:
        """
        Update specific settings and auto-save.

        Args:
            **kwargs: Setting names and values to update.
        """
        for key, value in kwargs.items():
            if hasattr(self._settings, key):
                setattr(self._settings, key, value)
            else:
                self._logger.warning(f"Ignoring unknown setting: {key}")

        self.save()

    def reset_to_defaults(self) -> None:
        """Reset all settings to their default values and save."""
        self._settings = AppSettings()
        self.save()


# Global settings instance
_settings_manager: Optional[SettingsManager] = None


def get_settings_manager() -> SettingsManager:
    """
    Get the global settings manager instance, loading it on first use.
    """
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager()
        _settings_manager.load()
    return _settings_manager


def get_settings() -> AppSettings:
    """Get the current application settings."""
    return get_settings_manager().get()
