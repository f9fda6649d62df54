"""
Path utilities.

This module resolves where formbind keeps its settings and log files.
"""

import os
import platform
from pathlib import Path


APP_NAME = "formbind"


def get_persistent_data_directory() -> Path:
    """
    Get the persistent data directory for the application (cross-platform).

    The FORMBIND_DATA_DIR environment variable overrides the platform default.

    Returns:
        Path to the persistent data directory (created if missing).

    Platform-specific locations:
        - Windows: %APPDATA%/LocalLow/formbind
        - macOS: ~/Library/Application Support/formbind
        - Linux: ~/.config/formbind
    """
    override = os.environ.get("FORMBIND_DATA_DIR")
    if override:
        data_dir = Path(override)
    else:
        system = platform.system()
        if system == "Windows":
            base = Path.home() / "AppData" / "LocalLow"
        elif system == "Darwin":
            base = Path.home() / "Library" / "Application Support"
        else:
            base = Path.home() / ".config"
        data_dir = base / APP_NAME

    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_settings_file_path() -> Path:
    """Get the path to the settings.json file."""
    return get_persistent_data_directory() / "settings.json"


def get_log_file_path() -> Path:
    """Get the path to the current log file."""
    return get_persistent_data_directory() / "log.txt"


def get_old_log_file_path() -> Path:
    """Get the path to the log file of the previous session."""
    return get_persistent_data_directory() / "log.old.txt"
