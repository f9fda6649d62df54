"""
Logging configuration for the application.

Library modules only call get_logger(); setup_logging() is called once by
the application entry point.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from .paths import get_log_file_path, get_old_log_file_path


DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def rotate_log_files(log_file: Path, old_log_file: Path) -> None:
    """
    Keep one previous generation of the log file.

    The current log is renamed to the old log name, replacing any older copy.
    Failures are reported on stderr and do not stop logging setup.
    """
    if not log_file.exists():
        return

    try:
        if old_log_file.exists():
            old_log_file.unlink()
        log_file.rename(old_log_file)
    except OSError as e:
        print(f"Warning: Could not rotate log file {log_file}: {e}", file=sys.stderr)


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
    log_to_file: bool = True
) -> None:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (e.g., logging.DEBUG, logging.INFO).
        log_file: Log file path. Defaults to log.txt in the persistent data
            directory, whose previous content is rotated to log.old.txt.
        format_string: Optional custom format string for log messages.
        log_to_file: Whether to log to a file in addition to stdout.
    """
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)
    handlers: list[logging.Handler] = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_to_file:
        if log_file is None:
            log_file = get_log_file_path()
            rotate_log_files(log_file, get_old_log_file_path())
        else:
            rotate_log_files(log_file, log_file.with_name(f"{log_file.stem}.old{log_file.suffix}"))

        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8', mode='w')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__).

    Returns:
        A logger instance.
    """
    return logging.getLogger(name)
