"""
Logging-related settings for reqtree.
"""

import logging
from pathlib import Path

from .section import SettingsSection

logger = logging.getLogger(__name__)

# Relative to the working directory
LOG_FILE_PATH = "logs/reqtree.csv"

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Logger namespace of the condition engine, which logs every dropped stale value at DEBUG
ENGINE_LOGGER = "reqtree.conditions"


class LoggingSettings(SettingsSection):
    """Console and CSV file handlers plus the condition engine level."""

    prefix = "logging"

    def _get_level(self, name: str, default: str) -> str:
        level = self._get_str(name, default).upper()
        return level if level in VALID_LEVELS else default

    def _set_level(self, name: str, value: str) -> None:
        level = value.upper()
        if level not in VALID_LEVELS:
            logger.warning(
                f"Invalid log level '{value}' for {self.key(name)}, "
                f"keeping {self._get_str(name) or 'default'}"
            )
            return
        self._store(name, level)

    # === CONSOLE ===

    @property
    def console_logging(self) -> bool:
        return self._get_bool("console_enabled", True)

    @console_logging.setter
    def console_logging(self, value: bool) -> None:
        self._store("console_enabled", value)

    @property
    def console_log_level(self) -> str:
        return self._get_level("console_level", "INFO")

    @console_log_level.setter
    def console_log_level(self, value: str) -> None:
        self._set_level("console_level", value)

    @property
    def console_use_colors(self) -> bool:
        """Color level names with ANSI codes."""
        return self._get_bool("console_use_colors", True)

    @console_use_colors.setter
    def console_use_colors(self, value: bool) -> None:
        self._store("console_use_colors", value)

    # === FILE ===

    @property
    def file_logging(self) -> bool:
        return self._get_bool("file_enabled", False)

    @file_logging.setter
    def file_logging(self, value: bool) -> None:
        self._store("file_enabled", value)

    @property
    def file_log_level(self) -> str:
        return self._get_level("file_level", "DEBUG")

    @file_log_level.setter
    def file_log_level(self, value: str) -> None:
        self._set_level("file_level", value)

    @property
    def log_file_path(self) -> str:
        """Log file location (fixed)."""
        return LOG_FILE_PATH

    @property
    def log_file_absolute_path(self) -> Path:
        return Path(LOG_FILE_PATH).resolve()

    # === CONDITION ENGINE ===

    @property
    def engine_log_level(self) -> str:
        """Level of the condition engine loggers, independent of the handlers."""
        return self._get_level("engine_level", "INFO")

    @engine_log_level.setter
    def engine_log_level(self, value: str) -> None:
        self._set_level("engine_level", value)
