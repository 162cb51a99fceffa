"""
Application settings for reqtree.

AppSettings opens the QSettings store for one profile and composes the
subsystems. The values the GUI reads most are forwarded as plain attributes,
so ``settings.max_depth`` and ``settings.editor.max_depth`` are the same value.
"""

import logging
from pathlib import Path
from typing import Any, Union

from PySide6.QtCore import QSettings
from PySide6.QtWidgets import QMainWindow

from .editor import EditorSettings
from .logging import LoggingSettings
from .migration import SettingsMigrator
from .paths import PathSettings
from .section import SettingsSection
from .types import ConfigError, ConfigVersion, ValidationResult
from .ui import UISettings
from .validation import SettingsValidator

logger = logging.getLogger(__name__)

ORGANIZATION = "reqtree"
APPLICATION = "reqtree"


def _forward(section: str, name: str, writable: bool = True) -> property:
    """Property reading (and writing) ``self.<section>.<name>``."""

    def getter(self: "AppSettings") -> Any:
        return getattr(getattr(self, section), name)

    def setter(self: "AppSettings", value: Any) -> None:
        setattr(getattr(self, section), name, value)

    doc = f"Shortcut for {section}.{name}."
    return property(getter, setter if writable else None, doc=doc)


class AppSettings(SettingsSection):
    """
    Configuration of one profile.

    Keys are stored as ``<profile>/<subsystem>/<name>``; tests use their own
    profile and clear it afterwards.
    """

    prefix = "app"

    def __init__(self, profile: str = "default"):
        store = QSettings(ORGANIZATION, APPLICATION)
        if store.status() == QSettings.Status.AccessError:
            raise ConfigError(f"Cannot access settings storage: {store.fileName()}")
        super().__init__(store)
        self.profile = profile
        store.beginGroup(profile)

        self.paths = PathSettings(store)
        self.ui = UISettings(store)
        self.editor = EditorSettings(store)
        self.logging = LoggingSettings(store)

        SettingsMigrator(store).ensure_version()
        self._validator = SettingsValidator(self)

        logger.debug(f"Settings profile '{profile}' opened from {store.fileName()}")

    # === APP ===

    @property
    def is_first_run(self) -> bool:
        return self._get_bool("first_run", True)

    def set_first_run_complete(self) -> None:
        self._store("first_run", False)

    @property
    def version(self) -> str:
        """Stored configuration version."""
        return self._get_str("version", ConfigVersion.CURRENT.value)

    # === FORWARDED VALUES ===

    reference_data_path = _forward("paths", "reference_data_path")
    last_document_dir = _forward("paths", "last_document_dir", writable=False)
    recent_files = _forward("paths", "recent_files", writable=False)

    max_depth = _forward("editor", "max_depth")
    indent_size = _forward("editor", "indent_size")
    auto_expand = _forward("editor", "auto_expand")
    show_preview = _forward("editor", "show_preview")

    console_logging = _forward("logging", "console_logging")
    console_log_level = _forward("logging", "console_log_level")
    console_use_colors = _forward("logging", "console_use_colors")
    file_logging = _forward("logging", "file_logging")
    file_log_level = _forward("logging", "file_log_level")
    engine_log_level = _forward("logging", "engine_log_level")
    log_file_path = _forward("logging", "log_file_path", writable=False)
    log_file_absolute_path = _forward("logging", "log_file_absolute_path", writable=False)

    def add_recent_file(self, file_path: Union[str, Path]) -> None:
        self.paths.add_recent_file(file_path)

    def clear_recent_files(self) -> None:
        self.paths.clear_recent_files()

    def save_window_geometry(self, window: QMainWindow) -> None:
        self.ui.save_window_geometry(window)

    def restore_window_geometry(self, window: QMainWindow) -> bool:
        return self.ui.restore_window_geometry(window)

    # === STORE ===

    def validate(self) -> ValidationResult:
        return self._validator.validate()

    def get_settings_file_path(self) -> str:
        return self.settings.fileName()

    def clear(self) -> None:
        """Remove every key of this profile."""
        self.settings.remove("")
        self.settings.sync()

    def sync(self) -> None:
        self.settings.sync()

