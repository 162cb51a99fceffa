"""
Settings migration for reqtree.

Each step upgrades the stored keys by exactly one version; steps are chained
until the current version is reached.
"""

import logging
from typing import Callable, Dict, Tuple, TYPE_CHECKING

from .types import ConfigVersion

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)

VERSION_KEY = "app/version"


def _rename_reference_data_key(settings: "QSettings") -> None:
    """1.0 stored the startup reference file under paths/reference_data."""
    old_path = str(settings.value("paths/reference_data", "") or "")
    if not old_path:
        return
    if not settings.value("paths/reference_data_file", ""):
        settings.setValue("paths/reference_data_file", old_path)
        logger.info(f"Reference data path carried over: {old_path}")
    settings.remove("paths/reference_data")


MigrationStep = Tuple[str, Callable[["QSettings"], None]]

MIGRATIONS: Dict[str, MigrationStep] = {
    ConfigVersion.V1_0.value: (ConfigVersion.V1_1.value, _rename_reference_data_key),
}


class SettingsMigrator:
    """Brings a stored profile up to ConfigVersion.CURRENT."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def ensure_version(self) -> None:
        stored = str(self.settings.value(VERSION_KEY, "") or "")
        target = ConfigVersion.CURRENT.value

        if not stored:
            self.settings.setValue(VERSION_KEY, target)
            self.settings.setValue("app/first_run", True)
            self.settings.sync()
            logger.info("First run detected, configuration initialized")
            return
        if stored != target:
            self.migrate(stored, target)

    def migrate(self, from_version: str, to_version: str) -> None:
        logger.info(f"Migrating configuration from {from_version} to {to_version}")
        version = from_version
        while version != to_version:
            step = MIGRATIONS.get(version)
            if step is None:
                logger.warning(f"No migration from {version}, stored values kept as they are")
                break
            next_version, apply = step
            logger.debug(f"Applying settings migration {version} -> {next_version}")
            apply(self.settings)
            version = next_version

        self.settings.setValue(VERSION_KEY, to_version)
        self.settings.setValue("app/migrated_from", from_version)
        self.settings.sync()
