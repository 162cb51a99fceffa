"""
Startup validation of the stored configuration.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from .editor import MAX_DEPTH_RANGE
from .types import ValidationResult

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)


class SettingsValidator:
    """Checks the reference data file, editor ranges and recent documents."""

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        result = ValidationResult()
        self._check_reference_data(result)
        self._check_depth(result)
        self._prune_recent_files(result)

        for warning in result.warnings:
            logger.debug(f"Settings warning: {warning}")
        return result

    def _check_reference_data(self, result: ValidationResult) -> None:
        reference = self.settings.reference_data_path
        if reference is None:
            result.warn("Reference data file not set, reference lists will be empty")
        elif not reference.exists():
            # a moved file is picked again through the Data menu
            result.warn(f"Reference data file does not exist: {reference}")
        elif not reference.is_file():
            result.error(f"Reference data path is not a file: {reference}")

    def _check_depth(self, result: ValidationResult) -> None:
        stored = self.settings.editor.stored_max_depth
        if stored is None:
            return
        low, high = MAX_DEPTH_RANGE
        try:
            depth = int(str(stored))
        except ValueError:
            result.warn(f"Invalid maximum depth value: {stored}")
            return
        if not low <= depth <= high:
            result.warn(f"Maximum depth {depth} outside {low}-{high}, clamped")

    def _prune_recent_files(self, result: ValidationResult) -> None:
        recent = self.settings.recent_files
        existing = [entry for entry in recent if Path(entry).exists()]
        for missing in sorted(set(recent) - set(existing)):
            result.warn(f"Recent file no longer exists: {missing}")
        if len(existing) != len(recent):
            self.settings.paths.set_recent_files(existing)
