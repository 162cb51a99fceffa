"""
Logging settings dialog for reqtree.

Changes are applied right away by re-running setup_logging.
"""

from typing import Optional

from PySide6.QtCore import QUrl
from PySide6.QtGui import QDesktopServices
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ...settings import AppSettings
from ...settings.logging import VALID_LEVELS
from ...utils.logging_config import setup_logging
from .base_dialog import BaseDialog


def _level_combo(current: str) -> QComboBox:
    combo = QComboBox()
    combo.addItems(list(VALID_LEVELS))
    combo.setCurrentText(current)
    return combo


class LoggingSettingsDialog(BaseDialog):
    """Console, CSV file and condition engine log levels."""

    def __init__(self, settings: AppSettings, parent: Optional[QWidget] = None):
        super().__init__("Logging Settings", parent)
        self.settings = settings

        layout = QVBoxLayout(self)

        console_group = QGroupBox("Console")
        console_form = QFormLayout(console_group)
        self.console_enabled_check = QCheckBox("Log to the console")
        self.console_enabled_check.setChecked(settings.console_logging)
        console_form.addRow(self.console_enabled_check)
        self.console_level_combo = _level_combo(settings.console_log_level)
        console_form.addRow("Level:", self.console_level_combo)
        self.console_colors_check = QCheckBox("Color level names")
        self.console_colors_check.setChecked(settings.console_use_colors)
        console_form.addRow(self.console_colors_check)
        layout.addWidget(console_group)

        file_group = QGroupBox("CSV file")
        file_form = QFormLayout(file_group)
        self.file_enabled_check = QCheckBox("Log to a rotating CSV file")
        self.file_enabled_check.setChecked(settings.file_logging)
        file_form.addRow(self.file_enabled_check)
        self.file_level_combo = _level_combo(settings.file_log_level)
        file_form.addRow("Level:", self.file_level_combo)

        path_row = QHBoxLayout()
        path_field = QLineEdit(str(settings.log_file_absolute_path))
        path_field.setReadOnly(True)
        path_row.addWidget(path_field)
        open_button = QPushButton("Open Folder")
        open_button.clicked.connect(self._open_log_folder)
        path_row.addWidget(open_button)
        file_form.addRow("File:", path_row)
        layout.addWidget(file_group)

        engine_group = QGroupBox("Condition engine")
        engine_form = QFormLayout(engine_group)
        self.engine_level_combo = _level_combo(settings.engine_log_level)
        self.engine_level_combo.setToolTip(
            "DEBUG lists every stale reference value dropped after reloading data"
        )
        engine_form.addRow("Level:", self.engine_level_combo)
        layout.addWidget(engine_group)

        self.add_button_box(layout)

    def apply(self) -> None:
        self.settings.console_logging = self.console_enabled_check.isChecked()
        self.settings.console_log_level = self.console_level_combo.currentText()
        self.settings.console_use_colors = self.console_colors_check.isChecked()
        self.settings.file_logging = self.file_enabled_check.isChecked()
        self.settings.file_log_level = self.file_level_combo.currentText()
        self.settings.engine_log_level = self.engine_level_combo.currentText()
        setup_logging(self.settings)

    def _open_log_folder(self) -> None:
        folder = self.settings.log_file_absolute_path.parent
        folder.mkdir(parents=True, exist_ok=True)
        if not QDesktopServices.openUrl(QUrl.fromLocalFile(str(folder))):
            self.logger.error(f"Failed to open log folder {folder}")
