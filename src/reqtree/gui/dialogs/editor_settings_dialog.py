"""
Editor settings dialog for reqtree.
"""

from typing import Optional

from PySide6.QtWidgets import QCheckBox, QFormLayout, QLabel, QSpinBox, QVBoxLayout, QWidget

from ...settings import AppSettings
from ...settings.editor import INDENT_SIZE_RANGE, MAX_DEPTH_RANGE
from .base_dialog import BaseDialog


class EditorSettingsDialog(BaseDialog):
    """Depth limit, indentation, expansion and preview."""

    def __init__(self, settings: AppSettings, parent: Optional[QWidget] = None):
        super().__init__("Editor Settings", parent)
        self.settings = settings

        layout = QVBoxLayout(self)
        form = QFormLayout()

        self.max_depth_spinbox = QSpinBox()
        self.max_depth_spinbox.setRange(*MAX_DEPTH_RANGE)
        self.max_depth_spinbox.setValue(settings.max_depth)
        self.max_depth_spinbox.setToolTip("Deepest nesting level where conditions can be added")
        form.addRow("Maximum nesting depth:", self.max_depth_spinbox)

        self.indent_spinbox = QSpinBox()
        self.indent_spinbox.setRange(*INDENT_SIZE_RANGE)
        self.indent_spinbox.setSuffix(" px")
        self.indent_spinbox.setValue(settings.indent_size)
        form.addRow("Indent per level:", self.indent_spinbox)

        self.auto_expand_check = QCheckBox("Expand loaded condition trees")
        self.auto_expand_check.setChecked(settings.auto_expand)
        form.addRow(self.auto_expand_check)

        self.show_preview_check = QCheckBox("Show JSON preview")
        self.show_preview_check.setChecked(settings.show_preview)
        form.addRow(self.show_preview_check)

        note = QLabel("The depth limit applies to documents opened afterwards.")
        note.setWordWrap(True)
        form.addRow(note)

        layout.addLayout(form)
        self.add_button_box(layout)

    def apply(self) -> None:
        self.settings.max_depth = self.max_depth_spinbox.value()
        self.settings.indent_size = self.indent_spinbox.value()
        self.settings.auto_expand = self.auto_expand_check.isChecked()
        self.settings.show_preview = self.show_preview_check.isChecked()
