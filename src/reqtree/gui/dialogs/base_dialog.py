"""
Base class of the reqtree settings dialogs.
"""

import logging
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QShowEvent
from PySide6.QtWidgets import QDialog, QDialogButtonBox, QLayout, QWidget


class BaseDialog(QDialog):
    """
    Modal dialog with Ok / Cancel buttons.

    Subclasses build their form, call add_button_box() last and store the
    edited values in apply(), which runs only when Ok is pressed.
    """

    def __init__(self, title: str, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.setWindowTitle(title)
        self.setWindowFlags(
            Qt.WindowType.Dialog | Qt.WindowType.CustomizeWindowHint | Qt.WindowType.WindowTitleHint
        )
        self.setModal(True)

    def add_button_box(self, layout: QLayout) -> QDialogButtonBox:
        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)
        return buttons

    def apply(self) -> None:
        """Store the edited values."""

    def accept(self) -> None:
        self.apply()
        self.logger.info(f"{self.windowTitle()} applied")
        super().accept()

    def showEvent(self, arg__1: QShowEvent) -> None:
        super().showEvent(arg__1)
        self.adjustSize()
