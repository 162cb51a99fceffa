"""
JSON display widget for showing the canonical document.

Provides read-only monospaced text with a validity line underneath.
"""

import logging
from typing import Any, List, Optional

import orjson
from PySide6.QtGui import QFontDatabase
from PySide6.QtWidgets import QLabel, QTextEdit, QVBoxLayout, QWidget

from .leaf_form import ERROR_STYLE

VALID_STYLE = "color: #2e7d32;"


class JsonDisplayWidget(QWidget):
    """Widget for displaying formatted JSON data."""

    def __init__(self, title: str, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.title = title
        self.setup_ui()
        self.logger.debug(f"JsonDisplayWidget '{title}' initialized")

    def setup_ui(self) -> None:
        """Setup the user interface."""
        layout = QVBoxLayout(self)

        title_label = QLabel(f"<b>{self.title}</b>")
        layout.addWidget(title_label)

        self.text_edit = QTextEdit()
        self.text_edit.setReadOnly(True)
        self.text_edit.setFont(QFontDatabase.systemFont(QFontDatabase.SystemFont.FixedFont))
        self.text_edit.setLineWrapMode(QTextEdit.LineWrapMode.NoWrap)
        self.text_edit.setPlaceholderText("No condition")
        layout.addWidget(self.text_edit)

        self.status_label = QLabel()
        self.status_label.setWordWrap(True)
        layout.addWidget(self.status_label)

    def set_json_data(self, data: Optional[Any]) -> None:
        """Set JSON data to display; None shows the placeholder."""
        if data is None:
            self.text_edit.clear()
            return

        try:
            formatted = orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8")
        except TypeError as e:
            self.logger.error(f"Failed to format JSON: {e}")
            formatted = f"Error formatting JSON: {e}"
        self.text_edit.setPlainText(formatted)

    def set_validity(self, valid: bool, errors: Optional[List[str]] = None) -> None:
        if valid:
            self.status_label.setText("Valid")
            self.status_label.setStyleSheet(VALID_STYLE)
        else:
            details = "\n".join(errors or [])
            self.status_label.setText(f"Incomplete\n{details}".strip())
            self.status_label.setStyleSheet(ERROR_STYLE)

    def text(self) -> str:
        return self.text_edit.toPlainText()

    def clear(self) -> None:
        """Clear the display."""
        self.text_edit.clear()
        self.status_label.clear()
