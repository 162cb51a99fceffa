"""Action handlers for MainWindow.

Keeps UI action logic separate from window construction/layout.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from PySide6.QtWidgets import QApplication, QDialog, QFileDialog, QMessageBox

from .. import __version__
from ..data.loaders import DocumentError
from .dialogs import EditorSettingsDialog, LoggingSettingsDialog, show_about_dialog

if TYPE_CHECKING:
    from .main_window import MainWindow

JSON_FILTER = "JSON Files (*.json);;All Files (*)"


class MainWindowActions:
    """Handles actions and events for the main window."""

    def __init__(self, main_window: "MainWindow") -> None:
        self.main_window = main_window
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _start_dir(self) -> str:
        last_dir = self.main_window.settings.last_document_dir
        return str(last_dir) if last_dir else str(Path.cwd())

    # === DOCUMENTS ===

    def maybe_discard_changes(self) -> bool:
        """Ask before unsaved edits are dropped. Returns False to cancel."""
        mw = self.main_window
        if not mw.modified:
            return True

        reply = QMessageBox.question(
            mw,
            "Unsaved Changes",
            "The document has unsaved changes.\n\nDo you want to save them?",
            QMessageBox.StandardButton.Save
            | QMessageBox.StandardButton.Discard
            | QMessageBox.StandardButton.Cancel,
            QMessageBox.StandardButton.Save,
        )
        if reply == QMessageBox.StandardButton.Save:
            return self.save_document()
        return reply == QMessageBox.StandardButton.Discard

    def new_document(self) -> None:
        """Start an empty strat document."""
        mw = self.main_window
        if not self.maybe_discard_changes():
            return
        mw.load_document({})
        mw.show_status("New document", 3000)

    def open_document(self, path: Optional[Path] = None) -> None:
        """Open a document, asking for the file when path is not given."""
        mw = self.main_window
        if not self.maybe_discard_changes():
            return

        if not path:
            file_path, _ = QFileDialog.getOpenFileName(
                mw, "Open Document", self._start_dir(), JSON_FILTER
            )
            if not file_path:
                return
            path = Path(file_path)

        try:
            mw.open_path(path)
        except DocumentError as e:
            mw.logger.error(f"Failed to open document: {e}")
            QMessageBox.warning(mw, "Open Failed", f"Could not open document:\n{e}")
            return
        mw.show_status(f"Opened {path.name}", 3000)

    def save_document(self) -> bool:
        """Save to the current path. Returns True when written."""
        mw = self.main_window
        if mw.document_path is None:
            return self.save_document_as()
        return self._write(mw.document_path)

    def save_document_as(self) -> bool:
        mw = self.main_window
        default_name = mw.document_path.name if mw.document_path else "condition.json"
        file_path, _ = QFileDialog.getSaveFileName(
            mw, "Save Document As", str(Path(self._start_dir()) / default_name), JSON_FILTER
        )
        if not file_path:
            return False
        return self._write(Path(file_path))

    def _write(self, path: Path) -> bool:
        mw = self.main_window
        if not mw.strat.is_valid():
            reply = QMessageBox.question(
                mw,
                "Incomplete Conditions",
                "Some conditions are incomplete and will be left out of the saved document.\n\n"
                "Save anyway?",
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
                QMessageBox.StandardButton.No,
            )
            if reply != QMessageBox.StandardButton.Yes:
                return False
        try:
            mw.save_to(path)
        except DocumentError as e:
            mw.logger.error(f"Failed to save document: {e}")
            QMessageBox.critical(mw, "Save Failed", f"Could not save document:\n{e}")
            return False
        mw.show_status(f"Saved {path.name}", 3000)
        return True

    def clear_recent_files(self) -> None:
        mw = self.main_window
        mw.settings.clear_recent_files()
        mw.menu_builder.update_recent_menu()

    # === REFERENCE DATA ===

    def load_reference_data(self) -> None:
        """Pick a reference data file and load it."""
        mw = self.main_window
        current = mw.settings.reference_data_path
        start = str(current.parent) if current else str(Path.cwd())
        file_path, _ = QFileDialog.getOpenFileName(mw, "Load Reference Data", start, JSON_FILTER)
        if not file_path:
            return

        path = Path(file_path)
        if self._load_reference(path):
            mw.settings.reference_data_path = path
            mw.logger.info(f"Reference data path updated: {path}")

    def reload_reference_data(self) -> None:
        mw = self.main_window
        path = mw.reference_path or mw.settings.reference_data_path
        if path is None:
            mw.show_status("No reference data file configured", 3000)
            return
        self._load_reference(path)

    def _load_reference(self, path: Path) -> bool:
        mw = self.main_window
        try:
            mw.load_reference_file(path)
        except DocumentError as e:
            mw.logger.error(f"Failed to load reference data: {e}")
            QMessageBox.warning(mw, "Reference Data", f"Could not load reference data:\n{e}")
            return False
        return True

    # === EDIT ===

    def copy_json(self) -> None:
        """Put the canonical document on the clipboard."""
        mw = self.main_window
        text = mw.preview.text()
        QApplication.clipboard().setText(text)
        mw.show_status("Canonical JSON copied" if text else "Nothing to copy", 3000)

    def show_problems(self) -> None:
        mw = self.main_window
        errors = mw.validation_errors()
        if not errors:
            QMessageBox.information(mw, "Problems", "The document is complete.")
            return
        QMessageBox.warning(
            mw,
            "Problems",
            f"{len(errors)} incomplete condition(s); they are left out when saving:\n\n"
            + "\n".join(errors),
        )

    # === VIEW ===

    def expand_all(self) -> None:
        self.main_window.editor.expand_all()

    def collapse_all(self) -> None:
        self.main_window.editor.collapse_all()

    def set_preview_visible(self, checked: bool) -> None:
        mw = self.main_window
        mw.preview_dock.setVisible(checked)
        mw.settings.show_preview = bool(checked)

    # === SETTINGS AND HELP ===

    def editor_settings(self) -> None:
        """Show editor settings dialog."""
        mw = self.main_window
        try:
            dialog = EditorSettingsDialog(mw.settings, mw)
            if dialog.exec() == QDialog.DialogCode.Accepted:
                mw.apply_editor_settings()
                mw.show_status("Editor settings updated", 3000)
        except Exception as e:
            mw.logger.error(f"Error showing editor settings dialog: {e}", exc_info=True)
            QMessageBox.critical(mw, "Error", f"Failed to show editor settings dialog:\n{e}")

    def logging_settings(self) -> None:
        """Show logging settings dialog."""
        mw = self.main_window
        try:
            dialog = LoggingSettingsDialog(mw.settings, mw)
            if dialog.exec() == QDialog.DialogCode.Accepted:
                mw.show_status("Logging settings applied", 3000)
        except Exception as e:
            mw.logger.error(f"Error showing logging settings dialog: {e}", exc_info=True)

    def about(self) -> None:
        """Show about dialog."""
        mw = self.main_window
        reference = str(mw.reference_path) if mw.reference_path else None
        show_about_dialog(version=__version__, reference_path=reference, parent=mw)
