"""
Main application window for reqtree.
"""

import logging
from pathlib import Path
from typing import Any, List, Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QAction, QCloseEvent
from PySide6.QtWidgets import QDockWidget, QLabel, QMainWindow, QMenu, QScrollArea, QWidget

from ..conditions.data_sources import DataSourceBus
from ..data.loaders import (
    load_json,
    load_reference_data,
    save_condition,
    save_json,
)
from ..data.strat import StratConditions, is_strat_document
from ..resources import get_app_icon
from ..settings import AppSettings
from .actions import MainWindowActions
from .json_display import JsonDisplayWidget
from .menu import MenuBuilder
from .strat_editor import StratEditorWidget

APP_TITLE = "reqtree - Condition Editor"


class MainWindow(QMainWindow):
    """Main application window."""

    # Menu actions (created by MenuBuilder)
    action_new: QAction
    action_open: QAction
    action_save: QAction
    action_save_as: QAction
    action_clear_recent: QAction
    action_copy_json: QAction
    action_show_problems: QAction
    action_exit: QAction
    action_load_reference: QAction
    action_reload_reference: QAction
    action_expand_all: QAction
    action_collapse_all: QAction
    action_toggle_preview: QAction
    action_logging_settings: QAction
    action_editor_settings: QAction
    action_about: QAction
    recent_menu: QMenu

    def __init__(self, settings: AppSettings, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self.setObjectName("main_window")
        self.settings = settings
        self.bus = DataSourceBus()
        self.reference_path: Optional[Path] = None

        self.document: Any = {}
        self.document_path: Optional[Path] = None
        self.is_strat = True
        self.modified = False
        self.strat = StratConditions(self.bus, {}, max_depth=settings.max_depth)

        # Initialize managers
        self.menu_builder = MenuBuilder(self)
        self.main_window_actions = MainWindowActions(self)

        self.setup_central_widget()
        self.setup_preview_dock()
        self.menu_builder.setup_actions()
        self.menu_builder.setup_menus()
        self.setup_status_bar()

        if not self.settings.restore_window_geometry(self):
            self.resize(1100, 800)

        self.setWindowIcon(get_app_icon())
        self.update_title()
        self.refresh_preview()

        QTimer.singleShot(0, self.load_startup_reference_data)  # type: ignore

        self.logger.info("Main window initialized")

    # === UI SETUP ===

    def setup_central_widget(self) -> None:
        self.editor = StratEditorWidget(
            self.strat,
            indent_size=self.settings.indent_size,
            auto_expand=self.settings.auto_expand,
        )
        self.editor.changed.connect(self.on_document_changed)
        self.editor.status_message.connect(self.show_status)

        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(True)
        self.scroll_area.setWidget(self.editor)
        self.setCentralWidget(self.scroll_area)

    def setup_preview_dock(self) -> None:
        self.preview = JsonDisplayWidget("Canonical JSON")
        self.preview_dock = QDockWidget("Preview", self)
        self.preview_dock.setObjectName("preview_dock")
        self.preview_dock.setWidget(self.preview)
        self.addDockWidget(Qt.DockWidgetArea.RightDockWidgetArea, self.preview_dock)
        self.preview_dock.setVisible(self.settings.show_preview)

    def setup_status_bar(self) -> None:
        self.status_bar = self.statusBar()
        self.validity_label = QLabel()
        self.status_bar.addPermanentWidget(self.validity_label)
        self.status_bar.showMessage("Ready", 3000)
        self.logger.debug("Status bar created")

    def show_status(self, message: str, timeout: int = 5000) -> None:
        self.status_bar.showMessage(message, timeout)

    # === DOCUMENT ===

    def load_document(self, document: Any, path: Optional[Path] = None) -> None:
        """Replace the edited document; strat records get all three sections."""
        self.is_strat = not document or is_strat_document(document)
        if self.is_strat:
            strat_dict = document or {}
        else:
            strat_dict = {"requires": [document]}

        old_strat = self.strat
        self.strat = StratConditions(self.bus, strat_dict, max_depth=self.settings.max_depth)
        self.editor.set_strat(self.strat)
        self.editor.set_transitions_visible(self.is_strat)
        old_strat.close()

        self.document = document if document is not None else {}
        self.document_path = path
        self.modified = False
        self.update_title()
        self.refresh_preview()
        self.logger.info(
            f"Loaded {'strat' if self.is_strat else 'condition'} document"
            f"{f' from {path}' if path else ''}"
        )

    def open_path(self, path: Path) -> None:
        """Load a document file; raises DocumentError."""
        document = load_json(path)
        self.load_document(document, path)
        self.settings.add_recent_file(path)
        self.menu_builder.update_recent_menu()

    def current_document(self) -> Any:
        """The document as it would be saved."""
        if self.is_strat:
            return self.strat.apply_to(self.document if isinstance(self.document, dict) else {})
        return self.strat.requires.to_canonical()

    def save_to(self, path: Path) -> None:
        """Write the document; raises DocumentError."""
        if self.is_strat:
            document = self.current_document()
            save_json(path, document)
            self.document = document
        else:
            save_condition(path, self.strat.requires)
        self.document_path = path
        self.modified = False
        self.settings.add_recent_file(path)
        self.menu_builder.update_recent_menu()
        self.update_title()
        self.logger.info(f"Document saved to {path}")

    def validation_errors(self) -> List[str]:
        errors = [f"Entrance: {e}" for e in self.strat.entrance.errors()]
        errors += [
            f"{node.info.label}: {e}" for node in self.strat.requires.walk() for e in node.errors()
            if node.is_leaf
        ]
        errors += [f"Exit: {e}" for e in self.strat.exit.errors()]
        return errors

    def on_document_changed(self) -> None:
        self.modified = True
        self.update_title()
        self.refresh_preview()

    def refresh_preview(self) -> None:
        valid = self.strat.is_valid()
        self.preview.set_json_data(self.current_document())
        self.preview.set_validity(valid, self.validation_errors())
        self.validity_label.setText("Valid" if valid else "Incomplete")

    def update_title(self) -> None:
        name = self.document_path.name if self.document_path else "Untitled"
        marker = "*" if self.modified else ""
        self.setWindowTitle(f"{name}{marker} - {APP_TITLE}")

    # === REFERENCE DATA ===

    def load_reference_file(self, path: Path) -> None:
        """Load reference data and push it to every open condition; raises DocumentError."""
        snapshot = load_reference_data(path)
        self.reference_path = path
        self.bus.update_all(snapshot)
        self.refresh_preview()
        self.show_status(f"Reference data loaded: {path.name}")

    def load_startup_reference_data(self) -> None:
        path = self.settings.reference_data_path
        if path is None or not path.is_file():
            self.show_status("No reference data loaded. Use Data → Load Reference Data", 10000)
            return
        try:
            self.load_reference_file(path)
        except Exception as e:
            self.logger.warning(f"Failed to load reference data at startup: {e}")
            self.show_status(f"Failed to load reference data: {e}", 10000)

    # === EDITOR SETTINGS ===

    def apply_editor_settings(self) -> None:
        """Rebuild the editor with the current indent and preview settings."""
        self.editor.indent_size = self.settings.indent_size
        self.editor.auto_expand = self.settings.auto_expand
        self.editor.set_strat(self.strat)
        self.preview_dock.setVisible(self.settings.show_preview)
        self.action_toggle_preview.setChecked(self.settings.show_preview)

    def closeEvent(self, event: QCloseEvent) -> None:
        """Handle window close event to save settings."""
        if not self.main_window_actions.maybe_discard_changes():
            event.ignore()
            return
        self.settings.save_window_geometry(self)
        self.editor.release()
        self.strat.close()
        self.logger.info("Window geometry saved")
        super().closeEvent(event)
