"""
Menu builder for main application window.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import QMenuBar

from ..resources import get_action_icon

if TYPE_CHECKING:
    from .main_window import MainWindow


class MenuBuilder:
    """Builds and manages the application menu bar."""

    def __init__(self, main_window: "MainWindow") -> None:
        """
        Initialize menu builder.

        Args:
            main_window: MainWindow instance that owns the menus
        """
        self.main_window = main_window
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def setup_actions(self) -> None:
        """Create all actions for menus."""
        self._setup_file_actions()
        self._setup_edit_actions()
        self._setup_data_actions()
        self._setup_view_actions()
        self._setup_settings_actions()
        self._setup_help_actions()

        self.logger.debug("Actions created")

    def _setup_file_actions(self) -> None:
        mw = self.main_window
        actions = mw.main_window_actions

        mw.action_new = QAction(get_action_icon("mdi.file-outline"), "&New", mw)
        mw.action_new.setShortcut(QKeySequence.StandardKey.New)
        mw.action_new.setStatusTip("Start a new strat document")
        mw.action_new.triggered.connect(actions.new_document)

        mw.action_open = QAction(get_action_icon("mdi.folder-open-outline"), "&Open...", mw)
        mw.action_open.setShortcut(QKeySequence.StandardKey.Open)
        mw.action_open.setStatusTip("Open a strat or condition document")
        mw.action_open.triggered.connect(actions.open_document)

        mw.action_save = QAction(get_action_icon("mdi.content-save-outline"), "&Save", mw)
        mw.action_save.setShortcut(QKeySequence.StandardKey.Save)
        mw.action_save.setStatusTip("Save the current document")
        mw.action_save.triggered.connect(actions.save_document)

        mw.action_save_as = QAction("Save &As...", mw)
        mw.action_save_as.setShortcut(QKeySequence.StandardKey.SaveAs)
        mw.action_save_as.setStatusTip("Save the current document with a new name")
        mw.action_save_as.triggered.connect(actions.save_document_as)

        mw.action_clear_recent = QAction("&Clear Recent Files", mw)
        mw.action_clear_recent.triggered.connect(actions.clear_recent_files)

        mw.action_exit = QAction("E&xit", mw)
        mw.action_exit.setShortcut(QKeySequence.StandardKey.Quit)
        mw.action_exit.setStatusTip("Exit the application")
        mw.action_exit.triggered.connect(mw.close)

    def _setup_edit_actions(self) -> None:
        mw = self.main_window
        actions = mw.main_window_actions

        mw.action_copy_json = QAction(get_action_icon("mdi.content-copy"), "&Copy Canonical JSON", mw)
        mw.action_copy_json.setShortcut(QKeySequence("Ctrl+Shift+C"))
        mw.action_copy_json.setStatusTip("Copy the document as it would be saved")
        mw.action_copy_json.triggered.connect(actions.copy_json)

        mw.action_show_problems = QAction(get_action_icon("mdi.alert-circle-outline"), "Show &Problems", mw)
        mw.action_show_problems.setShortcut(QKeySequence("F8"))
        mw.action_show_problems.setStatusTip("List incomplete conditions")
        mw.action_show_problems.triggered.connect(actions.show_problems)

    def _setup_data_actions(self) -> None:
        mw = self.main_window
        actions = mw.main_window_actions

        mw.action_load_reference = QAction(
            get_action_icon("mdi.database-import"), "&Load Reference Data...", mw
        )
        mw.action_load_reference.setStatusTip("Load items, events, techniques and room nodes")
        mw.action_load_reference.triggered.connect(actions.load_reference_data)

        mw.action_reload_reference = QAction(
            get_action_icon("mdi.database-refresh"), "&Reload Reference Data", mw
        )
        mw.action_reload_reference.setShortcut(QKeySequence("F5"))
        mw.action_reload_reference.setStatusTip("Reload the current reference data file")
        mw.action_reload_reference.triggered.connect(actions.reload_reference_data)

    def _setup_view_actions(self) -> None:
        mw = self.main_window
        actions = mw.main_window_actions

        mw.action_expand_all = QAction(get_action_icon("mdi.unfold-more-horizontal"), "&Expand All", mw)
        mw.action_expand_all.triggered.connect(actions.expand_all)

        mw.action_collapse_all = QAction(
            get_action_icon("mdi.unfold-less-horizontal"), "&Collapse All", mw
        )
        mw.action_collapse_all.triggered.connect(actions.collapse_all)

        mw.action_toggle_preview = QAction("Show JSON &Preview", mw)
        mw.action_toggle_preview.setCheckable(True)
        mw.action_toggle_preview.setChecked(mw.settings.show_preview)
        mw.action_toggle_preview.toggled.connect(actions.set_preview_visible)

    def _setup_settings_actions(self) -> None:
        mw = self.main_window
        actions = mw.main_window_actions

        mw.action_editor_settings = QAction("&Editor Settings...", mw)
        mw.action_editor_settings.setStatusTip("Configure nesting depth, indentation and preview")
        mw.action_editor_settings.triggered.connect(actions.editor_settings)

        mw.action_logging_settings = QAction("&Logging Settings...", mw)
        mw.action_logging_settings.setStatusTip("Configure logging settings")
        mw.action_logging_settings.triggered.connect(actions.logging_settings)

    def _setup_help_actions(self) -> None:
        mw = self.main_window
        actions = mw.main_window_actions

        mw.action_about = QAction("&About", mw)
        mw.action_about.setStatusTip("About reqtree")
        mw.action_about.triggered.connect(actions.about)

    def setup_menus(self) -> None:
        """Setup the menu bar."""
        menubar = self.main_window.menuBar()

        self._setup_file_menu(menubar)
        self._setup_edit_menu(menubar)
        self._setup_data_menu(menubar)
        self._setup_view_menu(menubar)
        self._setup_settings_menu(menubar)
        self._setup_help_menu(menubar)

        self.logger.debug("Menus created")

    def _setup_file_menu(self, menubar: QMenuBar) -> None:
        mw = self.main_window
        file_menu = menubar.addMenu("&File")
        file_menu.addAction(mw.action_new)  # type: ignore[arg-type]
        file_menu.addAction(mw.action_open)  # type: ignore[arg-type]
        mw.recent_menu = file_menu.addMenu("Open &Recent")
        self.update_recent_menu()
        file_menu.addSeparator()
        file_menu.addAction(mw.action_save)  # type: ignore[arg-type]
        file_menu.addAction(mw.action_save_as)  # type: ignore[arg-type]
        file_menu.addSeparator()
        file_menu.addAction(mw.action_exit)  # type: ignore[arg-type]

    def _setup_edit_menu(self, menubar: QMenuBar) -> None:
        mw = self.main_window
        edit_menu = menubar.addMenu("&Edit")
        edit_menu.addAction(mw.action_copy_json)  # type: ignore[arg-type]
        edit_menu.addAction(mw.action_show_problems)  # type: ignore[arg-type]

    def _setup_data_menu(self, menubar: QMenuBar) -> None:
        mw = self.main_window
        data_menu = menubar.addMenu("&Data")
        data_menu.addAction(mw.action_load_reference)  # type: ignore[arg-type]
        data_menu.addAction(mw.action_reload_reference)  # type: ignore[arg-type]

    def _setup_view_menu(self, menubar: QMenuBar) -> None:
        mw = self.main_window
        view_menu = menubar.addMenu("&View")
        view_menu.addAction(mw.action_expand_all)  # type: ignore[arg-type]
        view_menu.addAction(mw.action_collapse_all)  # type: ignore[arg-type]
        view_menu.addSeparator()
        view_menu.addAction(mw.action_toggle_preview)  # type: ignore[arg-type]

    def _setup_settings_menu(self, menubar: QMenuBar) -> None:
        mw = self.main_window
        settings_menu = menubar.addMenu("&Settings")
        settings_menu.addAction(mw.action_editor_settings)  # type: ignore[arg-type]
        settings_menu.addAction(mw.action_logging_settings)  # type: ignore[arg-type]

    def _setup_help_menu(self, menubar: QMenuBar) -> None:
        mw = self.main_window
        help_menu = menubar.addMenu("&Help")
        help_menu.addAction(mw.action_about)  # type: ignore[arg-type]

    def update_recent_menu(self) -> None:
        """Rebuild the Open Recent submenu from settings."""
        mw = self.main_window
        if not hasattr(mw, "recent_menu"):
            return
        menu = mw.recent_menu
        menu.clear()
        recent_files = mw.settings.recent_files
        for file_path in recent_files:
            action = menu.addAction(Path(file_path).name)
            action.setStatusTip(file_path)
            action.triggered.connect(
                lambda _checked=False, path=Path(file_path): mw.main_window_actions.open_document(path)
            )
        if recent_files:
            menu.addSeparator()
        menu.addAction(mw.action_clear_recent)  # type: ignore[arg-type]
        menu.setEnabled(bool(recent_files))
