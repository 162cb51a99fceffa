"""
Dialogs of the reqtree GUI.
"""

from .about_dialog import show_about_dialog
from .base_dialog import BaseDialog
from .editor_settings_dialog import EditorSettingsDialog
from .logging_settings_dialog import LoggingSettingsDialog

__all__ = [
    "BaseDialog",
    "EditorSettingsDialog",
    "LoggingSettingsDialog",
    "show_about_dialog",
]
