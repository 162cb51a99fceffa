"""
Window state settings for reqtree.
"""

from typing import Any, Optional

from PySide6.QtCore import QByteArray
from PySide6.QtWidgets import QMainWindow

from .section import SettingsSection


def _to_byte_array(value: Any) -> Optional[QByteArray]:
    """Geometry comes back as QByteArray or bytes depending on the backend."""
    if isinstance(value, QByteArray):
        return value if not value.isEmpty() else None
    if isinstance(value, (bytes, bytearray)):
        return QByteArray(bytes(value)) if value else None
    return None


class UISettings(SettingsSection):
    """Main window geometry and dock layout."""

    prefix = "ui"

    def save_window_geometry(self, window: QMainWindow) -> None:
        self.settings.setValue(self.key("window_geometry"), window.saveGeometry())
        self._store("window_state", window.saveState())

    def restore_window_geometry(self, window: QMainWindow) -> bool:
        """Apply the saved geometry and dock layout. Returns True if anything was restored."""
        geometry = _to_byte_array(self._raw("window_geometry"))
        state = _to_byte_array(self._raw("window_state"))

        restored = False
        if geometry is not None:
            restored = window.restoreGeometry(geometry)
        if state is not None:
            restored = window.restoreState(state) or restored
        return restored
