"""
About box for reqtree.
"""

from typing import Optional

from PySide6.QtWidgets import QApplication, QMessageBox, QWidget


def about_text(version: str, reference_path: Optional[str] = None) -> str:
    return (
        f"<h3>reqtree {version}</h3>"
        "<p>Editor for the requires, entrance and exit conditions of logic "
        "documents. Conditions are edited as trees and checked against the "
        "loaded reference data.</p>"
        f"<p><b>Reference data:</b> {reference_path or 'not loaded'}</p>"
    )


def show_about_dialog(
    version: str, reference_path: Optional[str] = None, parent: Optional[QWidget] = None
) -> None:
    box = QMessageBox(parent)
    box.setWindowTitle("About reqtree")
    box.setText(about_text(version, reference_path))
    box.setIconPixmap(QApplication.windowIcon().pixmap(64, 64))
    box.exec()
