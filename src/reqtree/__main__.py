"""
Entry point: ``python -m reqtree [--profile NAME] [--reference FILE] [document.json]``
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PySide6.QtWidgets import QApplication, QMessageBox

from . import __version__
from .data.loaders import DocumentError
from .gui.main_window import MainWindow
from .resources import get_app_icon
from .settings import AppSettings, ValidationResult
from .utils.logging_config import setup_logging

logger = logging.getLogger("reqtree.main")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="reqtree", description="Condition tree editor")
    parser.add_argument("document", nargs="?", type=Path, help="strat or condition JSON file")
    parser.add_argument("--profile", default="default", help="settings profile name")
    parser.add_argument(
        "--reference", type=Path, help="reference data file, remembered for later runs"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    # Qt consumes its own options (-style, -platform ...) from the full argv
    args, _unknown = parser.parse_known_args(argv)
    return args


def show_error_dialog(title: str, message: str, details: Optional[str] = None) -> None:
    if QApplication.instance() is None:
        QApplication(sys.argv)
    box = QMessageBox()
    box.setIcon(QMessageBox.Icon.Critical)
    box.setWindowTitle(title)
    box.setText(message)
    if details:
        box.setDetailedText(details)
    box.exec()


def report_validation(validation: ValidationResult) -> bool:
    """Log warnings and errors; returns False when startup must stop."""
    for warning in validation.warnings:
        logger.warning(f"Configuration: {warning}")
    for error in validation.errors:
        logger.error(f"Configuration: {error}")
    if not validation.is_valid:
        show_error_dialog(
            "Configuration Error",
            "The stored configuration is not usable. Please check your settings.",
            "\n".join(validation.errors),
        )
    return validation.is_valid


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        settings = AppSettings(args.profile)
        if args.reference is not None:
            settings.reference_data_path = args.reference.resolve()

        app = QApplication(sys.argv)
        app.setApplicationName("reqtree")
        app.setApplicationVersion(__version__)
        app.setOrganizationName("reqtree")
        app.setWindowIcon(get_app_icon())
        app.setStyle("Fusion")

        setup_logging(settings)
        logger.info(f"Starting reqtree {__version__}, profile '{args.profile}'")
        logger.debug(f"Configuration file: {settings.get_settings_file_path()}")

        if not report_validation(settings.validate()):
            return 1

        window = MainWindow(settings)
        window.show()

        if args.document is not None:
            try:
                window.open_path(args.document)
            except DocumentError as e:
                logger.error(f"Failed to open {args.document}: {e}")
                window.show_status(f"Failed to open document: {e}", 10000)

        if settings.is_first_run:
            settings.set_first_run_complete()

        return app.exec()

    except Exception as e:
        logger.exception("Unhandled exception in main")
        show_error_dialog("Application Error", "An unexpected error occurred.", str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
