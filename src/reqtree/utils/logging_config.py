"""
Logging configuration for reqtree.

The root logger passes everything through; the console and CSV file handlers
each filter by their own configured level. The condition engine namespace has
a separate level so its per-node DEBUG chatter can be silenced on its own.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from ..settings.logging import ENGINE_LOGGER

if TYPE_CHECKING:
    from ..settings import AppSettings

CONSOLE_FORMAT = "%(asctime)s : %(levelname)-8s : %(message)s"
CONSOLE_DATEFMT = "%H:%M:%S"
FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"
LOG_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5

# third party loggers kept at INFO
NOISY_LOGGERS = ("PySide6", "qtawesome", "asyncio")


def _level(name: str, fallback: int) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else fallback


class ColoredFormatter(logging.Formatter):
    """Console formatter that wraps the level name in an ANSI color."""

    RESET = "\033[0m"
    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        color = self.COLORS.get(record.levelname)
        if color is None:
            return text
        return text.replace(record.levelname, f"{color}{record.levelname}{self.RESET}", 1)


class CSVFormatter(logging.Formatter):
    """
    One semicolon separated row per record.

    Columns: time; level; ms since start; logger; line; message. Every column
    but the padded level is quoted, with quotes doubled inside.
    """

    @staticmethod
    def _quote(value: object) -> str:
        return '"' + str(value).replace('"', '""') + '"'

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        columns = [
            self._quote(self.formatTime(record, self.datefmt)),
            record.levelname.ljust(8),
            self._quote(f"{int(record.relativeCreated)} ms"),
            self._quote(record.name),
            self._quote(record.lineno),
            self._quote(message),
        ]
        return ";".join(columns)


def _console_handler(settings: "AppSettings") -> logging.Handler:
    formatter_class = ColoredFormatter if settings.console_use_colors else logging.Formatter
    handler = logging.StreamHandler()
    handler.setLevel(_level(settings.console_log_level, logging.INFO))
    handler.setFormatter(formatter_class(fmt=CONSOLE_FORMAT, datefmt=CONSOLE_DATEFMT))
    return handler


def _file_handler(settings: "AppSettings") -> Optional[logging.Handler]:
    """Rotating CSV handler, or None when the log directory cannot be created."""
    log_path = Path(settings.log_file_path)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
        )
    except OSError as e:
        logging.getLogger(__name__).warning(f"Could not setup file logging at {log_path}: {e}")
        return None
    handler.setLevel(_level(settings.file_log_level, logging.DEBUG))
    handler.setFormatter(CSVFormatter(datefmt=FILE_DATEFMT))
    return handler


def setup_logging(settings: "AppSettings") -> None:
    """Replace the root handlers according to settings."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    logging.getLogger("reqtree").setLevel(logging.DEBUG)
    logging.getLogger(ENGINE_LOGGER).setLevel(_level(settings.engine_log_level, logging.INFO))
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO)

    if settings.console_logging:
        root_logger.addHandler(_console_handler(settings))

    file_handler = _file_handler(settings) if settings.file_logging else None
    if file_handler is not None:
        root_logger.addHandler(file_handler)

    logger = logging.getLogger(__name__)
    logger.info("Logging initialized")
    logger.debug(
        f"Console: {settings.console_log_level if settings.console_logging else 'off'}, "
        f"file: {settings.file_log_level if file_handler else 'off'}, "
        f"engine: {settings.engine_log_level}"
    )
