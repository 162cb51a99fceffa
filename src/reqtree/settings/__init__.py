"""
Settings package for reqtree.

Configuration lives in Qt's QSettings store, one group per profile:

    from reqtree.settings import AppSettings

    settings = AppSettings()
    for warning in settings.validate().warnings:
        ...
"""

from .core import AppSettings
from .editor import EditorSettings
from .logging import LoggingSettings
from .paths import PathSettings
from .types import ConfigError, ConfigVersion, ValidationResult

__all__ = [
    "AppSettings",
    "ConfigError",
    "ConfigVersion",
    "EditorSettings",
    "LoggingSettings",
    "PathSettings",
    "ValidationResult",
]
