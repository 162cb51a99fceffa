"""
Resources for reqtree.

Provides the application icon and the per-kind condition icons, all drawn
from qtawesome's Material Design set.
"""

from functools import lru_cache

import qtawesome as qta  # type: ignore
from PySide6.QtGui import QColor, QIcon

from ..conditions.models import kind_info

APP_ICON = "mdi.file-tree"
ICON_DARKEN = 180


@lru_cache(maxsize=1)
def get_app_icon() -> QIcon:
    """Return the shared application icon."""
    return QIcon(qta.icon(APP_ICON, color="#4a76a8"))  # type: ignore[arg-type]


@lru_cache(maxsize=None)
def get_kind_icon(kind: str) -> QIcon:
    """Icon for a condition kind, tinted with a darker shade of its header color."""
    info = kind_info(kind)
    color = QColor(info.color).darker(ICON_DARKEN).name()
    return QIcon(qta.icon(info.icon, color=color))  # type: ignore[arg-type]


@lru_cache(maxsize=None)
def get_action_icon(name: str) -> QIcon:
    """Icon for toolbar and button actions (mdi.* names)."""
    return QIcon(qta.icon(name))  # type: ignore[arg-type]
