"""
Editor-related settings for reqtree.
"""

from typing import Tuple

from ..conditions.models import INDENT_SIZE, MAX_DEPTH
from .section import SettingsSection

MAX_DEPTH_RANGE = (1, 20)
INDENT_SIZE_RANGE = (5, 60)


def clamp(value: int, bounds: Tuple[int, int]) -> int:
    low, high = bounds
    return max(low, min(high, value))


class EditorSettings(SettingsSection):
    """Condition tree depth, indentation and expansion."""

    prefix = "editor"

    @property
    def max_depth(self) -> int:
        """Deepest nesting level a new condition may be added at."""
        return clamp(self._get_int("max_depth", MAX_DEPTH), MAX_DEPTH_RANGE)

    @max_depth.setter
    def max_depth(self, value: int) -> None:
        self._store("max_depth", clamp(value, MAX_DEPTH_RANGE))

    @property
    def stored_max_depth(self) -> object:
        """The unclamped stored value, None when never set."""
        return self._raw("max_depth")

    @property
    def indent_size(self) -> int:
        """Indentation per nesting level in pixels."""
        return clamp(self._get_int("indent_size", INDENT_SIZE), INDENT_SIZE_RANGE)

    @indent_size.setter
    def indent_size(self, value: int) -> None:
        self._store("indent_size", clamp(value, INDENT_SIZE_RANGE))

    @property
    def auto_expand(self) -> bool:
        """Whether loaded trees start fully expanded."""
        return self._get_bool("auto_expand", True)

    @auto_expand.setter
    def auto_expand(self, value: bool) -> None:
        self._store("auto_expand", value)

    @property
    def show_preview(self) -> bool:
        return self._get_bool("show_preview", True)

    @show_preview.setter
    def show_preview(self, value: bool) -> None:
        self._store("show_preview", value)
