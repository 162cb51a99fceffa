"""
Shared base for the settings subsystems.

Every subsystem owns one key prefix inside the profile group, e.g. the
editor settings live under ``editor/``.
"""

from typing import Any, List, TYPE_CHECKING, cast

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

TRUE_STRINGS = ("true", "1", "yes")


class SettingsSection:
    """Typed access to the keys below one prefix."""

    prefix = ""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def key(self, name: str) -> str:
        return f"{self.prefix}/{name}" if self.prefix else name

    def _raw(self, name: str, default: Any = None) -> Any:
        return self.settings.value(self.key(name), default)

    def _store(self, name: str, value: Any) -> None:
        self.settings.setValue(self.key(name), value)
        self.settings.sync()

    def _remove(self, name: str) -> None:
        self.settings.remove(self.key(name))

    def _get_str(self, name: str, default: str = "") -> str:
        value = self._raw(name, default)
        return default if value is None else str(value)

    def _get_bool(self, name: str, default: bool = False) -> bool:
        # INI backends hand booleans back as strings
        value = self._raw(name, default)
        if isinstance(value, str):
            return value.lower() in TRUE_STRINGS
        return default if value is None else bool(value)

    def _get_int(self, name: str, default: int = 0) -> int:
        value = self._raw(name, default)
        try:
            return default if value is None else int(cast(Any, value))
        except (TypeError, ValueError):
            return default

    def _get_list(self, name: str) -> List[str]:
        value = self._raw(name, [])
        if isinstance(value, (list, tuple)):
            return ["" if item is None else str(item) for item in value]
        # a one element list is read back as a plain string
        if isinstance(value, str) and value:
            return [value]
        return []
