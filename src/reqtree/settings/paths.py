"""
Path-related settings for reqtree.
"""

from pathlib import Path
from typing import List, Optional, Union

from .section import SettingsSection

MAX_RECENT_FILES = 10


class PathSettings(SettingsSection):
    """Reference data file, last document directory and recent documents."""

    prefix = "paths"

    def _get_path(self, name: str) -> Optional[Path]:
        stored = self._get_str(name)
        return Path(stored) if stored else None

    def _set_path(self, name: str, value: Optional[Path]) -> None:
        self._store(name, str(value) if value else "")

    @property
    def reference_data_path(self) -> Optional[Path]:
        """Reference data file loaded at startup."""
        return self._get_path("reference_data_file")

    @reference_data_path.setter
    def reference_data_path(self, value: Optional[Path]) -> None:
        self._set_path("reference_data_file", value)

    @property
    def last_document_dir(self) -> Optional[Path]:
        """Start directory of the open and save dialogs."""
        return self._get_path("last_document_dir")

    @last_document_dir.setter
    def last_document_dir(self, value: Optional[Path]) -> None:
        self._set_path("last_document_dir", value)

    @property
    def recent_files(self) -> List[str]:
        """Recently opened or saved documents, most recent first."""
        return self._get_list("recent_files")

    def add_recent_file(self, file_path: Union[str, Path]) -> None:
        """Move file_path to the top of the recent list."""
        entry = str(file_path)
        recent = [existing for existing in self.recent_files if existing != entry]
        self.set_recent_files([entry] + recent)
        self.last_document_dir = Path(entry).parent

    def set_recent_files(self, files: List[str]) -> None:
        self._store("recent_files", list(files)[:MAX_RECENT_FILES])

    def clear_recent_files(self) -> None:
        self._store("recent_files", [])
