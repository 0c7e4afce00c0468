"""
Path-related settings for smart_localization.
"""

from pathlib import Path
from typing import List, Optional, Union, TYPE_CHECKING, cast

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

DEFAULT_ROOT_FILE_NAME = "Language"
MAX_RECENT_PLANS = 10


class PathSettings:
    """Manages path-related settings."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def _get_str(self, key: str, default: str = "") -> str:
        """Type-safe string retrieval from settings."""
        value = self.settings.value(key, default)
        return str(value) if value is not None else default

    def _get_list(self, key: str, default: Optional[List[str]] = None) -> List[str]:
        """Type-safe list retrieval from settings."""
        if default is None:
            default = []
        value = self.settings.value(key, default)
        if isinstance(value, list):
            return [
                str(item) if item is not None else ""
                for item in cast(list[object], value)
            ]
        # INI storage returns a single-item list as a plain string
        if isinstance(value, str) and value:
            return [value]
        return default

    @property
    def localization_path(self) -> Optional[Path]:
        """Get the directory holding the language tables."""
        path_str = self._get_str("paths/localization", "")
        return Path(path_str) if path_str else None

    @localization_path.setter
    def localization_path(self, value: Optional[Path]) -> None:
        """Set the directory holding the language tables."""
        self.settings.setValue("paths/localization", str(value) if value else "")
        self.settings.sync()

    @property
    def root_file_name(self) -> str:
        """Get the base name of the table files (``Language`` -> ``Language.resx``)."""
        return self._get_str("paths/root_file_name", DEFAULT_ROOT_FILE_NAME) or DEFAULT_ROOT_FILE_NAME

    @root_file_name.setter
    def root_file_name(self, value: str) -> None:
        """Set the base name of the table files."""
        self.settings.setValue("paths/root_file_name", value)
        self.settings.sync()

    @property
    def root_file_path(self) -> Optional[Path]:
        """Get the root table path (derived from localization_path)."""
        if self.localization_path:
            return self.localization_path / f"{self.root_file_name}.resx"
        return None

    @property
    def recent_plans(self) -> List[str]:
        """Get list of recently applied plan files."""
        return self._get_list("paths/recent_plans", [])

    def add_recent_plan(self, file_path: Union[str, Path]) -> None:
        """Add plan file to recent list (max 10 items)."""
        recent = self.recent_plans
        file_str = str(file_path)

        if file_str in recent:
            recent.remove(file_str)
        recent.insert(0, file_str)
        recent = recent[:MAX_RECENT_PLANS]

        self.settings.setValue("paths/recent_plans", recent)
        self.settings.sync()

    def clear_recent_plans(self) -> None:
        """Clear recent plan list."""
        self.settings.setValue("paths/recent_plans", [])
        self.settings.sync()
