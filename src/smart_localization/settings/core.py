"""
Core settings management for smart_localization.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from PySide6.QtCore import QSettings

from .types import ConfigVersion, ValidationResult
from .migration import SettingsMigrator
from .validation import SettingsValidator
from .paths import PathSettings
from .logging import LoggingSettings
from .reconciliation import ReconciliationSettings

logger = logging.getLogger(__name__)


class AppSettings:
    """
    Configuration management using QSettings.

    Provides type-safe access to application settings with automatic
    cross-platform storage and validation. When ``settings_file`` is given
    the settings live in that INI file instead of the platform store.
    """

    def __init__(
        self,
        profile: str = "default",
        settings_file: Optional[Union[str, Path]] = None,
    ):
        """Initialize settings with organization, application name, and profile.

        Args:
            profile: Settings profile name (default: "default")
            settings_file: Optional INI file to read and write instead of the
                platform store
        """
        if settings_file is not None:
            self.settings = QSettings(str(settings_file), QSettings.Format.IniFormat)
        else:
            self.settings = QSettings("smart_localization", "smart_localization")
        self.profile = profile

        # Use profile as a group: smart_localization/default/...
        self.settings.beginGroup(profile)

        # Initialize subsystems
        self._migrator = SettingsMigrator(self.settings)
        self._validator = SettingsValidator(self)
        self._paths = PathSettings(self.settings)
        self._logging = LoggingSettings(self.settings)
        self._reconciliation = ReconciliationSettings(self.settings)

        # Ensure version and migrate if needed
        self._migrator.ensure_version()

        logger.debug(
            f"Settings initialized for profile '{profile}', stored at: {self.settings.fileName()}"
        )

    # === SUBSYSTEM ACCESS ===

    @property
    def paths(self) -> PathSettings:
        """Access path settings subsystem."""
        return self._paths

    @property
    def logging(self) -> LoggingSettings:
        """Access logging settings subsystem."""
        return self._logging

    @property
    def reconciliation(self) -> ReconciliationSettings:
        """Access reconciliation settings subsystem."""
        return self._reconciliation

    # === VERSION AND FIRST RUN ===

    @property
    def is_first_run(self) -> bool:
        """Check if this is the first run of the application."""
        return self._get_bool("app/first_run", True)

    def set_first_run_complete(self) -> None:
        """Mark first run as complete."""
        self.settings.setValue("app/first_run", False)
        self.settings.sync()

    @property
    def version(self) -> str:
        """Get configuration version."""
        return self._get_str("app/version", ConfigVersion.CURRENT.value)

    # === HELPER METHODS ===

    def _get_str(self, key: str, default: str = "") -> str:
        """Type-safe string retrieval from settings."""
        value = self.settings.value(key, default)
        return str(value) if value is not None else default

    def _get_bool(self, key: str, default: bool = False) -> bool:
        """Type-safe boolean retrieval from settings."""
        value = self.settings.value(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        return bool(value) if value is not None else default

    # === PATH SETTINGS (DELEGATED) ===

    @property
    def localization_path(self) -> Optional[Path]:
        """Get the directory holding the language tables."""
        return self._paths.localization_path

    @localization_path.setter
    def localization_path(self, value: Optional[Path]) -> None:
        """Set the directory holding the language tables."""
        self._paths.localization_path = value

    @property
    def root_file_name(self) -> str:
        """Get the base name of the table files."""
        return self._paths.root_file_name

    @root_file_name.setter
    def root_file_name(self, value: str) -> None:
        """Set the base name of the table files."""
        self._paths.root_file_name = value

    @property
    def root_file_path(self) -> Optional[Path]:
        """Get the root table path (derived from localization_path)."""
        return self._paths.root_file_path

    @property
    def recent_plans(self) -> List[str]:
        """Get list of recently applied plan files."""
        return self._paths.recent_plans

    def add_recent_plan(self, file_path: Union[str, Path]) -> None:
        """Add plan file to recent list (max 10 items)."""
        self._paths.add_recent_plan(file_path)

    def clear_recent_plans(self) -> None:
        """Clear recent plan list."""
        self._paths.clear_recent_plans()

    # === RECONCILIATION SETTINGS (DELEGATED) ===

    @property
    def default_language(self) -> str:
        """Get the language loaded when none is requested."""
        return self._reconciliation.default_language

    @default_language.setter
    def default_language(self, value: str) -> None:
        """Set the default language."""
        self._reconciliation.default_language = value

    @property
    def dry_run(self) -> bool:
        """Check if reconciliation should run without writing anything."""
        return self._reconciliation.dry_run

    @dry_run.setter
    def dry_run(self, value: bool) -> None:
        """Set dry-run mode."""
        self._reconciliation.dry_run = value

    # === LOGGING SETTINGS (DELEGATED) ===

    @property
    def console_logging(self) -> bool:
        """Check if console logging is enabled."""
        return self._logging.console_logging

    @console_logging.setter
    def console_logging(self, value: bool) -> None:
        """Set console logging enabled state."""
        self._logging.console_logging = value

    @property
    def console_log_level(self) -> str:
        """Get console logging level."""
        return self._logging.console_log_level

    @console_log_level.setter
    def console_log_level(self, value: str) -> None:
        """Set console logging level."""
        self._logging.console_log_level = value

    @property
    def console_use_colors(self) -> bool:
        """Check if console should use colors."""
        return self._logging.console_use_colors

    @console_use_colors.setter
    def console_use_colors(self, value: bool) -> None:
        """Set console color usage."""
        self._logging.console_use_colors = value

    @property
    def file_logging(self) -> bool:
        """Check if file logging is enabled."""
        return self._logging.file_logging

    @file_logging.setter
    def file_logging(self, value: bool) -> None:
        """Set file logging enabled state."""
        self._logging.file_logging = value

    @property
    def log_file_path(self) -> str:
        """Get log file path (read-only)."""
        return self._logging.log_file_path

    @property
    def log_file_absolute_path(self) -> Path:
        """Get absolute path to log file."""
        return self._logging.log_file_absolute_path

    # === VALIDATION ===

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        return self._validator.validate()

    # === UTILITY METHODS ===

    def get_settings_file_path(self) -> str:
        """Get the file path where settings are stored."""
        return self.settings.fileName()

    def sync(self) -> None:
        """Force synchronization of settings to storage."""
        self.settings.sync()
