"""
Settings migration system for smart_localization.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from .types import ConfigVersion

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)


class SettingsMigrator:
    """Handles configuration migration between versions."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def ensure_version(self) -> None:
        """Ensure configuration version is set and handle migrations."""
        current_version = str(self.settings.value("app/version", "") or "")

        if not current_version:
            # First run - set current version
            self.settings.setValue("app/version", ConfigVersion.CURRENT.value)
            self.settings.setValue("app/first_run", True)
            self.settings.sync()
            logger.info("First run detected, initializing configuration")
        elif current_version != ConfigVersion.CURRENT.value:
            self._migrate_config(current_version, ConfigVersion.CURRENT.value)

    def _migrate_config(self, from_version: str, to_version: str) -> None:
        """Migrate configuration from old version to new version."""
        logger.info(f"Migrating configuration from {from_version} to {to_version}")

        if from_version == "1.0" and to_version == "1.1":
            self._migrate_1_0_to_1_1()

        self.settings.setValue("app/version", to_version)
        self.settings.setValue("app/migrated_from", from_version)
        self.settings.sync()
        logger.info(f"Migration from {from_version} to {to_version} completed")

    def _migrate_1_0_to_1_1(self) -> None:
        """Migrate from version 1.0 to 1.1 - split the root language file path.

        1.0 stored the root table as one path without extension
        (``.../Localization/Language``); 1.1 keeps the directory and the
        base name apart.
        """
        logger.debug("Performing migration from 1.0 to 1.1")

        old_path = str(self.settings.value("paths/root_language_file", "") or "")
        if not old_path:
            return

        root_file = Path(old_path)
        if root_file.suffix == ".resx":
            root_file = root_file.with_suffix("")

        self.settings.setValue("paths/localization", str(root_file.parent))
        self.settings.setValue("paths/root_file_name", root_file.name)
        self.settings.remove("paths/root_language_file")
        self.settings.sync()
        logger.info(
            f"Migrated root language file {old_path} -> "
            f"directory {root_file.parent}, name {root_file.name}"
        )
