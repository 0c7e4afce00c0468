"""
Settings validation system for smart_localization.
"""

import logging
from pathlib import Path
from typing import List, TYPE_CHECKING

from ..tables.store import is_valid_language_tag
from .types import ValidationResult

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)


class SettingsValidator:
    """Validates configuration settings."""

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        errors: List[str] = []
        warnings: List[str] = []

        # Validate localization directory
        localization_path = self.settings.localization_path
        if localization_path:
            if not localization_path.exists():
                errors.append(f"Localization path does not exist: {localization_path}")
            elif not (self.settings.root_file_path and self.settings.root_file_path.exists()):
                warnings.append(
                    f"No root language file in localization path: {localization_path}"
                )
        else:
            warnings.append("Localization path not set")

        # Validate root file name
        root_file_name = self.settings.root_file_name
        if "/" in root_file_name or "\\" in root_file_name:
            errors.append(f"Root file name must not contain a path: {root_file_name}")

        # Validate default language
        if not is_valid_language_tag(self.settings.default_language):
            errors.append(f"Invalid default language: {self.settings.default_language}")

        # Clean up plan files that no longer exist
        recent_plans = self.settings.recent_plans
        valid_recent = [p for p in recent_plans if Path(p).exists()]
        for missing in set(recent_plans) - set(valid_recent):
            warnings.append(f"Recent plan file no longer exists: {missing}")
        if len(valid_recent) != len(recent_plans):
            self.settings.settings.setValue("paths/recent_plans", valid_recent)
            self.settings.settings.sync()

        return ValidationResult(
            is_valid=len(errors) == 0, errors=errors, warnings=warnings
        )
