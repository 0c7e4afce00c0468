"""
Reconciliation-related settings for smart_localization.
"""

import logging
from typing import TYPE_CHECKING

from ..tables.store import is_valid_language_tag

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)


class ReconciliationSettings:
    """Manages reconciliation and runtime language settings."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def _get_bool(self, key: str, default: bool = False) -> bool:
        """Type-safe boolean retrieval from settings."""
        value = self.settings.value(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        return bool(value) if value is not None else default

    @property
    def default_language(self) -> str:
        """Get the language loaded when none is requested."""
        value = self.settings.value("reconciliation/default_language", "en")
        return str(value) if value else "en"

    @default_language.setter
    def default_language(self, value: str) -> None:
        """Set the default language."""
        if is_valid_language_tag(value):
            self.settings.setValue("reconciliation/default_language", value)
            self.settings.sync()
        else:
            logger.warning(
                f"Invalid language tag: {value}, keeping current: {self.default_language}"
            )

    @property
    def dry_run(self) -> bool:
        """Check if reconciliation should run without writing anything."""
        return self._get_bool("reconciliation/dry_run", False)

    @dry_run.setter
    def dry_run(self, value: bool) -> None:
        """Set dry-run mode."""
        self.settings.setValue("reconciliation/dry_run", value)
        self.settings.sync()
