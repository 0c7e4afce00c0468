"""
Settings package for smart_localization.

This package provides a modular, type-safe configuration management system
using Qt's QSettings for cross-platform storage.

Usage:
    from smart_localization.settings import AppSettings, ValidationResult

    settings = AppSettings(settings_file="localization.ini")
    result = settings.validate()
"""

from .core import AppSettings
from .types import ConfigVersion, ConfigError, ValidationResult
from .paths import PathSettings
from .logging import LoggingSettings
from .reconciliation import ReconciliationSettings

__all__ = [
    "AppSettings",
    "ConfigVersion",
    "ConfigError",
    "ValidationResult",
    "PathSettings",
    "LoggingSettings",
    "ReconciliationSettings",
]
