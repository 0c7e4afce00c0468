"""
Settings value types and configuration errors for smart_localization.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List


class ConfigVersion(Enum):
    """Layout version of the stored settings.

    1.0 kept the root table as a single ``paths/root_language_file`` path;
    1.1 stores the localization directory and the root file name apart.
    """
    V1_0 = "1.0"
    V1_1 = "1.1"
    CURRENT = V1_1


class ConfigError(Exception):
    """No usable localization directory could be derived from the settings."""
    pass


@dataclass
class ValidationResult:
    """Outcome of checking the localization settings.

    Errors make the configuration unusable without an explicit directory
    (a missing localization path, a bad root file name or default language);
    warnings cover recoverable states such as stale recent plan files.
    """
    is_valid: bool
    errors: List[str]
    warnings: List[str]
