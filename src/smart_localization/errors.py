"""
Error taxonomy for smart_localization.

Recoverable conditions (key syntax, missing language file, duplicate key,
per-table persistence failure) are recorded in a reconciliation report
instead of being raised. Only ``RootCorruptError`` aborts a save.
"""

from typing import Optional


class LocalizationError(Exception):
    """Base class for all localization errors."""

    def __init__(
        self,
        message: str,
        language: Optional[str] = None,
        key: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.language = language
        self.key = key


class KeySyntaxError(LocalizationError):
    """A key carries a type tag that is not recognised."""


class MissingFileError(LocalizationError):
    """An expected language table is absent on disk."""


class DuplicateKeyError(LocalizationError):
    """A key collided with an existing one and was renamed."""


class PersistenceError(LocalizationError):
    """A table could not be written."""


class ResourceParseError(LocalizationError):
    """A resource file could not be parsed at all."""


class RootCorruptError(LocalizationError):
    """The root table is missing or unparsable. Fatal for the current save."""
