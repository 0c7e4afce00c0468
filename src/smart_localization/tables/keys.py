"""
Key encoding for localized resource tables.

A full key is either a bare identifier (a STRING value) or a bare key
prefixed with a type tag, e.g. ``[type=AUDIO]Bark``.
"""

import logging
from enum import Enum
from typing import Callable, Optional, Tuple

from ..errors import KeySyntaxError

logger = logging.getLogger(__name__)

KEY_TYPE_IDENTIFIER = "[type="
"""Prefix shared by every tagged (non-string) key."""


class LocalizedObjectType(Enum):
    """Kind of value a key refers to."""

    STRING = 0
    GAME_OBJECT = 1
    AUDIO = 2
    TEXTURE = 3
    INVALID = 4  # sentinel, never persisted

    @property
    def is_asset(self) -> bool:
        """True for kinds backed by an external asset file."""
        return self in ASSET_TYPES

    @property
    def tag(self) -> str:
        """Type tag written in front of the bare key."""
        return f"{KEY_TYPE_IDENTIFIER}{self.name}]"


ASSET_TYPES = (
    LocalizedObjectType.GAME_OBJECT,
    LocalizedObjectType.AUDIO,
    LocalizedObjectType.TEXTURE,
)

SyntaxErrorHandler = Callable[[KeySyntaxError], None]


def decode(
    full_key: str, on_error: Optional[SyntaxErrorHandler] = None
) -> Tuple[str, LocalizedObjectType]:
    """Split a full key into ``(bare_key, kind)``.

    Unknown tags never raise: the error is logged, handed to ``on_error`` if
    given, and the whole key is treated as a STRING key.
    """
    if not full_key.startswith(KEY_TYPE_IDENTIFIER):
        return full_key, LocalizedObjectType.STRING

    for kind in ASSET_TYPES:
        if full_key.startswith(kind.tag):
            return full_key[len(kind.tag):], kind

    error = KeySyntaxError(
        f"Error in syntax of key '{full_key}', setting object type to STRING",
        key=full_key,
    )
    logger.error(error.message)
    if on_error:
        on_error(error)
    return full_key, LocalizedObjectType.STRING


def encode(bare_key: str, kind: LocalizedObjectType) -> str:
    """Build the full key for a bare key of the given kind."""
    if kind == LocalizedObjectType.STRING:
        return bare_key
    if kind == LocalizedObjectType.INVALID:
        raise ValueError(f"Cannot encode key '{bare_key}' with INVALID type")
    return kind.tag + bare_key


def get_kind(full_key: str) -> LocalizedObjectType:
    """Return the kind encoded in a full key."""
    return decode(full_key)[1]


def get_bare_key(full_key: str) -> str:
    """Return the full key with any type tag stripped."""
    return decode(full_key)[0]
