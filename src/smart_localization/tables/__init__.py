"""
Localized resource tables.

Provides the key codec, the table model, ``.resx`` reading/writing and the
on-disk store of a localization directory. Runtime lookups live in
``tables.lookup``.
"""

from .keys import (
    KEY_TYPE_IDENTIFIER,
    LocalizedObjectType,
    decode,
    encode,
    get_bare_key,
    get_kind,
)
from .models import LocalizedValue, ResourceTable
from .resx import dump_table, load_table, parse_table, save_table
from .store import LanguageStore, is_valid_language_tag
from .translation import (
    TranslationRequest,
    TranslationResult,
    apply_translation,
    build_translation_request,
)

__all__ = [
    # Keys
    "KEY_TYPE_IDENTIFIER",
    "LocalizedObjectType",
    "decode",
    "encode",
    "get_bare_key",
    "get_kind",
    # Models
    "LocalizedValue",
    "ResourceTable",
    # Files
    "dump_table",
    "load_table",
    "parse_table",
    "save_table",
    "LanguageStore",
    "is_valid_language_tag",
    # Translation boundary
    "TranslationRequest",
    "TranslationResult",
    "apply_translation",
    "build_translation_request",
]
