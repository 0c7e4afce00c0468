"""
Boundary towards machine translation providers.

No provider is called from here. A caller builds a request from a table,
hands it to its provider and applies the result to its own copy of the
target table once it is back on the owning thread.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .keys import LocalizedObjectType, decode
from .models import ResourceTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranslationRequest:
    """A batch of texts to translate, correlated with their full keys."""

    keys: Tuple[str, ...]
    texts: Tuple[str, ...]
    from_language: Optional[str]
    to_language: str


@dataclass(frozen=True)
class TranslationResult:
    """Translated texts returned by a provider, aligned with ``keys``."""

    keys: Tuple[str, ...]
    texts: Tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.keys) != len(self.texts):
            raise ValueError("Translation result keys and texts differ in length")


def build_translation_request(
    source: ResourceTable,
    to_language: str,
    target: Optional[ResourceTable] = None,
) -> TranslationRequest:
    """Collect the non-empty STRING values of ``source``.

    When ``target`` is given, only keys that are still empty there are sent.
    """
    keys = []
    texts = []
    for full_key, value in source.items():
        if decode(full_key)[1] != LocalizedObjectType.STRING or not value:
            continue
        if target is not None and target.get(full_key):
            continue
        keys.append(full_key)
        texts.append(value)

    return TranslationRequest(
        keys=tuple(keys),
        texts=tuple(texts),
        from_language=source.language,
        to_language=to_language,
    )


def apply_translation(table: ResourceTable, result: TranslationResult) -> ResourceTable:
    """Return a copy of ``table`` with the translated texts filled in."""
    entries: Dict[str, str] = dict(table.entries)
    applied = 0
    for full_key, text in zip(result.keys, result.texts):
        if full_key not in entries:
            logger.warning(f"Translated key '{full_key}' is not in the table, ignoring it")
            continue
        if decode(full_key)[1] != LocalizedObjectType.STRING:
            logger.warning(f"Translated key '{full_key}' is not a string key, ignoring it")
            continue
        entries[full_key] = text
        applied += 1

    logger.debug(f"Applied {applied} translations to '{table.language}'")
    return ResourceTable(language=table.language, entries=entries, header=table.header)
