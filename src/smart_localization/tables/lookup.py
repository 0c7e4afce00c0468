"""
Runtime lookups in the currently selected language.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from ..assets.relocator import FileSystemAssetRelocator
from .keys import LocalizedObjectType
from .models import LocalizedValue
from .store import LanguageStore


class LanguageCatalog:
    """Holds the parsed values of one language and answers key lookups.

    Observers are called with the catalog every time a language is loaded.
    """

    def __init__(
        self,
        store: LanguageStore,
        default_language: str = "en",
        observers: Optional[Iterable[Callable[["LanguageCatalog"], None]]] = None,
    ):
        self.store = store
        self.default_language = default_language
        self.observers = list(observers or [])
        self.language: Optional[str] = None
        self._values: Dict[str, LocalizedValue] = {}
        self._assets = FileSystemAssetRelocator(store.directory)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def is_initialized(self) -> bool:
        return self.language is not None

    @property
    def available_languages(self) -> List[str]:
        return self.store.available_languages()

    def initialize(self) -> Optional[str]:
        """Load the default language, or the first available one."""
        available = self.available_languages
        if self.default_language in available:
            return self.change_language(self.default_language)
        if available:
            return self.change_language(available[0])
        self.logger.error("No language is available")
        return None

    def change_language(self, language: str) -> Optional[str]:
        """Load ``language``, falling back to the default language if it is missing.

        Returns:
            The language actually loaded, or None if nothing could be loaded
        """
        table = self.store.load_language(language)
        if table is None:
            if language != self.default_language:
                self.logger.error(
                    f"Language '{language}' could not be found, reverting to '{self.default_language}'"
                )
                return self.change_language(self.default_language)
            self.logger.error(f"Language '{language}' could not be found")
            return None

        self.language = language
        self._values = table.parsed()
        for observer in self.observers:
            observer(self)
        return language

    def get_localized_value(self, bare_key: str) -> Optional[LocalizedValue]:
        return self._values.get(bare_key)

    def get_text_value(self, bare_key: str) -> Optional[str]:
        """Return the value of a key in the current language, or None."""
        value = self._values.get(bare_key)
        if value is None:
            self.logger.error(f"Invalid key '{bare_key}' for language '{self.language}'")
            return None
        return value.value

    def get_asset_path(self, kind: LocalizedObjectType, bare_key: str) -> Optional[Path]:
        """Return the asset file of an asset key in the current language."""
        value = self._values.get(bare_key)
        if value is None or value.kind != kind or self.language is None:
            return None
        return self._assets.find_asset(kind, bare_key, self.language)
