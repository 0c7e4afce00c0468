"""
On-disk layout of a localization directory.

The root table is ``Language.resx``; each language variant lives next to it
as ``Language.<tag>.resx`` and keeps its assets in a ``<tag>/`` folder.
"""

import logging
import re
import shutil
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional

from ..errors import (
    LocalizationError,
    MissingFileError,
    PersistenceError,
    ResourceParseError,
    RootCorruptError,
)
from .models import ResourceTable
from .resx import load_table, save_table

RESX_FILE_ENDING = ".resx"
DEFAULT_BASE_NAME = "Language"
FIRST_KEY = "MyFirst.Key"
FIRST_VALUE = "MyFirstValue"

LANGUAGE_TAG_PATTERN = re.compile(r"^[A-Za-z]{2,3}(?:-[A-Za-z0-9]{2,8})*$")

IssueHandler = Callable[[LocalizationError], None]


def is_valid_language_tag(tag: str) -> bool:
    """Check that ``tag`` looks like a locale identifier (``en``, ``pt-BR``)."""
    return bool(LANGUAGE_TAG_PATTERN.match(tag))


class LanguageStore:
    """Load, save, create and delete the tables of one localization directory."""

    def __init__(self, directory: str | Path, base_name: str = DEFAULT_BASE_NAME):
        self.directory = Path(directory)
        self.base_name = base_name
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.logger.debug(f"LanguageStore initialized for {self.directory}")

    # === PATHS ===

    @property
    def root_path(self) -> Path:
        return self.directory / f"{self.base_name}{RESX_FILE_ENDING}"

    def language_path(self, language: str) -> Path:
        return self.directory / f"{self.base_name}.{language}{RESX_FILE_ENDING}"

    def table_path(self, language: Optional[str]) -> Path:
        """Path of the root table (``None``) or of a language table."""
        return self.root_path if language is None else self.language_path(language)

    def asset_directory(self, language: str) -> Path:
        return self.directory / language

    def root_exists(self) -> bool:
        return self.root_path.is_file()

    def language_exists(self, language: str) -> bool:
        return self.language_path(language).is_file()

    def available_languages(self) -> List[str]:
        """Return the language tags that have a table on disk, sorted."""
        if not self.directory.is_dir():
            return []

        prefix = f"{self.base_name}."
        languages: List[str] = []
        for path in self.directory.glob(f"{prefix}*{RESX_FILE_ENDING}"):
            tag = path.name[len(prefix):-len(RESX_FILE_ENDING)]
            if is_valid_language_tag(tag):
                languages.append(tag)
            else:
                self.logger.debug(f"Ignoring file with invalid language tag: {path.name}")
        return sorted(languages)

    # === LOADING ===

    def load_root(self, on_issue: Optional[IssueHandler] = None) -> ResourceTable:
        """Load the root table.

        Raises:
            RootCorruptError: the root file is missing or cannot be parsed.
        """
        if not self.root_exists():
            raise RootCorruptError(f"Root language file not found: {self.root_path}")
        try:
            return load_table(self.root_path, language=None, on_issue=on_issue)
        except (ResourceParseError, OSError) as e:
            raise RootCorruptError(
                f"Root language file {self.root_path} could not be parsed: {e}"
            ) from e

    def load_language(
        self, language: str, on_issue: Optional[IssueHandler] = None
    ) -> Optional[ResourceTable]:
        """Load a language table, or return ``None`` if it is missing or unreadable."""
        path = self.language_path(language)
        if not path.is_file():
            error = MissingFileError(
                f"Language file for '{language}' not found: {path}", language=language
            )
            self.logger.warning(error.message)
            if on_issue:
                on_issue(error)
            return None

        try:
            return load_table(path, language=language, on_issue=on_issue)
        except (ResourceParseError, OSError) as e:
            error = ResourceParseError(
                f"Language file for '{language}' could not be read, treating it as empty: {e}",
                language=language,
            )
            self.logger.error(error.message)
            if on_issue:
                on_issue(error)
            return None

    def language_tables(
        self,
        languages: Optional[Iterable[str]] = None,
        on_issue: Optional[IssueHandler] = None,
    ) -> Dict[str, Optional[ResourceTable]]:
        """Load several language tables (all available ones by default)."""
        tags = list(languages) if languages is not None else self.available_languages()
        return {tag: self.load_language(tag, on_issue=on_issue) for tag in tags}

    # === SAVING ===

    def save(self, table: ResourceTable) -> Path:
        """Persist a table at its canonical location.

        Raises:
            PersistenceError: the file could not be written.
        """
        path = self.table_path(table.language)
        try:
            save_table(table, path)
        except OSError as e:
            raise PersistenceError(
                f"Could not save language file {path}: {e}", language=table.language
            ) from e
        return path

    # === CREATION / DELETION ===

    def create_root(
        self, initial: Optional[Mapping[str, str]] = None, overwrite: bool = False
    ) -> ResourceTable:
        """Create the root table, seeded with an example key by default."""
        if self.root_exists() and not overwrite:
            raise FileExistsError(f"Root language file already exists: {self.root_path}")

        entries = dict(initial) if initial is not None else {FIRST_KEY: FIRST_VALUE}
        table = ResourceTable(language=None, entries=entries)
        self.save(table)
        self.logger.info(f"Created root language file {self.root_path}")
        return table

    def create_language(self, language: str) -> ResourceTable:
        """Create a language table holding every root key with an empty value."""
        if not is_valid_language_tag(language):
            raise ValueError(f"Invalid language tag: {language!r}")
        if self.language_exists(language):
            raise FileExistsError(f"Language '{language}' already exists")

        table = self.load_root().empty_copy(language)
        self.save(table)
        self.logger.info(f"Created language '{language}' with {len(table)} keys")
        return table

    def delete_language(self, language: str) -> bool:
        """Delete a language table and its asset folder. Returns True if anything was removed."""
        removed = False
        path = self.language_path(language)
        for candidate in (path, path.with_name(path.name + ".meta")):
            if candidate.is_file():
                candidate.unlink()
                removed = True

        asset_dir = self.asset_directory(language)
        if asset_dir.is_dir():
            shutil.rmtree(asset_dir)
            removed = True
        meta = asset_dir.with_name(asset_dir.name + ".meta")
        if meta.is_file():
            meta.unlink()

        if removed:
            self.logger.info(f"Deleted language '{language}'")
        else:
            self.logger.warning(f"Language '{language}' not found, nothing deleted")
        return removed
