"""Tests for the on-disk language store."""

from pathlib import Path
from typing import Dict, List

import pytest

from smart_localization.errors import (
    LocalizationError,
    MissingFileError,
    PersistenceError,
    ResourceParseError,
    RootCorruptError,
)
from smart_localization.tables.models import ResourceTable
from smart_localization.tables.store import (
    FIRST_KEY,
    FIRST_VALUE,
    LanguageStore,
    is_valid_language_tag,
)


class TestLanguageTags:
    """Language tag validation."""

    @pytest.mark.parametrize("tag", ["en", "fr", "pt-BR", "zh-Hant", "ast"])
    def test_valid(self, tag: str) -> None:
        assert is_valid_language_tag(tag)

    @pytest.mark.parametrize("tag", ["", "e", "english", "en_US", "../en", "en-"])
    def test_invalid(self, tag: str) -> None:
        assert not is_valid_language_tag(tag)


class TestLoading:
    """Loading tables from a localization directory."""

    def test_paths(self, store: LanguageStore, localization_dir: Path) -> None:
        assert store.root_path == localization_dir / "Language.resx"
        assert store.language_path("fr") == localization_dir / "Language.fr.resx"
        assert store.asset_directory("fr") == localization_dir / "fr"

    def test_available_languages(self, store: LanguageStore, localization_dir: Path) -> None:
        (localization_dir / "Language.not_a_tag.resx").write_text("")
        (localization_dir / "Other.de.resx").write_text("")
        assert store.available_languages() == ["en", "fr"]

    def test_missing_directory_has_no_languages(self, tmp_path: Path) -> None:
        assert LanguageStore(tmp_path / "nowhere").available_languages() == []

    def test_load_root(self, store: LanguageStore, root_entries: Dict[str, str]) -> None:
        root = store.load_root()
        assert root.is_root
        assert dict(root.items()) == root_entries

    def test_missing_root(self, tmp_path: Path) -> None:
        with pytest.raises(RootCorruptError):
            LanguageStore(tmp_path).load_root()

    def test_corrupt_root(self, store: LanguageStore) -> None:
        store.root_path.write_text("this is not a resource file")
        with pytest.raises(RootCorruptError):
            store.load_root()

    def test_load_language(
        self, store: LanguageStore, language_entries: Dict[str, Dict[str, str]]
    ) -> None:
        table = store.load_language("fr")
        assert table is not None
        assert table.language == "fr"
        assert dict(table.items()) == language_entries["fr"]

    def test_missing_language_reports_issue(self, store: LanguageStore) -> None:
        issues: List[LocalizationError] = []
        assert store.load_language("de", on_issue=issues.append) is None
        assert len(issues) == 1
        assert isinstance(issues[0], MissingFileError)
        assert issues[0].language == "de"

    def test_unreadable_language_reports_issue(self, store: LanguageStore) -> None:
        store.language_path("fr").write_bytes(b"\xff\xfe garbage")
        issues: List[LocalizationError] = []
        assert store.load_language("fr", on_issue=issues.append) is None
        assert isinstance(issues[-1], ResourceParseError)

    def test_language_tables(self, store: LanguageStore) -> None:
        tables = store.language_tables()
        assert list(tables) == ["en", "fr"]
        assert all(table is not None for table in tables.values())


class TestSaving:
    """Saving, creating and deleting tables."""

    def test_save_to_canonical_path(self, tmp_path: Path) -> None:
        store = LanguageStore(tmp_path)
        path = store.save(ResourceTable(language="de", entries={"A": "1"}))
        assert path == tmp_path / "Language.de.resx"

    def test_custom_base_name(self, tmp_path: Path) -> None:
        store = LanguageStore(tmp_path, base_name="Strings")
        store.create_root()
        assert (tmp_path / "Strings.resx").is_file()

    def test_save_failure_raises_persistence_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        store = LanguageStore(blocker)
        with pytest.raises(PersistenceError):
            store.save(ResourceTable(entries={"A": "1"}))

    def test_create_root_seeds_first_key(self, tmp_path: Path) -> None:
        store = LanguageStore(tmp_path)
        root = store.create_root()
        assert dict(root.items()) == {FIRST_KEY: FIRST_VALUE}
        assert store.load_root() == root

    def test_create_root_refuses_to_overwrite(self, store: LanguageStore) -> None:
        with pytest.raises(FileExistsError):
            store.create_root()
        store.create_root({"Only": "one"}, overwrite=True)
        assert list(store.load_root()) == ["Only"]

    def test_create_language_copies_root_keys(
        self, store: LanguageStore, root_entries: Dict[str, str]
    ) -> None:
        table = store.create_language("de")
        assert list(table) == list(root_entries)
        assert all(value == "" for _, value in table.items())
        assert store.load_language("de") == table

    def test_create_language_rejects_bad_or_existing_tags(self, store: LanguageStore) -> None:
        with pytest.raises(ValueError):
            store.create_language("not a tag")
        with pytest.raises(FileExistsError):
            store.create_language("fr")

    def test_delete_language(self, store: LanguageStore, localization_dir: Path) -> None:
        meta = localization_dir / "fr.meta"
        meta.write_text("guid: 2\n")

        assert store.delete_language("fr")

        assert not store.language_path("fr").exists()
        assert not (localization_dir / "fr").exists()
        assert not meta.exists()
        assert store.available_languages() == ["en"]
        assert store.root_exists()

    def test_delete_unknown_language(self, store: LanguageStore) -> None:
        assert not store.delete_language("de")
