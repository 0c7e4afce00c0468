"""Shared fixtures for smart_localization tests."""

from pathlib import Path
from typing import Callable, Dict

import pytest
from PIL import Image

from smart_localization.assets.relocator import RecordingAssetRelocator
from smart_localization.reconciliation import LocalizationService
from smart_localization.tables.models import ResourceTable
from smart_localization.tables.store import LanguageStore

ROOT_ENTRIES: Dict[str, str] = {
    "Greeting": "Hello",
    "Farewell": "Goodbye",
    "[type=AUDIO]Bark": "",
    "[type=TEXTURE]Logo": "",
}

LANGUAGE_ENTRIES: Dict[str, Dict[str, str]] = {
    "en": {
        "Greeting": "Hello",
        "Farewell": "Goodbye",
        "[type=AUDIO]Bark": "en-bark",
        "[type=TEXTURE]Logo": "",
    },
    "fr": {
        "Greeting": "Bonjour",
        "Farewell": "Au revoir",
        "[type=AUDIO]Bark": "fr-bark",
        "[type=TEXTURE]Logo": "fr-logo",
    },
}


def write_png(path: Path) -> Path:
    """Write a tiny valid PNG image."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", (2, 2), color=(255, 0, 0)).save(path, format="PNG")
    return path


@pytest.fixture
def localization_dir(tmp_path: Path) -> Path:
    """A localization directory with a root table, ``en`` and ``fr`` and their assets."""
    directory = tmp_path / "Localization"
    store = LanguageStore(directory)
    store.save(ResourceTable(language=None, entries=ROOT_ENTRIES))
    for language, entries in LANGUAGE_ENTRIES.items():
        store.save(ResourceTable(language=language, entries=entries))

    for language in LANGUAGE_ENTRIES:
        audio = directory / language / "Audio Files" / "Bark.wav"
        audio.parent.mkdir(parents=True, exist_ok=True)
        audio.write_bytes(b"RIFF" + language.encode())
        audio.with_name("Bark.wav.meta").write_text("guid: 1\n")
    write_png(directory / "fr" / "Textures" / "Logo.png")

    return directory


@pytest.fixture
def store(localization_dir: Path) -> LanguageStore:
    return LanguageStore(localization_dir)


@pytest.fixture
def service(localization_dir: Path) -> LocalizationService:
    return LocalizationService(directory=localization_dir)


@pytest.fixture
def recording_relocator() -> RecordingAssetRelocator:
    return RecordingAssetRelocator()


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    """Path of a throwaway INI settings file."""
    return tmp_path / "smart_localization.ini"


@pytest.fixture
def root_entries() -> Dict[str, str]:
    return dict(ROOT_ENTRIES)


@pytest.fixture
def language_entries() -> Dict[str, Dict[str, str]]:
    return {language: dict(entries) for language, entries in LANGUAGE_ENTRIES.items()}


@pytest.fixture
def make_png() -> Callable[[Path], Path]:
    return write_png
