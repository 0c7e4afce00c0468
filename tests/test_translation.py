"""Tests for the translation boundary."""

import pytest

from smart_localization.tables.models import ResourceTable
from smart_localization.tables.translation import (
    TranslationResult,
    apply_translation,
    build_translation_request,
)

SOURCE = ResourceTable(
    language="en",
    entries={"Greeting": "Hello", "Farewell": "Goodbye", "Empty": "", "[type=AUDIO]Bark": "ref"},
)


class TestTranslationRequest:
    """Collecting texts to translate."""

    def test_only_non_empty_strings(self) -> None:
        request = build_translation_request(SOURCE, "fr")
        assert request.keys == ("Greeting", "Farewell")
        assert request.texts == ("Hello", "Goodbye")
        assert request.from_language == "en"
        assert request.to_language == "fr"

    def test_skips_keys_already_translated(self) -> None:
        target = ResourceTable(language="fr", entries={"Greeting": "Bonjour", "Farewell": ""})
        request = build_translation_request(SOURCE, "fr", target)
        assert request.keys == ("Farewell",)


class TestApplyTranslation:
    """Filling in translated texts."""

    def test_returns_new_table(self) -> None:
        target = SOURCE.empty_copy("fr")
        result = TranslationResult(
            keys=("Greeting", "Unknown", "[type=AUDIO]Bark"),
            texts=("Bonjour", "x", "y"),
        )

        translated = apply_translation(target, result)

        assert translated.get("Greeting") == "Bonjour"
        assert translated.get("[type=AUDIO]Bark") == ""
        assert "Unknown" not in translated
        assert target.get("Greeting") == ""

    def test_result_must_align(self) -> None:
        with pytest.raises(ValueError):
            TranslationResult(keys=("A",), texts=())
