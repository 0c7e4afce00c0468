"""Tests for the reconciliation engine."""

from typing import Dict, List, Optional

import pytest

from smart_localization.assets.relocator import RecordingAssetRelocator
from smart_localization.reconciliation.engine import ReconciliationEngine, unique_bare_key
from smart_localization.reconciliation.models import (
    AssetOperation,
    Issue,
    IssueSeverity,
    KeyChange,
    ReconciliationPlan,
    ReconciliationReport,
)
from smart_localization.tables.keys import LocalizedObjectType
from smart_localization.tables.models import ResourceTable


def tables(
    root: Dict[str, str], **languages: Optional[Dict[str, str]]
) -> tuple:
    root_table = ResourceTable(language=None, entries=root)
    language_tables = {
        language: ResourceTable(language=language, entries=entries) if entries is not None else None
        for language, entries in languages.items()
    }
    return root_table, language_tables


@pytest.fixture
def engine(recording_relocator: RecordingAssetRelocator) -> ReconciliationEngine:
    return ReconciliationEngine(recording_relocator)


class TestUniqueBareKey:
    """Suffix search for free names."""

    def test_free_name_unchanged(self) -> None:
        assert unique_bare_key("Key", {"Other"}) == "Key"

    def test_first_free_suffix(self) -> None:
        assert unique_bare_key("Key", {"Key"}) == "Key0"
        assert unique_bare_key("Key", {"Key", "Key0", "Key1"}) == "Key2"


class TestDeduplicate:
    """Renaming colliding keys."""

    def test_suffixes(self, engine: ReconciliationEngine) -> None:
        assert engine.deduplicate("Key", ["Key"]) == "Key0"
        assert engine.deduplicate("Key", ["Key", "Key0"]) == "Key1"
        assert engine.deduplicate("Fresh", ["Key"]) == "Fresh"

    def test_compares_bare_keys_and_keeps_tag(self, engine: ReconciliationEngine) -> None:
        report = ReconciliationReport()
        result = engine.deduplicate("[type=AUDIO]Key", ["Key"], report)
        assert result == "[type=AUDIO]Key0"
        assert [issue.code for issue in report.issues] == ["DuplicateKeyError"]

    def test_observers_see_issues(self, recording_relocator: RecordingAssetRelocator) -> None:
        seen: List[Issue] = []
        engine = ReconciliationEngine(recording_relocator, observers=[seen.append])
        engine.deduplicate("Key", ["Key"])
        assert len(seen) == 1
        assert seen[0].severity == IssueSeverity.WARNING


class TestComputePlan:
    """Building plans from old/new key lists."""

    def test_renames_and_deletions(self, engine: ReconciliationEngine) -> None:
        plan = engine.compute_plan(
            ["Greeting", None],
            ["Greeting2", "[type=AUDIO]Woof"],
            snapshot_keys=["Greeting", "Farewell"],
        )
        assert plan.renamed_keys == {"Greeting": "Greeting2"}
        assert plan.added_keys == ["[type=AUDIO]Woof"]
        assert plan.deleted_keys == ("Farewell",)
        assert not plan.is_empty

    def test_identity_plan_is_empty(self, engine: ReconciliationEngine) -> None:
        plan = engine.compute_plan(["A", "B"], ["A", "B"])
        assert plan.is_empty
        assert plan.deleted_keys == ()

    def test_length_mismatch(self, engine: ReconciliationEngine) -> None:
        with pytest.raises(ValueError):
            engine.compute_plan(["A"], ["A", "B"])

    def test_key_referenced_twice(self, engine: ReconciliationEngine) -> None:
        with pytest.raises(ValueError):
            engine.compute_plan(["A", "A"], ["A", "B"])

    def test_values_must_align(self, engine: ReconciliationEngine) -> None:
        with pytest.raises(ValueError):
            engine.compute_plan(["A"], ["A"], values=["x", "y"])


class TestApplyPlan:
    """Rebuilding the root and language tables."""

    def test_rename_keeps_translations(self, engine: ReconciliationEngine) -> None:
        """Greeting renamed to Greeting2 keeps its value in every language."""
        root, languages = tables(
            {"Greeting": "Hello", "Farewell": "Bye"},
            fr={"Greeting": "Bonjour", "Farewell": "Salut"},
            de={"Greeting": "Hallo", "Farewell": "Tschuss"},
        )
        plan = engine.compute_plan(["Greeting", "Farewell"], ["Greeting2", "Farewell"])

        result = engine.apply_plan(plan, root, languages)

        assert dict(result.root.items()) == {"Greeting2": "Hello", "Farewell": "Bye"}
        assert dict(result.languages["fr"].items()) == {"Greeting2": "Bonjour", "Farewell": "Salut"}
        assert result.languages["de"].get("Greeting2") == "Hallo"
        assert result.key_map == {"Greeting": "Greeting2", "Farewell": "Farewell"}
        assert len(result.report) == 0

    def test_language_key_sets_match_root(self, engine: ReconciliationEngine) -> None:
        root, languages = tables(
            {"A": "a", "B": "b"},
            fr={"A": "fa", "Stale": "old"},
            de={},
        )
        plan = engine.compute_plan(["A", "B", None], ["A", "B", "C"], values=[None, None, "c"])

        result = engine.apply_plan(plan, root, languages)

        assert list(result.root) == ["A", "B", "C"]
        for table in result.languages.values():
            assert list(table) == list(result.root)
        assert dict(result.languages["fr"].items()) == {"A": "fa", "B": "", "C": ""}
        assert result.root.get("C") == "c"

    def test_kind_change_wipes_value_and_asset(
        self, engine: ReconciliationEngine, recording_relocator: RecordingAssetRelocator
    ) -> None:
        root, languages = tables(
            {"[type=TEXTURE]Logo": "ref"},
            fr={"[type=TEXTURE]Logo": "fr-ref"},
            de={"[type=TEXTURE]Logo": "de-ref"},
        )
        plan = engine.compute_plan(["[type=TEXTURE]Logo"], ["Logo"])

        result = engine.apply_plan(plan, root, languages)
        engine.apply_asset_changes(result)

        assert dict(result.root.items()) == {"Logo": ""}
        assert result.languages["fr"].get("Logo") == ""
        assert recording_relocator.calls == [
            ("delete", "TEXTURE", "Logo", "fr"),
            ("delete", "TEXTURE", "Logo", "de"),
        ]

    def test_kind_change_from_string_deletes_nothing(
        self, engine: ReconciliationEngine, recording_relocator: RecordingAssetRelocator
    ) -> None:
        root, languages = tables({"Bark": "text"}, fr={"Bark": "texte"})
        plan = engine.compute_plan(["Bark"], ["[type=AUDIO]Bark"])

        result = engine.apply_plan(plan, root, languages)
        engine.apply_asset_changes(result)

        assert result.languages["fr"].get("[type=AUDIO]Bark") == ""
        assert recording_relocator.calls == []

    def test_asset_rename_moves_asset(
        self, engine: ReconciliationEngine, recording_relocator: RecordingAssetRelocator
    ) -> None:
        root, languages = tables(
            {"[type=AUDIO]Bark": ""},
            fr={"[type=AUDIO]Bark": "fr-bark"},
        )
        plan = engine.compute_plan(["[type=AUDIO]Bark"], ["[type=AUDIO]Woof"])

        result = engine.apply_plan(plan, root, languages)
        engine.apply_asset_changes(result)

        assert result.languages["fr"].get("[type=AUDIO]Woof") == "fr-bark"
        assert recording_relocator.calls == [("rename", "AUDIO", "Bark", "Woof", "fr")]

    def test_deleted_asset_key_deleted_once_per_language(
        self, engine: ReconciliationEngine, recording_relocator: RecordingAssetRelocator
    ) -> None:
        root, languages = tables(
            {"Greeting": "Hello", "[type=AUDIO]Bark": ""},
            fr={"Greeting": "Bonjour", "[type=AUDIO]Bark": "fr-bark"},
            de={"Greeting": "Hallo", "[type=AUDIO]Bark": "de-bark"},
        )
        plan = engine.compute_plan(
            ["Greeting"], ["Greeting"], snapshot_keys=root.keys()
        )

        result = engine.apply_plan(plan, root, languages)
        engine.apply_asset_changes(result)

        assert list(result.root) == ["Greeting"]
        assert list(result.languages["de"]) == ["Greeting"]
        assert recording_relocator.calls == [
            ("delete", "AUDIO", "Bark", "fr"),
            ("delete", "AUDIO", "Bark", "de"),
        ]

    def test_missing_language_is_treated_as_empty(
        self, engine: ReconciliationEngine
    ) -> None:
        root, languages = tables({"A": "a", "B": "b"}, fr={"A": "fa", "B": "fb"}, de=None)
        plan = engine.compute_plan(["A", "B"], ["A", "B"])

        result = engine.apply_plan(plan, root, languages)

        assert dict(result.languages["de"].items()) == {"A": "", "B": ""}
        assert result.languages["de"].language == "de"
        missing = result.report.by_code("MissingFileError")
        assert [issue.language for issue in missing] == ["de"]

    def test_collision_is_deduplicated(self, engine: ReconciliationEngine) -> None:
        """A key renamed onto an existing key gets a suffix, values stay attached."""
        root, languages = tables({"A": "a", "B": "b"}, fr={"A": "fa", "B": "fb"})
        plan = engine.compute_plan(["A", "B"], ["A", "A"])

        result = engine.apply_plan(plan, root, languages)

        assert list(result.root) == ["A", "A0"]
        assert result.key_map == {"A": "A", "B": "A0"}
        assert result.languages["fr"].get("A0") == "fb"
        assert len(result.report.by_code("DuplicateKeyError")) == 1

    def test_swapped_asset_names_use_temporary_names(
        self, engine: ReconciliationEngine, recording_relocator: RecordingAssetRelocator
    ) -> None:
        root, languages = tables(
            {"[type=AUDIO]A": "", "[type=AUDIO]B": ""},
            fr={"[type=AUDIO]A": "fa", "[type=AUDIO]B": "fb"},
        )
        plan = engine.compute_plan(
            ["[type=AUDIO]A", "[type=AUDIO]B"], ["[type=AUDIO]B", "[type=AUDIO]A"]
        )

        result = engine.apply_plan(plan, root, languages)
        engine.apply_asset_changes(result)

        assert dict(result.languages["fr"].items()) == {
            "[type=AUDIO]B": "fa",
            "[type=AUDIO]A": "fb",
        }
        assert recording_relocator.calls == [
            ("rename", "AUDIO", "A", "A.__reconcile0", "fr"),
            ("rename", "AUDIO", "B", "B.__reconcile1", "fr"),
            ("rename", "AUDIO", "A.__reconcile0", "B", "fr"),
            ("rename", "AUDIO", "B.__reconcile1", "A", "fr"),
        ]

    def test_deletion_runs_before_rename_onto_freed_name(
        self, engine: ReconciliationEngine, recording_relocator: RecordingAssetRelocator
    ) -> None:
        root, languages = tables(
            {"[type=AUDIO]Old": "", "[type=AUDIO]New": ""},
            fr={"[type=AUDIO]Old": "fo", "[type=AUDIO]New": "fn"},
        )
        plan = engine.compute_plan(
            ["[type=AUDIO]Old"], ["[type=AUDIO]New"], snapshot_keys=root.keys()
        )

        engine.apply_asset_changes(engine.apply_plan(plan, root, languages))

        assert recording_relocator.calls == [
            ("delete", "AUDIO", "New", "fr"),
            ("rename", "AUDIO", "Old", "New", "fr"),
        ]

    def test_edited_root_values(self, engine: ReconciliationEngine) -> None:
        root, languages = tables({"A": "a"}, fr={"A": "fa"})
        plan = ReconciliationPlan(changes=(KeyChange("A", "A", value="edited"),))

        result = engine.apply_plan(plan, root, languages)

        assert result.root.get("A") == "edited"
        assert result.languages["fr"].get("A") == "fa"

    def test_relocator_failure_is_reported(self) -> None:
        class FailingRelocator(RecordingAssetRelocator):
            def delete(self, kind, bare_key, language):  # type: ignore[override]
                raise PermissionError("read-only")

        engine = ReconciliationEngine(FailingRelocator())
        root, languages = tables({"[type=AUDIO]Bark": ""}, fr={"[type=AUDIO]Bark": "x"})
        plan = engine.compute_plan([], [], snapshot_keys=root.keys())

        result = engine.apply_plan(plan, root, languages)
        engine.apply_asset_changes(result)

        assert len(result.root) == 0
        assert [issue.code for issue in result.report.errors] == ["PersistenceError"]

    def test_inputs_are_not_modified(self, engine: ReconciliationEngine) -> None:
        root, languages = tables({"A": "a"}, fr={"A": "fa"})
        plan = engine.compute_plan(["A"], ["Z"])

        engine.apply_plan(plan, root, languages)

        assert list(root) == ["A"]
        assert list(languages["fr"]) == ["A"]

    def test_apply_plan_only_lists_asset_operations(
        self, engine: ReconciliationEngine, recording_relocator: RecordingAssetRelocator
    ) -> None:
        root, languages = tables(
            {"[type=AUDIO]Bark": ""},
            fr={"[type=AUDIO]Bark": "fr-bark"},
            de={"[type=AUDIO]Bark": "de-bark"},
        )
        plan = engine.compute_plan(["[type=AUDIO]Bark"], ["[type=AUDIO]Woof"])

        result = engine.apply_plan(plan, root, languages)

        assert recording_relocator.calls == []
        assert result.asset_operations == [
            AssetOperation("rename", LocalizedObjectType.AUDIO, "Bark", "fr", "Woof"),
            AssetOperation("rename", LocalizedObjectType.AUDIO, "Bark", "de", "Woof"),
        ]

        engine.apply_asset_changes(result)

        assert recording_relocator.calls == [
            ("rename", "AUDIO", "Bark", "Woof", "fr"),
            ("rename", "AUDIO", "Bark", "Woof", "de"),
        ]
