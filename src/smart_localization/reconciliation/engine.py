"""
Reconciliation of language tables with an edited root table.

The root table defines the set of valid keys and their kinds. After the root
is edited, every language table is rebuilt so that its key set equals the
root's again: renamed keys carry their translations (and asset files) over,
kind changes wipe the translation and its asset, deleted keys lose their
assets in every language. Asset moves are collected while the tables are
rebuilt and only run through ``apply_asset_changes``.
"""

import logging
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from ..assets.relocator import AssetRelocator
from ..errors import DuplicateKeyError, KeySyntaxError, MissingFileError, PersistenceError
from ..tables.keys import LocalizedObjectType, decode, encode
from ..tables.models import ResourceTable
from .models import (
    AssetOperation,
    Issue,
    IssueSeverity,
    KeyChange,
    ReconciliationPlan,
    ReconciliationReport,
    ReconciliationResult,
)

IssueObserver = Callable[[Issue], None]

# (kind, old bare key, new bare key)
AssetRename = Tuple[LocalizedObjectType, str, str]


def unique_bare_key(bare_key: str, taken: Set[str]) -> str:
    """Return ``bare_key`` or the first free ``bare_key + N`` (N = 0, 1, ...)."""
    if bare_key not in taken:
        return bare_key
    count = 0
    while f"{bare_key}{count}" in taken:
        count += 1
    return f"{bare_key}{count}"


class ReconciliationEngine:
    """Computes and applies reconciliation plans.

    The engine never touches table files itself; persisting the result is the
    caller's job. Asset operations go through the injected relocator.
    """

    def __init__(
        self,
        relocator: Optional[AssetRelocator] = None,
        observers: Optional[Iterable[IssueObserver]] = None,
    ):
        self.relocator = relocator
        self.observers: List[IssueObserver] = list(observers or [])
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    # === PLAN ===

    def compute_plan(
        self,
        old_root_keys: Sequence[Optional[str]],
        new_root_keys: Sequence[str],
        snapshot_keys: Optional[Iterable[str]] = None,
        values: Optional[Sequence[Optional[str]]] = None,
    ) -> ReconciliationPlan:
        """Build a plan from index-aligned old/new key lists.

        Args:
            old_root_keys: Full key each row had when the root was loaded,
                ``None`` for rows added during the edit
            new_root_keys: Full key each row has now
            snapshot_keys: Keys of the loaded root; those no row refers to are
                deleted. Defaults to the non-``None`` old keys.
            values: Optional edited root value per row

        Returns:
            The reconciliation plan
        """
        if len(old_root_keys) != len(new_root_keys):
            raise ValueError(
                f"Old and new key lists differ in length: "
                f"{len(old_root_keys)} != {len(new_root_keys)}"
            )
        if values is not None and len(values) != len(new_root_keys):
            raise ValueError("Values list must be aligned with the key lists")

        referenced: Set[str] = set()
        changes: List[KeyChange] = []
        for index, (old_key, new_key) in enumerate(zip(old_root_keys, new_root_keys)):
            if old_key is not None:
                if old_key in referenced:
                    raise ValueError(f"Key '{old_key}' is referenced by more than one row")
                referenced.add(old_key)
            value = values[index] if values is not None else None
            changes.append(KeyChange(old_key=old_key, new_key=new_key, value=value))

        if snapshot_keys is None:
            snapshot = [key for key in old_root_keys if key is not None]
        else:
            snapshot = list(snapshot_keys)
        deleted = tuple(key for key in snapshot if key not in referenced)

        plan = ReconciliationPlan(changes=tuple(changes), deleted_keys=deleted)
        self.logger.debug(
            f"Computed plan: {len(changes)} rows, {len(plan.added_keys)} added, "
            f"{len(deleted)} deleted"
        )
        return plan

    # === DEDUPLICATION ===

    def deduplicate(
        self,
        desired_key: str,
        existing_keys: Iterable[str],
        report: Optional[ReconciliationReport] = None,
    ) -> str:
        """Return ``desired_key`` made unique among ``existing_keys``.

        Keys are compared by bare key; the kind tag of ``desired_key`` is kept.
        ``deduplicate("Key", {"Key", "Key0"})`` returns ``"Key1"``.
        """
        taken = {decode(key)[0] for key in existing_keys}
        return self._deduplicate(desired_key, taken, report)

    def _deduplicate(
        self,
        desired_key: str,
        taken: Set[str],
        report: Optional[ReconciliationReport],
        observers: Sequence[IssueObserver] = (),
    ) -> str:
        bare_key, kind = decode(desired_key, on_error=self._syntax_handler(report, observers))
        unique = unique_bare_key(bare_key, taken)
        if unique == bare_key:
            return desired_key

        full_key = encode(unique, kind)
        error = DuplicateKeyError(
            f"Duplicate keys found, renaming key '{desired_key}' to '{full_key}'",
            key=desired_key,
        )
        self.logger.warning(error.message)
        self._record(report, Issue.from_error(error), observers)
        return full_key

    # === APPLY ===

    def apply_plan(
        self,
        plan: ReconciliationPlan,
        root_table: ResourceTable,
        language_tables: Mapping[str, Optional[ResourceTable]],
        observers: Optional[Iterable[IssueObserver]] = None,
    ) -> ReconciliationResult:
        """Rebuild the root and every language table according to ``plan``.

        A ``None`` language table (file missing) is treated as all-empty.
        Nothing is written: the returned tables are not persisted and the
        asset renames and deletions are only listed in
        ``result.asset_operations`` for ``apply_asset_changes``.
        """
        call_observers = list(observers or [])
        report = ReconciliationReport()

        new_root, placed = self._rebuild_root(plan, root_table, report, call_observers)
        key_map = {
            change.old_key: final_key
            for change, final_key in placed
            if change.old_key is not None
        }

        languages: Dict[str, ResourceTable] = {}
        operations: List[AssetOperation] = []
        for language, table in language_tables.items():
            if table is None:
                error = MissingFileError(
                    f"Language '{language}' has no table, treating all values as empty",
                    language=language,
                )
                self.logger.warning(error.message)
                self._record(report, Issue.from_error(error), call_observers)

            languages[language] = self._rebuild_language(
                language, table, placed, new_root, report, call_observers
            )
            operations.extend(self._plan_asset_changes(language, plan, placed))

        self.logger.info(
            f"Reconciled root ({len(new_root)} keys) with {len(languages)} languages, "
            f"{len(report)} issues, {len(operations)} asset operations pending"
        )
        return ReconciliationResult(
            root=new_root,
            languages=languages,
            key_map=key_map,
            report=report,
            asset_operations=operations,
        )

    def apply_asset_changes(
        self,
        result: ReconciliationResult,
        observers: Optional[Iterable[IssueObserver]] = None,
    ) -> None:
        """Run the asset operations of ``result`` through the relocator.

        Call this only after the root table of ``result`` has been saved.
        Failures are added to ``result.report``; the remaining operations
        still run.
        """
        call_observers = list(observers or [])
        for operation in result.asset_operations:
            self._relocate(result.report, call_observers, operation)
        self.logger.debug(f"Applied {len(result.asset_operations)} asset operations")

    def _rebuild_root(
        self,
        plan: ReconciliationPlan,
        root_table: ResourceTable,
        report: ReconciliationReport,
        observers: Sequence[IssueObserver],
    ) -> Tuple[ResourceTable, List[Tuple[KeyChange, str]]]:
        """Place every row under its final (deduplicated) key."""
        entries: Dict[str, str] = {}
        taken: Set[str] = set()
        placed: List[Tuple[KeyChange, str]] = []

        for change in plan.changes:
            final_key = self._deduplicate(change.new_key, taken, report, observers)
            taken.add(decode(final_key)[0])

            if change.value is not None:
                value = change.value
            elif change.old_key is None or change.kind_changed:
                value = ""
            else:
                if change.old_key not in root_table:
                    self.logger.warning(
                        f"Key '{change.old_key}' not found in the root table, using empty value"
                    )
                value = root_table.get(change.old_key, "") or ""

            entries[final_key] = value
            placed.append((change, final_key))

        return (
            ResourceTable(language=None, entries=entries, header=root_table.header),
            placed,
        )

    def _rebuild_language(
        self,
        language: str,
        table: Optional[ResourceTable],
        placed: Sequence[Tuple[KeyChange, str]],
        new_root: ResourceTable,
        report: ReconciliationReport,
        observers: Sequence[IssueObserver],
    ) -> ResourceTable:
        source: Mapping[str, str] = table.entries if table is not None else {}
        entries: Dict[str, str] = {}

        for change, final_key in placed:
            value = ""
            if change.old_key is not None:
                value = source.get(change.old_key, "")
                if change.kind_changed:
                    if value:
                        self.logger.debug(
                            f"Kind of '{change.old_key}' changed, clearing value in '{language}'"
                        )
                    value = ""
            entries[final_key] = value

        used_keys = {change.old_key for change, _ in placed}
        dropped = [key for key in source if key not in used_keys]
        if dropped:
            self.logger.debug(
                f"Dropping {len(dropped)} keys from '{language}' that are not in the root"
            )

        header = table.header if table is not None else new_root.header
        return ResourceTable(language=language, entries=entries, header=header)

    def _plan_asset_changes(
        self,
        language: str,
        plan: ReconciliationPlan,
        placed: Sequence[Tuple[KeyChange, str]],
    ) -> List[AssetOperation]:
        """List the asset deletes and renames of one language.

        Deletions come first so that a freed asset name can be reused by a
        rename in the same pass.
        """
        operations: List[AssetOperation] = []
        renames: List[AssetRename] = []

        for change, final_key in placed:
            if change.old_key is None or change.old_key == final_key:
                continue
            old_bare, old_kind = decode(change.old_key)
            new_bare, new_kind = decode(final_key)
            if old_kind != new_kind:
                if old_kind.is_asset:
                    operations.append(AssetOperation("delete", old_kind, old_bare, language))
            elif new_kind.is_asset and old_bare != new_bare:
                renames.append((new_kind, old_bare, new_bare))

        for deleted_key in plan.deleted_keys:
            bare_key, kind = decode(deleted_key)
            if kind.is_asset:
                operations.append(AssetOperation("delete", kind, bare_key, language))

        operations.extend(self._plan_renames(language, renames))
        return operations

    def _plan_renames(
        self, language: str, renames: Sequence[AssetRename]
    ) -> List[AssetOperation]:
        sources = {(kind, old_bare) for kind, old_bare, _ in renames}
        if not any((kind, new_bare) in sources for kind, _, new_bare in renames):
            return [
                AssetOperation("rename", kind, old_bare, language, new_bare)
                for kind, old_bare, new_bare in renames
            ]

        # Swapped or chained names: move everything aside first
        first: List[AssetOperation] = []
        second: List[AssetOperation] = []
        for index, (kind, old_bare, new_bare) in enumerate(renames):
            temporary = f"{old_bare}.__reconcile{index}"
            first.append(AssetOperation("rename", kind, old_bare, language, temporary))
            second.append(AssetOperation("rename", kind, temporary, language, new_bare))
        return first + second

    def _relocate(
        self,
        report: ReconciliationReport,
        observers: Sequence[IssueObserver],
        operation: AssetOperation,
    ) -> None:
        kind, bare_key, language = operation.kind, operation.bare_key, operation.language
        if self.relocator is None:
            self.logger.debug(f"No asset relocator, skipping {operation.operation} of '{bare_key}'")
            return
        try:
            if operation.new_bare_key is not None:
                self.relocator.rename(kind, bare_key, operation.new_bare_key, language)
            else:
                self.relocator.delete(kind, bare_key, language)
        except OSError as e:
            error = PersistenceError(
                f"Could not {operation.operation} {kind.name} asset '{bare_key}' "
                f"in '{language}': {e}",
                language=language,
                key=bare_key,
            )
            self.logger.error(error.message)
            self._record(report, Issue.from_error(error, IssueSeverity.ERROR), observers)

    # === REPORTING ===

    def _syntax_handler(
        self, report: Optional[ReconciliationReport], observers: Sequence[IssueObserver]
    ) -> Callable[[KeySyntaxError], None]:
        def handler(error: KeySyntaxError) -> None:
            self._record(report, Issue.from_error(error, IssueSeverity.ERROR), observers)

        return handler

    def _record(
        self,
        report: Optional[ReconciliationReport],
        issue: Issue,
        observers: Sequence[IssueObserver] = (),
    ) -> None:
        if report is not None:
            report.add(issue)
        for observer in [*self.observers, *observers]:
            observer(issue)
