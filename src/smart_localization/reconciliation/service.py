"""
Main service for working with a localization directory.

Provides the high-level API for saving root edits: load every table, run the
reconciliation engine and persist the results.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Mapping, Optional

from ..assets.relocator import AssetRelocator, FileSystemAssetRelocator, RecordingAssetRelocator
from ..errors import LocalizationError, MissingFileError, PersistenceError, RootCorruptError
from ..settings.types import ConfigError
from ..tables.keys import decode
from ..tables.models import ResourceTable
from ..tables.store import DEFAULT_BASE_NAME, LanguageStore
from .engine import IssueObserver, ReconciliationEngine
from .models import Issue, IssueSeverity, ReconciliationPlan, ReconciliationReport, ReconciliationResult

if TYPE_CHECKING:
    from ..settings import AppSettings
    from .session import RootEditSession


class LocalizationService:
    """Service for one localization directory.

    Owns the table store, the asset relocator and the reconciliation engine.
    Nothing here is global: several services can work side by side on
    different directories.
    """

    def __init__(
        self,
        directory: Optional[str | Path] = None,
        settings: Optional["AppSettings"] = None,
        relocator: Optional[AssetRelocator] = None,
        observers: Optional[Iterable[IssueObserver]] = None,
        dry_run: Optional[bool] = None,
    ):
        """Initialize the service.

        Args:
            directory: Localization directory; defaults to the configured one.
            settings: App settings for paths and the dry-run switch.
            relocator: Asset relocator; defaults to the file system one
                (or a recording one in dry-run mode).
            observers: Callables receiving every reported issue.
            dry_run: Overrides the configured dry-run switch.
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.settings = settings

        if directory is None and settings is not None:
            directory = settings.localization_path
        if directory is None:
            raise ConfigError("Localization directory is not configured")

        base_name = settings.root_file_name if settings is not None else DEFAULT_BASE_NAME
        if dry_run is None:
            dry_run = bool(settings.dry_run) if settings is not None else False
        self.dry_run = dry_run
        self.store = LanguageStore(directory, base_name)

        if relocator is None:
            relocator = (
                RecordingAssetRelocator()
                if self.dry_run
                else FileSystemAssetRelocator(self.store.directory)
            )
        self.relocator = relocator
        self.engine = ReconciliationEngine(relocator, observers)

        self.logger.info(
            f"Initializing LocalizationService with path: {self.store.directory}"
            + (" (dry run)" if self.dry_run else "")
        )

    # === LANGUAGES ===

    def available_languages(self) -> List[str]:
        return self.store.available_languages()

    def create_root(self, initial: Optional[Mapping[str, str]] = None) -> ResourceTable:
        return self.store.create_root(initial)

    def create_language(self, language: str) -> ResourceTable:
        return self.store.create_language(language)

    def delete_language(self, language: str) -> bool:
        return self.store.delete_language(language)

    def load_root(self) -> ResourceTable:
        return self.store.load_root()

    def load_language(self, language: str) -> Optional[ResourceTable]:
        return self.store.load_language(language)

    def open_session(self) -> "RootEditSession":
        """Start editing the root table."""
        from .session import RootEditSession

        return RootEditSession(self)

    # === RECONCILIATION ===

    def reconcile(
        self,
        plan: ReconciliationPlan,
        observers: Optional[Iterable[IssueObserver]] = None,
    ) -> ReconciliationResult:
        """Apply ``plan`` to the root and every language table and persist them.

        The root is loaded first; if it is missing, corrupt or only partly
        readable a ``RootCorruptError`` is raised before anything is written.
        Asset files are moved only after the root has been saved. Language
        tables are saved one by one; a failure is reported and the others are
        still saved.
        """
        call_observers = list(observers or [])
        load_report = ReconciliationReport()

        root = self._load_complete_root(load_report, call_observers)
        languages = self.store.language_tables(
            on_issue=self._load_issue_collector(load_report, call_observers)
        )

        result = self.engine.apply_plan(plan, root, languages, observers=call_observers)
        result.report.issues[:0] = load_report.issues

        if self.dry_run:
            self.engine.apply_asset_changes(result, observers=call_observers)
            self.logger.info("Dry run, no table written")
            return result

        self.store.save(result.root)
        result.saved.append("root")
        self.engine.apply_asset_changes(result, observers=call_observers)

        for language, table in result.languages.items():
            try:
                self.store.save(table)
                result.saved.append(language)
            except PersistenceError as e:
                self.logger.error(e.message)
                self._report(result.report, Issue.from_error(e, IssueSeverity.ERROR), call_observers)

        self.logger.info(
            f"Saved {len(result.saved)} tables, {len(result.report.errors)} errors"
        )
        return result

    def save_language_values(
        self,
        language: str,
        values: Mapping[str, str],
        assets: Optional[Mapping[str, str | Path]] = None,
        observers: Optional[Iterable[IssueObserver]] = None,
    ) -> ResourceTable:
        """Write edited values (and new asset files) for one language.

        Args:
            language: Language tag
            values: Full key -> new raw value
            assets: Full key -> source file to copy in for asset keys
            observers: Callables receiving reported issues

        Returns:
            The language table as saved
        """
        call_observers = list(observers or [])
        report = ReconciliationReport()
        assets = assets or {}

        root = self.store.load_root()
        current = self.store.load_language(language)
        if current is None:
            current = root.empty_copy(language)

        for key in [*values, *assets]:
            if key not in root:
                self.logger.warning(f"Ignoring value for unknown key '{key}' in '{language}'")

        entries: Dict[str, str] = {}
        for full_key in root:
            value = values.get(full_key, current.get(full_key, "") or "")
            bare_key, kind = decode(full_key)
            if kind.is_asset and full_key in assets:
                try:
                    value = self.relocator.copy_into(kind, bare_key, language, assets[full_key])
                except (OSError, ValueError) as e:
                    error = PersistenceError(
                        f"Could not copy asset for '{full_key}' into '{language}': {e}",
                        language=language,
                        key=full_key,
                    )
                    self.logger.error(error.message)
                    self._report(report, Issue.from_error(error, IssueSeverity.ERROR), call_observers)
                    value = current.get(full_key, "") or ""
            entries[full_key] = value

        table = ResourceTable(language=language, entries=entries, header=current.header)
        if not self.dry_run:
            self.store.save(table)
        self.logger.info(f"Saved {len(table)} values for '{language}'")
        return table

    # === HELPERS ===

    def _load_complete_root(
        self, report: ReconciliationReport, observers: List[IssueObserver]
    ) -> ResourceTable:
        """Load the root, refusing one that lost records while parsing.

        Every language is rebuilt from the root, so a record skipped here
        would be dropped from all tables on save.
        """
        problems: List[LocalizationError] = []

        def collect(error: LocalizationError) -> None:
            problems.append(error)
            self._report(report, Issue.from_error(error, IssueSeverity.ERROR), observers)

        root = self.store.load_root(on_issue=collect)
        if problems:
            details = "; ".join(problem.message for problem in problems)
            raise RootCorruptError(
                f"Root language file {self.store.root_path} has unreadable records, "
                f"not reconciling: {details}"
            )
        return root

    def _load_issue_collector(
        self, report: ReconciliationReport, observers: List[IssueObserver]
    ) -> Callable[[LocalizationError], None]:
        # Missing language tables are reported by the engine itself
        def collect(error: LocalizationError) -> None:
            if not isinstance(error, MissingFileError):
                self._report(report, Issue.from_error(error), observers)

        return collect

    def _report(
        self,
        report: ReconciliationReport,
        issue: Issue,
        observers: List[IssueObserver],
    ) -> None:
        report.add(issue)
        for observer in [*self.engine.observers, *observers]:
            observer(issue)
