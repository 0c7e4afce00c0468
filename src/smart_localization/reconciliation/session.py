"""
Editing session over the root table.

A session keeps the root as it was loaded (the snapshot) plus a working copy
of its rows. Saving turns the difference into a reconciliation plan.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from ..tables.keys import LocalizedObjectType, decode, encode
from ..tables.models import ResourceTable
from .engine import IssueObserver
from .models import ReconciliationPlan, ReconciliationResult

if TYPE_CHECKING:
    from .service import LocalizationService

NEW_KEY_NAME = "New Key"


class SessionState(Enum):
    LOADED = "loaded"
    EDITED = "edited"
    RECONCILING = "reconciling"
    PERSISTED = "persisted"


@dataclass(frozen=True)
class EditRow:
    """One key of the working copy; ``original_key`` is None for added keys."""

    original_key: Optional[str]
    bare_key: str
    kind: LocalizedObjectType
    value: str = ""

    @property
    def full_key(self) -> str:
        return encode(self.bare_key, self.kind)


class RootEditSession:
    """Working copy of the root table owned by one editor."""

    def __init__(self, service: "LocalizationService"):
        self.service = service
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.snapshot = ResourceTable()
        self._rows: List[EditRow] = []
        self.state = SessionState.LOADED
        self.reload()

    def reload(self) -> None:
        """Discard edits and load the root table from disk."""
        self._reset(self.service.load_root())
        self.logger.debug(f"Session loaded with {len(self._rows)} keys")

    def _reset(self, root: ResourceTable) -> None:
        self.snapshot = root
        self._rows = []
        for full_key, value in root.items():
            bare_key, kind = decode(full_key)
            self._rows.append(EditRow(full_key, bare_key, kind, value))
        self.state = SessionState.LOADED

    # === ACCESS ===

    @property
    def rows(self) -> Tuple[EditRow, ...]:
        return tuple(self._rows)

    @property
    def is_dirty(self) -> bool:
        return self.state == SessionState.EDITED

    def _index(self, key: int | str) -> int:
        """Resolve a row index or a current bare key to a row index."""
        if isinstance(key, int):
            if not 0 <= key < len(self._rows):
                raise IndexError(f"No row at index {key}")
            return key
        for index, row in enumerate(self._rows):
            if row.bare_key == key:
                return index
        raise KeyError(f"No key named '{key}' in the session")

    def _update(self, key: int | str, **changes: object) -> None:
        if self.state == SessionState.RECONCILING:
            raise RuntimeError("Cannot edit while the session is being saved")
        index = self._index(key)
        self._rows[index] = replace(self._rows[index], **changes)  # type: ignore[arg-type]
        self.state = SessionState.EDITED

    # === EDITING ===

    def rename_key(self, key: int | str, new_bare_key: str) -> None:
        if not new_bare_key:
            raise ValueError("Key name cannot be empty")
        self._update(key, bare_key=new_bare_key)

    def set_kind(self, key: int | str, kind: LocalizedObjectType) -> None:
        if kind == LocalizedObjectType.INVALID:
            raise ValueError("INVALID is not a key type")
        self._update(key, kind=kind)

    def set_value(self, key: int | str, value: str) -> None:
        self._update(key, value=value)

    def add_key(
        self,
        bare_key: str = NEW_KEY_NAME,
        kind: LocalizedObjectType = LocalizedObjectType.STRING,
        value: str = "",
    ) -> str:
        """Append a new key, renamed if its name is taken. Returns the bare key used."""
        if self.state == SessionState.RECONCILING:
            raise RuntimeError("Cannot edit while the session is being saved")
        taken = [row.bare_key for row in self._rows]
        unique = self.service.engine.deduplicate(bare_key, taken)
        self._rows.append(EditRow(None, unique, kind, value))
        self.state = SessionState.EDITED
        return unique

    def delete_key(self, key: int | str) -> EditRow:
        if self.state == SessionState.RECONCILING:
            raise RuntimeError("Cannot edit while the session is being saved")
        row = self._rows.pop(self._index(key))
        self.state = SessionState.EDITED
        return row

    # === SAVING ===

    def build_plan(self) -> ReconciliationPlan:
        """Diff the working copy against the snapshot."""
        return self.service.engine.compute_plan(
            [row.original_key for row in self._rows],
            [row.full_key for row in self._rows],
            snapshot_keys=self.snapshot.keys(),
            values=[row.value for row in self._rows],
        )

    def save(
        self, observers: Optional[Iterable[IssueObserver]] = None
    ) -> ReconciliationResult:
        """Reconcile and persist the edits.

        On failure the session stays EDITED and keeps its rows. In dry-run
        mode nothing reaches disk, so the snapshot and the edits are kept as
        well and the next save diffs against the same root.
        """
        plan = self.build_plan()
        self.state = SessionState.RECONCILING
        try:
            result = self.service.reconcile(plan, observers=observers)
        except Exception:
            self.state = SessionState.EDITED
            raise

        if self.service.dry_run:
            self.state = SessionState.EDITED
            self.logger.info(f"Dry run, root with {len(result.root)} keys not saved")
            return result

        self._reset(result.root)
        self.state = SessionState.PERSISTED
        self.logger.info(f"Root saved with {len(result.root)} keys")
        return result
