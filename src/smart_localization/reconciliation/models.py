"""
Data models for the reconciliation of root and language tables.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..errors import LocalizationError
from ..tables.keys import LocalizedObjectType, decode
from ..tables.models import ResourceTable


@dataclass(frozen=True)
class KeyChange:
    """One row of the edited root table.

    ``old_key`` is the full key in the last loaded root, or ``None`` for a
    key added during the edit. ``value`` is the edited root value; ``None``
    keeps the value currently stored in the root.
    """

    old_key: Optional[str]
    new_key: str
    value: Optional[str] = None

    @property
    def is_added(self) -> bool:
        return self.old_key is None

    @property
    def old_bare(self) -> Optional[str]:
        return decode(self.old_key)[0] if self.old_key is not None else None

    @property
    def new_bare(self) -> str:
        return decode(self.new_key)[0]

    @property
    def old_kind(self) -> Optional[LocalizedObjectType]:
        return decode(self.old_key)[1] if self.old_key is not None else None

    @property
    def new_kind(self) -> LocalizedObjectType:
        return decode(self.new_key)[1]

    @property
    def is_renamed(self) -> bool:
        return self.old_key is not None and self.old_key != self.new_key

    @property
    def kind_changed(self) -> bool:
        return self.old_key is not None and self.old_kind != self.new_kind


@dataclass(frozen=True)
class ReconciliationPlan:
    """Key renames, additions and deletions derived from one root edit."""

    changes: Tuple[KeyChange, ...] = ()
    deleted_keys: Tuple[str, ...] = ()

    @property
    def renamed_keys(self) -> Dict[str, str]:
        """Old bare key -> new bare key; identity entries mean unchanged."""
        return {
            change.old_bare: change.new_bare
            for change in self.changes
            if change.old_bare is not None
        }

    @property
    def added_keys(self) -> List[str]:
        return [change.new_key for change in self.changes if change.is_added]

    @property
    def deleted_bare_keys(self) -> List[str]:
        return [decode(key)[0] for key in self.deleted_keys]

    @property
    def is_empty(self) -> bool:
        """True if applying the plan changes no key at all."""
        return not self.deleted_keys and all(
            not change.is_added and not change.is_renamed for change in self.changes
        )


class IssueSeverity(Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Issue:
    """A recoverable condition met during loading or reconciliation."""

    code: str
    message: str
    severity: IssueSeverity = IssueSeverity.WARNING
    language: Optional[str] = None
    key: Optional[str] = None

    @classmethod
    def from_error(
        cls, error: LocalizationError, severity: IssueSeverity = IssueSeverity.WARNING
    ) -> "Issue":
        return cls(
            code=type(error).__name__,
            message=error.message,
            severity=severity,
            language=error.language,
            key=error.key,
        )

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "language": self.language,
            "key": self.key,
        }


@dataclass
class ReconciliationReport:
    """Ordered list of every non-fatal condition of one operation."""

    issues: List[Issue] = field(default_factory=list)

    def add(self, issue: Issue) -> None:
        self.issues.append(issue)

    @property
    def warnings(self) -> List[Issue]:
        return [i for i in self.issues if i.severity == IssueSeverity.WARNING]

    @property
    def errors(self) -> List[Issue]:
        return [i for i in self.issues if i.severity == IssueSeverity.ERROR]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def by_code(self, code: str) -> List[Issue]:
        return [i for i in self.issues if i.code == code]

    def __len__(self) -> int:
        return len(self.issues)


@dataclass(frozen=True)
class AssetOperation:
    """A pending asset delete or rename in one language."""

    operation: str
    kind: LocalizedObjectType
    bare_key: str
    language: str
    new_bare_key: Optional[str] = None


@dataclass
class ReconciliationResult:
    """Outcome of applying a plan.

    ``key_map`` maps each old full key to the full key it ended up under
    after deduplication; added keys are listed under their final key only
    in ``root``. ``asset_operations`` lists the asset moves the plan needs,
    in the order they must run; they are applied separately once the root
    is persisted.
    """

    root: ResourceTable
    languages: Dict[str, ResourceTable]
    key_map: Dict[str, str] = field(default_factory=dict)
    report: ReconciliationReport = field(default_factory=ReconciliationReport)
    saved: List[str] = field(default_factory=list)
    asset_operations: List[AssetOperation] = field(default_factory=list)
