"""
Reconciliation of language tables with the root table.

Provides the engine computing and applying key rename/delete plans, the
editing session over the root table and the service persisting the results.
"""

from .engine import ReconciliationEngine, unique_bare_key
from .models import (
    AssetOperation,
    Issue,
    IssueSeverity,
    KeyChange,
    ReconciliationPlan,
    ReconciliationReport,
    ReconciliationResult,
)
from .planfile import plan_from_edits, read_plan, write_report
from .service import LocalizationService
from .session import EditRow, RootEditSession, SessionState

__all__ = [
    # Main service
    "LocalizationService",
    # Engine
    "ReconciliationEngine",
    "unique_bare_key",
    # Models
    "AssetOperation",
    "Issue",
    "IssueSeverity",
    "KeyChange",
    "ReconciliationPlan",
    "ReconciliationReport",
    "ReconciliationResult",
    # Editing
    "EditRow",
    "RootEditSession",
    "SessionState",
    # Plan files
    "plan_from_edits",
    "read_plan",
    "write_report",
]
