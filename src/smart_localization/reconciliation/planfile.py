"""
JSON plan and report files for batch tooling.

A plan file lists explicit edits of the root table::

    {
      "changes": [
        {"old": "Greeting", "new": "Greeting2"},
        {"old": null, "new": "[type=AUDIO]Bark", "value": ""}
      ],
      "deleted": ["Farewell"]
    }

Root keys mentioned in neither list are kept unchanged.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import orjson

from ..tables.models import ResourceTable
from .engine import ReconciliationEngine
from .models import ReconciliationPlan, ReconciliationResult

logger = logging.getLogger(__name__)


def _change_value(change: Dict[str, Any]) -> Optional[str]:
    """Edited value of a change entry; ``None`` when absent or null."""
    value = change.get("value")
    if value is not None and not isinstance(value, str):
        raise ValueError(f"Value of change entry {change!r} must be a string")
    return value


def plan_from_edits(
    data: Dict[str, Any], root: ResourceTable, engine: ReconciliationEngine
) -> ReconciliationPlan:
    """Expand explicit edits into a full, index-aligned plan over ``root``."""
    raw_changes: List[Dict[str, Any]] = list(data.get("changes", []))
    deleted = [str(key) for key in data.get("deleted", [])]

    edited: Dict[str, Dict[str, Any]] = {}
    added: List[Dict[str, Any]] = []
    for change in raw_changes:
        if not isinstance(change, dict) or not change.get("new"):
            raise ValueError(f"Invalid change entry: {change!r}")
        _change_value(change)
        old_key = change.get("old")
        if old_key is None:
            added.append(change)
            continue
        if old_key not in root:
            raise ValueError(f"Changed key '{old_key}' is not in the root table")
        if old_key in edited:
            raise ValueError(f"Key '{old_key}' is changed more than once")
        edited[old_key] = change

    for key in deleted:
        if key not in root:
            logger.warning(f"Deleted key '{key}' is not in the root table")
        if key in edited:
            raise ValueError(f"Key '{key}' is both changed and deleted")

    old_keys: List[Optional[str]] = []
    new_keys: List[str] = []
    values: List[Optional[str]] = []
    for key in root:
        if key in deleted:
            continue
        change = edited.get(key, {})
        old_keys.append(key)
        new_keys.append(str(change.get("new", key)))
        values.append(_change_value(change))

    for change in added:
        old_keys.append(None)
        new_keys.append(str(change["new"]))
        values.append(_change_value(change) or "")

    # Unknown deleted keys stay in the snapshot so their stray assets are removed
    snapshot = [*root.keys(), *(key for key in deleted if key not in root)]
    return engine.compute_plan(old_keys, new_keys, snapshot_keys=snapshot, values=values)


def read_plan(
    path: str | Path, root: ResourceTable, engine: ReconciliationEngine
) -> ReconciliationPlan:
    """Read a plan file and expand it against the root table."""
    with Path(path).open("rb") as f:  # orjson works with bytes
        data = orjson.loads(f.read())
    if not isinstance(data, dict):
        raise ValueError(f"Plan file {path} must contain a JSON object")
    return plan_from_edits(data, root, engine)


def report_to_dict(result: ReconciliationResult) -> Dict[str, Any]:
    return {
        "saved": result.saved,
        "key_map": result.key_map,
        "root_keys": list(result.root.keys()),
        "languages": sorted(result.languages),
        "issues": [issue.to_dict() for issue in result.report.issues],
    }


def write_report(path: str | Path, result: ReconciliationResult) -> None:
    """Write the outcome of a reconciliation as JSON."""
    Path(path).write_bytes(
        orjson.dumps(report_to_dict(result), option=orjson.OPT_INDENT_2)
    )
