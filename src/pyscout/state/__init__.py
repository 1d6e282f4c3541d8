"""State/store layer.

This package is the single source of truth for the scouting snapshot:
schema registry and record store operations, the closed set of named
operations, the pure reducer and the store that applies them.
"""

from pyscout.state.operations import (
    AddField,
    AddRecord,
    ImportSnapshot,
    Operation,
    RemoveField,
    ReplaceRecords,
    SetTheme,
    UpdateField,
    UpdateSettings,
    parse_operation,
)
from pyscout.state.reducer import reduce
from pyscout.state.store import ScoutStore, SnapshotListener

__all__ = [
    "AddField",
    "AddRecord",
    "ImportSnapshot",
    "Operation",
    "RemoveField",
    "ReplaceRecords",
    "ScoutStore",
    "SetTheme",
    "SnapshotListener",
    "UpdateField",
    "UpdateSettings",
    "parse_operation",
    "reduce",
]
