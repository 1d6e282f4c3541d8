"""Pure snapshot transitions, one per named operation.

``reduce`` either returns a complete new snapshot or raises a
:class:`~pyscout.exceptions.ScoutValidationError`; it never modifies its
input.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pyscout.models.snapshot import AppSnapshot
from pyscout.state import records as _records
from pyscout.state import schema as _schema
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
)


def _add_field(snapshot: AppSnapshot, op: AddField) -> AppSnapshot:
    return snapshot.model_copy(update={"scoring_fields": _schema.add_field(snapshot.scoring_fields, op.definition)})


def _remove_field(snapshot: AppSnapshot, op: RemoveField) -> AppSnapshot:
    return snapshot.model_copy(update={"scoring_fields": _schema.remove_field(snapshot.scoring_fields, op.field_id)})


def _update_field(snapshot: AppSnapshot, op: UpdateField) -> AppSnapshot:
    return snapshot.model_copy(update={"scoring_fields": _schema.update_field(snapshot.scoring_fields, op.definition)})


def _add_record(snapshot: AppSnapshot, op: AddRecord) -> AppSnapshot:
    return snapshot.model_copy(update={"records": _records.add_record(snapshot.records, op.record)})


def _replace_records(snapshot: AppSnapshot, op: ReplaceRecords) -> AppSnapshot:
    return snapshot.model_copy(update={"records": _records.replace_all(op.records)})


def _update_settings(snapshot: AppSnapshot, op: UpdateSettings) -> AppSnapshot:
    patch = {name: getattr(op.settings, name) for name in op.settings.model_fields_set}
    if not patch:
        return snapshot
    return snapshot.model_copy(update={"settings": snapshot.settings.model_copy(update=patch)})


def _set_theme(snapshot: AppSnapshot, op: SetTheme) -> AppSnapshot:
    return snapshot.model_copy(update={"theme": op.theme})


def _import_snapshot(snapshot: AppSnapshot, op: ImportSnapshot) -> AppSnapshot:
    update: dict[str, Any] = {}
    if op.scoring_fields is not None:
        update["scoring_fields"] = op.scoring_fields
    if op.records is not None:
        update["records"] = _records.replace_all(op.records)
    if op.settings is not None:
        update["settings"] = op.settings
    if op.theme is not None:
        update["theme"] = op.theme
    return snapshot.model_copy(update=update)


_HANDLERS: dict[type[Any], Callable[[AppSnapshot, Any], AppSnapshot]] = {
    AddField: _add_field,
    RemoveField: _remove_field,
    UpdateField: _update_field,
    AddRecord: _add_record,
    ReplaceRecords: _replace_records,
    UpdateSettings: _update_settings,
    SetTheme: _set_theme,
    ImportSnapshot: _import_snapshot,
}


def reduce(snapshot: AppSnapshot, operation: Operation) -> AppSnapshot:
    """Apply *operation* to *snapshot* and return the resulting snapshot."""
    handler = _HANDLERS.get(type(operation))
    if handler is None:
        raise TypeError(f"Unsupported store operation: {type(operation).__name__}")
    return handler(snapshot, operation)
