"""Named store operations.

The store accepts exactly these operations. Each one is an immutable
payload tagged by ``type``, so operations can be logged, replayed or parsed
from JSON with :func:`parse_operation`.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import Field, TypeAdapter

from pyscout.models._base import ScoutBaseModel
from pyscout.models.record import MatchRecord
from pyscout.models.schema import ScoringFieldDefinition
from pyscout.models.settings import Settings
from pyscout.models.snapshot import ThemeMode


class AddField(ScoutBaseModel):
    type: Literal["add_field"] = "add_field"
    definition: ScoringFieldDefinition


class RemoveField(ScoutBaseModel):
    type: Literal["remove_field"] = "remove_field"
    field_id: str


class UpdateField(ScoutBaseModel):
    type: Literal["update_field"] = "update_field"
    definition: ScoringFieldDefinition


class AddRecord(ScoutBaseModel):
    type: Literal["add_record"] = "add_record"
    record: MatchRecord


class ReplaceRecords(ScoutBaseModel):
    type: Literal["replace_records"] = "replace_records"
    records: tuple[MatchRecord, ...]


class UpdateSettings(ScoutBaseModel):
    """Merge the explicitly set keys of *settings* over the current settings."""

    type: Literal["update_settings"] = "update_settings"
    settings: Settings


class SetTheme(ScoutBaseModel):
    type: Literal["set_theme"] = "set_theme"
    theme: ThemeMode


class ImportSnapshot(ScoutBaseModel):
    """Restore top-level snapshot parts, e.g. from a backup file.

    Each part that is not ``None`` replaces the current one wholesale; parts
    left as ``None`` are kept. No field-level merge is performed.
    """

    type: Literal["import_snapshot"] = "import_snapshot"
    scoring_fields: tuple[ScoringFieldDefinition, ...] | None = Field(default=None, alias="schema")
    records: tuple[MatchRecord, ...] | None = Field(default=None, alias="matches")
    settings: Settings | None = None
    theme: ThemeMode | None = None


Operation = Annotated[
    AddField | RemoveField | UpdateField | AddRecord | ReplaceRecords | UpdateSettings | SetTheme | ImportSnapshot,
    Field(discriminator="type"),
]

_OPERATION_ADAPTER: TypeAdapter[Operation] = TypeAdapter(Operation)


def parse_operation(data: Any) -> Operation:
    """Validate a JSON-compatible dict (``{"type": ..., ...}``) into an operation."""
    return _OPERATION_ADAPTER.validate_python(data)
