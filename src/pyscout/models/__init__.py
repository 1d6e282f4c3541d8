"""Data models for the scouting snapshot."""

from pyscout.models._base import ScoutBaseModel
from pyscout.models.record import AllianceSide, FieldValue, MatchRecord
from pyscout.models.schema import DEFAULT_SCHEMA, ScoringFieldDefinition, ValueKind, make_field_id, new_field
from pyscout.models.settings import Settings
from pyscout.models.snapshot import AppSnapshot, ThemeMode, default_snapshot

__all__ = [
    "AllianceSide",
    "AppSnapshot",
    "DEFAULT_SCHEMA",
    "FieldValue",
    "MatchRecord",
    "ScoringFieldDefinition",
    "ScoutBaseModel",
    "Settings",
    "ThemeMode",
    "ValueKind",
    "default_snapshot",
    "make_field_id",
    "new_field",
]
