"""Aggregate snapshot model."""

from __future__ import annotations

import enum

from pydantic import Field

from pyscout.models._base import ScoutBaseModel
from pyscout.models.record import MatchRecord
from pyscout.models.schema import DEFAULT_SCHEMA, ScoringFieldDefinition
from pyscout.models.settings import Settings


class ThemeMode(enum.StrEnum):
    DARK = "dark"
    LIGHT = "light"


class AppSnapshot(ScoutBaseModel):
    """Full application state at a point in time.

    Serialized as ``{"schema": [...], "matches": [...], "settings": {...},
    "theme": "dark"}``. Missing keys take their defaults and unknown keys
    are ignored, so older and newer stored payloads both load.
    """

    scoring_fields: tuple[ScoringFieldDefinition, ...] = Field(default=DEFAULT_SCHEMA, alias="schema")
    records: tuple[MatchRecord, ...] = Field(default=(), alias="matches")
    """Most recent first."""
    settings: Settings = Field(default_factory=Settings)
    theme: ThemeMode = ThemeMode.DARK

    def to_json(self, *, indent: int | None = None) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)


def default_snapshot() -> AppSnapshot:
    """Snapshot used on first run or when stored state is unusable."""
    return AppSnapshot()
