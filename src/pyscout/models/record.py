"""Match record model."""

from __future__ import annotations

import enum
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from pyscout._normalize import safe_str
from pyscout.models._base import ScoutBaseModel

FieldValue = bool | int | float | str
"""A recorded value: number (counter/direct), text (free text/grade) or flag."""


class AllianceSide(enum.StrEnum):
    """Side the observed subject played on."""

    A = "A"
    B = "B"

    @classmethod
    def _missing_(cls, value: object) -> AllianceSide | None:
        if not isinstance(value, str):
            return None
        legacy = {"a": cls.A, "b": cls.B, "red": cls.A, "blue": cls.B}
        return legacy.get(value.strip().lower())


class MatchRecord(ScoutBaseModel):
    """One completed observation of a subject in a match.

    ``values`` is keyed by scoring field id. It is validated against the
    schema when the record is built, never afterwards: keys of fields that
    were later deleted are kept and ignored by readers.
    """

    id: str = Field(min_length=1)
    """Unique record id (uuid4), generated at creation."""
    match_number: str = Field(validation_alias=AliasChoices("matchNumber", "match_number"))
    subject_number: str = Field(validation_alias=AliasChoices("subjectNumber", "subject_number", "teamNumber"))
    alliance_side: AllianceSide = Field(
        default=AllianceSide.B,
        validation_alias=AliasChoices("allianceSide", "alliance_side", "alliance"),
    )
    observer_name: str = Field(default="", validation_alias=AliasChoices("observerName", "observer_name", "scoutName"))
    values: dict[str, FieldValue] = Field(default_factory=dict, validation_alias=AliasChoices("values", "data"))
    recorded_at: int = Field(default=0, validation_alias=AliasChoices("recordedAt", "recorded_at", "timestamp"))
    """Capture time in epoch milliseconds."""

    @field_validator("match_number", "subject_number", mode="before")
    @classmethod
    def _coerce_identifier(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return safe_str(value)
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("observer_name", mode="before")
    @classmethod
    def _coerce_observer(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("values", mode="before")
    @classmethod
    def _drop_null_values(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {k: v for k, v in value.items() if v is not None}
        return value
