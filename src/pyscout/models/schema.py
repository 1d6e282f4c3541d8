"""Scoring schema models."""

from __future__ import annotations

import enum
import re
import secrets

from pydantic import AliasChoices, Field, model_validator

from pyscout.models._base import ScoutBaseModel


class ValueKind(enum.StrEnum):
    """How a scoring field is collected and what values it produces.

    Wire values are the short type names used by the storage format.
    """

    NUMERIC_COUNTER = "score"
    NUMERIC_DIRECT = "manual_score"
    LETTER_GRADE = "grade"
    FREE_TEXT = "text"
    FLAG = "boolean"

    @classmethod
    def _missing_(cls, value: object) -> ValueKind | None:
        # Also accept member names and their CamelCase spelling.
        if not isinstance(value, str):
            return None
        text = value.strip()
        member = cls.__members__.get(text.upper())
        if member is None:
            member = cls.__members__.get(re.sub(r"(?<!^)(?=[A-Z])", "_", text).upper())
        return member

    @property
    def is_numeric(self) -> bool:
        return self in (ValueKind.NUMERIC_COUNTER, ValueKind.NUMERIC_DIRECT)


class ScoringFieldDefinition(ScoutBaseModel):
    """One configurable observable collected for every match record.

    ``min_value``/``max_value`` only carry meaning for numeric kinds; they
    are kept, but ignored, on other kinds.
    """

    id: str = Field(min_length=1)
    label: str = ""
    value_kind: ValueKind = Field(validation_alias=AliasChoices("valueKind", "value_kind", "type"))
    min_value: int | float | None = Field(
        default=None,
        validation_alias=AliasChoices("minValue", "min_value", "min"),
    )
    max_value: int | float | None = Field(
        default=None,
        validation_alias=AliasChoices("maxValue", "max_value", "max"),
    )
    order: int = 0

    @model_validator(mode="after")
    def _check_bounds(self) -> ScoringFieldDefinition:
        if self.min_value is not None and self.max_value is not None and self.min_value > self.max_value:
            raise ValueError(f"minValue ({self.min_value}) must not exceed maxValue ({self.max_value})")
        return self

    @property
    def is_numeric(self) -> bool:
        return self.value_kind.is_numeric


DEFAULT_SCHEMA: tuple[ScoringFieldDefinition, ...] = (
    ScoringFieldDefinition(id="auto_mobility", label="Auto Mobility", value_kind=ValueKind.FLAG, order=0),
    ScoringFieldDefinition(
        id="auto_score_top",
        label="Auto Top Score (counter)",
        value_kind=ValueKind.NUMERIC_COUNTER,
        min_value=0,
        max_value=99,
        order=1,
    ),
    ScoringFieldDefinition(
        id="tele_score_manual",
        label="Teleop Score (direct entry)",
        value_kind=ValueKind.NUMERIC_DIRECT,
        min_value=0,
        max_value=999,
        order=2,
    ),
    ScoringFieldDefinition(id="driver_skill", label="Driver Skill", value_kind=ValueKind.LETTER_GRADE, order=3),
    ScoringFieldDefinition(id="defense_quality", label="Defense Quality", value_kind=ValueKind.LETTER_GRADE, order=4),
    ScoringFieldDefinition(id="notes", label="Notes", value_kind=ValueKind.FREE_TEXT, order=5),
)
"""Built-in schema used on first run so the store is never empty."""


def make_field_id(label: str) -> str:
    """Derive a field id from its label: ``"Auto Balance"`` -> ``"auto_balance_417"``."""
    slug = re.sub(r"\s+", "_", label.strip().lower())
    return f"{slug}_{secrets.randbelow(1000)}"


def new_field(
    label: str,
    value_kind: ValueKind | str,
    *,
    min_value: int | float | None = None,
    max_value: int | float | None = None,
    order: int = 0,
) -> ScoringFieldDefinition:
    """Build a new field definition with a generated id.

    Bounds are only kept for counter fields; direct-entry fields are
    free-form numbers.
    """
    kind = ValueKind(value_kind)
    label = label.strip()
    if not label:
        raise ValueError("label must be non-empty")
    keep_bounds = kind is ValueKind.NUMERIC_COUNTER
    return ScoringFieldDefinition(
        id=make_field_id(label),
        label=label,
        value_kind=kind,
        min_value=min_value if keep_bounds else None,
        max_value=max_value if keep_bounds else None,
        order=order,
    )
