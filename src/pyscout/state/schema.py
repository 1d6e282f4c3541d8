"""Schema registry: pure operations over the ordered scoring field set.

Every function returns a new tuple; the input is never modified.
"""

from __future__ import annotations

from collections.abc import Sequence

from pyscout.exceptions import DuplicateFieldIdError, UnknownFieldIdError
from pyscout.models.schema import ScoringFieldDefinition

Fields = tuple[ScoringFieldDefinition, ...]


def get_field(fields: Sequence[ScoringFieldDefinition], field_id: str) -> ScoringFieldDefinition | None:
    for definition in fields:
        if definition.id == field_id:
            return definition
    return None


def add_field(fields: Sequence[ScoringFieldDefinition], definition: ScoringFieldDefinition) -> Fields:
    """Append *definition*; its id must not be in use."""
    if get_field(fields, definition.id) is not None:
        raise DuplicateFieldIdError(definition.id)
    return (*fields, definition)


def remove_field(fields: Sequence[ScoringFieldDefinition], field_id: str) -> Fields:
    """Remove the field with *field_id*. Removing an absent id is a no-op.

    Recorded values for the field are left in place on existing records.
    """
    return tuple(definition for definition in fields if definition.id != field_id)


def update_field(fields: Sequence[ScoringFieldDefinition], definition: ScoringFieldDefinition) -> Fields:
    """Replace the field with the same id, keeping its position."""
    if get_field(fields, definition.id) is None:
        raise UnknownFieldIdError(definition.id)
    return tuple(definition if existing.id == definition.id else existing for existing in fields)


def ordered_fields(fields: Sequence[ScoringFieldDefinition]) -> Fields:
    """Fields in collection order (stable sort on ``order``)."""
    return tuple(sorted(fields, key=lambda definition: definition.order))
