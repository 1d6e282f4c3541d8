"""Match draft: collects one observation against the current schema.

A draft starts from per-kind defaults, accepts values only for fields of
the schema it was created with, and builds an immutable
:class:`~pyscout.models.record.MatchRecord` once match and subject numbers
are filled in.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from typing import Any

from pyscout._constants import DEFAULT_COUNTER_MAX, DEFAULT_GRADE, GRADES
from pyscout._normalize import compact_number, now_ms, safe_float, safe_str
from pyscout.exceptions import InvalidFieldValueError, ScoutValidationError, UnknownFieldIdError
from pyscout.models.record import AllianceSide, FieldValue, MatchRecord
from pyscout.models.schema import ScoringFieldDefinition, ValueKind
from pyscout.state.schema import ordered_fields


def default_value(definition: ScoringFieldDefinition) -> FieldValue:
    """Initial form value for a field."""
    kind = definition.value_kind
    if kind is ValueKind.FLAG:
        return False
    if kind.is_numeric:
        return compact_number(float(definition.min_value or 0))
    if kind is ValueKind.LETTER_GRADE:
        return DEFAULT_GRADE
    return ""


def coerce_value(definition: ScoringFieldDefinition, value: Any) -> FieldValue:
    """Validate *value* for *definition*'s kind and return its stored form.

    Numbers are clamped to the declared bounds; grades are upper-cased.

    Raises
    ------
    InvalidFieldValueError
        If *value* cannot represent the field's kind.
    """
    kind = definition.value_kind
    if kind is ValueKind.FLAG:
        if not isinstance(value, bool):
            raise InvalidFieldValueError(definition.id, f"expected true/false, got {value!r}")
        return value

    if kind.is_numeric:
        number = safe_float(value)
        if number is None:
            raise InvalidFieldValueError(definition.id, f"expected a number, got {value!r}")
        if definition.min_value is not None:
            number = max(float(definition.min_value), number)
        if definition.max_value is not None:
            number = min(float(definition.max_value), number)
        return compact_number(number)

    if kind is ValueKind.LETTER_GRADE:
        grade = value.strip().upper() if isinstance(value, str) else None
        if grade not in GRADES:
            raise InvalidFieldValueError(definition.id, f"expected one of {', '.join(GRADES)}, got {value!r}")
        return grade

    if not isinstance(value, str):
        raise InvalidFieldValueError(definition.id, f"expected text, got {value!r}")
    return value


class MatchDraft:
    """Mutable form state for one match observation.

    Usage::

        draft = MatchDraft(store.snapshot.scoring_fields, observer_name="Kim")
        draft.match_number = "12"
        draft.subject_number = "254"
        draft.increment("auto_score_top")
        draft.set_value("driver_skill", "A")
        record = draft.build()
    """

    def __init__(
        self,
        fields: Sequence[ScoringFieldDefinition],
        *,
        match_number: str = "",
        subject_number: str = "",
        alliance_side: AllianceSide = AllianceSide.B,
        observer_name: str = "",
    ) -> None:
        self._fields = ordered_fields(fields)
        self._by_id = {definition.id: definition for definition in self._fields}
        self.match_number = match_number
        self.subject_number = subject_number
        self.alliance_side = AllianceSide(alliance_side)
        self.observer_name = observer_name
        self._values: dict[str, FieldValue] = self._defaults()

    def _defaults(self) -> dict[str, FieldValue]:
        return {definition.id: default_value(definition) for definition in self._fields}

    def _require(self, field_id: str) -> ScoringFieldDefinition:
        definition = self._by_id.get(field_id)
        if definition is None:
            raise UnknownFieldIdError(field_id)
        return definition

    @property
    def fields(self) -> tuple[ScoringFieldDefinition, ...]:
        """Fields in collection order."""
        return self._fields

    @property
    def values(self) -> dict[str, FieldValue]:
        return dict(self._values)

    def get_value(self, field_id: str) -> FieldValue:
        self._require(field_id)
        return self._values[field_id]

    def set_value(self, field_id: str, value: Any) -> FieldValue:
        """Set a field value, returning the value actually stored."""
        coerced = coerce_value(self._require(field_id), value)
        self._values[field_id] = coerced
        return coerced

    def increment(self, field_id: str, step: int = 1) -> FieldValue:
        """Step a numeric field, staying within ``[min or 0, max or 99]``."""
        definition = self._require(field_id)
        if not definition.is_numeric:
            raise InvalidFieldValueError(field_id, f"cannot step a {definition.value_kind.value} field")
        low = float(definition.min_value if definition.min_value is not None else 0)
        high = float(definition.max_value if definition.max_value is not None else DEFAULT_COUNTER_MAX)
        current = safe_float(self._values.get(field_id)) or 0.0
        stepped = min(high, max(low, current + step))
        self._values[field_id] = compact_number(stepped)
        return self._values[field_id]

    def decrement(self, field_id: str, step: int = 1) -> FieldValue:
        return self.increment(field_id, -step)

    def reset(self, *, keep_match_number: bool = False) -> None:
        """Restore default values and clear the identifiers."""
        if not keep_match_number:
            self.match_number = ""
        self.subject_number = ""
        self._values = self._defaults()

    def build(self, *, record_id: str | None = None, recorded_at: int | None = None) -> MatchRecord:
        """Create the record for this draft.

        Raises
        ------
        ScoutValidationError
            If the match or subject number is missing.
        """
        match_number = safe_str(self.match_number)
        subject_number = safe_str(self.subject_number)
        if not match_number or not subject_number:
            raise ScoutValidationError("Match number and subject number are required")
        return MatchRecord(
            id=record_id or str(uuid.uuid4()),
            match_number=match_number,
            subject_number=subject_number,
            alliance_side=self.alliance_side,
            observer_name=self.observer_name.strip(),
            values=dict(self._values),
            recorded_at=recorded_at if recorded_at is not None else now_ms(),
        )
