"""Tests for snapshot entity parsing and serialization."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pyscout.models import (
    DEFAULT_SCHEMA,
    AllianceSide,
    AppSnapshot,
    MatchRecord,
    ScoringFieldDefinition,
    Settings,
    ThemeMode,
    ValueKind,
    new_field,
)

# ------------------------------------------------------------------
# ValueKind / AllianceSide
# ------------------------------------------------------------------


class TestEnums:
    def test_value_kind_wire_values(self) -> None:
        assert ValueKind("score") is ValueKind.NUMERIC_COUNTER
        assert ValueKind("manual_score") is ValueKind.NUMERIC_DIRECT
        assert ValueKind("boolean") is ValueKind.FLAG

    def test_value_kind_accepts_member_names(self) -> None:
        assert ValueKind("NumericCounter") is ValueKind.NUMERIC_COUNTER
        assert ValueKind("letter_grade") is ValueKind.LETTER_GRADE
        assert ValueKind("FREE_TEXT") is ValueKind.FREE_TEXT

    def test_value_kind_unknown_raises(self) -> None:
        with pytest.raises(ValueError):
            ValueKind("slider")

    def test_alliance_legacy_colors(self) -> None:
        assert AllianceSide("red") is AllianceSide.A
        assert AllianceSide("BLUE") is AllianceSide.B


# ------------------------------------------------------------------
# ScoringFieldDefinition
# ------------------------------------------------------------------


class TestScoringFieldDefinition:
    def test_default_schema_has_six_fields(self) -> None:
        kinds = [definition.value_kind for definition in DEFAULT_SCHEMA]
        assert len(DEFAULT_SCHEMA) == 6
        assert kinds.count(ValueKind.FLAG) == 1
        assert kinds.count(ValueKind.NUMERIC_COUNTER) == 1
        assert kinds.count(ValueKind.NUMERIC_DIRECT) == 1
        assert kinds.count(ValueKind.LETTER_GRADE) == 2
        assert kinds.count(ValueKind.FREE_TEXT) == 1
        assert len({definition.id for definition in DEFAULT_SCHEMA}) == 6

    def test_min_above_max_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ScoringFieldDefinition(id="x", value_kind=ValueKind.NUMERIC_COUNTER, min_value=5, max_value=1)

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ScoringFieldDefinition(id="", value_kind=ValueKind.FLAG)

    def test_legacy_keys(self) -> None:
        definition = ScoringFieldDefinition.model_validate(
            {"id": "auto", "label": "Auto", "type": "score", "min": 0, "max": 10, "order": 3}
        )
        assert definition.value_kind is ValueKind.NUMERIC_COUNTER
        assert definition.min_value == 0
        assert definition.max_value == 10
        assert definition.is_numeric

    def test_wire_keys_are_camel_case(self) -> None:
        wire = DEFAULT_SCHEMA[1].to_wire()
        assert wire == {
            "id": "auto_score_top",
            "label": "Auto Top Score (counter)",
            "valueKind": "score",
            "minValue": 0,
            "maxValue": 99,
            "order": 1,
        }

    def test_new_field_generates_id_from_label(self) -> None:
        definition = new_field("Auto  Balance", ValueKind.NUMERIC_COUNTER, min_value=0, max_value=5, order=7)
        prefix, _, suffix = definition.id.rpartition("_")
        assert prefix == "auto_balance"
        assert 0 <= int(suffix) < 1000
        assert definition.max_value == 5
        assert definition.order == 7

    def test_new_field_drops_bounds_for_non_counter(self) -> None:
        definition = new_field("Endgame", "manual_score", min_value=0, max_value=50)
        assert definition.min_value is None
        assert definition.max_value is None

    def test_new_field_requires_label(self) -> None:
        with pytest.raises(ValueError):
            new_field("   ", ValueKind.FLAG)


# ------------------------------------------------------------------
# MatchRecord
# ------------------------------------------------------------------


class TestMatchRecord:
    def test_legacy_payload(self) -> None:
        record = MatchRecord.model_validate(
            {
                "id": "r1",
                "matchNumber": 12,
                "teamNumber": "254",
                "alliance": "red",
                "scoutName": None,
                "data": {"auto": 5, "mobility": True, "skill": "A", "avg": 2.5, "gone": None},
                "timestamp": 1_700_000_000_000,
            }
        )
        assert record.match_number == "12"
        assert record.subject_number == "254"
        assert record.alliance_side is AllianceSide.A
        assert record.observer_name == ""
        assert record.values == {"auto": 5, "mobility": True, "skill": "A", "avg": 2.5}
        assert record.recorded_at == 1_700_000_000_000

    def test_value_types_are_preserved(self) -> None:
        record = MatchRecord(id="r1", match_number="1", subject_number="2", values={"a": 1, "b": True, "c": "x"})
        assert type(record.values["a"]) is int
        assert type(record.values["b"]) is bool
        assert type(record.values["c"]) is str

    def test_missing_identifiers_rejected(self) -> None:
        with pytest.raises(ValidationError):
            MatchRecord.model_validate({"id": "r1", "matchNumber": "1"})

    def test_frozen(self) -> None:
        record = MatchRecord(id="r1", match_number="1", subject_number="2")
        with pytest.raises(ValidationError):
            record.match_number = "3"  # type: ignore[misc]

    def test_wire_round_trip(self) -> None:
        record = MatchRecord(
            id="r1",
            match_number="1",
            subject_number="100",
            alliance_side=AllianceSide.A,
            observer_name="Kim",
            values={"auto": 5},
            recorded_at=42,
        )
        wire = record.to_wire()
        assert wire["subjectNumber"] == "100"
        assert wire["allianceSide"] == "A"
        assert MatchRecord.model_validate(wire) == record


# ------------------------------------------------------------------
# Settings / AppSnapshot
# ------------------------------------------------------------------


class TestSnapshot:
    def test_blank_endpoint_is_none(self) -> None:
        assert Settings(remote_endpoint_url="   ").remote_endpoint_url is None

    def test_legacy_sheet_url(self) -> None:
        settings = Settings.model_validate({"sheetUrl": "https://example.com/exec"})
        assert settings.remote_endpoint_url == "https://example.com/exec"

    def test_defaults(self) -> None:
        snapshot = AppSnapshot()
        assert snapshot.scoring_fields == DEFAULT_SCHEMA
        assert snapshot.records == ()
        assert snapshot.settings.remote_endpoint_url is None
        assert snapshot.theme is ThemeMode.DARK

    def test_storage_format_keys(self) -> None:
        wire = AppSnapshot().to_wire()
        assert set(wire) == {"schema", "matches", "settings", "theme"}

    def test_missing_keys_default_and_unknown_keys_ignored(self) -> None:
        snapshot = AppSnapshot.model_validate_json('{"theme": "light", "somethingNew": 1}')
        assert snapshot.theme is ThemeMode.LIGHT
        assert snapshot.scoring_fields == DEFAULT_SCHEMA
