from __future__ import annotations

import pytest
from pydantic import ValidationError

from pyscout.exceptions import DuplicateFieldIdError, DuplicateRecordIdError, UnknownFieldIdError
from pyscout.models import DEFAULT_SCHEMA, AppSnapshot, MatchRecord, ScoringFieldDefinition, Settings, ThemeMode
from pyscout.models.schema import ValueKind
from pyscout.persistence import MemoryStorage, SnapshotPersistence
from pyscout.state import (
    AddField,
    AddRecord,
    ImportSnapshot,
    RemoveField,
    ReplaceRecords,
    ScoutStore,
    SetTheme,
    UpdateField,
    UpdateSettings,
    parse_operation,
    reduce,
)
from pyscout.state.records import find_subjects
from pyscout.state.schema import ordered_fields


def _record(record_id: str, match: str = "1", subject: str = "100", **values: object) -> MatchRecord:
    return MatchRecord(id=record_id, match_number=match, subject_number=subject, values=values)


def _counter(field_id: str, order: int = 10) -> ScoringFieldDefinition:
    return ScoringFieldDefinition(
        id=field_id,
        label=field_id.title(),
        value_kind=ValueKind.NUMERIC_COUNTER,
        min_value=0,
        max_value=10,
        order=order,
    )


# ------------------------------------------------------------------
# Schema registry
# ------------------------------------------------------------------


def test_add_field_appends_and_duplicate_is_rejected() -> None:
    store = ScoutStore()
    store.dispatch(AddField(definition=_counter("climb")))

    assert store.snapshot.scoring_fields[-1].id == "climb"
    before = store.snapshot
    with pytest.raises(DuplicateFieldIdError):
        store.dispatch(AddField(definition=_counter("climb")))
    assert store.snapshot is before


def test_remove_field_keeps_recorded_values_and_is_idempotent() -> None:
    store = ScoutStore()
    store.dispatch(AddRecord(record=_record("r1", auto_score_top=3)))

    store.dispatch(RemoveField(field_id="auto_score_top"))
    store.dispatch(RemoveField(field_id="auto_score_top"))

    assert all(definition.id != "auto_score_top" for definition in store.snapshot.scoring_fields)
    assert store.snapshot.records[0].values == {"auto_score_top": 3}


def test_update_field_keeps_position() -> None:
    store = ScoutStore()
    replacement = DEFAULT_SCHEMA[1].model_copy(update={"label": "Auto Top", "max_value": 20})

    store.dispatch(UpdateField(definition=replacement))

    assert store.snapshot.scoring_fields[1] == replacement
    assert [d.id for d in store.snapshot.scoring_fields] == [d.id for d in DEFAULT_SCHEMA]


def test_update_unknown_field_rejected() -> None:
    store = ScoutStore()
    with pytest.raises(UnknownFieldIdError):
        store.dispatch(UpdateField(definition=_counter("missing")))


def test_ordered_fields_is_stable_on_equal_order() -> None:
    fields = (_counter("b", order=1), _counter("a", order=0), _counter("c", order=1))
    assert [d.id for d in ordered_fields(fields)] == ["a", "b", "c"]


# ------------------------------------------------------------------
# Record store
# ------------------------------------------------------------------


def test_add_record_prepends() -> None:
    store = ScoutStore()
    store.dispatch(AddRecord(record=_record("r1")))
    store.dispatch(AddRecord(record=_record("r2")))

    assert [record.id for record in store.snapshot.records] == ["r2", "r1"]


def test_duplicate_record_id_leaves_state_unchanged() -> None:
    store = ScoutStore()
    store.dispatch(AddRecord(record=_record("r1")))
    before = store.snapshot

    with pytest.raises(DuplicateRecordIdError):
        store.dispatch(AddRecord(record=_record("r1", match="2")))

    assert store.snapshot is before
    assert len(store.snapshot.records) == 1


def test_replace_records_discards_previous_records() -> None:
    store = ScoutStore()
    store.dispatch(AddRecord(record=_record("local")))

    store.dispatch(ReplaceRecords(records=(_record("remote-1"), _record("remote-2"))))

    assert [record.id for record in store.snapshot.records] == ["remote-1", "remote-2"]


def test_replace_records_with_internal_duplicates_rejected() -> None:
    store = ScoutStore()
    store.dispatch(AddRecord(record=_record("local")))

    with pytest.raises(DuplicateRecordIdError):
        store.dispatch(ReplaceRecords(records=(_record("x"), _record("x"))))

    assert [record.id for record in store.snapshot.records] == ["local"]


def test_subject_queries_sort_numerically() -> None:
    store = ScoutStore()
    for record_id, match, subject in (("a", "10", "1114"), ("b", "2", "254"), ("c", "9", "254"), ("d", "1", "33")):
        store.dispatch(AddRecord(record=_record(record_id, match=match, subject=subject)))

    assert store.distinct_subjects() == ["33", "254", "1114"]
    assert [record.match_number for record in store.records_for_subject(" 254 ")] == ["2", "9"]
    assert find_subjects(store.snapshot.records, "25") == ["254"]
    assert find_subjects(store.snapshot.records, "") == ["33", "254", "1114"]


# ------------------------------------------------------------------
# Settings / theme / import
# ------------------------------------------------------------------


def test_update_settings_merges_only_set_keys() -> None:
    store = ScoutStore()
    store.dispatch(UpdateSettings(settings=Settings(remote_endpoint_url="https://example.com/exec")))
    store.dispatch(UpdateSettings(settings=Settings()))

    assert store.snapshot.settings.remote_endpoint_url == "https://example.com/exec"

    store.dispatch(UpdateSettings(settings=Settings(remote_endpoint_url=None)))
    assert store.snapshot.settings.remote_endpoint_url is None


def test_set_theme() -> None:
    store = ScoutStore()
    store.dispatch(SetTheme(theme=ThemeMode.LIGHT))
    assert store.snapshot.theme is ThemeMode.LIGHT


def test_import_snapshot_replaces_only_present_parts() -> None:
    store = ScoutStore()
    store.dispatch(AddRecord(record=_record("r1")))
    store.dispatch(SetTheme(theme=ThemeMode.LIGHT))

    store.dispatch(ImportSnapshot(scoring_fields=(_counter("only"),)))

    assert [d.id for d in store.snapshot.scoring_fields] == ["only"]
    assert [record.id for record in store.snapshot.records] == ["r1"]
    assert store.snapshot.theme is ThemeMode.LIGHT


def test_reduce_does_not_modify_input() -> None:
    snapshot = AppSnapshot()
    result = reduce(snapshot, AddRecord(record=_record("r1")))

    assert snapshot.records == ()
    assert len(result.records) == 1


def test_parse_operation_from_wire_dict() -> None:
    op = parse_operation(
        {
            "type": "add_record",
            "record": {"id": "r9", "matchNumber": "4", "teamNumber": 118, "data": {"auto": 2}},
        }
    )
    assert isinstance(op, AddRecord)
    assert op.record.subject_number == "118"

    with pytest.raises(ValidationError):
        parse_operation({"type": "drop_everything"})


# ------------------------------------------------------------------
# Persistence and listeners
# ------------------------------------------------------------------


def test_dispatch_persists_before_notifying() -> None:
    storage = MemoryStorage()
    persistence = SnapshotPersistence(storage)
    store = ScoutStore.open(persistence)
    seen_in_storage: list[str | None] = []

    store.subscribe(lambda _snapshot: seen_in_storage.append(storage.read(persistence.key)))
    store.dispatch(AddRecord(record=_record("r1")))

    assert seen_in_storage[0] is not None
    assert '"r1"' in seen_in_storage[0]
    assert ScoutStore.open(persistence).snapshot == store.snapshot


def test_failed_dispatch_does_not_persist_or_notify() -> None:
    storage = MemoryStorage()
    store = ScoutStore.open(SnapshotPersistence(storage))
    store.dispatch(AddRecord(record=_record("r1")))
    stored = storage.read("frc-scout-data")
    calls: list[AppSnapshot] = []
    store.subscribe(calls.append)

    with pytest.raises(DuplicateRecordIdError):
        store.dispatch(AddRecord(record=_record("r1")))

    assert calls == []
    assert storage.read("frc-scout-data") == stored


def test_unsubscribe_is_idempotent() -> None:
    store = ScoutStore()
    first: list[AppSnapshot] = []
    second: list[AppSnapshot] = []
    unsubscribe_first = store.subscribe(first.append)
    store.subscribe(second.append)

    unsubscribe_first()
    unsubscribe_first()
    store.dispatch(SetTheme(theme=ThemeMode.LIGHT))

    assert first == []
    assert len(second) == 1


def test_subscribing_same_listener_twice_needs_two_unsubscribes() -> None:
    store = ScoutStore()
    calls: list[AppSnapshot] = []
    unsubscribe_a = store.subscribe(calls.append)
    store.subscribe(calls.append)

    unsubscribe_a()
    store.dispatch(SetTheme(theme=ThemeMode.LIGHT))

    assert len(calls) == 1


def test_listener_failure_does_not_break_dispatch() -> None:
    store = ScoutStore()
    calls: list[AppSnapshot] = []

    def _broken(_snapshot: AppSnapshot) -> None:
        raise RuntimeError("boom")

    store.subscribe(_broken)
    store.subscribe(calls.append)
    result = store.dispatch(SetTheme(theme=ThemeMode.LIGHT))

    assert calls == [result]
    assert store.get_snapshot() is result
