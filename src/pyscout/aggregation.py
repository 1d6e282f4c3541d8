"""Read-side aggregation over a snapshot.

All functions are pure and never raise on odd record contents: a value
that is missing, boolean or not a number counts as ``0`` for numeric
fields. Values whose field no longer exists in the schema are ignored
(see :func:`orphaned_field_ids` to list them).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from pyscout._constants import DEFAULT_FULL_MARK, MAX_COMPARISON_SUBJECTS, RECENT_ACTIVITY_LIMIT
from pyscout._normalize import numeric_or_zero, numeric_sort_key
from pyscout.models.record import MatchRecord
from pyscout.models.schema import ScoringFieldDefinition, ValueKind
from pyscout.models.snapshot import AppSnapshot
from pyscout.state.records import distinct_subjects, records_for_subject
from pyscout.state.schema import ordered_fields


@dataclass(frozen=True, slots=True)
class FieldAverage:
    field_id: str
    label: str
    average: float
    full_mark: float


@dataclass(frozen=True, slots=True)
class TrendPoint:
    """Numeric field values of one subject in one match."""

    match_number: str
    values: dict[str, float]
    total: float


@dataclass(frozen=True, slots=True)
class ComparisonRow:
    """Averages of one numeric field across the compared subjects."""

    field_id: str
    label: str
    averages: dict[str, float]


@dataclass(frozen=True, slots=True)
class ActivityPoint:
    match_number: str
    subject_number: str
    score: float


@dataclass(frozen=True, slots=True)
class DashboardSummary:
    total_records: int
    unique_subjects: int
    total_points: float
    recent_activity: list[ActivityPoint] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SubjectNote:
    match_number: str
    field_id: str
    label: str
    text: str


def numeric_fields(snapshot: AppSnapshot) -> list[ScoringFieldDefinition]:
    """Counter and direct-entry fields, in collection order."""
    return [definition for definition in ordered_fields(snapshot.scoring_fields) if definition.is_numeric]


def _record_total(record: MatchRecord, fields: Iterable[ScoringFieldDefinition]) -> float:
    return sum(numeric_or_zero(record.values.get(definition.id)) for definition in fields)


def _average(records: list[MatchRecord], field_id: str) -> float:
    if not records:
        return 0.0
    return sum(numeric_or_zero(record.values.get(field_id)) for record in records) / len(records)


def subject_averages(snapshot: AppSnapshot, subject: str) -> list[FieldAverage]:
    """Per-field averages for *subject*; empty if it has no records."""
    records = records_for_subject(snapshot.records, subject)
    if not records:
        return []
    return [
        FieldAverage(
            field_id=definition.id,
            label=definition.label,
            average=_average(records, definition.id),
            full_mark=float(definition.max_value if definition.max_value is not None else DEFAULT_FULL_MARK),
        )
        for definition in numeric_fields(snapshot)
    ]


def subject_trend(snapshot: AppSnapshot, subject: str) -> list[TrendPoint]:
    """Numeric values of *subject* per match, ordered by match number."""
    fields = numeric_fields(snapshot)
    points: list[TrendPoint] = []
    for record in records_for_subject(snapshot.records, subject):
        values = {definition.id: numeric_or_zero(record.values.get(definition.id)) for definition in fields}
        points.append(TrendPoint(match_number=record.match_number, values=values, total=sum(values.values())))
    return points


def comparison_table(
    snapshot: AppSnapshot,
    subjects: Iterable[str],
    *,
    max_subjects: int = MAX_COMPARISON_SUBJECTS,
) -> list[ComparisonRow]:
    """Side-by-side averages for up to *max_subjects* subjects.

    Subjects are taken in the given order; duplicates and any beyond the
    limit are dropped. Averages are rounded to one decimal.
    """
    if max_subjects < 1:
        raise ValueError(f"max_subjects must be >= 1, got {max_subjects}")

    selected: list[str] = []
    for subject in subjects:
        subject = subject.strip()
        if subject and subject not in selected:
            selected.append(subject)
        if len(selected) >= max_subjects:
            break

    per_subject = {subject: records_for_subject(snapshot.records, subject) for subject in selected}
    return [
        ComparisonRow(
            field_id=definition.id,
            label=definition.label,
            averages={subject: round(_average(records, definition.id), 1) for subject, records in per_subject.items()},
        )
        for definition in numeric_fields(snapshot)
    ]


def dashboard_summary(snapshot: AppSnapshot, *, recent: int = RECENT_ACTIVITY_LIMIT) -> DashboardSummary:
    """Headline counts plus the numeric score of the latest matches."""
    fields = numeric_fields(snapshot)
    records = snapshot.records
    by_match = sorted(records, key=lambda record: numeric_sort_key(record.match_number))
    latest = by_match[-recent:] if recent > 0 else []
    return DashboardSummary(
        total_records=len(records),
        unique_subjects=len(distinct_subjects(records)),
        total_points=sum(_record_total(record, fields) for record in records),
        recent_activity=[
            ActivityPoint(
                match_number=record.match_number,
                subject_number=record.subject_number,
                score=_record_total(record, fields),
            )
            for record in latest
        ],
    )


def subject_notes(snapshot: AppSnapshot, subject: str) -> list[SubjectNote]:
    """Non-empty free-text values recorded for *subject*, by match."""
    text_fields = [
        definition
        for definition in ordered_fields(snapshot.scoring_fields)
        if definition.value_kind is ValueKind.FREE_TEXT
    ]
    notes: list[SubjectNote] = []
    for record in records_for_subject(snapshot.records, subject):
        for definition in text_fields:
            text = record.values.get(definition.id)
            if isinstance(text, str) and text.strip():
                notes.append(
                    SubjectNote(
                        match_number=record.match_number,
                        field_id=definition.id,
                        label=definition.label,
                        text=text,
                    )
                )
    return notes


def orphaned_field_ids(snapshot: AppSnapshot) -> list[str]:
    """Value keys used by records that no longer exist in the schema."""
    known = {definition.id for definition in snapshot.scoring_fields}
    orphaned = {key for record in snapshot.records for key in record.values if key not in known}
    return sorted(orphaned)
