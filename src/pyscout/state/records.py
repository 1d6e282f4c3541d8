"""Record store: append/replace operations and derived queries.

Records are held most-recent-first. The only mutations are prepending a
single new record and replacing the whole sequence (inbound sync).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from pyscout._normalize import numeric_sort_key
from pyscout.exceptions import DuplicateRecordIdError
from pyscout.models.record import MatchRecord

Records = tuple[MatchRecord, ...]


def add_record(records: Sequence[MatchRecord], record: MatchRecord) -> Records:
    """Prepend *record*; its id must be unique in the store."""
    if any(existing.id == record.id for existing in records):
        raise DuplicateRecordIdError(record.id)
    return (record, *records)


def replace_all(records: Iterable[MatchRecord]) -> Records:
    """Return *records* as the new sequence, discarding whatever was stored.

    Nothing is merged: local records missing from *records* are lost.
    """
    replacement = tuple(records)
    seen: set[str] = set()
    for record in replacement:
        if record.id in seen:
            raise DuplicateRecordIdError(record.id)
        seen.add(record.id)
    return replacement


def distinct_subjects(records: Iterable[MatchRecord]) -> list[str]:
    """Subject numbers present in *records*, in numeric order."""
    return sorted({record.subject_number for record in records}, key=numeric_sort_key)


def records_for_subject(records: Iterable[MatchRecord], subject: str) -> list[MatchRecord]:
    """Records of one subject, ordered by match number."""
    subject = subject.strip()
    matching = [record for record in records if record.subject_number == subject]
    return sorted(matching, key=lambda record: numeric_sort_key(record.match_number))


def find_subjects(records: Iterable[MatchRecord], term: str) -> list[str]:
    """Subjects whose number contains *term*; an empty term matches all."""
    term = term.strip()
    return [subject for subject in distinct_subjects(records) if term in subject]
