"""Single-writer snapshot store.

This is the only component allowed to replace the application snapshot.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from pyscout.models.record import MatchRecord
from pyscout.models.snapshot import AppSnapshot, default_snapshot
from pyscout.state.operations import Operation
from pyscout.state.records import distinct_subjects, records_for_subject
from pyscout.state.reducer import reduce

if TYPE_CHECKING:
    from pyscout.persistence import SnapshotPersistence

_logger = logging.getLogger(__name__)

SnapshotListener = Callable[[AppSnapshot], None]


class ScoutStore:
    """Holds the current :class:`AppSnapshot` and applies operations to it.

    ``dispatch`` is synchronous: by the time it returns, the new snapshot
    is current, has been handed to the persistence adapter (if any) and
    every listener has been called.

    Usage::

        store = ScoutStore.open(SnapshotPersistence(JsonFileStorage(path)))
        unsubscribe = store.subscribe(render)
        store.dispatch(AddRecord(record=record))
    """

    def __init__(
        self,
        snapshot: AppSnapshot | None = None,
        *,
        persistence: SnapshotPersistence | None = None,
    ) -> None:
        self._snapshot = snapshot if snapshot is not None else default_snapshot()
        self._persistence = persistence
        self._listeners: list[SnapshotListener] = []

    @classmethod
    def open(cls, persistence: SnapshotPersistence) -> ScoutStore:
        """Create a store from the persisted snapshot (or defaults)."""
        return cls(persistence.load(), persistence=persistence)

    def get_snapshot(self) -> AppSnapshot:
        return self._snapshot

    @property
    def snapshot(self) -> AppSnapshot:
        return self._snapshot

    def dispatch(self, operation: Operation) -> AppSnapshot:
        """Apply *operation* and return the new snapshot.

        Raises
        ------
        ScoutValidationError
            If the operation violates a store invariant. The current
            snapshot is left untouched.
        """
        snapshot = reduce(self._snapshot, operation)
        self._snapshot = snapshot
        if self._persistence is not None:
            self._persistence.save(snapshot)
        _logger.debug(
            "Applied %s: fields=%d records=%d",
            operation.type,
            len(snapshot.scoring_fields),
            len(snapshot.records),
        )

        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                _logger.debug("Snapshot listener failed", exc_info=True)
        return snapshot

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Call *listener* with the new snapshot after every dispatch.

        Returns a callable that removes the listener; calling it more than
        once has no further effect.
        """
        self._listeners.append(listener)
        removed = False

        def _unsubscribe() -> None:
            nonlocal removed
            if removed:
                return
            removed = True
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Read helpers
    # ------------------------------------------------------------------

    def distinct_subjects(self) -> list[str]:
        return distinct_subjects(self._snapshot.records)

    def records_for_subject(self, subject: str) -> list[MatchRecord]:
        return records_for_subject(self._snapshot.records, subject)
