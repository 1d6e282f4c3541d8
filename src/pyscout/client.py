"""High-level async client wiring store, persistence and sync together."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import aiohttp

from pyscout._normalize import now_ms
from pyscout._transport import HttpTransport, SyncTransport
from pyscout.aggregation import ComparisonRow, comparison_table
from pyscout.config import ScoutConfig
from pyscout.draft import MatchDraft
from pyscout.exceptions import DuplicateFieldIdError, ScoutError
from pyscout.models.record import MatchRecord
from pyscout.models.schema import ScoringFieldDefinition, ValueKind, new_field
from pyscout.models.settings import Settings
from pyscout.models.snapshot import AppSnapshot, ThemeMode
from pyscout.persistence import (
    JsonFileStorage,
    MemoryStorage,
    SnapshotPersistence,
    StorageBackend,
    export_backup,
    parse_backup,
)
from pyscout.state.operations import AddField, AddRecord, RemoveField, SetTheme, UpdateField, UpdateSettings
from pyscout.state.store import ScoutStore, SnapshotListener
from pyscout.sync import SyncAdapter, SyncNotice

_logger = logging.getLogger(__name__)

_FIELD_ID_ATTEMPTS = 5


@dataclass(frozen=True, slots=True)
class SaveResult:
    """A saved record and the outcome of pushing it."""

    record: MatchRecord
    notice: SyncNotice


class ScoutClient:
    """Async entry point for a scouting application.

    The snapshot is loaded when the client is constructed and every change
    goes through :attr:`store`. Remote sync needs an open HTTP session, so
    sync methods must be used inside the context manager.

    Usage::

        async with ScoutClient(ScoutConfig(storage_dir=Path("data"))) as client:
            draft = client.new_draft(observer_name="Kim")
            draft.match_number, draft.subject_number = "12", "254"
            result = await client.save_record(draft)
    """

    def __init__(
        self,
        config: ScoutConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        storage: StorageBackend | None = None,
        transport: SyncTransport | None = None,
        on_notice: Callable[[SyncNotice], None] | None = None,
        on_snapshot: SnapshotListener | None = None,
    ) -> None:
        self._config = config or ScoutConfig()
        self._external_session = session is not None
        self._http_session = session
        self._injected_transport = transport
        self._on_notice = on_notice
        self._sync: SyncAdapter | None = None

        if storage is None:
            storage = (
                JsonFileStorage(self._config.storage_dir) if self._config.storage_dir is not None else MemoryStorage()
            )
        self._persistence = SnapshotPersistence(storage, self._config.storage_key)
        self._store = ScoutStore.open(self._persistence)
        if on_snapshot is not None:
            self._store.subscribe(on_snapshot)
        self._last_recorded_at = max((record.recorded_at for record in self._store.snapshot.records), default=0)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ScoutClient:
        transport = self._injected_transport
        if transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            transport = HttpTransport(self._http_session, timeout=self._config.request_timeout)
        self._sync = SyncAdapter(self._store, transport, on_notice=self._on_notice)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._sync = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_sync(self) -> SyncAdapter:
        if self._sync is None:
            raise ScoutError("Client not initialized. Use 'async with ScoutClient(...) as client:'")
        return self._sync

    def _next_recorded_at(self) -> int:
        """Capture timestamp that never goes backwards within this client."""
        self._last_recorded_at = max(now_ms(), self._last_recorded_at)
        return self._last_recorded_at

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def config(self) -> ScoutConfig:
        return self._config

    @property
    def store(self) -> ScoutStore:
        return self._store

    @property
    def snapshot(self) -> AppSnapshot:
        return self._store.snapshot

    @property
    def sync_busy(self) -> bool:
        return self._sync is not None and self._sync.busy

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def compare_subjects(self, subjects: Iterable[str]) -> list[ComparisonRow]:
        """Comparison table limited to `ScoutConfig.max_comparison_subjects`."""
        return comparison_table(self._store.snapshot, subjects, max_subjects=self._config.max_comparison_subjects)

    def new_draft(self, **kwargs: Any) -> MatchDraft:
        """Start a draft against the current schema."""
        return MatchDraft(self._store.snapshot.scoring_fields, **kwargs)

    async def save_record(self, draft: MatchDraft) -> SaveResult:
        """Store the drafted record locally, then try to push it.

        The local save is complete (and persisted) before the push starts;
        a failed push only produces a warning notice.
        """
        sync = self._require_sync()
        record = draft.build(recorded_at=self._next_recorded_at())
        snapshot = self._store.dispatch(AddRecord(record=record))
        notice = await sync.push_record(record, snapshot.settings.remote_endpoint_url)
        return SaveResult(record=record, notice=notice)

    async def pull_records(self) -> SyncNotice:
        """Replace local records with the remote set."""
        sync = self._require_sync()
        return await sync.pull_all(self._store.snapshot.settings.remote_endpoint_url)

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    def add_field(
        self,
        label: str,
        value_kind: ValueKind | str,
        *,
        min_value: int | float | None = None,
        max_value: int | float | None = None,
    ) -> ScoringFieldDefinition:
        """Create a field with a generated id and append it to the schema."""
        fields = self._store.snapshot.scoring_fields
        order = max((definition.order for definition in fields), default=-1) + 1
        for _ in range(_FIELD_ID_ATTEMPTS):
            definition = new_field(label, value_kind, min_value=min_value, max_value=max_value, order=order)
            try:
                self._store.dispatch(AddField(definition=definition))
            except DuplicateFieldIdError:
                _logger.debug("Generated field id %s already in use; retrying", definition.id)
                continue
            return definition
        raise DuplicateFieldIdError(definition.id)

    def update_field(self, definition: ScoringFieldDefinition) -> AppSnapshot:
        return self._store.dispatch(UpdateField(definition=definition))

    def remove_field(self, field_id: str) -> AppSnapshot:
        return self._store.dispatch(RemoveField(field_id=field_id))

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def set_endpoint(self, url: str | None) -> AppSnapshot:
        return self._store.dispatch(UpdateSettings(settings=Settings(remote_endpoint_url=url)))

    def set_theme(self, theme: ThemeMode | str) -> AppSnapshot:
        return self._store.dispatch(SetTheme(theme=ThemeMode(theme)))

    # ------------------------------------------------------------------
    # Backups
    # ------------------------------------------------------------------

    def export_backup(self, path: Path | str) -> Path:
        """Write the current snapshot to *path* as a backup document."""
        target = Path(path)
        target.write_text(export_backup(self._store.snapshot), encoding="utf-8")
        return target

    def import_backup(self, path: Path | str) -> AppSnapshot:
        """Restore the parts of the snapshot present in the backup at *path*.

        Raises
        ------
        ScoutStorageError
            If the file is not a valid backup.
        """
        operation = parse_backup(Path(path).read_text(encoding="utf-8"))
        return self._store.dispatch(operation)
