"""Best-effort remote synchronization of match records.

Sync runs beside the store, never inside it: a push happens after the
record was already applied and persisted locally, and a pull only touches
local state by dispatching :class:`~pyscout.state.operations.ReplaceRecords`.
Failures are reported as :class:`SyncNotice` values and never roll back
local state.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from pyscout._transport import SyncTransport
from pyscout.exceptions import ScoutSyncError, ScoutTransportError, ScoutValidationError
from pyscout.models.record import MatchRecord
from pyscout.state.operations import ReplaceRecords
from pyscout.state.store import ScoutStore

_logger = logging.getLogger(__name__)

_RECORDS_ADAPTER: TypeAdapter[list[MatchRecord]] = TypeAdapter(list[MatchRecord])


class NoticeLevel(enum.StrEnum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class SyncNotice(BaseModel):
    """User-facing outcome of a sync attempt."""

    model_config = ConfigDict(frozen=True)

    level: NoticeLevel
    title: str
    message: str
    applied: bool = False
    """Whether the remote side (push) or local store (pull) was updated."""


def parse_remote_records(payload: Any) -> tuple[MatchRecord, ...]:
    """Validate a pulled payload as a sequence of match records.

    Raises
    ------
    ScoutSyncError
        If *payload* is not a JSON array or an element is not record-shaped.
    """
    if not isinstance(payload, list):
        raise ScoutSyncError(f"Remote payload is not a list of records (got {type(payload).__name__})")
    try:
        return tuple(_RECORDS_ADAPTER.validate_python(payload))
    except ValidationError as exc:
        raise ScoutSyncError(f"Remote payload contains malformed records: {exc.error_count()} error(s)") from exc


class SyncAdapter:
    """Push single records to, and pull all records from, a remote endpoint.

    At most one sync operation runs at a time. A call made while another is
    in flight is refused with a warning notice instead of being queued.
    """

    def __init__(
        self,
        store: ScoutStore,
        transport: SyncTransport,
        *,
        on_notice: Callable[[SyncNotice], None] | None = None,
    ) -> None:
        self._store = store
        self._transport = transport
        self._on_notice = on_notice
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    def _notify(self, notice: SyncNotice) -> SyncNotice:
        if self._on_notice is not None:
            try:
                self._on_notice(notice)
            except Exception:
                _logger.debug("on_notice callback failed", exc_info=True)
        return notice

    def _busy_notice(self) -> SyncNotice:
        return self._notify(
            SyncNotice(
                level=NoticeLevel.WARNING,
                title="Sync busy",
                message="Another sync operation is still running; try again when it finishes.",
            )
        )

    async def push_record(self, record: MatchRecord, endpoint_url: str | None) -> SyncNotice:
        """Send one record to *endpoint_url*.

        The record must already be in the store. A failed push leaves it
        there and is not retried.
        """
        if not endpoint_url:
            return self._notify(
                SyncNotice(
                    level=NoticeLevel.INFO,
                    title="Saved locally",
                    message="No remote endpoint configured; the record was saved locally only.",
                )
            )
        if self._busy:
            return self._busy_notice()

        self._busy = True
        try:
            await self._transport.post_json(endpoint_url, record.to_wire())
        except ScoutTransportError as exc:
            _logger.warning("Push of record %s failed: %s", record.id, exc)
            return self._notify(
                SyncNotice(
                    level=NoticeLevel.WARNING,
                    title="Sync failed",
                    message=f"Match {record.match_number} / {record.subject_number} was saved locally "
                    f"but could not be sent: {exc}",
                )
            )
        finally:
            self._busy = False

        return self._notify(
            SyncNotice(
                level=NoticeLevel.INFO,
                title="Synced",
                message=f"Match {record.match_number} / {record.subject_number} sent to the remote endpoint.",
                applied=True,
            )
        )

    async def pull_all(self, endpoint_url: str | None) -> SyncNotice:
        """Replace the local record set with the one held remotely.

        Local records missing from the remote set are discarded.
        """
        if not endpoint_url:
            return self._notify(
                SyncNotice(
                    level=NoticeLevel.ERROR,
                    title="Sync not configured",
                    message="Set a remote endpoint URL before pulling records.",
                )
            )
        if self._busy:
            return self._busy_notice()

        self._busy = True
        try:
            try:
                payload = await self._transport.get_json(endpoint_url)
                records = parse_remote_records(payload)
            except ScoutSyncError as exc:
                _logger.warning("Pull from %s failed: %s", endpoint_url, exc)
                return self._notify(SyncNotice(level=NoticeLevel.ERROR, title="Pull failed", message=str(exc)))

            previous = self._store.get_snapshot().records
            try:
                self._store.dispatch(ReplaceRecords(records=records))
            except ScoutValidationError as exc:
                _logger.warning("Pulled records rejected: %s", exc)
                return self._notify(SyncNotice(level=NoticeLevel.ERROR, title="Pull failed", message=str(exc)))

            pulled_ids = {record.id for record in records}
            discarded = [record.id for record in previous if record.id not in pulled_ids]
            if discarded:
                _logger.warning(
                    "Pull replaced %d local record(s) missing from the remote set: %s",
                    len(discarded),
                    ", ".join(discarded),
                )
        finally:
            self._busy = False

        return self._notify(
            SyncNotice(
                level=NoticeLevel.INFO,
                title="Pulled",
                message=f"Loaded {len(records)} record(s) from the remote endpoint.",
                applied=True,
            )
        )
