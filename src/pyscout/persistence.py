"""Durable local storage of the application snapshot.

The snapshot lives in a single named slot of a key-value
:class:`StorageBackend`. Loading never raises: a missing or unusable slot
yields the default snapshot. Saving never raises either: a failed write is
logged and the in-memory snapshot stays authoritative.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from pyscout._constants import STORAGE_KEY
from pyscout.exceptions import ScoutStorageError
from pyscout.models.snapshot import AppSnapshot, default_snapshot
from pyscout.state.operations import ImportSnapshot

_logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    """Structural key-value storage interface.

    Implementations raise :class:`OSError` (or :class:`ScoutStorageError`)
    on I/O failure.
    """

    def read(self, key: str) -> str | None: ...

    def write(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """In-process storage; contents are lost with the process."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._slots: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self._slots.get(key)

    def write(self, key: str, value: str) -> None:
        self._slots[key] = value


class JsonFileStorage:
    """One ``<key>.json`` file per slot inside *directory*.

    Writes go to a temporary file in the same directory which then replaces
    the slot file, so a crash mid-write leaves the previous copy intact.
    """

    def __init__(self, directory: Path | str) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key in {".", ".."}:
            raise ScoutStorageError(f"Invalid storage key: {key!r}")
        return self._directory / f"{key}.json"

    def read(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as exc:
            raise ScoutStorageError(f"Storage slot {key!r} is not valid UTF-8: {exc}") from exc

    def write(self, key: str, value: str) -> None:
        path = self.path_for(key)
        self._directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise


class SnapshotPersistence:
    """Load/save the full snapshot to one storage slot."""

    def __init__(self, storage: StorageBackend, key: str = STORAGE_KEY) -> None:
        self._storage = storage
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> AppSnapshot:
        """Return the stored snapshot, or the default one if it is absent or invalid."""
        try:
            raw = self._storage.read(self._key)
        except (OSError, ScoutStorageError):
            _logger.error("Failed to read snapshot slot %r; using defaults", self._key, exc_info=True)
            return default_snapshot()

        if raw is None:
            _logger.debug("Snapshot slot %r is empty; using defaults", self._key)
            return default_snapshot()

        try:
            return AppSnapshot.model_validate_json(raw)
        except ValidationError as exc:
            _logger.warning(
                "Stored snapshot in slot %r is not a valid snapshot (%d error(s)); using defaults",
                self._key,
                exc.error_count(),
            )
            _logger.debug("Snapshot validation errors: %s", exc)
            return default_snapshot()

    def save(self, snapshot: AppSnapshot) -> bool:
        """Write *snapshot* to the slot. Returns ``False`` if the write failed."""
        try:
            self._storage.write(self._key, snapshot.to_json())
        except (OSError, ScoutStorageError):
            _logger.error("Failed to write snapshot slot %r", self._key, exc_info=True)
            return False
        return True


# ------------------------------------------------------------------
# Backups
# ------------------------------------------------------------------


def export_backup(snapshot: AppSnapshot) -> str:
    """Serialize *snapshot* as an indented backup document."""
    return snapshot.to_json(indent=2)


def parse_backup(text: str) -> ImportSnapshot:
    """Parse a backup document into an :class:`ImportSnapshot` operation.

    Only the top-level parts present in the document are restored.

    Raises
    ------
    ScoutStorageError
        If *text* is not JSON or does not have the snapshot shape.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ScoutStorageError(f"Backup is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ScoutStorageError(f"Backup must be a JSON object, got {type(data).__name__}")
    data.pop("type", None)
    try:
        return ImportSnapshot.model_validate(data)
    except ValidationError as exc:
        raise ScoutStorageError(f"Backup does not match the snapshot shape: {exc.error_count()} error(s)") from exc
