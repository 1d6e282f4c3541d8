"""Custom exception hierarchy for pyscout."""

from __future__ import annotations


class ScoutError(Exception):
    """Base exception for all pyscout errors."""


class ScoutConfigError(ScoutError):
    """Invalid :class:`~pyscout.config.ScoutConfig` values."""


class ScoutValidationError(ScoutError):
    """An operation payload violates a store invariant.

    The store keeps its previous snapshot when this is raised.
    """


class DuplicateFieldIdError(ScoutValidationError):
    """A scoring field with the same id already exists in the schema."""

    def __init__(self, field_id: str) -> None:
        self.field_id = field_id
        super().__init__(f"Scoring field {field_id!r} already exists")


class UnknownFieldIdError(ScoutValidationError):
    """No scoring field with the given id exists in the schema."""

    def __init__(self, field_id: str) -> None:
        self.field_id = field_id
        super().__init__(f"Unknown scoring field {field_id!r}")


class DuplicateRecordIdError(ScoutValidationError):
    """A match record with the same id is already stored.

    Record ids are random uuid4 values, so a collision is unexpected and is
    never retried.
    """

    def __init__(self, record_id: str) -> None:
        self.record_id = record_id
        super().__init__(f"Match record {record_id!r} already exists")


class InvalidFieldValueError(ScoutValidationError):
    """A value does not fit the kind of the scoring field it is recorded for."""

    def __init__(self, field_id: str, message: str) -> None:
        self.field_id = field_id
        super().__init__(f"{field_id}: {message}")


class ScoutStorageError(ScoutError):
    """Local storage or backup payload could not be read."""


class ScoutSyncError(ScoutError):
    """Remote synchronization failed."""


class ScoutTransportError(ScoutSyncError):
    """HTTP-level failure (network, timeout, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)
