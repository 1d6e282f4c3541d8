"""Client configuration for pyscout."""

from __future__ import annotations

import dataclasses
from pathlib import Path

from pyscout._constants import DEFAULT_REQUEST_TIMEOUT, MAX_COMPARISON_SUBJECTS, STORAGE_KEY
from pyscout.exceptions import ScoutConfigError


@dataclasses.dataclass(frozen=True)
class ScoutConfig:
    """Client configuration.

    The remote endpoint is *not* part of this object: it lives in the
    persisted :class:`~pyscout.models.settings.Settings` entity so that it
    can be edited in-app and survives restarts.

    Parameters
    ----------
    storage_dir : Path or None
        Directory holding the durable snapshot slot. ``None`` keeps the
        snapshot in memory only (nothing survives the process).
    storage_key : str
        Name of the slot the snapshot is written to.
    request_timeout : float
        Total timeout in seconds for a single sync HTTP request.
    max_comparison_subjects : int
        Upper bound on subjects in a comparison table.
    """

    storage_dir: Path | None = None
    storage_key: str = STORAGE_KEY
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    max_comparison_subjects: int = MAX_COMPARISON_SUBJECTS

    def __post_init__(self) -> None:
        if isinstance(self.storage_dir, str):
            object.__setattr__(self, "storage_dir", Path(self.storage_dir))
        if not self.storage_key.strip():
            raise ScoutConfigError("storage_key must be non-empty")
        if self.request_timeout <= 0:
            raise ScoutConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.max_comparison_subjects < 1:
            raise ScoutConfigError(f"max_comparison_subjects must be >= 1, got {self.max_comparison_subjects}")
