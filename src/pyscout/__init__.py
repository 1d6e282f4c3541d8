"""pyscout - Schema-driven match scouting store with best-effort remote sync."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyscout")
except PackageNotFoundError:
    __version__ = "0+local"
from pyscout.client import SaveResult, ScoutClient
from pyscout.config import ScoutConfig
from pyscout.draft import MatchDraft
from pyscout.exceptions import (
    DuplicateFieldIdError,
    DuplicateRecordIdError,
    InvalidFieldValueError,
    ScoutConfigError,
    ScoutError,
    ScoutStorageError,
    ScoutSyncError,
    ScoutTransportError,
    ScoutValidationError,
    UnknownFieldIdError,
)
from pyscout.models import (
    DEFAULT_SCHEMA,
    AllianceSide,
    AppSnapshot,
    FieldValue,
    MatchRecord,
    ScoringFieldDefinition,
    Settings,
    ThemeMode,
    ValueKind,
)
from pyscout.persistence import JsonFileStorage, MemoryStorage, SnapshotPersistence
from pyscout.state import ScoutStore
from pyscout.sync import NoticeLevel, SyncAdapter, SyncNotice

__all__ = [
    "__version__",
    "AllianceSide",
    "AppSnapshot",
    "DEFAULT_SCHEMA",
    "DuplicateFieldIdError",
    "DuplicateRecordIdError",
    "FieldValue",
    "InvalidFieldValueError",
    "JsonFileStorage",
    "MatchDraft",
    "MatchRecord",
    "MemoryStorage",
    "NoticeLevel",
    "SaveResult",
    "ScoringFieldDefinition",
    "ScoutClient",
    "ScoutConfig",
    "ScoutConfigError",
    "ScoutError",
    "ScoutStorageError",
    "ScoutStore",
    "ScoutSyncError",
    "ScoutTransportError",
    "ScoutValidationError",
    "Settings",
    "SnapshotPersistence",
    "SyncAdapter",
    "SyncNotice",
    "ThemeMode",
    "UnknownFieldIdError",
    "ValueKind",
]
