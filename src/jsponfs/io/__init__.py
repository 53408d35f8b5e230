"""
jsponfs.io: File-backed entry store with a hard-link root index.

## Responsibilities
- Persist one JSPON document per identifier under `<root>/all`, written atomically
  (tmp write, fsync, then os.replace).
- Keep the root set as hard links under `<root>/root`, updated under an optional
  cross-process advisory lock.
- Stream all entries or root entries lazily, in bounded chunks.

## Public API
- StoreSettings: configuration (env > TOML > defaults).
- JsponBackend: entry-level facade: get/insert/delete/exists/all_entries/root_entries/clear.
- EntryStore, RootIndex, BulkScanner, EntryStream: lower-level building blocks.
- FileWriteLock, NullLock: injectable lock coordinators.
- FlatLayout, FanoutLayout: identifier to path layouts.

## Import DAG discipline
- Depends only on stdlib and jsponfs.core.*.

## Notes
- Hard links require `all/` and `root/` on the same volume.
- Reads never take the lock; the lock is global, not per identifier.
"""

from __future__ import annotations

from .backend import JsponBackend
from .config import StoreSettings
from .errors import (
    InvalidEntryId,
    IoConfigError,
    IoError,
    LockAcquisitionFailure,
    NotFound,
)
from .lock import FileWriteLock, NullLock, WriteLock
from .paths import FanoutLayout, FlatLayout
from .root_index import RootIndex
from .scan import BulkScanner, EntryStream
from .store import EntryStore

__all__ = [
    "StoreSettings",
    "JsponBackend",
    "EntryStore",
    "RootIndex",
    "BulkScanner",
    "EntryStream",
    "WriteLock",
    "FileWriteLock",
    "NullLock",
    "FlatLayout",
    "FanoutLayout",
    "IoError",
    "NotFound",
    "InvalidEntryId",
    "LockAcquisitionFailure",
    "IoConfigError",
]
