"""
File-backed byte store: one file per identifier.

Overview
- get/put/delete/exists/clear over ``<root>/all``, with root markers kept in step by
  RootIndex.
- put: payload → private temp file in ``<root>/tmp`` → fsync → (under the write lock)
  os.replace into place → remove stale root marker → re-link if the entry is a root.
  Readers see either the old file or the complete new one, and never a root marker that
  points at a pre-write inode once they can see the new object file.
- delete is idempotent and does not take the lock; clear keeps the directories.

Notes
- Bytes are UTF-8 JSON; decoding is the caller's concern (see jsponfs.io.backend).
- Lock and layout are injected so tests can substitute NullLock or a custom layout.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator

from . import fs
from .config import StoreSettings
from .errors import IoError, NotFound
from .lock import WriteLock, lock_for
from .paths import (
    EntryLayout,
    is_valid_entry_id,
    layout_for,
    object_dir,
    object_path,
    root_set_dir,
    tmp_dir,
    validate_entry_id,
)
from .root_index import RootIndex

logger = logging.getLogger(__name__)


class EntryStore:
    """
    Byte-level store bound to a root directory.

    Args:
        settings (StoreSettings): Validated store settings.
        lock (WriteLock | None): Lock guarding write finalization; defaults to the one
            configured by settings.
        layout (EntryLayout | None): Identifier layout; defaults to the one configured by
            settings.
    """

    def __init__(
        self,
        settings: StoreSettings,
        *,
        lock: WriteLock | None = None,
        layout: EntryLayout | None = None,
    ) -> None:
        self.settings = settings.validate()
        self.layout = layout if layout is not None else layout_for(settings)
        self.lock = lock if lock is not None else lock_for(settings)
        self.root_index = RootIndex(settings, self.layout)

    def create_dirs(self) -> None:
        """Create the object, root set and temp directories."""
        try:
            for d in (object_dir(self.settings), root_set_dir(self.settings), tmp_dir(self.settings)):
                fs.makedirs(d)
        except OSError as exc:
            raise IoError(f"cannot create store directories under {self.settings.root_dir}: {exc}") from exc

    def path(self, entry_id: str) -> str:
        return object_path(self.settings, self.layout, entry_id)

    # ---------------------------------------------------------------------
    # Read
    # ---------------------------------------------------------------------
    def get(self, entry_id: str) -> bytes:
        """
        Read the stored document bytes for an identifier.

        Args:
            entry_id (str): Identifier.

        Returns:
            bytes: Full file contents (UTF-8 JSON).

        Raises:
            NotFound: If there is no object file.
            InvalidEntryId: If the identifier cannot be a file name.
            IoError: For any other OS-level failure.
        """
        path = self.path(entry_id)
        try:
            return fs.read_bytes(path)
        except FileNotFoundError as exc:
            raise NotFound(f"no entry with id {entry_id!r}", entry_id=entry_id) from exc
        except OSError as exc:
            raise IoError(f"cannot read {entry_id!r}: {exc}", entry_id=entry_id) from exc

    def exists(self, entry_id: str) -> bool:
        """
        Return True if an object file exists (root status is a separate query).

        Identifiers that cannot be file names never exist, so they give False.
        """
        if not is_valid_entry_id(entry_id):
            return False
        return fs.exists(self.path(entry_id))

    def is_root(self, entry_id: str) -> bool:
        return self.root_index.is_root(entry_id)

    def iter_object_paths(self) -> Iterator[str]:
        """Lazily yield object file paths in directory order."""
        return fs.iter_files(object_dir(self.settings))

    def iter_root_paths(self) -> Iterator[str]:
        """Lazily yield root marker paths in directory order."""
        return self.root_index.iter_marker_paths()

    # ---------------------------------------------------------------------
    # Write
    # ---------------------------------------------------------------------
    def put(self, entry_id: str, payload: bytes, *, root: bool = False) -> None:
        """
        Atomically store payload under entry_id and sync its root marker.

        Args:
            entry_id (str): Identifier.
            payload (bytes): Encoded document.
            root (bool): Whether the entry is currently a root.

        Raises:
            InvalidEntryId: If the identifier cannot be a file name.
            LockAcquisitionFailure: If locking is enabled and the lock cannot be taken.
            IoError: If the temp write, rename or root marker update fails.
        """
        final_path = self.path(entry_id)
        try:
            tmp_path = fs.write_temp(tmp_dir(self.settings), payload)
        except OSError as exc:
            raise IoError(f"cannot write temp file for {entry_id!r}: {exc}", entry_id=entry_id) from exc

        try:
            with self.lock.hold():
                fs.makedirs(os.path.dirname(final_path))
                fs.rename_atomic(tmp_path, final_path)
                self.root_index.unmark_root(entry_id)
                if root:
                    self.root_index.mark_root(entry_id)
        except IoError:
            self._discard_temp(tmp_path)
            raise
        except OSError as exc:
            self._discard_temp(tmp_path)
            raise IoError(f"cannot store {entry_id!r}: {exc}", entry_id=entry_id) from exc
        logger.debug("stored %s (%d bytes, root=%s)", entry_id, len(payload), root)

    def _discard_temp(self, tmp_path: str) -> None:
        try:
            fs.remove_if_exists(tmp_path)
        except OSError as exc:
            logger.warning("could not remove temp file %s: %s", tmp_path, exc)

    def delete(self, entry_id: str) -> None:
        """
        Remove the object file and root marker for entry_id.

        Notes:
            Idempotent: deleting a missing identifier is not an error.

        Raises:
            IoError: If an existing file cannot be removed.
        """
        validate_entry_id(entry_id)
        self.root_index.unmark_root(entry_id)
        try:
            removed = fs.remove_if_exists(self.path(entry_id))
        except OSError as exc:
            raise IoError(f"cannot delete {entry_id!r}: {exc}", entry_id=entry_id) from exc
        if removed:
            logger.debug("deleted %s", entry_id)

    def clear(self) -> None:
        """
        Remove all entries and root markers, keeping the directories.

        Raises:
            IoError: If a file or subdirectory cannot be removed.
        """
        try:
            self.root_index.clear()
            fs.empty_dir(object_dir(self.settings))
        except OSError as exc:
            raise IoError(f"cannot clear {self.settings.root_dir}: {exc}") from exc
        logger.debug("cleared %s", self.settings.root_dir)
