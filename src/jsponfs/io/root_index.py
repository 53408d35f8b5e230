"""
Root set index backed by hard links.

A root entry has a second directory entry under ``<root>/root/`` that is a hard link to
its object file. Root membership is therefore an existence check, enumeration is a
directory walk, and no payload bytes are duplicated. Removing the marker never touches
the object file.

Notes
- Requires hard-link support for regular files on the volume holding root_dir.
- An object file replaced by os.replace gets a new inode, so an old marker would keep
  showing the old bytes; the store always unmarks and re-marks after a rename, under the
  write lock.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator

from . import fs
from .config import StoreSettings
from .errors import IoError, NotFound
from .paths import (
    EntryLayout,
    entry_id_from_path,
    is_valid_entry_id,
    object_path,
    root_set_dir,
    root_set_path,
)

logger = logging.getLogger(__name__)


class RootIndex:
    """
    Hard-link root markers for a store.

    Args:
        settings (StoreSettings): Store settings (root_dir).
        layout (EntryLayout): Identifier layout shared with the object directory.
    """

    def __init__(self, settings: StoreSettings, layout: EntryLayout) -> None:
        self.settings = settings
        self.layout = layout

    def marker_path(self, entry_id: str) -> str:
        return root_set_path(self.settings, self.layout, entry_id)

    def mark_root(self, entry_id: str) -> None:
        """
        Link the object file for entry_id into the root set.

        Raises:
            NotFound: If there is no object file to link.
            IoError: If the link cannot be created.
        """
        src = object_path(self.settings, self.layout, entry_id)
        dst = self.marker_path(entry_id)
        try:
            fs.makedirs(os.path.dirname(dst))
            fs.remove_if_exists(dst)
            fs.link(src, dst)
        except FileNotFoundError as exc:
            raise NotFound(f"no object file for {entry_id!r}", entry_id=entry_id) from exc
        except OSError as exc:
            raise IoError(f"cannot mark {entry_id!r} as root: {exc}", entry_id=entry_id) from exc
        logger.debug("marked root %s", entry_id)

    def unmark_root(self, entry_id: str) -> bool:
        """
        Remove the root marker for entry_id, if any.

        Returns:
            bool: True if a marker was removed.

        Raises:
            IoError: If the marker exists but cannot be removed.
        """
        try:
            removed = fs.remove_if_exists(self.marker_path(entry_id))
        except OSError as exc:
            raise IoError(f"cannot unmark root {entry_id!r}: {exc}", entry_id=entry_id) from exc
        if removed:
            logger.debug("unmarked root %s", entry_id)
        return removed

    def is_root(self, entry_id: str) -> bool:
        """Return True if entry_id has a root marker; invalid identifiers are never roots."""
        if not is_valid_entry_id(entry_id):
            return False
        return fs.exists(self.marker_path(entry_id))

    def iter_marker_paths(self) -> Iterator[str]:
        """Lazily yield root marker paths in directory order."""
        return fs.iter_files(root_set_dir(self.settings))

    def list_root_ids(self) -> list[str]:
        """
        Enumerate root identifiers.

        Returns:
            list[str]: Identifiers in filesystem enumeration order (not sorted).
        """
        return [entry_id_from_path(p) for p in self.iter_marker_paths()]

    def clear(self) -> None:
        """Remove every root marker, keeping the root set directory."""
        fs.empty_dir(root_set_dir(self.settings))
