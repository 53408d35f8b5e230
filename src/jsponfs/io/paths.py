"""
Path and layout helpers for jsponfs.io.

Overview (file protocol baseline)
- <root>/all/<id>      object files, one per entry
- <root>/root/<id>     hard links for root entries (same relative path as under all/)
- <root>/tmp/          private temporary files for atomic writes
- <root>/lock          advisory lock token

Identifier → relative path mapping is pluggable:
- FlatLayout: ``<id>``.
- FanoutLayout(levels=2, width=3): ``dec/afb/decafbad``; shard components replace ``.``
  with ``_`` and are right-padded with ``_`` for short identifiers.

Notes
- The file name is always the full identifier, so scans recover identifiers from
  basenames under either layout.
- This module focuses solely on path construction and identifier checks.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final, Protocol

from .config import StoreSettings
from .errors import InvalidEntryId

_OBJECT_DIR_NAME: Final[str] = "all"
_ROOT_SET_DIR_NAME: Final[str] = "root"
_TMP_DIR_NAME: Final[str] = "tmp"
_LOCK_FILE_NAME: Final[str] = "lock"
_SHARD_PAD: Final[str] = "_"


def validate_entry_id(entry_id: str) -> str:
    """
    Check that an identifier can be used as a file name.

    Args:
        entry_id (str): Identifier to check.

    Returns:
        str: The identifier unchanged.

    Raises:
        InvalidEntryId: If empty, '.' or '..', or containing '/', os.sep or NUL.
    """
    if not isinstance(entry_id, str) or not entry_id:
        raise InvalidEntryId(f"entry id must be a non-empty string, got {entry_id!r}", entry_id=None)
    if entry_id in (".", ".."):
        raise InvalidEntryId(f"entry id {entry_id!r} is reserved", entry_id=entry_id)
    if "/" in entry_id or os.sep in entry_id or "\0" in entry_id:
        raise InvalidEntryId(
            f"entry id {entry_id!r} contains a path separator or NUL", entry_id=entry_id
        )
    return entry_id


def is_valid_entry_id(entry_id: object) -> bool:
    """Return True if validate_entry_id would accept entry_id."""
    try:
        validate_entry_id(entry_id)  # type: ignore[arg-type]
    except InvalidEntryId:
        return False
    return True


class EntryLayout(Protocol):
    """Maps an identifier to its path relative to the object (or root set) directory."""

    def relpath(self, entry_id: str) -> str: ...


@dataclass(frozen=True)
class FlatLayout:
    """One directory level: the identifier is the file name."""

    def relpath(self, entry_id: str) -> str:
        return entry_id


@dataclass(frozen=True)
class FanoutLayout:
    """
    Shard identifiers into nested directories by prefix.

    Attributes:
        levels (int): Number of directory levels (>= 1).
        width (int): Identifier characters per level (>= 1).

    Examples:
        >>> FanoutLayout(levels=2, width=3).relpath("decafbad")
        'dec/afb/decafbad'
        >>> FanoutLayout(levels=2, width=2).relpath("a")
        'a_/__/a'
    """

    levels: int = 2
    width: int = 3

    def shards(self, entry_id: str) -> list[str]:
        out: list[str] = []
        for level in range(self.levels):
            chunk = entry_id[level * self.width : (level + 1) * self.width]
            out.append(chunk.replace(".", _SHARD_PAD).ljust(self.width, _SHARD_PAD))
        return out

    def relpath(self, entry_id: str) -> str:
        return os.path.join(*self.shards(entry_id), entry_id)


def layout_for(settings: StoreSettings) -> EntryLayout:
    """
    Select the identifier layout configured by settings.

    Returns:
        EntryLayout: FanoutLayout when fanout_levels > 0, otherwise FlatLayout.
    """
    if settings.fanout_levels > 0:
        return FanoutLayout(levels=settings.fanout_levels, width=settings.fanout_width)
    return FlatLayout()


def object_dir(settings: StoreSettings) -> str:
    """
    Object directory.

    Returns:
        str: Path "<root>/all".
    """
    return os.path.join(settings.root_dir, _OBJECT_DIR_NAME)


def root_set_dir(settings: StoreSettings) -> str:
    """
    Root set directory.

    Returns:
        str: Path "<root>/root".
    """
    return os.path.join(settings.root_dir, _ROOT_SET_DIR_NAME)


def tmp_dir(settings: StoreSettings) -> str:
    """
    Temporary file directory (same filesystem as the object directory).

    Returns:
        str: Path "<root>/tmp".
    """
    return os.path.join(settings.root_dir, _TMP_DIR_NAME)


def lock_path(settings: StoreSettings) -> str:
    """
    Lock token path.

    Returns:
        str: Path "<root>/lock".
    """
    return os.path.join(settings.root_dir, _LOCK_FILE_NAME)


def object_path(settings: StoreSettings, layout: EntryLayout, entry_id: str) -> str:
    """
    Object file path for an identifier.

    Raises:
        InvalidEntryId: If the identifier cannot be used as a file name.
    """
    return os.path.join(object_dir(settings), layout.relpath(validate_entry_id(entry_id)))


def root_set_path(settings: StoreSettings, layout: EntryLayout, entry_id: str) -> str:
    """
    Root marker path for an identifier.

    Raises:
        InvalidEntryId: If the identifier cannot be used as a file name.
    """
    return os.path.join(root_set_dir(settings), layout.relpath(validate_entry_id(entry_id)))


def entry_id_from_path(path: str) -> str:
    """Recover the identifier from an object or root marker path."""
    return os.path.basename(path)
