"""
Filesystem helpers for jsponfs.io (file protocol baseline).

Responsibilities
- Provide a minimal stdlib-only abstraction for the filesystem operations used by the
  store: existence checks, directory creation, temp-file writes with fsync, atomic
  renames, hard links, lazy directory walks and directory emptying.
- Establish clear semantics for the atomic write path: tmp write → fsync → atomic rename.

Notes
- Atomicity via os.replace is guaranteed only when src and dst reside on the same filesystem.
- Hard links require the object and root directories to live on the same volume.
- All helpers are synchronous and raise OSError; callers translate to jsponfs.io.errors.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from collections.abc import Iterator
from typing import BinaryIO

# Process umask, read once; new files get the mode open() would give them.
_UMASK = os.umask(0o022)
os.umask(_UMASK)


def exists(path: str) -> bool:
    """
    Check whether a regular file exists at path.

    Args:
        path (str): Filesystem path.

    Returns:
        bool: True if a file exists, False otherwise.
    """
    return os.path.isfile(path)


def makedirs(path: str, exist_ok: bool = True) -> None:
    """
    Create directories recursively.

    Args:
        path (str): Directory path to create.
        exist_ok (bool): Do not error if the directory already exists.
    """
    os.makedirs(path, exist_ok=exist_ok)


def read_bytes(path: str) -> bytes:
    """Read a whole file. Raises FileNotFoundError if absent."""
    with open(path, "rb") as fh:
        return fh.read()


def fsync_file(fh: BinaryIO) -> None:
    """
    Flush and fsync an open file handle.

    Args:
        fh (object): A file-like object with .fileno() and .flush().

    Notes:
        Ensures file contents reach the storage device (subject to OS/filesystem semantics).
    """
    fh.flush()
    os.fsync(fh.fileno())


def write_temp(tmp_dir: str, payload: bytes, *, prefix: str = "") -> str:
    """
    Write payload to a new file under tmp_dir and fsync it.

    Args:
        tmp_dir (str): Directory for temporary files (same filesystem as the final path).
        payload (bytes): Bytes to write.
        prefix (str): Optional file name prefix, for debugging leftovers.

    Returns:
        str: Path of the written temporary file. The caller renames or removes it.

    Notes:
        mkstemp creates files as 0600; the mode is widened to 0666 minus the process umask so
        the renamed object file is as readable as a plainly created one.
    """
    fd, tmp_path = tempfile.mkstemp(dir=tmp_dir, prefix=prefix, suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as fh:
            os.fchmod(fh.fileno(), 0o666 & ~_UMASK)
            fh.write(payload)
            fsync_file(fh)
    except BaseException:
        remove_if_exists(tmp_path)
        raise
    return tmp_path


def rename_atomic(src: str, dst: str) -> None:
    """
    Atomically rename src -> dst on the same filesystem.

    Args:
        src (str): Existing source path (typically a temporary file).
        dst (str): Final destination path.

    Notes:
        Uses os.replace, which is atomic only if src and dst reside on the same filesystem.
    """
    os.replace(src, dst)


def link(src: str, dst: str) -> None:
    """Create a hard link dst pointing at the inode of src."""
    os.link(src, dst)


def remove_if_exists(path: str) -> bool:
    """
    Remove a file, ignoring a missing one.

    Returns:
        bool: True if a file was removed.
    """
    try:
        os.remove(path)
    except FileNotFoundError:
        return False
    return True


def iter_files(root: str) -> Iterator[str]:
    """
    Lazily yield regular files beneath root, depth-first, in directory order.

    Args:
        root (str): Directory to walk; a missing directory yields nothing.

    Yields:
        str: Full path of each regular file.
    """
    try:
        it = os.scandir(root)
    except FileNotFoundError:
        return
    with it:
        for entry in it:
            if entry.is_dir(follow_symlinks=False):
                yield from iter_files(entry.path)
            elif entry.is_file(follow_symlinks=False):
                yield entry.path


def empty_dir(path: str) -> None:
    """
    Remove everything inside a directory, keeping the directory itself.

    Args:
        path (str): Directory to empty; created if missing.
    """
    try:
        it = os.scandir(path)
    except FileNotFoundError:
        makedirs(path)
        return
    with it:
        for entry in it:
            if entry.is_dir(follow_symlinks=False):
                shutil.rmtree(entry.path)
            else:
                remove_if_exists(entry.path)
