"""
Lazy bulk scans over a file store.

Overview
- scan_all(): every object file, each entry annotated with its root membership.
- scan_roots(): every root marker, each entry expanded with ``root=True``.
- Both return an EntryStream that enumerates the directory lazily (os.scandir) and decodes
  ``chunk_size`` files at a time, so memory is bounded by one chunk.

Semantics
- An EntryStream is single-use. Restart a scan by calling scan_all()/scan_roots() again.
- Order is filesystem enumeration order; sort externally if determinism is needed.
- A file deleted between enumeration and read is skipped; any other error propagates.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterator

from jsponfs.core.model import Entry

from . import fs
from .entries import decode_entry
from .errors import IoError
from .paths import entry_id_from_path
from .store import EntryStore

logger = logging.getLogger(__name__)

# (path) -> Entry, or None when the file vanished before it could be read.
Loader = Callable[[str], "Entry | None"]


class EntryStream(Iterator[Entry]):
    """
    One-shot iterator of entries produced in chunks.

    Args:
        paths (Iterator[str]): Lazy source of file paths.
        load (Loader): Turns a path into an Entry (None to skip).
        chunk_size (int): Maximum entries per chunk.
    """

    def __init__(self, paths: Iterator[str], load: Loader, chunk_size: int) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")
        self._paths = paths
        self._load = load
        self.chunk_size = chunk_size
        self._chunks = self._iter_chunks()
        self._buffer: deque[Entry] = deque()

    def _iter_chunks(self) -> Iterator[list[Entry]]:
        batch: list[Entry] = []
        for path in self._paths:
            entry = self._load(path)
            if entry is None:
                continue
            batch.append(entry)
            if len(batch) >= self.chunk_size:
                logger.debug("scan chunk of %d entries", len(batch))
                yield batch
                batch = []
        if batch:
            logger.debug("scan chunk of %d entries", len(batch))
            yield batch

    def chunks(self) -> Iterator[list[Entry]]:
        """
        Iterate remaining entries as lists of at most chunk_size.

        Notes:
            Shares position with plain iteration; entries already buffered by next()
            are emitted first.
        """
        if self._buffer:
            pending = list(self._buffer)
            self._buffer.clear()
            yield pending
        yield from self._chunks

    def __iter__(self) -> EntryStream:
        return self

    def __next__(self) -> Entry:
        while not self._buffer:
            self._buffer.extend(next(self._chunks))
        return self._buffer.popleft()

    def all(self) -> list[Entry]:
        """Drain the stream into a list."""
        return list(self)


class BulkScanner:
    """
    Builds fresh EntryStreams over a store.

    Args:
        store (EntryStore): Store to scan.
        chunk_size (int | None): Entries per chunk; defaults to settings.scan_chunk_size.
    """

    def __init__(self, store: EntryStore, chunk_size: int | None = None) -> None:
        self.store = store
        self.chunk_size = chunk_size or store.settings.scan_chunk_size

    def _read(self, path: str) -> bytes | None:
        try:
            return fs.read_bytes(path)
        except FileNotFoundError:
            logger.debug("skipping %s: removed during scan", path)
            return None
        except OSError as exc:
            entry_id = entry_id_from_path(path)
            raise IoError(f"cannot read {entry_id!r}: {exc}", entry_id=entry_id) from exc

    def _load_any(self, path: str) -> Entry | None:
        raw = self._read(path)
        if raw is None:
            return None
        entry_id = entry_id_from_path(path)
        return decode_entry(raw, entry_id, root=self.store.is_root(entry_id))

    def _load_root(self, path: str) -> Entry | None:
        raw = self._read(path)
        if raw is None:
            return None
        return decode_entry(raw, entry_id_from_path(path), root=True)

    def scan_all(self) -> EntryStream:
        """Lazily stream every entry, annotated with root membership."""
        return EntryStream(self.store.iter_object_paths(), self._load_any, self.chunk_size)

    def scan_roots(self) -> EntryStream:
        """Lazily stream root entries only, with root forced True."""
        return EntryStream(self.store.iter_root_paths(), self._load_root, self.chunk_size)
