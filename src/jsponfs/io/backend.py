"""
JsponBackend facade for jsponfs.io.

The collaborator-facing API consumed by an embedding object-persistence layer: entries in,
entries out, with JSPON documents on disk underneath.

Source of truth
- Codec: jsponfs.core (collapse/expand, key escaping, serde).
- Byte storage, root markers and locking: EntryStore, RootIndex, WriteLock.
- Bulk scans: BulkScanner / EntryStream.

Batch semantics
- insert/delete over many entries process each one independently; a failure stops the
  batch at that entry and does not roll back earlier ones.

Examples
```python
from jsponfs.core import Entry, Reference
from jsponfs.io import JsponBackend, StoreSettings

backend = JsponBackend(StoreSettings(root_dir="db"))
backend.insert(Entry(id="A1", class_name="Point", data={"x": 1, "y": 2}, root=True))
backend.get("A1")                      # Entry(id='A1', class_name='Point', ...)
[e.id for e in backend.root_entries()]  # ['A1']
```
"""

from __future__ import annotations

import os
from typing import Any

from jsponfs.core.model import Entry

from .config import StoreSettings
from .entries import decode_entry, encode_entry
from .errors import InvalidEntryId
from .lock import WriteLock
from .paths import EntryLayout
from .scan import BulkScanner, EntryStream
from .store import EntryStore


class JsponBackend:
    """
    Entry-level store facade.

    Notes:
        - Construction validates settings and creates the store directories.
        - ``lock`` and ``layout`` may be injected; otherwise they follow settings.
    """

    def __init__(
        self,
        settings: StoreSettings,
        *,
        lock: WriteLock | None = None,
        layout: EntryLayout | None = None,
    ) -> None:
        """
        Initialize a backend rooted at settings.root_dir.

        Args:
            settings (StoreSettings): Store configuration.
            lock (WriteLock | None): Optional lock override.
            layout (EntryLayout | None): Optional identifier layout override.

        Raises:
            jsponfs.io.errors.IoConfigError: Invalid settings.
            jsponfs.io.errors.IoError: Directories cannot be created.
        """
        self.settings = settings
        self.store = EntryStore(settings, lock=lock, layout=layout)
        self.store.create_dirs()
        self.scanner = BulkScanner(self.store)

    @classmethod
    def from_settings(
        cls, path: str | os.PathLike[str] | None = None, **overrides: Any
    ) -> JsponBackend:
        """
        Build a backend from StoreSettings.load() (env > TOML > defaults) plus overrides.

        Args:
            path: Optional explicit TOML path.
            **overrides: StoreSettings fields that win over loaded values.
        """
        settings = StoreSettings._apply_mapping(StoreSettings.load(path), dict(overrides))
        return cls(settings)

    # ---------------------------------------------------------------------
    # Read
    # ---------------------------------------------------------------------
    def get_entry(self, entry_id: str) -> Entry:
        """
        Fetch and expand one entry, annotated with its current root status.

        Raises:
            NotFound: No such identifier.
            MalformedDocument: Stored bytes are not a valid JSPON document.
        """
        raw = self.store.get(entry_id)
        return decode_entry(raw, entry_id, root=self.store.is_root(entry_id))

    def get(self, *entry_ids: str) -> Entry | list[Entry]:
        """
        Fetch entries by identifier.

        Returns:
            Entry | list[Entry]: A single Entry for one identifier, otherwise a list in
            argument order.

        Raises:
            NotFound: On the first missing identifier.
        """
        if len(entry_ids) == 1:
            return self.get_entry(entry_ids[0])
        return [self.get_entry(entry_id) for entry_id in entry_ids]

    def exists(self, *entry_ids: str) -> list[bool]:
        """Object-file existence for each identifier, in argument order (invalid ids: False)."""
        return [self.store.exists(entry_id) for entry_id in entry_ids]

    def is_root(self, entry_id: str) -> bool:
        return self.store.is_root(entry_id)

    def root_ids(self) -> list[str]:
        """Root identifiers in filesystem enumeration order."""
        return self.store.root_index.list_root_ids()

    def all_entries(self) -> EntryStream:
        """Fresh lazy stream over every entry (root flag annotated per entry)."""
        return self.scanner.scan_all()

    def root_entries(self) -> EntryStream:
        """Fresh lazy stream over root entries (root flag forced True)."""
        return self.scanner.scan_roots()

    # ---------------------------------------------------------------------
    # Write
    # ---------------------------------------------------------------------
    def insert_entry(self, entry: Entry) -> None:
        """
        Collapse and persist one entry, syncing its root marker to ``entry.root``.

        Raises:
            InvalidEntryId: Entry has no id (anonymous entries are embedded only).
            UnsupportedValueKind: Data cannot be represented as JSPON.
            IoError / LockAcquisitionFailure: Storage failed.
        """
        if entry.id is None:
            raise InvalidEntryId("cannot insert an entry without an id", entry_id=None)
        payload = encode_entry(entry, pretty=self.settings.pretty)
        self.store.put(entry.id, payload, root=entry.root)

    def insert(self, *entries: Entry) -> None:
        """Insert entries one by one (no atomicity across the batch)."""
        for entry in entries:
            self.insert_entry(entry)

    def delete(self, *ids_or_entries: str | Entry) -> None:
        """
        Remove object files and root markers. Missing identifiers are ignored.

        Args:
            *ids_or_entries: Identifiers or Entry instances (their id is used).
        """
        for item in ids_or_entries:
            entry_id = item.id if isinstance(item, Entry) else item
            if entry_id is None:
                raise InvalidEntryId("cannot delete an entry without an id", entry_id=None)
            self.store.delete(entry_id)

    def clear(self) -> None:
        """Remove every entry and root marker; the store stays usable."""
        self.store.clear()
