"""
Entry <-> bytes glue between jsponfs.core and the file store.

encode_entry = collapse + serde.encode_document; decode_entry = serde.decode_document +
expand, with codec errors re-raised carrying the stored identifier.
"""

from __future__ import annotations

from typing import Any

from jsponfs.core.collapse import collapse
from jsponfs.core.errors import MalformedDocument, UnsupportedValueKind
from jsponfs.core.expand import expand
from jsponfs.core.model import Entry
from jsponfs.core.serde import decode_document, encode_document


def encode_entry(entry: Entry, *, pretty: bool = False) -> bytes:
    """
    Collapse and encode an entry.

    Raises:
        UnsupportedValueKind: With ``entry_id`` set to the entry's id.
    """
    try:
        document = collapse(entry)
    except UnsupportedValueKind as exc:
        raise UnsupportedValueKind(exc.message, path=exc.path, entry_id=entry.id) from exc
    return encode_document(document, pretty=pretty)


def decode_entry(raw: bytes, entry_id: str, **extra_attrs: Any) -> Entry:
    """
    Decode and expand stored bytes.

    Args:
        raw (bytes): Object file contents.
        entry_id (str): Identifier the bytes were stored under (for error reporting).
        **extra_attrs: Out-of-band Entry fields, e.g. ``root=True``.

    Raises:
        MalformedDocument: With ``entry_id`` set.
    """
    try:
        return expand(decode_document(raw), **extra_attrs)
    except MalformedDocument as exc:
        raise MalformedDocument(exc.message, path=exc.path, entry_id=entry_id) from exc
