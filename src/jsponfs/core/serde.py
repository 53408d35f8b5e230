"""
JSON byte encoding for JSPON documents.

Provides the single JSON policy used for persistence: canonical (sorted keys, compact
separators, ``ensure_ascii=False``) or pretty (sorted keys, two-space indent). Both
decode to the same value. This module is zero-IO and uses only the Python standard
library.

Notes:
    - Byte layout is the only thing ``pretty`` changes; semantics are identical.
    - decode_document raises MalformedDocument for invalid UTF-8 or invalid JSON so that
      callers see a single error type for undecodable documents.
"""

from __future__ import annotations

import json
from typing import Any

from .errors import MalformedDocument

__all__ = [
    "json_dumps_canonical",
    "json_dumps_pretty",
    "encode_document",
    "decode_document",
]


def json_dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string.

    Args:
        obj (Any): JSON-serializable object.

    Returns:
        str: JSON with sort_keys=True, compact separators and ensure_ascii=False.

    Raises:
        ValueError: If obj contains NaN or an infinity.

    Examples:
        >>> json_dumps_canonical({"b": 1, "a": [1, 2]})
        '{"a":[1,2],"b":1}'
    """
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False
    )


def json_dumps_pretty(obj: Any) -> str:
    """Serialize an object to sorted, indented JSON for human inspection."""
    return json.dumps(obj, sort_keys=True, indent=2, ensure_ascii=False, allow_nan=False)


def encode_document(document: Any, *, pretty: bool = False) -> bytes:
    """
    Encode a collapsed document to UTF-8 bytes.

    Args:
        document (Any): Output of collapse().
        pretty (bool): Use the indented layout instead of the compact one.

    Returns:
        bytes: UTF-8 encoded JSON.
    """
    text = json_dumps_pretty(document) if pretty else json_dumps_canonical(document)
    return text.encode("utf-8")


def decode_document(raw: bytes | str) -> Any:
    """
    Decode stored bytes (or already-decoded text) into a JSON value.

    Args:
        raw (bytes | str): File contents.

    Returns:
        Any: Decoded JSON value (not yet expanded).

    Raises:
        MalformedDocument: If the bytes are not UTF-8 or not valid JSON.
    """
    try:
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        return json.loads(text)
    except UnicodeDecodeError as exc:
        raise MalformedDocument(f"document is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise MalformedDocument(f"document is not valid JSON: {exc.msg}") from exc
