"""
Core exception types raised by the JSPON codec.

Provides typed exceptions for codec failures:
- MalformedDocument when decoded JSON does not have the JSPON document shape.
- UnsupportedValueKind when collapse meets a value with no JSPON representation.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - Both errors carry a ``path`` (JSON-pointer-like, e.g. ``/data/items/3``) locating
      the offending node; the root is ``""``.
    - IO-layer failures live in jsponfs.io.errors.

Examples:
    >>> from jsponfs.core.errors import MalformedDocument
    >>> err = MalformedDocument("expected a mapping", path="/data")
    >>> str(err)
    'expected a mapping (at /data)'
"""

from __future__ import annotations

__all__ = [
    "CodecError",
    "MalformedDocument",
    "UnsupportedValueKind",
]


class CodecError(ValueError):
    """
    Base class for collapse/expand failures.

    Attributes:
        message (str): Description without location.
        path (str): Location of the offending node inside the document.
        entry_id (str | None): Identifier of the stored entry, when known.
    """

    def __init__(self, message: str, *, path: str = "", entry_id: str | None = None) -> None:
        self.message = message
        self.path = path
        self.entry_id = entry_id
        where = f"at {path or '/'}"
        if entry_id is not None:
            where = f"entry {entry_id!r}, {where}"
        super().__init__(f"{message} ({where})")


class MalformedDocument(CodecError):
    """Decoded bytes do not match the expected JSPON document shape."""


class UnsupportedValueKind(CodecError):
    """A value with no defined JSPON representation was found during collapse."""
