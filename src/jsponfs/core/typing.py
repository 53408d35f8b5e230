"""
Lightweight typing aliases used across the codec and store.

This module contains no runtime logic and is zero-IO.

Examples:
    >>> from jsponfs.core.typing import EntryId, JsonDict
    >>> def document() -> JsonDict:
    ...     return {"id": EntryId("A1"), "data": {}}
"""

from __future__ import annotations

from typing import Any, NewType

__all__ = [
    "EntryId",
    "JsonDict",
]

# Opaque identifier assigned by the embedding layer; stored as a file name on disk.
EntryId = NewType("EntryId", str)

# Collapsed document or mapping node. Kept intentionally broad for serde boundaries.
JsonDict = dict[str, Any]
