"""
Structural keys and defaults for JSPON documents.

Defines the reserved keys of the on-disk document shape and the escape prefix used to
keep user mapping keys apart from them. This module is zero-IO and uses only the Python
standard library.

Notes:
    - A document envelope is ``{"__CLASS__"?, "id"?, "data"}``.
    - A reference node is ``{"$ref": <id>, "weak"?: true}``.
    - Any user key equal to a structural key, or already starting with ESCAPE_PREFIX,
      is written as ``ESCAPE_PREFIX + key``.
"""

from __future__ import annotations

from typing import Final

__all__ = [
    "CLASS_KEY",
    "ID_KEY",
    "DATA_KEY",
    "REF_KEY",
    "WEAK_KEY",
    "STRUCTURAL_KEYS",
    "ESCAPE_PREFIX",
]

CLASS_KEY: Final[str] = "__CLASS__"
ID_KEY: Final[str] = "id"
DATA_KEY: Final[str] = "data"
REF_KEY: Final[str] = "$ref"
WEAK_KEY: Final[str] = "weak"

STRUCTURAL_KEYS: Final[frozenset[str]] = frozenset({CLASS_KEY, ID_KEY, DATA_KEY, REF_KEY, WEAK_KEY})

ESCAPE_PREFIX: Final[str] = "public::"
