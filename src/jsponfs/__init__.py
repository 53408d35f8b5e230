"""
jsponfs: persist object graphs as JSPON documents on a filesystem.

Two layers:
- jsponfs.core: zero-IO codec between `Entry` and JSON-safe documents with explicit
  `$ref` references, weak flags and class tags.
- jsponfs.io: atomic one-file-per-entry store, hard-link root index, advisory write
  lock, lazy bulk scans, and the `JsponBackend` facade.
"""

from __future__ import annotations

from .core import Entry, MalformedDocument, Reference, UnsupportedValueKind, collapse, expand
from .io import JsponBackend, NotFound, StoreSettings

__all__ = [
    "Entry",
    "Reference",
    "collapse",
    "expand",
    "MalformedDocument",
    "UnsupportedValueKind",
    "JsponBackend",
    "StoreSettings",
    "NotFound",
]

__version__ = "0.1.0"
