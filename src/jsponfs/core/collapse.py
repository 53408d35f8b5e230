"""
Collapse an Entry into a JSON-safe JSPON document.

Overview
- Walks ``entry.data`` recursively; lists, tuples and str-keyed mappings are walked
  structurally and mapping keys pass through ``keys.escape_key``.
- Reference values become ``{"$ref": target_id}`` plus ``"weak": true`` for weak edges.
- Nested Entry values become envelopes, exactly like the top-level entry.
- Anything else raises UnsupportedValueKind; values are never coerced. This includes
  NaN and infinities, which have no JSON form, and containers that contain themselves.

Notes
- Pure and deterministic. Mapping iteration order is preserved; canonical key ordering is
  applied later by serde.encode_document.
- ``Entry.root`` is not part of the document.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from .constants import CLASS_KEY, DATA_KEY, ID_KEY, REF_KEY, WEAK_KEY
from .errors import UnsupportedValueKind
from .keys import escape_key
from .model import Entry, Reference
from .typing import JsonDict

__all__ = [
    "collapse",
    "collapse_value",
]

_SCALARS = (str, int, float, bool)


def collapse(entry: Entry) -> JsonDict:
    """
    Collapse an entry into a JSPON document.

    Args:
        entry (Entry): Entry to encode.

    Returns:
        JsonDict: ``{"__CLASS__"?, "id"?, "data"}`` with ``__CLASS__``/``id`` omitted when
        the entry has none.

    Raises:
        UnsupportedValueKind: If the data contains a value with no JSPON representation.

    Examples:
        >>> from jsponfs.core.model import Entry, Reference
        >>> collapse(Entry(id="P", data={"child": Reference("C", is_weak=True)}))
        {'id': 'P', 'data': {'child': {'$ref': 'C', 'weak': True}}}
        >>> collapse(Entry(id="A1", class_name="Point", data={"x": 1, "id": 7}))
        {'__CLASS__': 'Point', 'id': 'A1', 'data': {'x': 1, 'public::id': 7}}
    """
    if not isinstance(entry, Entry):
        raise UnsupportedValueKind(f"expected Entry, got {type(entry).__name__}")
    return _collapse(entry, "", set())


def collapse_value(value: Any) -> Any:
    """Collapse a bare data value (no envelope)."""
    return _collapse(value, "", set())


def _collapse_entry(entry: Entry, path: str, active: set[int]) -> JsonDict:
    out: JsonDict = {}
    if entry.has_class:
        if not isinstance(entry.class_name, str):
            raise UnsupportedValueKind("entry class must be a string", path=path)
        out[CLASS_KEY] = entry.class_name
    if entry.id is not None:
        if not isinstance(entry.id, str):
            raise UnsupportedValueKind("entry id must be a string", path=path)
        out[ID_KEY] = entry.id
    out[DATA_KEY] = _collapse(entry.data, f"{path}/{DATA_KEY}", active)
    return out


def _collapse_reference(ref: Reference, path: str) -> JsonDict:
    if not isinstance(ref.target_id, str):
        raise UnsupportedValueKind("reference target must be a string", path=path)
    if ref.is_weak:
        return {REF_KEY: ref.target_id, WEAK_KEY: True}
    return {REF_KEY: ref.target_id}


def _collapse(value: Any, path: str, active: set[int]) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        raise UnsupportedValueKind(f"non-finite float {value!r}", path=path)
    if value is None or isinstance(value, _SCALARS):
        return value
    if isinstance(value, Reference):
        return _collapse_reference(value, path)
    if not isinstance(value, (Entry, Mapping, list, tuple)):
        raise UnsupportedValueKind(f"unsupported value of type {type(value).__name__}", path=path)

    # Containers on the current path; a repeat is a cycle with no tree form.
    marker = id(value)
    if marker in active:
        raise UnsupportedValueKind("cyclic container; use Reference for cycles", path=path)
    active.add(marker)
    try:
        if isinstance(value, Entry):
            return _collapse_entry(value, path, active)
        if isinstance(value, Mapping):
            out: JsonDict = {}
            for key, item in value.items():
                if not isinstance(key, str):
                    raise UnsupportedValueKind(
                        f"mapping keys must be strings, got {type(key).__name__}", path=path
                    )
                out[escape_key(key)] = _collapse(item, f"{path}/{key}", active)
            return out
        return [_collapse(item, f"{path}/{i}", active) for i, item in enumerate(value)]
    finally:
        active.discard(marker)
