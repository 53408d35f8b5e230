"""
Expand a JSPON document back into an Entry.

Overview
- Inverse of collapse: reads ``__CLASS__``, ``id`` and ``data`` from the envelope, unescapes
  mapping keys, and turns ``{"$ref": ..., "weak"?: ...}`` nodes into Reference values.
  References are not followed.
- Mappings carrying an unescaped ``data`` key are embedded entries and expand to Entry.
- ``extra_attrs`` injects out-of-band facts (e.g. ``root=True`` for entries found in the
  root index) without touching the document.

Notes
- Expansion is all-or-nothing: on MalformedDocument no partial Entry is returned.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from .constants import CLASS_KEY, DATA_KEY, ID_KEY, REF_KEY, WEAK_KEY
from .errors import MalformedDocument
from .keys import unescape_key
from .model import Entry, Reference
from .schema import EnvelopeNode, ReferenceNode, validation_message

__all__ = [
    "expand",
]

_SCALARS = (str, int, float, bool)


def expand(document: Any, **extra_attrs: Any) -> Entry:
    """
    Expand a decoded JSPON document into an Entry.

    Args:
        document (Any): Decoded JSON value; must be an envelope mapping.
        **extra_attrs: Additional Entry fields not stored in the document
            (currently ``root``).

    Returns:
        Entry: Entry with References preserved as Reference values.

    Raises:
        MalformedDocument: If the document, or any structural node inside it, violates
            the JSPON shape.
        TypeError: If ``extra_attrs`` names a field Entry does not have.

    Examples:
        >>> expand({"id": "P", "data": {"child": {"$ref": "C", "weak": True}}}, root=True)
        Entry(id='P', class_name=None, data={'child': Reference(target_id='C', is_weak=True)}, root=True)
    """
    if not isinstance(document, Mapping):
        raise MalformedDocument(
            f"document must be a mapping, got {type(document).__name__}", path=""
        )
    return _expand_entry(document, "", extra_attrs)


def _expand_entry(node: Mapping[str, Any], path: str, extra_attrs: Mapping[str, Any]) -> Entry:
    try:
        env = EnvelopeNode.model_validate(dict(node))
    except ValidationError as exc:
        raise MalformedDocument(f"invalid entry envelope: {validation_message(exc)}", path=path) from exc
    data = _expand(env.data, f"{path}/{DATA_KEY}")
    return Entry(id=env.id, class_name=env.class_name, data=data, **extra_attrs)


def _expand_reference(node: Mapping[str, Any], path: str) -> Reference:
    try:
        ref = ReferenceNode.model_validate(dict(node))
    except ValidationError as exc:
        raise MalformedDocument(f"invalid reference: {validation_message(exc)}", path=path) from exc
    return Reference(ref.ref, is_weak=ref.weak)


def _expand(node: Any, path: str) -> Any:
    if node is None or isinstance(node, _SCALARS):
        return node
    if isinstance(node, list):
        return [_expand(item, f"{path}/{i}") for i, item in enumerate(node)]
    if isinstance(node, Mapping):
        if REF_KEY in node:
            return _expand_reference(node, path)
        if WEAK_KEY in node:
            raise MalformedDocument("'weak' is only valid beside '$ref'", path=path)
        if DATA_KEY in node:
            return _expand_entry(node, path, {})
        if CLASS_KEY in node or ID_KEY in node:
            raise MalformedDocument("entry envelope is missing 'data'", path=path)
        out: dict[str, Any] = {}
        for key, item in node.items():
            if not isinstance(key, str):
                raise MalformedDocument(f"mapping key must be a string, got {key!r}", path=path)
            user_key = unescape_key(key)
            out[user_key] = _expand(item, f"{path}/{user_key}")
        return out
    raise MalformedDocument(f"unexpected value of type {type(node).__name__}", path=path)
