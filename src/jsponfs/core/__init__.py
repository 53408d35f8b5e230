"""
Core package for jsponfs: the zero-IO JSPON codec.

## Contracts
- Model: `Entry` (id, class, data, out-of-band root flag) and `Reference` (target id, weak flag).
- Keys: escaping of user mapping keys that collide with structural keys.
- Schema: pydantic models for the envelope and reference node shapes.
- Collapse/Expand: the forward/inverse transforms between `Entry` and a JSON-safe document.
- Serde: canonical and pretty JSON byte encoding.
- Errors: `MalformedDocument`, `UnsupportedValueKind`.

## Notes
- Zero-IO policy: stdlib + pydantic only; no file/network IO.
- References are preserved as `Reference` values and never resolved here.

## Examples
```python
from jsponfs.core import Entry, Reference, collapse, expand

entry = Entry(id="P", data={"child": Reference("C", is_weak=True)})
doc = collapse(entry)          # {'id': 'P', 'data': {'child': {'$ref': 'C', 'weak': True}}}
expand(doc) == entry           # True
```
"""

from __future__ import annotations

from .collapse import collapse
from .errors import CodecError, MalformedDocument, UnsupportedValueKind
from .expand import expand
from .model import Entry, Reference
from .serde import decode_document, encode_document

__all__ = [
    "Entry",
    "Reference",
    "collapse",
    "expand",
    "encode_document",
    "decode_document",
    "CodecError",
    "MalformedDocument",
    "UnsupportedValueKind",
]
