"""
In-memory persistence units: Entry and Reference.

An Entry is the persisted representation of one object in the graph; a Reference is an
edge from an entry's data to another entry by identifier. Both are plain dataclasses so
that collapse/expand stay zero-IO and trivially comparable in tests.

Notes:
    - ``Entry.root`` is out-of-band: it is never written into the document and does not
      participate in equality. It is asserted on insert and reported by the root index.
    - A Reference never carries inline data; resolving it to a live object belongs to the
      embedding object-graph layer.

Examples:
    >>> from jsponfs.core.model import Entry, Reference
    >>> a = Entry(id="P", data={"child": Reference("C", is_weak=True)}, root=True)
    >>> b = Entry(id="P", data={"child": Reference("C", is_weak=True)})
    >>> a == b
    True
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "Entry",
    "Reference",
]


@dataclass(frozen=True, slots=True)
class Reference:
    """
    Directed edge to another entry by identifier.

    Attributes:
        target_id (str): Identifier of the referenced entry.
        is_weak (bool): Whether the edge is weak; carried through storage unchanged.
    """

    target_id: str
    is_weak: bool = False


@dataclass(slots=True)
class Entry:
    """
    Unit of persistence.

    Attributes:
        id (str | None): Opaque identifier assigned externally. None for anonymous,
            embedded sub-structures which cannot be fetched on their own.
        class_name (str | None): Optional type tag used by the embedding layer to
            reconstruct the object.
        data (Any): Nested scalars, lists and str-keyed mappings, possibly containing
            Reference and nested Entry values.
        root (bool): Whether the entry belongs to the root set. Excluded from equality.
    """

    id: str | None = None
    class_name: str | None = None
    data: Any = None
    root: bool = field(default=False, compare=False)

    @property
    def has_class(self) -> bool:
        return self.class_name is not None
