"""
Pydantic v2 models for the structural nodes of a JSPON document.

Two node shapes carry meaning inside an otherwise untyped JSON tree:

- Envelope: ``{"__CLASS__"?: str, "id"?: str, "data": <any>}`` wraps an entry (the
  document root, or an anonymous entry embedded in another entry's data).
- Reference node: ``{"$ref": str, "weak"?: bool}`` stands in for a Reference.

Responsibilities
- Validate the shape of structural nodes (key set and scalar types) before expansion.
- Render pydantic.ValidationError as a short message for MalformedDocument via ``validation_message``.

Style
- Zero-IO (stdlib + pydantic only).
- Models are validated by alias only, so a user key such as ``class_name`` is never
  mistaken for ``__CLASS__``.

References
- constants: src/jsponfs/core/constants.py
- expand: src/jsponfs/core/expand.py
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator

__all__ = [
    "EnvelopeNode",
    "ReferenceNode",
    "validation_message",
]


class EnvelopeNode(BaseModel):
    """
    Entry envelope as stored on disk.

    Attributes:
        class_name (str | None): Value of ``__CLASS__`` when present.
        id (str | None): Entry identifier when present.
        data (Any): Still-collapsed payload; required.

    Raises:
        pydantic.ValidationError: On missing ``data``, non-string ``id``/``__CLASS__``,
            or any key outside the envelope shape.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    class_name: StrictStr | None = Field(default=None, alias="__CLASS__")
    id: StrictStr | None = None
    data: Any


class ReferenceNode(BaseModel):
    """
    Reference node as stored on disk.

    Attributes:
        ref (str): Target identifier (``$ref``).
        weak (bool): Weak flag; absent means False.

    Notes:
        ``weak`` also accepts the integers 0 and 1, which older writers emitted.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    ref: StrictStr = Field(alias="$ref")
    weak: bool = False

    @field_validator("weak", mode="before")
    @classmethod
    def _check_weak(cls, v: Any) -> bool:
        if isinstance(v, bool):
            return v
        if isinstance(v, int) and v in (0, 1):
            return bool(v)
        raise ValueError(f"weak must be a boolean, got {v!r}")


def validation_message(exc: ValidationError) -> str:
    """
    Render the first pydantic error as a short message.

    Args:
        exc (ValidationError): Error raised by one of the node models.

    Returns:
        str: ``"<loc>: <msg>"`` for the first error, e.g. ``"data: Field required"``.
    """
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ())) or "<node>"
    return f"{loc}: {first.get('msg', 'invalid value')}"
