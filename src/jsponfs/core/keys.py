"""
Mapping-key escaping for JSPON documents.

User data and document structure share one untyped JSON tree, so user keys that look
structural are prefixed on the way out and stripped on the way in.

Examples:
    >>> from jsponfs.core.keys import escape_key, unescape_key
    >>> escape_key("id")
    'public::id'
    >>> escape_key("public::x")
    'public::public::x'
    >>> unescape_key(escape_key("$ref"))
    '$ref'
    >>> escape_key("name")
    'name'
"""

from __future__ import annotations

from .constants import ESCAPE_PREFIX, STRUCTURAL_KEYS

__all__ = [
    "needs_escape",
    "escape_key",
    "unescape_key",
    "is_escaped",
]


def needs_escape(key: str) -> bool:
    """Return True if a user key collides with a structural key or the escape prefix."""
    return key in STRUCTURAL_KEYS or key.startswith(ESCAPE_PREFIX)


def escape_key(key: str) -> str:
    """
    Escape a user mapping key for storage.

    Args:
        key (str): Key as it appears in the entry data.

    Returns:
        str: ``ESCAPE_PREFIX + key`` when the key needs escaping, else the key unchanged.
    """
    if needs_escape(key):
        return ESCAPE_PREFIX + key
    return key


def is_escaped(key: str) -> bool:
    return key.startswith(ESCAPE_PREFIX)


def unescape_key(key: str) -> str:
    """
    Invert escape_key by stripping exactly one ESCAPE_PREFIX.

    Args:
        key (str): Key as it appears in a stored document.

    Returns:
        str: Original user key.
    """
    if key.startswith(ESCAPE_PREFIX):
        return key[len(ESCAPE_PREFIX) :]
    return key
