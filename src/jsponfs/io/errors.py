"""
Custom exceptions for the jsponfs.io module.

Purpose
- Provide IO-layer error types that map cleanly to responsibilities in jsponfs.io.
- Keep jsponfs.core as the source of truth for codec errors (MalformedDocument,
  UnsupportedValueKind; see jsponfs.core.errors).

Taxonomy
- IoError: base class; any filesystem failure (permissions, disk full, missing dirs).
  - NotFound: no object file for the requested identifier.
  - InvalidEntryId: identifier cannot be used as a file name.
  - LockAcquisitionFailure: the write lock could not be obtained.
  - IoConfigError: invalid or unsupported configuration.

Notes
- Errors carry the offending identifier as ``entry_id`` (None when not applicable) and
  chain the underlying OSError via ``raise ... from``.
- These exceptions do not perform any IO and are stdlib-only.
"""

from __future__ import annotations


class IoError(Exception):
    """
    Base class for IO-related errors in jsponfs.io.

    Attributes:
        entry_id (str | None): Identifier the failing operation was about.
    """

    def __init__(self, message: str, *, entry_id: str | None = None) -> None:
        self.entry_id = entry_id
        super().__init__(message)


class NotFound(IoError):
    """
    Raised when an identifier has no object file.

    Notes:
        Returned from get() only; delete() of a missing identifier is not an error.
    """


class InvalidEntryId(IoError):
    """Raised for identifiers that are empty, '.', '..', or contain a path separator or NUL."""


class LockAcquisitionFailure(IoError):
    """
    Raised when the advisory write lock cannot be opened or acquired.

    Notes:
        Only possible when StoreSettings.lock is enabled.
    """


class IoConfigError(IoError):
    """
    Raised when store configuration is invalid or unsupported.

    Examples:
        - Missing root_dir
        - fanout_width < 1
    """
