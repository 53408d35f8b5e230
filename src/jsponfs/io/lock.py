"""
Write lock coordinator for jsponfs.io.

The store takes the write lock only around "rename temp file into place + update root
marker". Two implementations share one interface and are injected into the store:

- FileWriteLock: exclusive advisory ``fcntl.flock`` on ``<root>/lock``; works across
  processes and across threads (each acquisition opens its own file description).
- NullLock: no-op, for single-process use when StoreSettings.lock is False.

Notes
- Acquisition blocks without timeout. A process that dies while holding the lock releases
  it with its file descriptors; a process that hangs while holding it stalls writers.
- The lock is global to the store, not per identifier.
"""

from __future__ import annotations

import fcntl
import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import TypeVar

from .config import StoreSettings
from .errors import LockAcquisitionFailure
from .paths import lock_path

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WriteLock(ABC):
    """Scoped exclusive lock. Subclasses implement hold() as a context manager."""

    @abstractmethod
    def hold(self) -> AbstractContextManager[None]:
        """Return a context manager that holds the lock for the duration of the block."""

    def with_write_lock(self, fn: Callable[[], T]) -> T:
        """
        Run fn while holding the lock.

        Args:
            fn (Callable[[], T]): Critical section.

        Returns:
            T: Whatever fn returns.

        Notes:
            The lock is released on every exit path, including exceptions raised by fn.
        """
        with self.hold():
            return fn()


class NullLock(WriteLock):
    """Lock that never blocks; used when locking is disabled."""

    @contextmanager
    def hold(self) -> Iterator[None]:
        yield


class FileWriteLock(WriteLock):
    """
    Exclusive advisory lock on a token file.

    Args:
        path (str): Lock token path; created on first acquisition, never read.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    def __repr__(self) -> str:
        return f"FileWriteLock({self.path!r})"

    @contextmanager
    def hold(self) -> Iterator[None]:
        try:
            fd = os.open(self.path, os.O_RDWR | os.O_CREAT, 0o644)
        except OSError as exc:
            raise LockAcquisitionFailure(f"cannot open lock file {self.path}: {exc}") from exc
        try:
            try:
                fcntl.flock(fd, fcntl.LOCK_EX)
            except OSError as exc:
                raise LockAcquisitionFailure(f"cannot lock {self.path}: {exc}") from exc
            try:
                yield
            finally:
                fcntl.flock(fd, fcntl.LOCK_UN)
        finally:
            os.close(fd)


def lock_for(settings: StoreSettings) -> WriteLock:
    """
    Build the lock configured by settings.

    Returns:
        WriteLock: FileWriteLock on <root>/lock when settings.lock, otherwise NullLock.
    """
    if settings.lock:
        return FileWriteLock(lock_path(settings))
    logger.debug("write locking disabled for %s", settings.root_dir)
    return NullLock()
