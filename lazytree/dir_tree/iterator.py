"""Lazy, error-surfacing iteration over one directory's entries.

The directory is opened relative to its parent handle on the first advance,
which construction performs so the first entry (or terminal state) is ready
before first use. Open and read failures are stored in ``error`` and end the
iteration; they never propagate as exceptions.
"""

from __future__ import annotations

import logging
import os

from .entry import DirEntry
from .errors import FsError, IteratorStateError, OpenFailure, ReadFailure, StatFailure
from .handles import DirStream, FdHandle

logger = logging.getLogger(__name__)

OPEN_FLAGS = os.O_RDONLY | os.O_DIRECTORY | os.O_NOFOLLOW
_PSEUDO_ENTRIES = (".", "..")


class LazyDirectoryIterator:
    """Forward-only cursor over a directory opened relative to ``parent_handle``.

    The iterator owns only OS handles: the opened directory descriptor and the
    stream read from it. Both are released as soon as the iterator reaches its
    terminal state, is closed, or is dropped.
    """

    def __init__(self, parent_handle: FdHandle | None, name: str | None) -> None:
        self.parent_handle = parent_handle
        self.name = name
        self.directory_handle: FdHandle | None = None
        self.current_name: str | None = None
        self.error: FsError | None = None
        self._stream: DirStream | None = None
        self._opened = False
        if parent_handle is not None:
            self.advance()

    @classmethod
    def end(cls) -> LazyDirectoryIterator:
        """Return the canonical terminal iterator: no entries and no error."""
        return cls(None, None)

    @property
    def at_end(self) -> bool:
        return self.current_name is None

    def _open(self) -> None:
        self._opened = True
        try:
            fd = os.open(self.name, OPEN_FLAGS, dir_fd=self.parent_handle.fd)
        except OSError as exc:
            self._fail(OpenFailure.from_os_error("openat", exc))
            return
        self.directory_handle = FdHandle(fd)
        try:
            self._stream = DirStream(self.directory_handle)
        except OSError as exc:
            self._fail(OpenFailure.from_os_error("fdopendir", exc))

    def _fail(self, error: FsError) -> None:
        logger.debug("listing %r stopped: %s", self.name, error)
        self.error = error
        self.close()

    def advance(self) -> None:
        """Move to the next entry other than ``.`` and ``..``.

        Opens the directory on the first call. Once terminal, further calls
        leave the iterator unchanged.
        """
        if self.parent_handle is None:
            raise IteratorStateError("advance on an iterator that has no directory to read")
        if not self._opened:
            self._open()
        if self._stream is None:
            return

        while True:
            try:
                name = self._stream.read_next()
            except OSError as exc:
                self._fail(ReadFailure.from_os_error("readdir", exc))
                return
            if name not in _PSEUDO_ENTRIES:
                break

        self.current_name = name
        if name is None:
            self.close()

    def dereference(self) -> DirEntry:
        """Build the entry at the current position against a duplicated descriptor.

        The duplicate gives the child its own base handle for later relative
        opens, independent of the stream this iterator keeps reading.
        """
        if self.current_name is None or self.directory_handle is None:
            raise IteratorStateError("dereference of a directory iterator in its terminal state")
        try:
            parent = self.directory_handle.duplicate()
        except OSError as exc:
            failure = StatFailure.from_os_error("dup", exc)
            logger.debug("dup for %r failed: %s", self.current_name, failure)
            return DirEntry(parent=self.directory_handle, name=self.current_name, error=failure)
        return DirEntry.stat_at(parent, self.current_name)

    def close(self) -> None:
        """Release the stream and directory descriptor, leaving the iterator terminal."""
        self.current_name = None
        if self._stream is not None:
            self._stream.close()
            self._stream = None
        if self.directory_handle is not None:
            self.directory_handle.close()
            self.directory_handle = None

    def __enter__(self) -> LazyDirectoryIterator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __iter__(self) -> LazyDirectoryIterator:
        return self

    def __next__(self) -> DirEntry:
        if self.current_name is None:
            raise StopIteration
        child = self.dereference()
        self.advance()
        return child

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LazyDirectoryIterator):
            return NotImplemented
        return self.current_name == other.current_name

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"LazyDirectoryIterator(name={self.name!r}, current_name={self.current_name!r}, "
            f"error={self.error!r})"
        )


__all__ = ["LazyDirectoryIterator", "OPEN_FLAGS"]
