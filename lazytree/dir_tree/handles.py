"""Shared OS directory resources with deterministic release.

``FdHandle`` owns one directory descriptor that many sibling entries may share
as the ``dir_fd`` base for relative lookups. ``DirStream`` owns one
``os.scandir`` stream over such a descriptor. Both release their OS resource
exactly once: on explicit ``close()`` or when the last reference is dropped.
"""

from __future__ import annotations

import os
import weakref


class FdHandle:
    """Directory descriptor used as the base for ``dir_fd`` relative calls."""

    def __init__(self, fd: int | None) -> None:
        """Take ownership of ``fd``; ``None`` builds the working-directory sentinel."""
        self._fd = fd
        self._finalizer = weakref.finalize(self, os.close, fd) if fd is not None else None

    @classmethod
    def cwd(cls) -> FdHandle:
        """Return the sentinel that resolves names against the working directory."""
        return cls(None)

    @property
    def is_cwd(self) -> bool:
        return self._fd is None

    @property
    def closed(self) -> bool:
        return self._finalizer is not None and not self._finalizer.alive

    @property
    def fd(self) -> int | None:
        """Descriptor to pass as ``dir_fd``; ``None`` for the cwd sentinel."""
        if self.closed:
            raise ValueError("I/O operation on closed directory handle")
        return self._fd

    def duplicate(self) -> FdHandle:
        """Return an independently owned handle to the same directory.

        Raises ``OSError`` when ``dup`` fails (for example ``EMFILE``).
        """
        if self._fd is None:
            return FdHandle.cwd()
        return FdHandle(os.dup(self.fd))

    def close(self) -> None:
        """Release the descriptor; further calls are no-ops."""
        if self._finalizer is not None:
            self._finalizer()

    def __enter__(self) -> FdHandle:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        if self._fd is None:
            return "FdHandle(cwd)"
        state = "closed" if self.closed else "open"
        return f"FdHandle(fd={self._fd}, {state})"


class DirStream:
    """One directory stream opened over an ``FdHandle``.

    ``os.scandir`` duplicates the descriptor it is given, so the stream and
    the handle it was opened from are released independently.
    """

    def __init__(self, handle: FdHandle) -> None:
        self._entries = os.scandir(handle.fd)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def read_next(self) -> str | None:
        """Return the next raw entry name, or ``None`` once the stream is exhausted.

        Read failures propagate as ``OSError``.
        """
        entry = next(self._entries, None)
        if entry is None:
            return None
        return entry.name

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._entries.close()


__all__ = ["FdHandle", "DirStream"]
