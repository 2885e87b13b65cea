"""Immutable handles to single filesystem objects.

A ``DirEntry`` is a name plus the shared directory handle it is looked up
against. Metadata is fetched eagerly with a symlink-non-following stat; the
entry's own contents are only opened when ``open_children`` is called.
"""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from .errors import StatFailure
from .handles import FdHandle

if TYPE_CHECKING:
    from .iterator import LazyDirectoryIterator

logger = logging.getLogger(__name__)

EntryKind = Literal["directory", "regular", "symlink", "other", "unknown"]


def kind_for_mode(mode: int) -> EntryKind:
    """Classify an ``st_mode`` value."""
    if stat.S_ISDIR(mode):
        return "directory"
    if stat.S_ISREG(mode):
        return "regular"
    if stat.S_ISLNK(mode):
        return "symlink"
    return "other"


@dataclass(frozen=True)
class DirEntry:
    """One filesystem object named relative to a parent directory handle."""

    parent: FdHandle = field(repr=False, compare=False)
    name: str
    kind: EntryKind = "unknown"
    mode: int | None = None
    error: StatFailure | None = None

    @classmethod
    def stat_at(cls, parent: FdHandle, name: str) -> DirEntry:
        """Look up ``name`` relative to ``parent`` without following symlinks.

        Never raises for OS failures: the failure is stored in ``error`` and
        the entry's kind stays ``"unknown"``.
        """
        try:
            st = os.stat(name, dir_fd=parent.fd, follow_symlinks=False)
        except OSError as exc:
            failure = StatFailure.from_os_error("fstatat", exc)
            logger.debug("stat of %r failed: %s", name, failure)
            return cls(parent=parent, name=name, error=failure)
        return cls(parent=parent, name=name, kind=kind_for_mode(st.st_mode), mode=st.st_mode)

    @classmethod
    def root(cls, path: str | os.PathLike[str]) -> DirEntry:
        """Build the entry for a top-level path, resolved against the cwd."""
        return cls.stat_at(FdHandle.cwd(), os.fspath(path))

    def is_dir(self) -> bool:
        return self.error is None and self.kind == "directory"

    def open_children(self) -> LazyDirectoryIterator:
        """Return an iterator over this entry's children.

        Non-directories (including entries whose stat failed) yield an iterator
        that is already at its end with no error. For directories, an open
        failure is reported through the iterator's ``error``.
        """
        from .iterator import LazyDirectoryIterator

        if not self.is_dir():
            return LazyDirectoryIterator.end()
        return LazyDirectoryIterator(self.parent, self.name)

    def __str__(self) -> str:
        return self.name


__all__ = ["DirEntry", "EntryKind", "kind_for_mode"]
