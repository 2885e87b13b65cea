"""Descriptor-relative, fault-tolerant directory traversal primitives.

This package contains the non-rendering half of lazytree:
- shared directory descriptor and stream handles
- error values for failed stat/open/read calls
- ``DirEntry`` for one filesystem object
- ``LazyDirectoryIterator`` for one directory's children
"""

from __future__ import annotations

from .errors import FsError, IteratorStateError, OpenFailure, ReadFailure, StatFailure
from .handles import DirStream, FdHandle
from .entry import DirEntry, EntryKind, kind_for_mode
from .iterator import LazyDirectoryIterator

__all__ = [
    "FsError",
    "StatFailure",
    "OpenFailure",
    "ReadFailure",
    "IteratorStateError",
    "FdHandle",
    "DirStream",
    "DirEntry",
    "EntryKind",
    "kind_for_mode",
    "LazyDirectoryIterator",
]
