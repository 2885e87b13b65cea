"""Filesystem failures captured as values instead of raised exceptions."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class FsError:
    """One failed OS call: syscall name, platform error code, and description."""

    operation: str
    errno: int
    strerror: str

    @classmethod
    def from_os_error(cls, operation: str, exc: OSError) -> FsError:
        code = exc.errno or 0
        text = exc.strerror or os.strerror(code)
        return cls(operation=operation, errno=code, strerror=text)

    def __str__(self) -> str:
        return f"{self.operation}: ({self.errno}) {self.strerror}"


@dataclass(frozen=True)
class StatFailure(FsError):
    """Metadata lookup for an entry failed."""


@dataclass(frozen=True)
class OpenFailure(FsError):
    """A directory could not be opened for listing."""


@dataclass(frozen=True)
class ReadFailure(FsError):
    """Reading the next entry from an open directory stream failed."""


class IteratorStateError(RuntimeError):
    """Directory iterator driven outside its valid states (a caller bug)."""


__all__ = [
    "FsError",
    "StatFailure",
    "OpenFailure",
    "ReadFailure",
    "IteratorStateError",
]
