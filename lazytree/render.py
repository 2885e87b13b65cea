"""Connector-tree rendering over lazily iterated directories.

Walks a ``DirEntry`` depth-first, one directory stream per level, and writes
one line per entry. Last-sibling detection uses a one-entry lookahead on the
live iterator instead of listing a directory up front.
"""

from __future__ import annotations

import io
import os
from collections.abc import Iterable
from typing import TextIO

from .dir_tree import DirEntry, FsError, LazyDirectoryIterator, OpenFailure
from .ui_theme import DEFAULT_THEME, PLAIN_THEME, UITheme

BRANCH = "├── "
LAST_BRANCH = "└── "
CONTINUATION = "│   "
BLANK = "    "


class TreeRenderer:
    """Write connector-tree listings to ``out``.

    ``inline_open_errors`` selects where a directory-open failure is shown:
    appended to the directory's own line (default), or as one synthetic error
    child below it. Failures while reading an already open directory are
    always shown as a synthetic last child.
    """

    def __init__(
        self,
        out: TextIO,
        color: bool = False,
        theme: UITheme | None = None,
        inline_open_errors: bool = True,
    ) -> None:
        self.out = out
        self.theme = (theme or DEFAULT_THEME) if color else PLAIN_THEME
        self.inline_open_errors = inline_open_errors

    def format_error(self, error: FsError) -> str:
        return f"{self.theme.error_marker}(error: {error}){self.theme.reset}"

    def render(self, root: DirEntry, max_depth: int | None = None) -> None:
        """Print ``root`` and its descendants down to ``max_depth`` levels.

        ``max_depth=0`` prints only the root line; ``None`` is unbounded.
        """
        if max_depth is not None and max_depth < 0:
            raise ValueError("max_depth must be >= 0")
        self._render_entry(root, [], max_depth, "")

    def render_paths(self, paths: Iterable[str | os.PathLike[str]], max_depth: int | None = None) -> None:
        """Render each path as its own tree, separated by a blank line."""
        for idx, path in enumerate(paths):
            if idx > 0:
                self.out.write("\n")
            self.render(DirEntry.root(path), max_depth)

    def _write_line(self, pending: list[bool], connector: str, text: str) -> None:
        prefix = "".join(CONTINUATION if more else BLANK for more in pending)
        self.out.write(f"{prefix}{connector}{text}\n")

    def _render_entry(
        self,
        entry: DirEntry,
        pending: list[bool],
        depth_left: int | None,
        connector: str,
    ) -> None:
        if entry.error is not None:
            self._write_line(pending, connector, f"{entry.name} {self.format_error(entry.error)}")
            return
        if depth_left == 0 or not entry.is_dir():
            self._write_line(pending, connector, entry.name)
            return

        with entry.open_children() as children:
            if self.inline_open_errors and isinstance(children.error, OpenFailure):
                self._write_line(pending, connector, f"{entry.name} {self.format_error(children.error)}")
                return

            self._write_line(pending, connector, entry.name)
            # The trunk line has no connector and adds no column.
            if connector:
                pending.append(connector == BRANCH)
            try:
                self._render_children(children, pending, None if depth_left is None else depth_left - 1)
            finally:
                if connector:
                    pending.pop()

    def _render_children(
        self,
        children: LazyDirectoryIterator,
        pending: list[bool],
        depth_left: int | None,
    ) -> None:
        while not children.at_end:
            child = children.dereference()
            children.advance()
            # A pending read error is printed after the last real child.
            last = children.at_end and children.error is None
            self._render_entry(child, pending, depth_left, LAST_BRANCH if last else BRANCH)

        if children.error is not None:
            self._write_line(pending, LAST_BRANCH, self.format_error(children.error))


def render_to_string(
    paths: Iterable[str | os.PathLike[str]],
    max_depth: int | None = None,
    color: bool = False,
    inline_open_errors: bool = True,
) -> str:
    """Render ``paths`` into a string instead of a stream."""
    buffer = io.StringIO()
    TreeRenderer(buffer, color=color, inline_open_errors=inline_open_errors).render_paths(paths, max_depth)
    return buffer.getvalue()


__all__ = [
    "BRANCH",
    "LAST_BRANCH",
    "CONTINUATION",
    "BLANK",
    "TreeRenderer",
    "render_to_string",
]
