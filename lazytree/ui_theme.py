"""ANSI palettes used when tree output goes to a terminal.

Only error annotations are coloured; names and connectors stay plain so the
tree remains readable when copied out of the terminal.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by the tree renderer."""

    name: str
    error_marker: str
    reset: str


DEFAULT_THEME = UITheme(
    name="default",
    error_marker="\033[1;31m",
    reset="\033[0m",
)

PLAIN_THEME = UITheme(
    name="plain",
    error_marker="",
    reset="",
)


__all__ = ["UITheme", "DEFAULT_THEME", "PLAIN_THEME"]
