"""Output-destination checks that decide whether to emit ANSI colour."""

from __future__ import annotations

from typing import Literal, TextIO

ColorMode = Literal["auto", "always", "never"]
COLOR_MODES: tuple[ColorMode, ...] = ("auto", "always", "never")


def is_interactive_output(stream: TextIO) -> bool:
    """Return whether ``stream`` is attached to a terminal.

    Streams without a usable ``isatty`` (closed files, test doubles) count as
    non-interactive.
    """
    isatty = getattr(stream, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except (OSError, ValueError):
        return False


def resolve_color(mode: ColorMode, stream: TextIO) -> bool:
    """Map a colour mode to on/off for output written to ``stream``."""
    if mode == "always":
        return True
    if mode == "never":
        return False
    return is_interactive_output(stream)


__all__ = ["ColorMode", "COLOR_MODES", "is_interactive_output", "resolve_color"]
