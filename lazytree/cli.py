"""Command-line front door for lazytree.

Parses CLI options, merges them with persisted config, and renders each
requested path as a connector tree on stdout. Per-entry filesystem errors are
part of the output, not failures: only usage errors exit nonzero.
"""

from __future__ import annotations

import argparse
import io
import logging
import sys
from typing import TextIO

from . import config
from .render import TreeRenderer
from .terminal import COLOR_MODES, ColorMode, resolve_color

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
OPEN_ERROR_PLACEMENTS = ("inline", "child")


def _nonnegative_int(value: str) -> int:
    """argparse type for integer values >= 0."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazytree",
        description="List directory contents as a tree, reporting unreadable entries in place.",
    )
    parser.add_argument("paths", nargs="*", metavar="PATH", help="Paths to list. Defaults to current directory.")
    parser.add_argument(
        "-d",
        "--depth",
        type=_nonnegative_int,
        default=None,
        metavar="DEPTH",
        help="Maximum depth below each path (0 prints only the path itself).",
    )
    parser.add_argument(
        "--color",
        choices=COLOR_MODES,
        default=None,
        help="Colour error annotations: auto (only on a terminal), always, or never.",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument(
        "--open-errors",
        choices=OPEN_ERROR_PLACEMENTS,
        default=None,
        help="Show directory-open failures on the directory's line (inline) or as a child line (child).",
    )
    parser.add_argument(
        "--save-defaults",
        action="store_true",
        help="Persist the given --color/--no-color, --depth, and --open-errors values as defaults.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log skipped entries and failed calls to stderr.")
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def _prepare_output(out: TextIO) -> None:
    """Switch a real stdout to UTF-8 that passes undecodable filename bytes through.

    ``os.scandir`` maps invalid UTF-8 in names to surrogate escapes; a
    ``strict`` stream would abort the listing on the first such name.
    """
    if not isinstance(out, io.TextIOWrapper):
        return
    encoding = out.encoding.lower().replace("-", "").replace("_", "")
    if encoding != "utf8" or out.errors != "surrogateescape":
        out.reconfigure(encoding="utf-8", errors="surrogateescape")


def _save_defaults(args: argparse.Namespace, color_mode: ColorMode) -> None:
    """Persist only the settings given explicitly on this command line."""
    if args.no_color or args.color is not None:
        config.save_color_mode(color_mode)
    if args.depth is not None:
        config.save_max_depth(args.depth)
    if args.open_errors is not None:
        config.save_inline_open_errors(args.open_errors == "inline")
    logger.debug("saved defaults to %s", config.CONFIG_PATH)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and print one tree per requested path.

    ``argv`` is primarily for tests; when omitted ``sys.argv`` is used.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    color_mode: ColorMode
    if args.no_color:
        color_mode = "never"
    elif args.color is not None:
        color_mode = args.color
    else:
        color_mode = config.load_color_mode()
    max_depth = args.depth if args.depth is not None else config.load_max_depth()
    if args.open_errors is not None:
        inline_open_errors = args.open_errors == "inline"
    else:
        inline_open_errors = config.load_inline_open_errors()
    if args.save_defaults:
        _save_defaults(args, color_mode)

    paths = args.paths or ["."]
    logger.debug("rendering %d path(s), max_depth=%s, color=%s", len(paths), max_depth, color_mode)

    out = sys.stdout
    _prepare_output(out)
    renderer = TreeRenderer(
        out,
        color=resolve_color(color_mode, out),
        inline_open_errors=inline_open_errors,
    )
    renderer.render_paths(paths, max_depth)
    out.flush()


if __name__ == "__main__":
    main()
