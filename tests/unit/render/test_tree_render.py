"""Tests for connector-tree rendering.

Checks connector and continuation-bar layout, depth cutoffs, and where stat,
open, and read failures are printed. Listing order is whatever the directory
stream returns, so expectations are built from ``os.scandir`` order.
"""

from __future__ import annotations

import errno
import io
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazytree.dir_tree import DirEntry, DirStream, FdHandle
from lazytree.render import TreeRenderer, render_to_string

_REAL_OPEN = os.open
_REAL_STAT = os.stat


def _listing_order(path: Path) -> list[str]:
    with os.scandir(path) as entries:
        return [entry.name for entry in entries]


def _deny_open_of(blocked: str):
    def fake_open(path, flags, mode=0o777, *, dir_fd=None):
        if path == blocked:
            raise PermissionError(errno.EACCES, "Permission denied")
        return _REAL_OPEN(path, flags, mode, dir_fd=dir_fd)

    return fake_open


def _deny_stat_of(blocked: str):
    def fake_stat(path, *, dir_fd=None, follow_symlinks=True):
        if path == blocked:
            raise PermissionError(errno.EACCES, "Permission denied")
        return _REAL_STAT(path, dir_fd=dir_fd, follow_symlinks=follow_symlinks)

    return fake_stat


class TreeRendererTests(unittest.TestCase):
    def test_directory_with_empty_subdir_and_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "t").mkdir()
            (root / "t" / "a").mkdir()
            (root / "t" / "b").write_text("b", encoding="utf-8")
            first, second = _listing_order(root / "t")

            previous_cwd = Path.cwd()
            try:
                os.chdir(root)
                rendered = render_to_string(["t"])
                shallow = render_to_string(["t"], max_depth=0)
            finally:
                os.chdir(previous_cwd)

        self.assertEqual(rendered, f"t\n├── {first}\n└── {second}\n")
        self.assertEqual(shallow, "t\n")

    def test_continuation_bars_follow_pending_siblings(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            for name in ("p", "q"):
                (root / name).mkdir()
                (root / name / "f").write_text("x", encoding="utf-8")
            first, second = _listing_order(root)

            rendered = render_to_string([root])

        self.assertEqual(
            rendered.splitlines(),
            [
                str(root),
                f"├── {first}",
                "│   └── f",
                f"└── {second}",
                "    └── f",
            ],
        )

    def test_depth_limit_counts_levels_below_root(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "a" / "b" / "c").mkdir(parents=True)
            (root / "a" / "b" / "c" / "deep.txt").write_text("x", encoding="utf-8")

            depth_zero = render_to_string([root], max_depth=0)
            depth_two = render_to_string([root], max_depth=2)
            unbounded = render_to_string([root])

        self.assertEqual(depth_zero.splitlines(), [str(root)])
        self.assertEqual(depth_two.splitlines(), [str(root), "└── a", "    └── b"])
        self.assertEqual(
            unbounded.splitlines(),
            [str(root), "└── a", "    └── b", "        └── c", "            └── deep.txt"],
        )

    def test_depth_limit_skips_opening_directories_past_cutoff(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "a").mkdir()
            with mock.patch("lazytree.dir_tree.iterator.os.open", wraps=os.open) as opener:
                render_to_string([root], max_depth=1)

        self.assertEqual(opener.call_count, 1)

    def test_negative_depth_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ValueError):
                TreeRenderer(io.StringIO()).render(DirEntry.root(tmp), max_depth=-1)

    def test_empty_root_prints_single_line(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertEqual(render_to_string([tmp]), f"{tmp}\n")

    def test_file_root_prints_single_line(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "file.txt"
            target.write_text("x", encoding="utf-8")
            self.assertEqual(render_to_string([target]), f"{target}\n")

    def test_missing_root_renders_stat_error_inline(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp) / "missing"
            rendered = render_to_string([missing])

        self.assertEqual(
            rendered,
            f"{missing} (error: fstatat: ({errno.ENOENT}) {os.strerror(errno.ENOENT)})\n",
        )

    def test_stat_failure_of_child_is_shown_on_its_line(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "bad").mkdir()
            (root / "bad" / "hidden.txt").write_text("x", encoding="utf-8")

            with mock.patch("lazytree.dir_tree.entry.os.stat", side_effect=_deny_stat_of("bad")):
                rendered = render_to_string([root])

        self.assertEqual(
            rendered.splitlines(),
            [str(root), f"└── bad (error: fstatat: ({errno.EACCES}) Permission denied)"],
        )

    def test_open_failure_is_inline_and_siblings_still_render(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "locked").mkdir()
            (root / "locked" / "secret.txt").write_text("x", encoding="utf-8")
            (root / "open").mkdir()
            (root / "open" / "visible.txt").write_text("x", encoding="utf-8")
            order = _listing_order(root)

            with mock.patch("lazytree.dir_tree.iterator.os.open", side_effect=_deny_open_of("locked")):
                rendered = render_to_string([root])

        lines = rendered.splitlines()
        locked_error = f"locked (error: openat: ({errno.EACCES}) Permission denied)"
        if order == ["locked", "open"]:
            expected = [str(root), f"├── {locked_error}", "└── open", "    └── visible.txt"]
        else:
            expected = [str(root), "├── open", "│   └── visible.txt", f"└── {locked_error}"]
        self.assertEqual(lines, expected)
        self.assertNotIn("secret.txt", rendered)

    def test_failed_dup_is_shown_inline_and_siblings_still_render(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            for name in ("p", "q"):
                (root / name).mkdir()
                (root / name / "f").write_text("x", encoding="utf-8")
            first, second = _listing_order(root)
            real_duplicate = FdHandle.duplicate
            calls = []

            def fail_first_duplicate(handle: FdHandle) -> FdHandle:
                calls.append(handle)
                if len(calls) == 1:
                    raise OSError(errno.EMFILE, "Too many open files")
                return real_duplicate(handle)

            with mock.patch.object(FdHandle, "duplicate", autospec=True, side_effect=fail_first_duplicate):
                rendered = render_to_string([root])

        self.assertEqual(
            rendered.splitlines(),
            [
                str(root),
                f"├── {first} (error: dup: ({errno.EMFILE}) Too many open files)",
                f"└── {second}",
                "    └── f",
            ],
        )

    def test_open_failure_as_synthetic_child_when_not_inline(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "locked").mkdir()

            with mock.patch("lazytree.dir_tree.iterator.os.open", side_effect=_deny_open_of("locked")):
                rendered = render_to_string([root], inline_open_errors=False)

        self.assertEqual(
            rendered.splitlines(),
            [
                str(root),
                "└── locked",
                f"    └── (error: openat: ({errno.EACCES}) Permission denied)",
            ],
        )

    def test_read_failure_is_rendered_as_last_child(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "a").write_text("a", encoding="utf-8")
            (root / "b").write_text("b", encoding="utf-8")
            read_error = OSError(errno.EIO, "Input/output error")

            with mock.patch.object(DirStream, "read_next", side_effect=["a", "b", read_error]):
                rendered = render_to_string([root])

        self.assertEqual(
            rendered.splitlines(),
            [
                str(root),
                "├── a",
                "├── b",
                f"└── (error: readdir: ({errno.EIO}) Input/output error)",
            ],
        )

    def test_error_marker_is_colored_only_when_enabled(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp) / "missing"
            colored = render_to_string([missing], color=True)
            plain = render_to_string([missing], color=False)

        self.assertIn("\033[1;31m(error: fstatat:", colored)
        self.assertTrue(colored.endswith("\033[0m\n"))
        self.assertNotIn("\033[", plain)

    def test_multiple_paths_are_separated_by_blank_line(self) -> None:
        with tempfile.TemporaryDirectory() as first, tempfile.TemporaryDirectory() as second:
            rendered = render_to_string([first, second])

        self.assertEqual(rendered, f"{first}\n\n{second}\n")

    def test_renderer_writes_to_given_stream(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / "only.txt").write_text("x", encoding="utf-8")
            out = io.StringIO()
            TreeRenderer(out).render(DirEntry.root(tmp))

        self.assertEqual(out.getvalue(), f"{tmp}\n└── only.txt\n")


if __name__ == "__main__":
    unittest.main()
