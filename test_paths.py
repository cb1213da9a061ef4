from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from bfs.constants import IGNORE_FILE_NAME
from bfs.errors import ArchiveIOError, UnsafePathError
from bfs.fswriter import FileSystemWriter
from bfs.ignore import IgnoreList
from bfs.pathutil import safe_archive_path, to_archive_path
from bfs.walker import iter_included, walk_files


class PathTests(unittest.TestCase):
    def test_to_archive_path(self):
        self.assertEqual(to_archive_path("a/b.txt"), "a/b.txt")
        # Backslash only separates where the platform uses it
        expected = "a/b.txt" if "\\" in (os.sep, os.altsep) else "a\\b.txt"
        self.assertEqual(to_archive_path("a\\b.txt"), expected)
        self.assertEqual(to_archive_path("./a//b.txt/"), "a/b.txt")
        self.assertEqual(to_archive_path(os.path.join("x", "y", "z")), "x/y/z")
        self.assertEqual(to_archive_path(""), "")

    def test_safe_archive_path(self):
        self.assertEqual(safe_archive_path("sub/b.txt"), "sub/b.txt")
        self.assertEqual(safe_archive_path("sub\\b.txt"), "sub/b.txt")
        for bad in ("../x", "a/../../x", "/etc/passwd", "\\x", "C:/x", "c:x", "", ".", "a\x00b"):
            with self.assertRaises(UnsafePathError, msg=repr(bad)):
                safe_archive_path(bad)

    def test_unsafe_path_carries_offset(self):
        with self.assertRaises(UnsafePathError) as cm:
            safe_archive_path("../x", 17)
        self.assertEqual(cm.exception.offset, 17)
        self.assertIn("offset 17", str(cm.exception))


class IgnoreListTests(unittest.TestCase):
    def test_exact_match_only(self):
        ig = IgnoreList(["a.txt", "sub/b.txt"])
        self.assertFalse(ig.should_include("a.txt"))
        self.assertFalse(ig.should_include("sub/b.txt"))
        self.assertTrue(ig.should_include("sub/a.txt"))
        self.assertTrue(ig.should_include("a.txt.bak"))
        self.assertTrue(ig.should_include("sub"))
        self.assertTrue(IgnoreList(["*.txt"]).should_include("a.txt"))

    def test_normalisation_is_shared(self):
        ig = IgnoreList([os.path.join("sub", "b.txt"), "./c.txt", "sub/b.txt"])
        self.assertEqual(list(ig), ["sub/b.txt", "c.txt"])
        self.assertIn("sub/b.txt", ig)
        self.assertFalse(ig.should_include("c.txt"))

    def test_load(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            self.assertEqual(len(IgnoreList.load(str(root))), 0)
            inside = os.path.join(str(root), "sub", "abs.txt")
            outside = os.path.join(os.path.dirname(str(root)), "elsewhere.txt")
            (root / IGNORE_FILE_NAME).write_text(
                "a.txt\r\n\n./sub//b.txt\n" + inside + "\n" + outside + "\n", encoding="utf-8"
            )
            ig = IgnoreList.load(str(root))
            self.assertEqual(list(ig), ["a.txt", "sub/b.txt", "sub/abs.txt"])
            self.assertFalse(ig.should_include(IGNORE_FILE_NAME))
            self.assertTrue(ig.should_include("elsewhere.txt"))
            self.assertTrue(IgnoreList().should_include(IGNORE_FILE_NAME))

    def test_load_unreadable(self):
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / IGNORE_FILE_NAME).write_bytes(b"\xff\xfe\xfa")
            with self.assertRaises(ArchiveIOError):
                IgnoreList.load(tmp)


class WalkerTests(unittest.TestCase):
    def test_walk_files(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "d" / "e").mkdir(parents=True)
            (root / "top.txt").write_text("1")
            (root / "d" / "e" / "leaf.txt").write_text("2")
            found = {arc: full for full, arc in walk_files(str(root))}
            self.assertEqual(set(found), {"top.txt", "d/e/leaf.txt"})
            self.assertEqual(Path(found["d/e/leaf.txt"]).read_text(), "2")
            included = [arc for _full, arc in iter_included(str(root), lambda p: p != "top.txt")]
            self.assertEqual(included, ["d/e/leaf.txt"])

    def test_walk_missing_root(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ArchiveIOError):
                list(walk_files(os.path.join(tmp, "missing")))
            f = Path(tmp) / "f"
            f.write_text("x")
            with self.assertRaises(ArchiveIOError):
                list(walk_files(str(f)))


class FileSystemWriterTests(unittest.TestCase):
    def test_write_creates_parents_and_overwrites(self):
        with tempfile.TemporaryDirectory() as tmp:
            w = FileSystemWriter(os.path.join(tmp, "out"))
            w.ensure_root()
            dst = w.write("a/b/c.txt", b"one")
            self.assertEqual(Path(dst).read_bytes(), b"one")
            w.write("a/b/c.txt", b"two")
            self.assertEqual(Path(dst).read_bytes(), b"two")

    def test_write_refuses_directory_target(self):
        with tempfile.TemporaryDirectory() as tmp:
            w = FileSystemWriter(tmp)
            (Path(tmp) / "d").mkdir()
            with self.assertRaises(ArchiveIOError):
                w.write("d", b"x")

    def test_target_for_rejects_escape(self):
        with tempfile.TemporaryDirectory() as tmp:
            w = FileSystemWriter(tmp)
            with self.assertRaises(UnsafePathError):
                w.target_for("../x")


if __name__ == "__main__":
    unittest.main()
