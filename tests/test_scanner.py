from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from fullsend.errors import InvalidRootError
from fullsend.ignore import PathFilter
from fullsend.scanner import scan_directory


def write_tree(root: Path, files: dict) -> None:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def rel_paths(entries) -> list:
    return [e.relative_path for e in entries]


class ScanDirectoryTests(unittest.TestCase):
    def test_scans_nested_files_with_posix_relative_paths(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            write_tree(
                root,
                {
                    "README.md": "# Project",
                    "src/index.ts": "export {}",
                    "src/utils/helper.ts": "export {}",
                    "a/b/c/d/e/deep.txt": "deep content",
                },
            )

            result = scan_directory(root)

            self.assertEqual(
                rel_paths(result.included_entries),
                ["a/b/c/d/e/deep.txt", "README.md", "src/index.ts", "src/utils/helper.ts"],
            )
            index = next(e for e in result.included_entries if e.relative_path == "src/index.ts")
            self.assertEqual(index.path, (root / "src" / "index.ts").resolve())
            self.assertEqual(index.size, len("export {}"))
            self.assertFalse(index.is_directory)

    def test_gitignored_dependency_directory_is_not_descended(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            write_tree(
                root,
                {
                    "src/index.ts": "export {}",
                    "deps/pkg.js": "module.exports = 1",
                    ".gitignore": "deps\n",
                },
            )

            result = scan_directory(root)

            self.assertEqual(rel_paths(result.included_entries), ["src/index.ts"])
            placeholders = [e for e in result.all_entries if e.is_filtered]
            self.assertEqual(rel_paths(placeholders), ["deps"])
            self.assertTrue(placeholders[0].is_directory)
            self.assertNotIn("deps/pkg.js", rel_paths(result.all_entries))

    def test_ignored_directory_is_never_listed(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            write_tree(root, {"node_modules/a/b.js": "x", "main.py": "print()"})
            listed = []
            real_scandir = os.scandir

            def tracking_scandir(path):
                listed.append(Path(path).name)
                return real_scandir(path)

            with mock.patch("fullsend.scanner.os.scandir", side_effect=tracking_scandir):
                scan_directory(root)

            self.assertNotIn("node_modules", listed)

    def test_ignored_files_are_not_recorded(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            write_tree(root, {"app.log": "noise", "app.py": "pass"})

            result = scan_directory(root)

            self.assertEqual(rel_paths(result.included_entries), ["app.py"])
            self.assertNotIn("app.log", rel_paths(result.all_entries))

    def test_use_gitignore_false_keeps_gitignored_files(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            write_tree(root, {".gitignore": "secret.txt\n", "secret.txt": "s"})

            self.assertEqual(rel_paths(scan_directory(root).included_entries), [])
            self.assertEqual(
                rel_paths(scan_directory(root, use_gitignore=False).included_entries),
                ["secret.txt"],
            )

    def test_injected_filter_is_used(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            write_tree(root, {"keep.txt": "k", "drop.txt": "d"})

            result = scan_directory(root, PathFilter(["drop.txt"]))

            self.assertEqual(rel_paths(result.included_entries), ["keep.txt"])

    def test_zero_byte_file_is_a_valid_entry(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "empty.txt").touch()

            result = scan_directory(root)

            self.assertEqual(len(result.included_entries), 1)
            self.assertEqual(result.included_entries[0].size, 0)

    def test_empty_directory_yields_no_files(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "empty").mkdir()

            result = scan_directory(root)

            self.assertEqual(result.included_entries, [])
            self.assertEqual(rel_paths(result.all_entries), ["empty"])

    def test_ordering_is_deterministic_and_case_insensitive(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            write_tree(root, {"b.txt": "", "A.txt": "", "a/z.txt": "", "C.txt": ""})

            result = scan_directory(root)

            self.assertEqual(rel_paths(result.included_entries), ["a/z.txt", "A.txt", "b.txt", "C.txt"])

    def test_on_entry_called_for_each_included_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            write_tree(root, {"one.py": "", "sub/two.py": ""})
            seen = []

            scan_directory(root, on_entry=seen.append)

            self.assertEqual(sorted(seen), ["one.py", "sub/two.py"])

    def test_unreadable_subdirectory_is_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            write_tree(root, {"locked/secret.py": "", "open/visible.py": ""})
            real_scandir = os.scandir

            def flaky_scandir(path):
                if Path(path).name == "locked":
                    raise PermissionError(13, "Permission denied", str(path))
                return real_scandir(path)

            with mock.patch("fullsend.scanner.os.scandir", side_effect=flaky_scandir):
                result = scan_directory(root)

            self.assertEqual(rel_paths(result.included_entries), ["open/visible.py"])

    def test_stat_failure_skips_only_that_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            write_tree(root, {"good.py": "ok", "gone.py": "bye"})
            real_scandir = os.scandir

            class VanishingEntry:
                def __init__(self, entry):
                    self._entry = entry
                    self.name = entry.name
                    self.path = entry.path

                def is_dir(self, follow_symlinks=True):
                    return self._entry.is_dir(follow_symlinks=follow_symlinks)

                def is_file(self, follow_symlinks=True):
                    return self._entry.is_file(follow_symlinks=follow_symlinks)

                def stat(self, follow_symlinks=True):
                    if self.name == "gone.py":
                        raise FileNotFoundError(2, "No such file", self.path)
                    return self._entry.stat(follow_symlinks=follow_symlinks)

            class Listing:
                def __init__(self, path):
                    self._it = real_scandir(path)

                def __enter__(self):
                    return (VanishingEntry(e) for e in self._it)

                def __exit__(self, *exc):
                    self._it.close()
                    return False

            with mock.patch("fullsend.scanner.os.scandir", side_effect=Listing):
                result = scan_directory(root)

            self.assertEqual(rel_paths(result.included_entries), ["good.py"])

    def test_missing_root_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(InvalidRootError):
                scan_directory(Path(tmp) / "nope")

    def test_file_root_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "file.txt"
            target.write_text("x", encoding="utf-8")
            with self.assertRaises(InvalidRootError):
                scan_directory(target)


if __name__ == "__main__":
    unittest.main()
