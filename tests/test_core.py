from __future__ import annotations

import tempfile
import unittest
import xml.etree.ElementTree as ET
from pathlib import Path
from unittest import mock

from fullsend.config import Config
from fullsend.core import FileStatus, bundle
from fullsend.errors import InvalidRootError


def write_tree(root: Path, files: dict) -> None:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")


class BundleTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)
        patcher = mock.patch("fullsend.core.count_tokens", return_value=42)
        self.count_tokens = patcher.start()
        self.addCleanup(patcher.stop)

    def test_gitignored_node_modules_scenario(self) -> None:
        write_tree(
            self.root,
            {
                "src/index.ts": "export {}",
                "node_modules/pkg.js": "module.exports = {}",
                ".gitignore": "node_modules\n",
            },
        )

        result = bundle(self.root, Config())

        self.assertEqual([f.path for f in result.files], ["src/index.ts"])
        self.assertIn("src/index.ts:\n```typescript\nexport {}\n```", result.output)
        self.assertNotIn("pkg.js", result.output)
        self.assertEqual(result.metadata.total_tokens, 42)
        self.count_tokens.assert_called_once_with(result.output)

    def test_statuses_and_metadata(self) -> None:
        write_tree(
            self.root,
            {"ok.py": "pass", "blob.dat": b"\x00\x01", "big.txt": "x" * 100},
        )

        result = bundle(self.root, Config(max_file_size=50))

        statuses = {f.path: f.status for f in result.files}
        self.assertEqual(
            statuses,
            {"ok.py": FileStatus.LOADED, "blob.dat": FileStatus.SKIPPED, "big.txt": FileStatus.SKIPPED},
        )
        self.assertEqual([f.status for f in result.files][0], FileStatus.LOADED)
        self.assertEqual(result.metadata.files_skipped, 2)
        self.assertEqual(result.loaded_size, 4)
        self.assertGreaterEqual(result.metadata.duration, 0)

    def test_max_file_size_zero_skips_everything(self) -> None:
        write_tree(self.root, {"a.py": "a", "b.py": "b"})

        result = bundle(self.root, Config(max_file_size=0))

        self.assertEqual(result.loaded_files, ())
        self.assertEqual(len(result.skipped_files), 2)

    def test_zero_byte_file_in_both_formats(self) -> None:
        write_tree(self.root, {"empty.txt": ""})

        md = bundle(self.root, Config(format="markdown"))
        xml = bundle(self.root, Config(format="xml"))

        self.assertEqual(md.loaded_files[0].size, 0)
        self.assertIn("empty.txt:\n```\n\n```", md.output)
        root = ET.fromstring(xml.output)
        self.assertEqual(root.find("file").get("path"), "empty.txt")

    def test_xml_with_tree_shows_filtered_directories(self) -> None:
        write_tree(self.root, {"main.py": "print('hi')", "dist/bundle.js": "x"})

        result = bundle(self.root, Config(format="xml", show_file_tree=True))

        root = ET.fromstring(result.output)
        self.assertIsNotNone(root.find("note"))
        structure = root.find("structure").text
        self.assertIn("dist/...", structure)
        self.assertIn("main.py", structure)
        self.assertEqual(root.find("file").text, "print('hi')")

    def test_markdown_without_tree_has_no_structure_heading(self) -> None:
        write_tree(self.root, {"a.py": "1", "b.py": "2", "c.py": "3"})

        result = bundle(self.root, Config())

        self.assertNotIn("## File Structure", result.output)
        self.assertTrue(result.output.startswith("## Files\n\n"))

    def test_read_failure_is_reported_not_raised(self) -> None:
        write_tree(self.root, {"a.py": "1", "b.py": "2"})
        real_read_bytes = Path.read_bytes

        def failing_read(path):
            if path.name == "b.py":
                raise PermissionError(13, "Permission denied", str(path))
            return real_read_bytes(path)

        with mock.patch.object(Path, "read_bytes", failing_read):
            result = bundle(self.root, Config())

        failed = result.failed_files
        self.assertEqual([f.path for f in failed], ["b.py"])
        self.assertIn("Permission denied", failed[0].error)
        self.assertEqual([f.path for f in result.loaded_files], ["a.py"])

    def test_empty_project_is_a_successful_empty_result(self) -> None:
        result = bundle(self.root, Config())
        self.assertEqual(result.files, ())
        self.assertEqual(result.output, "## Files\n\n")

    def test_missing_root_raises(self) -> None:
        with self.assertRaises(InvalidRootError):
            bundle(self.root / "missing", Config())


if __name__ == "__main__":
    unittest.main()
