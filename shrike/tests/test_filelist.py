"""Tests for filelist generation."""

import os
import tempfile
from pathlib import Path
from unittest.mock import MagicMock, patch

from django.test import SimpleTestCase

from shrike.models import BackupEntry, ItemType
from shrike.sync.exceptions import FilesystemError
from shrike.sync.filelist import generate_filelist, read_filelist


def make_entries(*paths):
    return [BackupEntry(path=path, item_type=ItemType.FILE) for path in paths]


class GenerateFilelistTests(SimpleTestCase):
    def test_writes_all_paths(self):
        entries = make_entries("/etc/hosts", "/tmp", "/home/user/.zshrc")
        with generate_filelist(entries) as listing:
            contents = Path(listing.name).read_text(encoding="utf-8")

        self.assertEqual(contents, "/etc/hosts\n/tmp\n/home/user/.zshrc\n")

    def test_empty_entries_produce_empty_file(self):
        with generate_filelist([]) as listing:
            self.assertEqual(Path(listing.name).read_text(), "")

    def test_preserves_order_without_sorting(self):
        entries = make_entries("/z", "/a", "/m", "/a")
        with generate_filelist(entries) as listing:
            lines = Path(listing.name).read_text().splitlines()

        self.assertEqual(lines, ["/z", "/a", "/m", "/a"])

    def test_unicode_and_spaces(self):
        entries = make_entries("/home/me/我的文件/笔记.md", "/home/me/My Documents/file name.txt")
        with generate_filelist(entries) as listing:
            contents = Path(listing.name).read_text(encoding="utf-8")

        self.assertIn("我的文件/笔记.md", contents)
        self.assertIn("My Documents/file name.txt", contents)

    def test_file_removed_when_handle_closes(self):
        with generate_filelist(make_entries("/a")) as listing:
            name = listing.name
            self.assertTrue(os.path.exists(name))

        self.assertFalse(os.path.exists(name))

    def test_file_removed_on_exception(self):
        """The listing must not outlive a failing pipeline."""
        name = None
        with self.assertRaises(RuntimeError):
            with generate_filelist(make_entries("/a")) as listing:
                name = listing.name
                raise RuntimeError("boom")

        self.assertFalse(os.path.exists(name))

    def test_file_removed_when_writing_fails(self):
        """A bad entry part-way through closes and removes the listing."""
        created = []
        real_named_temporary_file = tempfile.NamedTemporaryFile

        def capture(*args, **kwargs):
            handle = real_named_temporary_file(*args, **kwargs)
            created.append(handle)
            return handle

        entries = make_entries("/a") + [object()]
        with patch("shrike.sync.filelist.tempfile.NamedTemporaryFile", side_effect=capture):
            with self.assertRaises(AttributeError):
                generate_filelist(entries)

        self.assertEqual(len(created), 1)
        self.assertTrue(created[0].closed)
        self.assertFalse(os.path.exists(created[0].name))

    def test_write_error_becomes_filesystem_error(self):
        created = []
        real_named_temporary_file = tempfile.NamedTemporaryFile

        def failing(*args, **kwargs):
            handle = real_named_temporary_file(*args, **kwargs)
            created.append(handle)
            handle.flush = MagicMock(side_effect=OSError("No space left on device"))
            return handle

        with patch("shrike.sync.filelist.tempfile.NamedTemporaryFile", side_effect=failing):
            with self.assertRaises(FilesystemError) as ctx:
                generate_filelist(make_entries("/a"))

        self.assertIn("No space left on device", str(ctx.exception))
        self.assertTrue(created[0].closed)


class ReadFilelistTests(SimpleTestCase):
    def test_roundtrip(self):
        paths = ["/a", "/b", "/c"]
        with generate_filelist(make_entries(*paths)) as listing:
            self.assertEqual(read_filelist(listing.name), paths)

    def test_empty_file(self):
        with generate_filelist([]) as listing:
            self.assertEqual(read_filelist(listing.name), [])

    def test_skips_blank_lines(self):
        with tempfile.NamedTemporaryFile("w", suffix=".txt") as f:
            f.write("/a\n\n/b\n\n\n/c\n")
            f.flush()
            self.assertEqual(read_filelist(f.name), ["/a", "/b", "/c"])

    def test_nonexistent_file_errors(self):
        with self.assertRaises(FilesystemError):
            read_filelist("/nonexistent/filelist-abc123.txt")
