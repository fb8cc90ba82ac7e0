"""Tests for rsync argument building, output parsing and execution."""

import shutil
import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from django.test import SimpleTestCase, override_settings

from shrike.sync.exceptions import RsyncError
from shrike.sync.executor import build_rsync_args, count_transferred_items, run_rsync

HAS_RSYNC = shutil.which("rsync") is not None


def completed(returncode=0, stdout=b"", stderr=b""):
    return subprocess.CompletedProcess(args=["rsync"], returncode=returncode, stdout=stdout, stderr=stderr)


class BuildRsyncArgsTests(SimpleTestCase):
    def test_correct_format(self):
        args = build_rsync_args("/tmp/filelist.txt", "/mnt/backup")
        self.assertEqual(args, ["-avrR", "--files-from=/tmp/filelist.txt", "/", "/mnt/backup/"])

    def test_recursive_flag_is_explicit(self):
        """--files-from disables -a's implied recursion, so -r must be present."""
        self.assertIn("r", build_rsync_args("/tmp/f.txt", "/dest")[0])

    def test_root_source(self):
        self.assertEqual(build_rsync_args("/tmp/f.txt", "/dest")[2], "/")

    def test_spaces_and_unicode(self):
        args = build_rsync_args("/tmp/my list.txt", "/mnt/我的云端硬盘/My Backup")
        self.assertEqual(args[1], "--files-from=/tmp/my list.txt")
        self.assertEqual(args[3], "/mnt/我的云端硬盘/My Backup/")


class CountTransferredItemsTests(SimpleTestCase):
    def test_files_and_dirs_with_header_and_summary(self):
        output = (
            "sending incremental file list\n"
            "home/me/project/\n"
            "home/me/project/a.txt\n"
            "home/me/project/src/\n"
            "home/me/project/src/b.py\n"
            "home/me/.zshrc\n"
            "\n"
            "sent 2,000 bytes  received 100 bytes  4,200.00 bytes/sec\n"
            "total size is 1,500  speedup is 0.71\n"
        )
        self.assertEqual(count_transferred_items(output), (3, 2))

    def test_empty_output(self):
        self.assertEqual(count_transferred_items(""), (0, 0))

    def test_no_transfers(self):
        output = (
            "sending incremental file list\n"
            "sent 100 bytes  received 20 bytes  240.00 bytes/sec\n"
            "total size is 0  speedup is 0.00\n"
        )
        self.assertEqual(count_transferred_items(output), (0, 0))

    def test_skips_dot_and_dotslash(self):
        output = "sending incremental file list\n./\n.\nhome/me/file.txt\n"
        self.assertEqual(count_transferred_items(output), (1, 0))

    def test_skips_building_line(self):
        output = "building file list ... done\nfile.txt\n"
        self.assertEqual(count_transferred_items(output), (1, 0))

    def test_whitespace_only_lines_skipped(self):
        output = "sending incremental file list\n  \n\t\nfile.txt\n\n"
        self.assertEqual(count_transferred_items(output), (1, 0))

    def test_repeated_lines_each_count(self):
        self.assertEqual(count_transferred_items("a.txt\na.txt\nd/\nd/\n"), (2, 2))


class RunRsyncTests(SimpleTestCase):
    @patch("shrike.sync.executor.subprocess.run")
    def test_success_parses_output(self, mock_run):
        mock_run.return_value = completed(stdout=b"sending incremental file list\ndir/\ndir/a.txt\n")

        result = run_rsync(["-avrR", "--files-from=/tmp/x", "/", "/dest/"])

        self.assertTrue(result.is_success())
        self.assertEqual(result.files_transferred, 1)
        self.assertEqual(result.dirs_transferred, 1)
        self.assertEqual(result.bytes_transferred, 0)
        self.assertIsNotNone(result.synced_at)
        self.assertEqual(mock_run.call_args[0][0], ["rsync", "-avrR", "--files-from=/tmp/x", "/", "/dest/"])

    @patch("shrike.sync.executor.subprocess.run")
    def test_stderr_on_zero_exit_is_success(self, mock_run):
        mock_run.return_value = completed(stderr=b"some warning\n")

        result = run_rsync([])

        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.stderr, "some warning\n")

    @patch("shrike.sync.executor.subprocess.run")
    def test_nonzero_exit_raises_with_code_and_stderr(self, mock_run):
        mock_run.return_value = completed(returncode=23, stderr=b"partial transfer")

        with self.assertRaises(RsyncError) as ctx:
            run_rsync([])

        self.assertEqual(ctx.exception.code, 23)
        self.assertEqual(ctx.exception.stderr, "partial transfer")
        self.assertEqual(str(ctx.exception), "rsync error (exit code 23): partial transfer")

    @patch("shrike.sync.executor.subprocess.run")
    def test_killed_by_signal_reports_minus_one(self, mock_run):
        mock_run.return_value = completed(returncode=-9)

        with self.assertRaises(RsyncError) as ctx:
            run_rsync([])

        self.assertEqual(ctx.exception.code, -1)

    @patch("shrike.sync.executor.subprocess.run", side_effect=FileNotFoundError("no rsync"))
    def test_missing_binary(self, mock_run):
        with self.assertRaises(RsyncError) as ctx:
            run_rsync([])

        self.assertEqual(ctx.exception.code, -1)

    @override_settings(SHRIKE_RSYNC_BINARY="/opt/bin/rsync")
    @patch("shrike.sync.executor.subprocess.run")
    def test_binary_from_settings(self, mock_run):
        mock_run.return_value = completed()
        run_rsync(["-avrR"])
        self.assertEqual(mock_run.call_args[0][0][0], "/opt/bin/rsync")

    @patch("shrike.sync.executor.subprocess.run")
    def test_invalid_utf8_output_is_replaced(self, mock_run):
        mock_run.return_value = completed(stdout=b"caf\xe9.txt\n")
        result = run_rsync([])
        self.assertEqual(result.files_transferred, 1)


@unittest.skipUnless(HAS_RSYNC, "rsync not installed")
class RunRsyncIntegrationTests(SimpleTestCase):
    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp()).resolve()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_real_file_transfer(self):
        source = self.temp_dir / "src" / "test.txt"
        source.parent.mkdir()
        source.write_text("rsync test content")
        listing = self.temp_dir / "list.txt"
        listing.write_text(f"{source}\n")
        dest = self.temp_dir / "dest"
        dest.mkdir()

        result = run_rsync(build_rsync_args(str(listing), str(dest)))

        self.assertTrue(result.is_success())
        self.assertGreaterEqual(result.files_transferred, 1)
        backup = Path(f"{dest}{source}")
        self.assertEqual(backup.read_text(), "rsync test content")

    def test_nonexistent_filelist_fails(self):
        with self.assertRaises(RsyncError):
            run_rsync(build_rsync_args("/nonexistent/filelist.txt", str(self.temp_dir)))
