"""
rsync execution.

Builds the rsync argument vector, runs rsync, and parses its verbose
output into a SyncResult.
"""

from __future__ import annotations

import logging
import subprocess

from django.conf import settings
from django.utils import timezone

from shrike.sync.exceptions import RsyncError
from shrike.sync.types import SyncResult

logger = logging.getLogger(__name__)

# rsync -v status lines that are not transferred items
STATUS_PREFIXES = ("sending", "sent ", "total ", "building ")
ROOT_MARKERS = (".", "./")


def build_rsync_args(files_from_path: str, destination: str) -> list[str]:
    """
    Build the rsync arguments: ``-avrR --files-from=<list> / <destination>/``.

    The explicit -r is required: --files-from turns off the recursion that
    -a normally implies, and listed directories would be created empty.
    -R keeps each source's full path below the destination.
    """
    return [
        "-avrR",
        f"--files-from={files_from_path}",
        "/",
        f"{destination}/",
    ]


def count_transferred_items(stdout: str) -> tuple[int, int]:
    """
    Count transferred files and directories in rsync -v output.

    Directories are listed with a trailing "/", files without.

    Returns:
        Tuple of (files, dirs)
    """
    files = 0
    dirs = 0

    for line in stdout.splitlines():
        trimmed = line.strip()
        if not trimmed or trimmed.startswith(STATUS_PREFIXES) or trimmed in ROOT_MARKERS:
            continue

        if trimmed.endswith("/"):
            dirs += 1
        else:
            files += 1

    return files, dirs


def run_rsync(args: list[str]) -> SyncResult:
    """
    Run rsync synchronously and return a SyncResult.

    A zero exit code is success even when stderr carries warnings.

    Raises:
        RsyncError: If rsync exits non-zero or cannot be started
    """
    binary = getattr(settings, "SHRIKE_RSYNC_BINARY", "rsync")
    logger.debug(f"Running {binary} {' '.join(args)}")

    try:
        completed = subprocess.run([binary, *args], capture_output=True)
    except OSError as e:
        raise RsyncError(-1, f"failed to start {binary}: {e}") from e

    stdout = completed.stdout.decode("utf-8", errors="replace")
    stderr = completed.stderr.decode("utf-8", errors="replace")
    # Negative return codes mean the process was killed by a signal
    exit_code = completed.returncode if completed.returncode >= 0 else -1

    if exit_code != 0:
        logger.warning(f"rsync exited with code {exit_code}")
        raise RsyncError(exit_code, stderr)

    files, dirs = count_transferred_items(stdout)

    return SyncResult(
        files_transferred=files,
        dirs_transferred=dirs,
        bytes_transferred=0,
        stdout=stdout,
        stderr=stderr,
        exit_code=exit_code,
        synced_at=timezone.now(),
    )
