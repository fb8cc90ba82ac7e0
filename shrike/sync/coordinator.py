"""
Single-flight sync coordinator.

Every sync attempt, whether from the webhook, a management command or a
Celery task, goes through SyncCoordinator.execute. The coordinator owns a
RunningFlag; at most one pipeline invocation holds it at a time, across
processes sharing the lock file, and a second caller is turned away instead
of queued.
"""

from __future__ import annotations

import fcntl
import logging
import os
import tempfile
import threading
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from django.conf import settings

from shrike.sync.destination import destination_path
from shrike.sync.exceptions import FilesystemError, SyncInProgressError
from shrike.sync.executor import build_rsync_args, run_rsync
from shrike.sync.filelist import generate_filelist, read_filelist
from shrike.sync.types import SyncResult
from shrike.sync.validation import pre_sync_check

if TYPE_CHECKING:
    from shrike.models import AppSettings, BackupEntry

logger = logging.getLogger(__name__)


class RunningFlag:
    """
    Boolean guard with an atomic false -> true transition, shared by every
    process that points at the same lock file.

    Setting the flag takes a non-blocking exclusive flock on the lock file,
    so across the webhook server, Celery workers and management commands
    exactly one caller wins. The OS drops the lock if the holder dies.
    Within a process a thread lock is taken first, so two threads never
    race for the same file descriptor.
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path else default_lock_path()
        self._thread_lock = threading.Lock()
        self._fd: int | None = None

    def _open(self) -> int:
        try:
            return os.open(self.path, os.O_RDWR | os.O_CREAT, 0o644)
        except OSError as e:
            raise FilesystemError(f"Failed to open sync lock {self.path}: {e}") from e

    def try_acquire(self) -> bool:
        """Set the flag if it is clear. Returns False if it was already set."""
        if not self._thread_lock.acquire(blocking=False):
            return False

        try:
            fd = self._open()
        except FilesystemError:
            self._thread_lock.release()
            raise

        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError:
            os.close(fd)
            self._thread_lock.release()
            return False

        self._fd = fd
        return True

    def release(self) -> None:
        fd, self._fd = self._fd, None
        if fd is not None:
            fcntl.flock(fd, fcntl.LOCK_UN)
            os.close(fd)
        self._thread_lock.release()

    def is_set(self) -> bool:
        if self._thread_lock.locked():
            return True

        # Another process holds the exclusive lock iff a shared one is refused
        fd = self._open()
        try:
            fcntl.flock(fd, fcntl.LOCK_SH | fcntl.LOCK_NB)
        except OSError:
            return True
        else:
            fcntl.flock(fd, fcntl.LOCK_UN)
            return False
        finally:
            os.close(fd)


def default_lock_path() -> Path:
    """SHRIKE_LOCK_FILE, or a lock file in the system temp directory."""
    configured = getattr(settings, "SHRIKE_LOCK_FILE", None)
    if configured:
        return Path(configured)
    return Path(tempfile.gettempdir()) / "shrike-sync.lock"


class SyncCoordinator:
    """
    Runs the sync pipeline under the running flag.

    Pipeline: destination -> filelist -> read back -> pre-sync check ->
    rsync arguments -> rsync.
    """

    def __init__(self, flag: RunningFlag | None = None):
        self.flag = flag or RunningFlag()

    def is_running(self) -> bool:
        """
        Snapshot of the running flag for status reporting.

        Not synchronized with execute(); the answer may be stale by the
        time the caller uses it.
        """
        return self.flag.is_set()

    def execute(self, entries: Sequence[BackupEntry], settings: AppSettings) -> SyncResult:
        """
        Execute the full sync pipeline.

        Args:
            entries: Entries to mirror, in order
            settings: Settings providing the destination components

        Returns:
            SyncResult of the rsync run

        Raises:
            SyncInProgressError: If another sync is running
            ConfigurationError: If the destination is misconfigured
            SyncValidationError: If there is nothing valid to sync
            FilesystemError: If the filelist or destination cannot be handled
            RsyncError: If rsync exits non-zero
        """
        if not self.flag.try_acquire():
            logger.info("Sync requested while another sync is running")
            raise SyncInProgressError("sync already in progress")

        try:
            return self._run_pipeline(entries, settings)
        finally:
            self.flag.release()

    def _run_pipeline(self, entries: Sequence[BackupEntry], settings: AppSettings) -> SyncResult:
        try:
            destination = destination_path(settings)
            logger.info(f"Starting sync of {len(entries)} entries to {destination}")

            with generate_filelist(entries) as listing:
                paths = read_filelist(listing.name)
                pre_sync_check(paths, destination)

                args = build_rsync_args(listing.name, destination)
                result = run_rsync(args)
        except Exception as e:
            logger.error(f"Sync failed: {e}")
            raise

        logger.info(
            f"Sync completed: {result.files_transferred} files, "
            f"{result.dirs_transferred} directories"
        )
        if result.stderr:
            logger.warning(f"rsync reported warnings: {result.stderr.strip()}")

        return result


_default_coordinator: SyncCoordinator | None = None
_default_lock = threading.Lock()


def get_coordinator() -> SyncCoordinator:
    """Return the coordinator shared by every trigger in this process; the flag
    it holds also excludes other processes using the same lock file."""
    global _default_coordinator

    with _default_lock:
        if _default_coordinator is None:
            _default_coordinator = SyncCoordinator()
        return _default_coordinator
