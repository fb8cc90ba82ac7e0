"""
Exceptions for sync operations.
"""


class SyncError(Exception):
    """Base exception for sync operations."""

    pass


class ConfigurationError(SyncError):
    """Destination components are unset or not a single path component."""

    pass


class SyncValidationError(SyncError):
    """Nothing to sync (no entries, no valid paths, unusable destination)."""

    pass


class RsyncError(SyncError):
    """rsync exited with a non-zero status."""

    def __init__(self, code: int, stderr: str):
        self.code = code
        self.stderr = stderr
        super().__init__(f"rsync error (exit code {code}): {stderr}")


class SyncInProgressError(SyncError):
    """Another sync holds the running flag."""

    pass


class UnauthorizedError(SyncError):
    """Missing or mismatched webhook credential."""

    pass


class StoreError(SyncError):
    """Failed to read settings or entries from the store."""

    pass


class FilesystemError(SyncError):
    """Filesystem failure while handling the filelist or destination."""

    pass
