"""
Sync pipeline: filelist generation -> validation -> rsync execution.
"""

from shrike.sync.coordinator import RunningFlag, SyncCoordinator, get_coordinator
from shrike.sync.destination import destination_path
from shrike.sync.exceptions import (
    ConfigurationError,
    FilesystemError,
    RsyncError,
    StoreError,
    SyncError,
    SyncInProgressError,
    SyncValidationError,
    UnauthorizedError,
)
from shrike.sync.types import PathValidation, SyncResult, ValidationReport

__all__ = [
    "SyncCoordinator",
    "RunningFlag",
    "get_coordinator",
    "destination_path",
    "SyncResult",
    "ValidationReport",
    "PathValidation",
    "SyncError",
    "ConfigurationError",
    "SyncValidationError",
    "RsyncError",
    "SyncInProgressError",
    "UnauthorizedError",
    "StoreError",
    "FilesystemError",
]
