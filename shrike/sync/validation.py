"""
Filelist validation.

Checks the generated filelist before it is handed to rsync: absolute path
requirement, existence, readability, duplicate detection, and destination
availability. The report is advisory; it never filters the filelist.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from shrike.sync.exceptions import FilesystemError, SyncValidationError
from shrike.sync.types import (
    NOT_ABSOLUTE,
    NOT_FOUND,
    NOT_READABLE,
    VALID,
    PathValidation,
    ValidationReport,
)

logger = logging.getLogger(__name__)


def validate_path(path: str) -> PathValidation:
    """
    Validate a single path: must be absolute, must exist, must be readable.

    Checks run in that order and stop at the first failure.
    """
    if not path.startswith("/"):
        return PathValidation(NOT_ABSOLUTE, path)

    if not os.path.exists(path):
        return PathValidation(NOT_FOUND, path)

    # Readability is judged by whether metadata can be read
    try:
        os.stat(path)
    except OSError:
        return PathValidation(NOT_READABLE, path)

    return PathValidation(VALID, path)


def validate_filelist(paths: list[str]) -> ValidationReport:
    """
    Validate a list of paths, typically read back from the filelist.

    A path identical to one already seen is recorded as a duplicate and
    not classified again.
    """
    seen: set[str] = set()
    report = ValidationReport(total=len(paths))

    for path in paths:
        if path in seen:
            report.duplicates.append(path)
            continue
        seen.add(path)

        validation = validate_path(path)
        if validation.is_valid:
            report.valid_count += 1
        else:
            report.errors.append(validation)

    return report


def validate_destination(destination: str) -> None:
    """
    Ensure the destination directory exists, creating it if missing.

    Raises:
        SyncValidationError: If the destination exists but is not a directory
        FilesystemError: If the directory chain cannot be created
    """
    path = Path(destination)

    if path.exists():
        if not path.is_dir():
            raise SyncValidationError(f"destination is not a directory: {destination}")
        return

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Failed to create destination {destination}: {e}") from e

    logger.info(f"Created destination directory: {destination}")


def pre_sync_check(paths: list[str], destination: str) -> ValidationReport:
    """
    Run full pre-sync validation.

    Args:
        paths: Paths read back from the filelist
        destination: Computed destination directory

    Returns:
        The validation report. Invalid paths are reported, not removed.

    Raises:
        SyncValidationError: If there are no paths, or none of them is valid
    """
    if not paths:
        raise SyncValidationError("no entries to sync")

    report = validate_filelist(paths)

    if report.valid_count == 0:
        raise SyncValidationError(f"no valid paths to sync: {report.summary()}")

    if report.has_issues():
        logger.warning(f"Filelist validation: {report.summary()}")
        for error in report.errors:
            logger.debug(f"  {error.kind}: {error.path}")

    validate_destination(destination)

    return report
