"""
Adding, removing and listing backup entries.

Entries are stored by canonical absolute path. This is the only place
uniqueness is enforced; the sync pipeline just reports duplicates.
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from django.db import IntegrityError, transaction

from shrike.models import BackupEntry, ItemType

logger = logging.getLogger(__name__)


class EntryError(Exception):
    """Base exception for entry management."""

    pass


class PathNotFoundError(EntryError):
    """Path does not exist or cannot be resolved."""

    pass


class DuplicateEntryError(EntryError):
    """Path is already tracked."""

    pass


class EntryNotFoundError(EntryError):
    """No entry with the given id."""

    pass


def detect_item_type(path: Path) -> str:
    """Classify an existing path; symlinks are judged by their target."""
    return ItemType.DIRECTORY if path.is_dir() else ItemType.FILE


def add_entry(path: str) -> BackupEntry:
    """
    Track a file or directory for mirroring.

    Args:
        path: Path to add; relative paths and symlinks are resolved

    Returns:
        The new BackupEntry

    Raises:
        PathNotFoundError: If the path does not exist
        DuplicateEntryError: If the canonical path is already tracked
    """
    try:
        canonical = Path(path).expanduser().resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise PathNotFoundError(f"path does not exist: {path}") from e

    canonical_str = str(canonical)

    if BackupEntry.objects.filter(path=canonical_str).exists():
        raise DuplicateEntryError(f"duplicate entry: {canonical_str}")

    try:
        with transaction.atomic():
            entry = BackupEntry.objects.create(
                path=canonical_str,
                item_type=detect_item_type(canonical),
            )
    except IntegrityError as e:
        # Lost a race with a concurrent add of the same path
        raise DuplicateEntryError(f"duplicate entry: {canonical_str}") from e

    logger.info(f"Added entry: {canonical_str} ({entry.item_type})")
    return entry


def remove_entry(entry_id: str) -> None:
    """
    Stop tracking an entry.

    Raises:
        EntryNotFoundError: If the id is malformed or unknown
    """
    try:
        uid = uuid.UUID(str(entry_id))
    except ValueError as e:
        raise EntryNotFoundError(f"entry not found: {entry_id}") from e

    deleted, _ = BackupEntry.objects.filter(pk=uid).delete()
    if not deleted:
        raise EntryNotFoundError(f"entry not found: {entry_id}")

    logger.info(f"Removed entry {uid}")


def list_entries() -> list[BackupEntry]:
    """All entries in the order they were added."""
    return list(BackupEntry.objects.all())
