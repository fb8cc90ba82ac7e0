"""
Filelist generation for rsync's --files-from mode.

Each entry path is written on its own line of a temporary file. The file
lives only as long as the returned handle: leaving its ``with`` block
deletes it.
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from shrike.sync.exceptions import FilesystemError

if TYPE_CHECKING:
    from shrike.models import BackupEntry

logger = logging.getLogger(__name__)


def generate_filelist(entries: Iterable[BackupEntry]):
    """
    Write all entry paths into a temporary file, one path per line.

    Paths are written in input order without sorting or filtering; an
    empty entry list produces an empty file.

    Args:
        entries: Entries (anything with a ``path`` attribute)

    Returns:
        An open NamedTemporaryFile. Keep it open for as long as rsync needs
        to read it; closing it removes the file.

    Raises:
        FilesystemError: If the temporary file cannot be created or written
    """
    try:
        handle = tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            prefix="shrike-filelist-",
            suffix=".txt",
        )
    except OSError as e:
        raise FilesystemError(f"Failed to create filelist: {e}") from e

    try:
        count = 0
        for entry in entries:
            handle.write(f"{entry.path}\n")
            count += 1
        handle.flush()
    except OSError as e:
        handle.close()
        raise FilesystemError(f"Failed to write filelist: {e}") from e
    except BaseException:
        handle.close()
        raise

    logger.debug(f"Wrote {count} paths to {handle.name}")
    return handle


def read_filelist(path: str | Path) -> list[str]:
    """
    Read a filelist back into a list of paths.

    Inverse of generate_filelist: only empty lines are dropped.

    Raises:
        FilesystemError: If the file cannot be read
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise FilesystemError(f"Failed to read filelist {path}: {e}") from e

    return [line for line in content.split("\n") if line]
