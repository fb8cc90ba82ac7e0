"""
Destination path computation.

The destination is <root>/<backup folder>/<machine name>. It is computed
from the current settings on every call so that configuration changes
take effect on the next sync.
"""

from __future__ import annotations

import os
from pathlib import PurePosixPath, PureWindowsPath
from typing import TYPE_CHECKING

from shrike.sync.exceptions import ConfigurationError

if TYPE_CHECKING:
    from shrike.models import AppSettings

SEPARATORS = ("/", "\\")


def _check_component(label: str, value: str) -> None:
    """
    Require a single, normal path component.

    Raises:
        ConfigurationError: If the value is empty, contains a separator,
            or is "." / ".."
    """
    if not value:
        raise ConfigurationError(f"{label} is not configured")

    if any(sep in value for sep in SEPARATORS):
        raise ConfigurationError(f"{label} contains path separators: {value!r}")

    if value in (".", ".."):
        raise ConfigurationError(f"{label} is an invalid path component: {value!r}")

    # Drive prefixes such as "C:x" split into more than one component
    if len(PurePosixPath(value).parts) != 1 or len(PureWindowsPath(value).parts) != 1:
        raise ConfigurationError(f"{label} contains path separators: {value!r}")


def destination_path(settings: AppSettings) -> str:
    """
    Compute the full rsync destination for the given settings.

    Args:
        settings: Anything with destination_root, backup_dir_name and
            machine_name attributes

    Returns:
        root + separator + backup folder + separator + machine name

    Raises:
        ConfigurationError: If any component is unset or invalid
    """
    root = settings.destination_root
    if not root:
        raise ConfigurationError("destination root is not configured")

    _check_component("backup folder name", settings.backup_dir_name)
    _check_component("machine name", settings.machine_name)

    return f"{root}{os.sep}{settings.backup_dir_name}{os.sep}{settings.machine_name}"
