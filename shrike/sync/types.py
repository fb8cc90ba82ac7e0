"""
Value types produced by the sync pipeline.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime

VALID = "valid"
NOT_ABSOLUTE = "not_absolute"
NOT_FOUND = "not_found"
NOT_READABLE = "not_readable"


@dataclass(frozen=True)
class PathValidation:
    """Outcome of checking a single filelist path."""

    kind: str
    path: str

    @property
    def is_valid(self) -> bool:
        return self.kind == VALID


@dataclass
class ValidationReport:
    """Result of validating an entire filelist."""

    total: int = 0
    valid_count: int = 0
    errors: list[PathValidation] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)

    def is_ok(self) -> bool:
        """True if every path is valid and nothing is repeated."""
        return not self.errors and not self.duplicates

    def has_issues(self) -> bool:
        return not self.is_ok()

    def summary(self) -> str:
        """
        Format a human-readable summary of validation issues.

        Returns:
            e.g. "1/3 paths valid; issues: 1 not found, 1 duplicates"
        """
        if self.is_ok():
            return f"all {self.total} paths validated successfully"

        counts = Counter(error.kind for error in self.errors)
        parts = []
        for kind, label in (
            (NOT_FOUND, "not found"),
            (NOT_READABLE, "not readable"),
            (NOT_ABSOLUTE, "not absolute"),
        ):
            if counts[kind]:
                parts.append(f"{counts[kind]} {label}")

        if self.duplicates:
            parts.append(f"{len(self.duplicates)} duplicates")

        return f"{self.valid_count}/{self.total} paths valid; issues: {', '.join(parts)}"


@dataclass
class SyncResult:
    """Summary of a completed rsync run."""

    files_transferred: int = 0
    dirs_transferred: int = 0
    # rsync -v does not report per-run byte totals in a stable format
    bytes_transferred: int = 0
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    synced_at: datetime | None = None

    def is_success(self) -> bool:
        return self.exit_code == 0

    def to_dict(self) -> dict:
        """JSON-ready representation used by the webhook and the Celery task."""
        return {
            "files_transferred": self.files_transferred,
            "dirs_transferred": self.dirs_transferred,
            "bytes_transferred": self.bytes_transferred,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "exit_code": self.exit_code,
            "synced_at": self.synced_at.isoformat() if self.synced_at else None,
        }
