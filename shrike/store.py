"""
Storage capability consumed by the webhook and the local triggers.

The webhook depends only on the EntryStore protocol. DjangoStore is the
production adapter over the ORM; InMemoryStore backs tests.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from django.db import DatabaseError

from shrike.models import AppSettings, BackupEntry
from shrike.sync.exceptions import StoreError

logger = logging.getLogger(__name__)


class EntryStore(Protocol):
    def load_token(self) -> str:
        """Return the webhook shared secret ("" when none is configured)."""
        ...

    def load_settings(self) -> AppSettings:
        ...

    def load_items(self) -> list[BackupEntry]:
        ...

    def mark_synced(self, entries: Sequence[BackupEntry], synced_at: datetime) -> None:
        ...


class DjangoStore:
    """EntryStore backed by the AppSettings and BackupEntry tables."""

    def load_token(self) -> str:
        try:
            token = (
                AppSettings.objects.filter(pk=1)
                .values_list("webhook_token", flat=True)
                .first()
            )
        except DatabaseError as e:
            raise StoreError(f"Failed to load webhook token: {e}") from e
        return token or ""

    def load_settings(self) -> AppSettings:
        try:
            return AppSettings.load()
        except DatabaseError as e:
            raise StoreError(f"Failed to load settings: {e}") from e

    def load_items(self) -> list[BackupEntry]:
        try:
            return list(BackupEntry.objects.all())
        except DatabaseError as e:
            raise StoreError(f"Failed to load entries: {e}") from e

    def mark_synced(self, entries: Sequence[BackupEntry], synced_at: datetime) -> None:
        ids = [entry.pk for entry in entries]
        try:
            updated = BackupEntry.objects.filter(pk__in=ids).update(last_synced=synced_at)
        except DatabaseError as e:
            raise StoreError(f"Failed to record sync time: {e}") from e
        logger.debug(f"Marked {updated} entries as synced at {synced_at.isoformat()}")


class InMemoryStore:
    """
    EntryStore holding settings and entries in memory.

    Pass an exception as settings_error / items_error to make the
    corresponding load fail with it.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        entries: Sequence[BackupEntry] = (),
        settings_error: Exception | None = None,
        items_error: Exception | None = None,
    ):
        self.settings = settings or AppSettings()
        self.entries = list(entries)
        self.settings_error = settings_error
        self.items_error = items_error
        self.settings_loads = 0
        self.items_loads = 0

    def load_token(self) -> str:
        return self.settings.webhook_token or ""

    def load_settings(self) -> AppSettings:
        self.settings_loads += 1
        if self.settings_error:
            raise self.settings_error
        return self.settings

    def load_items(self) -> list[BackupEntry]:
        self.items_loads += 1
        if self.items_error:
            raise self.items_error
        return list(self.entries)

    def mark_synced(self, entries: Sequence[BackupEntry], synced_at: datetime) -> None:
        for entry in entries:
            entry.last_synced = synced_at
