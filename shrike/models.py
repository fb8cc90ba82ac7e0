import socket
import uuid

from django.db import models

from shrike.sync.destination import destination_path


class ItemType(models.TextChoices):
    FILE = "file", "File"
    DIRECTORY = "directory", "Directory"


def default_machine_name() -> str:
    # Host names may be dotted FQDNs; the first label is enough to tell machines apart
    return socket.gethostname().split(".")[0] or "localhost"


def default_webhook_token() -> str:
    return str(uuid.uuid4())


class BackupEntry(models.Model):
    """
    A single file or directory tracked for mirroring.

    Paths are stored canonicalized and absolute. See shrike/entries.py.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    path = models.TextField(unique=True)
    item_type = models.CharField(max_length=10, choices=ItemType.choices)
    added_at = models.DateTimeField(auto_now_add=True)
    last_synced = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["added_at", "id"]
        verbose_name_plural = "Backup entries"

    def __str__(self):
        return f"{self.path} ({self.get_item_type_display()})"


class AppSettings(models.Model):
    """
    Mirror settings. A single row, loaded with AppSettings.load().

    The webhook token is a shared secret; never log or echo it.
    """

    destination_root = models.TextField(
        blank=True,
        help_text="Base directory backups are written under, e.g. a cloud drive mount.",
    )
    backup_dir_name = models.CharField(max_length=255, default="ShrikeBackup")
    machine_name = models.CharField(max_length=255, default=default_machine_name)
    webhook_port = models.PositiveIntegerField(default=7022)
    webhook_token = models.CharField(max_length=255, default=default_webhook_token)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Settings"
        verbose_name_plural = "Settings"

    def __str__(self):
        return f"Settings ({self.destination_root or 'unconfigured'})"

    @classmethod
    def load(cls) -> "AppSettings":
        """Return the settings row, creating it with defaults on first use."""
        settings, _ = cls.objects.get_or_create(pk=1)
        return settings

    def destination_path(self) -> str:
        """Full rsync destination; raises ConfigurationError when unset or invalid."""
        return destination_path(self)
