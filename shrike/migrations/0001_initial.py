import uuid

from django.db import migrations, models

import shrike.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AppSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "destination_root",
                    models.TextField(
                        blank=True,
                        help_text="Base directory backups are written under, e.g. a cloud drive mount.",
                    ),
                ),
                ("backup_dir_name", models.CharField(default="ShrikeBackup", max_length=255)),
                ("machine_name", models.CharField(default=shrike.models.default_machine_name, max_length=255)),
                ("webhook_port", models.PositiveIntegerField(default=7022)),
                ("webhook_token", models.CharField(default=shrike.models.default_webhook_token, max_length=255)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Settings",
                "verbose_name_plural": "Settings",
            },
        ),
        migrations.CreateModel(
            name="BackupEntry",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("path", models.TextField(unique=True)),
                (
                    "item_type",
                    models.CharField(
                        choices=[("file", "File"), ("directory", "Directory")],
                        max_length=10,
                    ),
                ),
                ("added_at", models.DateTimeField(auto_now_add=True)),
                ("last_synced", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "verbose_name_plural": "Backup entries",
                "ordering": ["added_at", "id"],
            },
        ),
    ]
