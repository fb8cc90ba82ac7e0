"""
Django management command to update mirror settings.
"""

from django.core.management.base import BaseCommand, CommandError

from shrike.models import AppSettings, default_webhook_token
from shrike.sync import ConfigurationError

FIELDS = ("destination_root", "backup_dir_name", "machine_name", "webhook_port")


class Command(BaseCommand):
    help = "Update mirror settings; the resulting destination must be valid"

    def add_arguments(self, parser):
        parser.add_argument("--destination-root", help="Base directory backups are written under")
        parser.add_argument("--backup-dir-name", help="Folder created under the destination root")
        parser.add_argument("--machine-name", help="Per-machine folder under the backup folder")
        parser.add_argument("--webhook-port", type=int, help="Port the webhook listens on")
        parser.add_argument(
            "--rotate-token",
            action="store_true",
            help="Replace the webhook token with a new random one",
        )

    def handle(self, *args, **options):
        settings = AppSettings.load()

        changed = [field for field in FIELDS if options[field] is not None]
        if not changed and not options["rotate_token"]:
            raise CommandError("Nothing to update. Pass at least one setting option.")

        for field in changed:
            setattr(settings, field, options[field])

        if not 1 <= settings.webhook_port <= 65535:
            raise CommandError(f"Invalid webhook port: {settings.webhook_port}")

        try:
            destination = settings.destination_path()
        except ConfigurationError as e:
            raise CommandError(f"Settings not saved: {e}")

        if options["rotate_token"]:
            settings.webhook_token = default_webhook_token()
            changed.append("webhook_token")

        settings.save()

        self.stdout.write(self.style.SUCCESS(f"✓ Updated {', '.join(changed)}"))
        self.stdout.write(f"Destination: {destination}")
        if options["rotate_token"]:
            self.stdout.write(self.style.WARNING("Webhook token rotated; run 'show_settings --show-token' to see it"))
