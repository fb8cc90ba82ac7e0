"""
Django management command to show mirror settings.
"""

import json

from django.core.management.base import BaseCommand

from shrike.models import AppSettings
from shrike.sync import ConfigurationError


def mask_token(token: str) -> str:
    if len(token) <= 8:
        return "*" * len(token)
    return f"{token[:4]}{'*' * (len(token) - 8)}{token[-4:]}"


class Command(BaseCommand):
    help = "Show mirror settings and the computed destination"

    def add_arguments(self, parser):
        parser.add_argument(
            "--json",
            action="store_true",
            help="Output as JSON",
        )
        parser.add_argument(
            "--show-token",
            action="store_true",
            help="Print the webhook token in full",
        )

    def handle(self, *args, **options):
        settings = AppSettings.load()

        try:
            destination = settings.destination_path()
            destination_error = None
        except ConfigurationError as e:
            destination = None
            destination_error = str(e)

        token = settings.webhook_token if options["show_token"] else mask_token(settings.webhook_token)

        data = {
            "destination_root": settings.destination_root,
            "backup_dir_name": settings.backup_dir_name,
            "machine_name": settings.machine_name,
            "destination": destination,
            "webhook_port": settings.webhook_port,
            "webhook_token": token,
        }

        if options["json"]:
            if destination_error:
                data["destination_error"] = destination_error
            self.stdout.write(json.dumps(data, indent=2))
            return

        for key, value in data.items():
            if key == "destination" and destination_error:
                self.stdout.write(f"{key:<18} " + self.style.ERROR(destination_error))
            else:
                self.stdout.write(f"{key:<18} {value}")
