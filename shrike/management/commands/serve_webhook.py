"""
Django management command to serve the webhook on the configured port.
"""

from django.core.management import call_command
from django.core.management.base import BaseCommand

from shrike.models import AppSettings


class Command(BaseCommand):
    help = "Serve the status/sync webhook on 127.0.0.1:<webhook_port>"

    def add_arguments(self, parser):
        parser.add_argument(
            "--port",
            type=int,
            help="Override the port from settings",
        )

    def handle(self, *args, **options):
        port = options["port"] or AppSettings.load().webhook_port
        self.stdout.write(f"Webhook listening on 127.0.0.1:{port}")
        # Threaded so a running sync does not block status requests
        call_command("runserver", f"127.0.0.1:{port}", use_reloader=False, use_threading=True)
