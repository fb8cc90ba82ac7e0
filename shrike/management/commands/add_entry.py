"""
Django management command to track files or directories for mirroring.
"""

from django.core.management.base import BaseCommand, CommandError

from shrike.entries import EntryError, add_entry


class Command(BaseCommand):
    help = "Add files or directories to the backup list"

    def add_arguments(self, parser):
        parser.add_argument(
            "paths",
            nargs="+",
            help="Paths to add (resolved to absolute paths)",
        )

    def handle(self, *args, **options):
        failures = 0

        for path in options["paths"]:
            try:
                entry = add_entry(path)
            except EntryError as e:
                self.stderr.write(self.style.ERROR(f"✗ {e}"))
                failures += 1
                continue

            self.stdout.write(self.style.SUCCESS(f"✓ Added {entry.item_type}: {entry.path}"))

        if failures:
            raise CommandError(f"{failures} path(s) could not be added")
