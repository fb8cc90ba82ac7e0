"""
Django management command to stop tracking an entry.
"""

from django.core.management.base import BaseCommand, CommandError

from shrike.entries import EntryNotFoundError, remove_entry


class Command(BaseCommand):
    help = "Remove an entry from the backup list by id"

    def add_arguments(self, parser):
        parser.add_argument(
            "entry_id",
            help="Entry id, as shown by list_entries",
        )

    def handle(self, *args, **options):
        try:
            remove_entry(options["entry_id"])
        except EntryNotFoundError as e:
            raise CommandError(str(e))

        self.stdout.write(self.style.SUCCESS(f"✓ Removed entry {options['entry_id']}"))
