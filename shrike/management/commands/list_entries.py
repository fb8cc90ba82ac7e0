"""
Django management command to list tracked entries.
"""

import json

from django.core.management.base import BaseCommand

from shrike.entries import list_entries


class Command(BaseCommand):
    help = "List all tracked entries with their last sync time"

    def add_arguments(self, parser):
        parser.add_argument(
            "--json",
            action="store_true",
            help="Output as JSON",
        )

    def handle(self, *args, **options):
        entries = list_entries()

        if not entries:
            self.stdout.write(self.style.WARNING("No entries found."))
            self.stdout.write("\nRun 'python manage.py add_entry <path>' to track a file or directory")
            return

        if options["json"]:
            self._output_json(entries)
        else:
            self._output_table(entries)

    def _output_table(self, entries):
        """Output entries as formatted table."""
        self.stdout.write("\n" + "=" * 100)
        self.stdout.write(f"{'ID':<36}  {'Type':<9}  {'Last Sync':<16}  Path")
        self.stdout.write("=" * 100)

        for entry in entries:
            last_sync = entry.last_synced.strftime("%Y-%m-%d %H:%M") if entry.last_synced else "never"
            self.stdout.write(f"{str(entry.id):<36}  {entry.item_type:<9}  {last_sync:<16}  {entry.path}")

        self.stdout.write("=" * 100)
        self.stdout.write(f"Total: {len(entries)} entry(ies)\n")

    def _output_json(self, entries):
        """Output entries as JSON."""
        data = [
            {
                "id": str(entry.id),
                "path": entry.path,
                "item_type": entry.item_type,
                "added_at": entry.added_at.isoformat(),
                "last_synced": entry.last_synced.isoformat() if entry.last_synced else None,
            }
            for entry in entries
        ]
        self.stdout.write(json.dumps(data, indent=2))
