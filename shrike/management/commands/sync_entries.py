"""
Django management command to mirror all tracked entries now.
"""

from django.core.management.base import BaseCommand, CommandError

from shrike.store import DjangoStore
from shrike.sync import SyncError, get_coordinator
from shrike.sync.filelist import generate_filelist, read_filelist
from shrike.sync.validation import validate_filelist


class Command(BaseCommand):
    help = "Mirror all tracked entries to the backup destination with rsync"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Validate the entries and destination without running rsync",
        )

    def handle(self, *args, **options):
        store = DjangoStore()

        try:
            settings = store.load_settings()
            entries = store.load_items()
        except SyncError as e:
            raise CommandError(str(e))

        if not entries:
            raise CommandError("No entries to sync. Add some with 'python manage.py add_entry <path>'")

        try:
            destination = settings.destination_path()
        except SyncError as e:
            raise CommandError(str(e))

        self.stdout.write(f"Syncing {len(entries)} entries to {destination}")

        if options["dry_run"]:
            self._dry_run(entries)
            return

        try:
            result = get_coordinator().execute(entries, settings)
        except SyncError as e:
            self.stdout.write(self.style.ERROR(f"\n✗ Sync failed: {e}"))
            raise CommandError(f"Sync failed: {e}")

        try:
            store.mark_synced(entries, result.synced_at)
        except SyncError as e:
            self.stdout.write(self.style.WARNING(f"Could not record sync time: {e}"))

        self.stdout.write(
            self.style.SUCCESS(
                f"\n✓ Sync completed successfully:\n"
                f"  - Files transferred: {result.files_transferred}\n"
                f"  - Directories transferred: {result.dirs_transferred}\n"
                f"  - Exit code: {result.exit_code}"
            )
        )

        if result.stderr.strip():
            self.stdout.write(self.style.WARNING("\n⚠ rsync reported warnings:"))
            for line in result.stderr.strip().splitlines()[:5]:
                self.stdout.write(f"  {line}")

    def _dry_run(self, entries):
        """Report what validation would say, without touching the destination."""
        try:
            with generate_filelist(entries) as listing:
                paths = read_filelist(listing.name)
        except SyncError as e:
            raise CommandError(str(e))

        report = validate_filelist(paths)
        style = self.style.SUCCESS if report.is_ok() else self.style.WARNING
        self.stdout.write(style(report.summary()))

        for error in report.errors:
            self.stdout.write(f"  {error.kind}: {error.path}")
        for path in report.duplicates:
            self.stdout.write(f"  duplicate: {path}")
