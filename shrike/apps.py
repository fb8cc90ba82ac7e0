import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class ShrikeConfig(AppConfig):
    name = "shrike"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        """
        Run when Django app is ready.

        Creates the settings row (and with it the webhook token) when the
        server starts, so the token exists before the first request.
        """
        # Only run in the serving process (not in migrations, etc.)
        import sys
        if "runserver" not in sys.argv and "serve_webhook" not in sys.argv:
            return

        from django.db import DatabaseError

        from shrike.models import AppSettings
        from shrike.sync.exceptions import ConfigurationError

        try:
            settings = AppSettings.load()
            try:
                destination = settings.destination_path()
            except ConfigurationError as e:
                logger.warning(f"Sync destination is not usable yet: {e}")
            else:
                logger.info(f"Mirroring to {destination}")
        except DatabaseError as e:
            # Don't crash the server if the database is not migrated yet
            logger.error(f"Failed to load settings: {e}", exc_info=True)
