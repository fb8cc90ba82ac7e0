"""
Webhook views for triggering and monitoring syncs remotely.

Both endpoints require ``Authorization: Bearer <token>`` matching the
shared secret in the settings row. Requests are served on Django's worker
threads, so running rsync synchronously inside the view is acceptable.
"""

from __future__ import annotations

import hmac
import logging

from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from shrike.store import DjangoStore, EntryStore
from shrike.sync import destination_path, get_coordinator
from shrike.sync.coordinator import SyncCoordinator
from shrike.sync.exceptions import SyncError, UnauthorizedError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def _error(message: str, status: int) -> JsonResponse:
    return JsonResponse({"error": message}, status=status)


def check_bearer_token(header: str | None, expected_token: str) -> None:
    """
    Validate an Authorization header against the shared secret.

    Raises:
        UnauthorizedError: If the header is missing, uses another scheme,
            or carries a different token. An empty secret authorizes nothing.
    """
    if not header or not header.startswith(BEARER_PREFIX) or not expected_token:
        raise UnauthorizedError("unauthorized")

    try:
        # WSGI headers arrive latin-1 decoded; this restores the raw bytes
        presented = header[len(BEARER_PREFIX):].encode("latin-1")
    except UnicodeEncodeError:
        raise UnauthorizedError("unauthorized")

    if not hmac.compare_digest(presented, expected_token.encode("utf-8")):
        raise UnauthorizedError("unauthorized")


class WebhookGateway:
    """
    HTTP surface over the sync coordinator.

    GET status reports whether a sync is running, how many entries are
    tracked and where they go. POST sync runs a sync and returns its result.
    """

    def __init__(self, store: EntryStore, coordinator: SyncCoordinator | None = None):
        self.store = store
        self.coordinator = coordinator or get_coordinator()

    def _authorize(self, request: HttpRequest) -> None:
        expected = self.store.load_token()
        try:
            check_bearer_token(request.headers.get("Authorization"), expected)
        except UnauthorizedError:
            logger.warning(f"Rejected unauthorized {request.method} {request.path}")
            raise

    @method_decorator(require_GET)
    def status(self, request: HttpRequest) -> JsonResponse:
        try:
            self._authorize(request)
            settings = self.store.load_settings()
            entries = self.store.load_items()
            destination = destination_path(settings)
            running = self.coordinator.is_running()
        except UnauthorizedError:
            return _error("unauthorized", 401)
        except SyncError as e:
            return _error(str(e), 500)
        except Exception as e:
            logger.error(f"Status request failed: {e}", exc_info=True)
            return _error(str(e), 500)

        return JsonResponse(
            {
                "status": "running" if running else "idle",
                "entries_count": len(entries),
                "destination": destination,
            }
        )

    @method_decorator(csrf_exempt)
    @method_decorator(require_POST)
    def sync(self, request: HttpRequest) -> JsonResponse:
        try:
            self._authorize(request)
            settings = self.store.load_settings()
            entries = self.store.load_items()
        except UnauthorizedError:
            return _error("unauthorized", 401)
        except SyncError as e:
            return _error(str(e), 500)
        except Exception as e:
            logger.error(f"Sync request failed: {e}", exc_info=True)
            return _error(str(e), 500)

        if not entries:
            return _error("no entries to sync", 400)

        logger.info(f"Webhook triggered sync of {len(entries)} entries")

        try:
            result = self.coordinator.execute(entries, settings)
        except SyncError as e:
            return _error(str(e), 500)
        except Exception as e:
            logger.error(f"Webhook sync failed: {e}", exc_info=True)
            return _error(str(e), 500)

        try:
            self.store.mark_synced(entries, result.synced_at)
        except Exception as e:
            logger.warning(f"Failed to record sync time: {e}")

        return JsonResponse(result.to_dict())


gateway = WebhookGateway(DjangoStore())
