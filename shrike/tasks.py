"""
Celery tasks for mirror operations.

sync_entries_task is the scheduled local trigger. It goes through the same
coordinator as the webhook, so it is turned away while any other sync holds the
lock file. It never retries; the next scheduled run is the
retry.
"""

import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task
def sync_entries_task():
    """
    Mirror all tracked entries.

    Returns:
        Dict with "status" of completed, skipped or failed
    """
    from shrike.store import DjangoStore
    from shrike.sync import SyncError, SyncInProgressError, get_coordinator

    store = DjangoStore()

    try:
        settings = store.load_settings()
        entries = store.load_items()
    except SyncError as e:
        logger.error(f"Scheduled sync could not load data: {e}")
        return {"status": "failed", "error": str(e)}

    if not entries:
        logger.info("No entries to sync")
        return {"status": "skipped", "reason": "no_entries"}

    logger.info(f"Starting scheduled sync of {len(entries)} entries")

    try:
        result = get_coordinator().execute(entries, settings)
    except SyncInProgressError:
        logger.info("Scheduled sync skipped: another sync is running")
        return {"status": "skipped", "reason": "already_running"}
    except SyncError as e:
        logger.error(f"Scheduled sync failed: {e}")
        return {"status": "failed", "error": str(e)}

    try:
        store.mark_synced(entries, result.synced_at)
    except SyncError as e:
        logger.warning(f"Failed to record sync time: {e}")

    return {"status": "completed", **result.to_dict()}
