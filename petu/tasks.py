import logging

from petu.core.celery_config import celery_app
from petu.storage import open_store

logger = logging.getLogger(__name__)


@celery_app.task(bind=True)
def notify_host_task(self, request_id):
    """Tell the host that someone asked to join an approval-required event."""
    with open_store() as store:
        info = store.mark_request_notified(request_id)

    if info is None:
        logger.warning("Join request %s disappeared before notification", request_id)
        return None

    logger.info(
        "Notifying host %s: new join request %s for '%s'",
        info["host_name"] or "(unknown)",
        info["request_id"],
        info["event_title"],
    )
    return info
