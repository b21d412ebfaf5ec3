import logging
from typing import Optional

import redis

from petu.core.config import settings
from petu.core.exceptions import JoinBusyError
from petu.core.redis_config import get_redis_client
from petu.storage.base import EventStore, JoinOutcome

logger = logging.getLogger(__name__)


def _locked(event_id, fn, *args) -> JoinOutcome:
    """
    Run ``fn`` while holding the per-event Redis lock, so that only one
    join for a given event touches the participant count at a time.
    """
    redis_client = get_redis_client()
    lock_key = f"event_lock:{event_id}"
    lock = redis_client.lock(
        lock_key,
        timeout=settings.JOIN_LOCK_TIMEOUT,
        blocking_timeout=settings.JOIN_LOCK_BLOCKING_TIMEOUT,
    )

    try:
        if not lock.acquire(blocking=True, blocking_timeout=settings.JOIN_LOCK_BLOCKING_TIMEOUT):
            raise JoinBusyError(event_id)
        try:
            return fn(*args)
        finally:
            lock.release()
    except redis.exceptions.LockError:  # type: ignore
        raise JoinBusyError(event_id)


def enqueue_host_notification(request_id) -> None:
    from petu.tasks import notify_host_task

    try:
        notify_host_task.delay(request_id)
    except Exception:
        # the join request is already stored; the host sees it on the next poll
        logger.warning("Could not enqueue host notification for request %s", request_id, exc_info=True)


def join_event(store: EventStore, event_id, user_id: Optional[int | str] = None) -> JoinOutcome:
    outcome = _locked(event_id, store.join_event, event_id, user_id)
    if outcome.request_id is not None:
        logger.info("Join request %s filed for event %s", outcome.request_id, event_id)
        enqueue_host_notification(outcome.request_id)
    else:
        logger.info(
            "Participant joined event %s (%s/%s)",
            event_id,
            outcome.event.current_players if outcome.event else "?",
            outcome.event.max_players if outcome.event else "?",
        )
    return outcome


def approve_join_request(store: EventStore, event_id, request_id) -> JoinOutcome:
    outcome = _locked(event_id, store.approve_join_request, event_id, request_id)
    logger.info("Join request %s approved for event %s", request_id, event_id)
    return outcome
