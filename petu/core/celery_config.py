from celery import Celery

from petu.core.config import settings
from petu.core.redis_config import get_redis_url


def make_celery(app_name: str = settings.APP_NAME) -> Celery:
    """Celery app for background work; host notifications get their own queue."""
    broker_url = settings.CELERY_BROKER_URL or get_redis_url()
    result_backend = settings.CELERY_RESULT_BACKEND or broker_url
    celery = Celery(app_name, broker=broker_url, backend=result_backend, include=["petu.tasks"])
    celery.conf.update(
        task_serializer="json",
        result_serializer="json",
        accept_content=["json"],
        result_expires=3600,
        task_acks_late=True,
        task_routes={"petu.tasks.notify_host_task": {"queue": settings.NOTIFICATIONS_QUEUE}},
    )
    return celery


celery_app = make_celery()
