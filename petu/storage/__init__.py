from contextlib import contextmanager
from typing import Iterator

from fastapi import Depends
from sqlalchemy.orm import Session

from petu.core.config import settings
from petu.database.db import SessionLocal, get_db
from petu.storage.base import AuthResult, EventStore, JoinOutcome
from petu.storage.hosted import HostedEventStore, make_hosted_client
from petu.storage.sql import SqlEventStore

__all__ = [
    "AuthResult",
    "EventStore",
    "HostedEventStore",
    "JoinOutcome",
    "SqlEventStore",
    "get_store",
    "open_store",
]


def get_store(db: Session = Depends(get_db)) -> Iterator[EventStore]:
    """Request dependency returning the configured storage backend."""
    if settings.STORAGE_BACKEND == "hosted":
        with make_hosted_client() as client:
            yield HostedEventStore(client)
    else:
        yield SqlEventStore(db)


@contextmanager
def open_store() -> Iterator[EventStore]:
    """Storage for code running outside a request, such as Celery tasks."""
    if settings.STORAGE_BACKEND == "hosted":
        with make_hosted_client() as client:
            yield HostedEventStore(client)
        return
    db = SessionLocal()
    try:
        yield SqlEventStore(db)
    finally:
        db.close()
