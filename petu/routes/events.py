from typing import Optional

from fastapi import APIRouter, Depends

from petu.routes.deps import get_current_user_id_optional
from petu.schemas.events import EventCreate, EventCreatedOut, EventOut, JoinOut
from petu.services.joins import approve_join_request, join_event
from petu.storage import EventStore, get_store

router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("", response_model=list[EventOut])
def list_events(store: EventStore = Depends(get_store)):
    return store.list_events()


@router.post("/create", response_model=EventCreatedOut)
def create_event(payload: EventCreate, store: EventStore = Depends(get_store)):
    event = store.create_event(payload)
    return EventCreatedOut(event=event)


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: str, store: EventStore = Depends(get_store)):
    return store.get_event(event_id)


@router.post("/{event_id}/join", response_model=JoinOut)
def join(
    event_id: str,
    store: EventStore = Depends(get_store),
    user_id: Optional[str] = Depends(get_current_user_id_optional),
):
    outcome = join_event(store, event_id, user_id)
    return JoinOut(
        event_id=outcome.event_id,
        requires_approval=outcome.requires_approval,
        request_id=outcome.request_id,
        event=outcome.event,
    )


@router.post("/{event_id}/requests/{request_id}/approve", response_model=JoinOut)
def approve(event_id: str, request_id: str, store: EventStore = Depends(get_store)):
    outcome = approve_join_request(store, event_id, request_id)
    return JoinOut(
        event_id=outcome.event_id,
        requires_approval=outcome.requires_approval,
        request_id=outcome.request_id,
        event=outcome.event,
    )
