"""
Application state for the event browser.

State is an immutable ``AppState``; every user interaction or server
response is an action, ``reduce`` computes the next state, and ``render``
turns a state into what the screen shows.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Union

from petu.client.api import FetchResult, ResultKind
from petu.client.cards import EventCard, build_event_card
from petu.schemas.events import EventOut, JoinOut
from petu.schemas.users import LoginOut, UserOut


@dataclass(frozen=True)
class Notification:
    message: str
    kind: str = "info"  # success | error | warning | info


@dataclass(frozen=True)
class AppState:
    is_host_mode: bool = False
    current_user: Optional[UserOut] = None
    events: tuple[EventOut, ...] = ()
    events_kind: Optional[ResultKind] = None
    showing_placeholders: bool = False
    notification: Optional[Notification] = None


# ---------- actions ----------
@dataclass(frozen=True)
class ToggleHostMode:
    pass


@dataclass(frozen=True)
class EventsLoaded:
    result: FetchResult[list[EventOut]]


@dataclass(frozen=True)
class LoggedIn:
    result: FetchResult[LoginOut]


@dataclass(frozen=True)
class EventCreated:
    result: FetchResult[EventOut]


@dataclass(frozen=True)
class JoinedEvent:
    result: FetchResult[JoinOut]


Action = Union[ToggleHostMode, EventsLoaded, LoggedIn, EventCreated, JoinedEvent]


def _replace_event(events: tuple[EventOut, ...], updated: EventOut) -> tuple[EventOut, ...]:
    return tuple(updated if event.id == updated.id else event for event in events)


def reduce(state: AppState, action: Action) -> AppState:
    if isinstance(action, ToggleHostMode):
        host = not state.is_host_mode
        message = "🎭 Modo Host activado" if host else "👤 Modo Usuario activado"
        return replace(state, is_host_mode=host, notification=Notification(message))

    if isinstance(action, EventsLoaded):
        result = action.result
        notification = None
        if result.kind is ResultKind.ERROR:
            notification = Notification(f"❌ Error cargando eventos: {result.error}", "error")
        return replace(
            state,
            events=tuple(result.data or ()),
            events_kind=result.kind,
            showing_placeholders=result.is_fallback,
            notification=notification,
        )

    if isinstance(action, LoggedIn):
        result = action.result
        if result.kind is ResultKind.ERROR:
            return replace(state, notification=Notification(f"❌ {result.error}", "error"))
        user = result.data.user
        return replace(
            state,
            current_user=user,
            notification=Notification(f"✅ Bienvenido {user.full_name}!", "success"),
        )

    if isinstance(action, EventCreated):
        result = action.result
        if result.kind is ResultKind.ERROR:
            return replace(state, notification=Notification(f"❌ {result.error}", "error"))
        return replace(
            state,
            events=state.events + (result.data,),
            notification=Notification("✅ Evento creado exitosamente", "success"),
        )

    if isinstance(action, JoinedEvent):
        result = action.result
        if result.kind is ResultKind.ERROR:
            return replace(state, notification=Notification(f"❌ {result.error}", "error"))
        joined = result.data
        if joined.requires_approval and joined.event is None:
            return replace(
                state,
                notification=Notification("✅ Solicitud enviada. Espera aprobación.", "info"),
            )
        events = _replace_event(state.events, joined.event) if joined.event else state.events
        return replace(
            state,
            events=events,
            notification=Notification("✅ ¡Te has unido al evento!", "success"),
        )

    raise TypeError(f"Unknown action: {action!r}")


@dataclass(frozen=True)
class Screen:
    cards: list[EventCard] = field(default_factory=list)
    empty_message: Optional[str] = None
    placeholder_banner: Optional[str] = None
    notification: Optional[Notification] = None
    can_create_events: bool = False
    user_label: str = "Invitado"


def render(state: AppState) -> Screen:
    cards = [build_event_card(event) for event in state.events]
    empty_message = None
    if not cards and state.events_kind is not None:
        empty_message = "No hay eventos disponibles"
    return Screen(
        cards=cards,
        empty_message=empty_message,
        placeholder_banner="Mostrando datos de ejemplo" if state.showing_placeholders else None,
        notification=state.notification,
        can_create_events=state.is_host_mode,
        user_label=state.current_user.full_name if state.current_user else "Invitado",
    )
