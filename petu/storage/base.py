from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from petu.schemas.events import EventCreate, EventOut
from petu.schemas.users import UserOut


@dataclass
class AuthResult:
    user: UserOut
    token: str


@dataclass
class JoinOutcome:
    event_id: int | str
    requires_approval: bool
    request_id: Optional[int | str] = None
    event: Optional[EventOut] = None


class EventStore(ABC):
    """Persistence capabilities the API needs, independent of the backend."""

    @abstractmethod
    def list_events(self) -> list[EventOut]:
        """All events ordered by date."""

    @abstractmethod
    def get_event(self, event_id: str) -> EventOut:
        """Raises ``EventNotFoundError`` for unknown ids."""

    @abstractmethod
    def create_event(self, payload: EventCreate) -> EventOut:
        ...

    @abstractmethod
    def join_event(self, event_id: str, user_id: Optional[int | str] = None) -> JoinOutcome:
        """Admit a participant, or file a join request when approval is required.

        Raises ``EventNotFoundError`` or ``EventFullError``.
        """

    @abstractmethod
    def approve_join_request(self, event_id: str, request_id: str) -> JoinOutcome:
        ...

    @abstractmethod
    def register(self, email: str, password: str, full_name: str) -> UserOut:
        ...

    @abstractmethod
    def authenticate(self, email: str, password: str) -> AuthResult:
        """Raises ``AuthenticationError`` on bad credentials."""

    @abstractmethod
    def mark_request_notified(self, request_id) -> Optional[dict]:
        """Stamp a join request as notified and return what the host needs to know.

        Returns ``None`` when the request no longer exists.
        """
