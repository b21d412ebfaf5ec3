import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import case, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from petu.core.config import settings
from petu.core.exceptions import (
    AuthenticationError,
    EmailTakenError,
    EventFullError,
    EventNotFoundError,
    JoinRequestNotFoundError,
    StorageError,
)
from petu.core.security import create_access_token, hash_password, verify_password
from petu.models.events import ESTADO_CONFIRMADO, Event
from petu.models.join_requests import JoinRequest, JoinRequestStatus
from petu.models.users import User
from petu.schemas.events import EventCreate, EventOut
from petu.schemas.mapping import event_to_row, row_to_event, row_to_user
from petu.schemas.users import UserOut
from petu.storage.base import AuthResult, EventStore, JoinOutcome

logger = logging.getLogger(__name__)


def _as_row(obj) -> dict:
    return {column.key: getattr(obj, column.key) for column in obj.__table__.columns}


def _parse_id(value, not_found):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise not_found(value)


@contextmanager
def _storage_errors():
    try:
        yield
    except SQLAlchemyError as e:
        logger.exception("Database error")
        raise StorageError(str(e)) from e


class SqlEventStore(EventStore):
    """Event storage on any SQLAlchemy database (SQLite file by default)."""

    def __init__(self, db: Session):
        self.db = db

    def _in_transaction(self, fn, *args):
        if self.db.in_transaction():
            # Use the existing transaction and commit it
            try:
                result = fn(*args)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise
            return result
        with self.db.begin():
            return fn(*args)

    # ---------- events ----------
    def list_events(self) -> list[EventOut]:
        with _storage_errors():
            events = self.db.scalars(select(Event).order_by(Event.fecha, Event.id)).all()
            return [row_to_event(_as_row(event)) for event in events]

    def get_event(self, event_id) -> EventOut:
        with _storage_errors():
            event = self.db.get(Event, _parse_id(event_id, EventNotFoundError))
            if event is None:
                raise EventNotFoundError(event_id)
            return row_to_event(_as_row(event))

    def create_event(self, payload: EventCreate) -> EventOut:
        with _storage_errors():
            event = Event(**event_to_row(payload, settings.DEFAULT_HOST_NAME))
            self.db.add(event)
            self.db.commit()
            self.db.refresh(event)
            logger.info("Created event %s (%s)", event.id, event.titulo)
            return row_to_event(_as_row(event))

    def join_event(self, event_id, user_id: Optional[int | str] = None) -> JoinOutcome:
        pk = _parse_id(event_id, EventNotFoundError)
        with _storage_errors():
            return self._in_transaction(self._join_in_transaction, pk, user_id)

    def _join_in_transaction(self, event_id: int, user_id) -> JoinOutcome:
        event = self.db.get(Event, event_id)
        if event is None:
            raise EventNotFoundError(event_id)

        if event.requiere_aprobacion:
            request = JoinRequest(
                evento_id=event.id,
                usuario_id=int(user_id) if user_id is not None else None,
                estado=JoinRequestStatus.PENDIENTE.value,
            )
            self.db.add(request)
            self.db.flush()  # gets request.id
            return JoinOutcome(event_id=event.id, requires_approval=True, request_id=request.id)

        self._admit(event_id)
        self.db.refresh(event)
        return JoinOutcome(
            event_id=event.id,
            requires_approval=False,
            event=row_to_event(_as_row(event)),
        )

    def _admit(self, event_id: int) -> None:
        """Check capacity and increment the participant count atomically."""
        stmt = (
            update(Event)
            .where(Event.id == event_id)
            .where(Event.participantes_actuales < Event.max_participantes)
            .values(
                participantes_actuales=Event.participantes_actuales + 1,
                estado=case(
                    (Event.participantes_actuales + 1 >= Event.min_quorum, ESTADO_CONFIRMADO),
                    else_=Event.estado,
                ),
            )
            .execution_options(synchronize_session=False)
        )
        res = self.db.execute(stmt)
        if res.rowcount != 1:  # type: ignore
            raise EventFullError(event_id)

    def approve_join_request(self, event_id, request_id) -> JoinOutcome:
        event_pk = _parse_id(event_id, EventNotFoundError)
        request_pk = _parse_id(request_id, JoinRequestNotFoundError)
        with _storage_errors():
            return self._in_transaction(self._approve_in_transaction, event_pk, request_pk)

    def _approve_in_transaction(self, event_id: int, request_id: int) -> JoinOutcome:
        event = self.db.get(Event, event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        request = self.db.get(JoinRequest, request_id)
        if request is None or request.evento_id != event_id:
            raise JoinRequestNotFoundError(request_id)

        if request.estado != JoinRequestStatus.ACEPTADA.value:
            self._admit(event_id)
            request.estado = JoinRequestStatus.ACEPTADA.value
            self.db.flush()
        self.db.refresh(event)
        return JoinOutcome(
            event_id=event.id,
            requires_approval=True,
            request_id=request.id,
            event=row_to_event(_as_row(event)),
        )

    def mark_request_notified(self, request_id) -> Optional[dict]:
        pk = _parse_id(request_id, JoinRequestNotFoundError)
        with _storage_errors():
            return self._in_transaction(self._mark_notified_in_transaction, pk)

    def _mark_notified_in_transaction(self, request_id: int) -> Optional[dict]:
        request = self.db.get(JoinRequest, request_id)
        if request is None:
            return None
        request.notificado_en = datetime.now(timezone.utc)
        return {
            "request_id": request.id,
            "event_id": request.evento_id,
            "event_title": request.evento.titulo,
            "host_name": request.evento.anfitrion,
        }

    # ---------- users ----------
    def register(self, email: str, password: str, full_name: str) -> UserOut:
        email = email.lower()
        with _storage_errors():
            if self.db.scalar(select(User.id).where(User.email == email)) is not None:
                raise EmailTakenError(email)
            user = User(email=email, nombre=full_name, contrasena=hash_password(password))
            self.db.add(user)
            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                raise EmailTakenError(email)
            self.db.refresh(user)
            logger.info("Registered user %s", user.id)
            return row_to_user(_as_row(user))

    def authenticate(self, email: str, password: str) -> AuthResult:
        with _storage_errors():
            user = self.db.scalar(select(User).where(User.email == email.lower()))
        if user is None or not verify_password(password, user.contrasena):
            logger.info("Failed login for %s", email)
            raise AuthenticationError()
        token = create_access_token({"sub": str(user.id), "email": user.email})
        return AuthResult(user=row_to_user(_as_row(user)), token=token)
