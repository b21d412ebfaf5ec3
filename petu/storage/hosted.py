"""
Event storage on a hosted Postgres-as-a-service backend.

Rows are read and written through the backend's PostgREST endpoint
(``/rest/v1``) and credentials are checked by its auth endpoint
(``/auth/v1``). Joins use a compare-and-set PATCH on the participant count,
so two concurrent joins can never both take the last seat.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from petu.core.config import settings
from petu.core.exceptions import (
    AuthenticationError,
    EventFullError,
    EventNotFoundError,
    JoinBusyError,
    JoinRequestNotFoundError,
    StorageError,
    ValidationError,
)
from petu.models.events import ESTADO_CONFIRMADO
from petu.models.join_requests import JoinRequestStatus
from petu.schemas.events import EventCreate, EventOut
from petu.schemas.mapping import event_to_row, row_to_event
from petu.schemas.users import UserOut
from petu.storage.base import AuthResult, EventStore, JoinOutcome

logger = logging.getLogger(__name__)

MAX_CAS_ATTEMPTS = 5


def make_hosted_client(url: str | None = None, key: str | None = None) -> httpx.Client:
    url = url or settings.SUPABASE_URL
    key = key or settings.SUPABASE_KEY
    if not url or not key:
        raise StorageError("SUPABASE_URL and SUPABASE_KEY must be set for the hosted backend")
    return httpx.Client(
        base_url=url,
        headers={"apikey": key, "Authorization": f"Bearer {key}"},
        timeout=10.0,
    )


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("msg", "error_description", "message", "error"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {response.status_code}"


def _json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        logger.error("Hosted backend returned a non-JSON body (HTTP %s)", response.status_code)
        raise StorageError(f"Invalid response from hosted backend (HTTP {response.status_code})") from e


def _user_to_out(user: dict) -> UserOut:
    metadata = user.get("user_metadata") or {}
    return UserOut(
        id=user["id"],
        email=user.get("email", ""),
        full_name=metadata.get("full_name", ""),
    )


class HostedEventStore(EventStore):
    def __init__(self, client: httpx.Client):
        self.client = client

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Hosted backend unreachable: %s", e)
            raise StorageError(str(e)) from e
        return response

    def _rest(self, method: str, table: str, *, params=None, json=None) -> list[dict[str, Any]]:
        headers = {"Prefer": "return=representation"}
        response = self._request(method, f"/rest/v1/{table}", params=params, json=json, headers=headers)
        if response.status_code >= 400:
            message = _error_message(response)
            logger.error("Hosted backend %s %s failed: %s", method, table, message)
            raise StorageError(message)
        return _json(response)

    def _event_row(self, event_id) -> dict[str, Any]:
        rows = self._rest("GET", "eventos", params={"id": f"eq.{event_id}", "select": "*"})
        if not rows:
            raise EventNotFoundError(event_id)
        return rows[0]

    # ---------- events ----------
    def list_events(self) -> list[EventOut]:
        rows = self._rest("GET", "eventos", params={"select": "*", "order": "fecha.asc"})
        return [row_to_event(row) for row in rows]

    def get_event(self, event_id) -> EventOut:
        return row_to_event(self._event_row(event_id))

    def create_event(self, payload: EventCreate) -> EventOut:
        rows = self._rest("POST", "eventos", json=[event_to_row(payload, settings.DEFAULT_HOST_NAME)])
        logger.info("Created event %s (%s)", rows[0].get("id"), payload.title)
        return row_to_event(rows[0])

    def join_event(self, event_id, user_id: Optional[int | str] = None) -> JoinOutcome:
        row = self._event_row(event_id)
        if row.get("requiere_aprobacion"):
            request = self._rest(
                "POST",
                "solicitudes",
                json=[{
                    "evento_id": row["id"],
                    "usuario_id": user_id,
                    "estado": JoinRequestStatus.PENDIENTE.value,
                }],
            )[0]
            return JoinOutcome(event_id=row["id"], requires_approval=True, request_id=request["id"])

        updated = self._admit(row)
        return JoinOutcome(event_id=row["id"], requires_approval=False, event=row_to_event(updated))

    def _admit(self, row: dict[str, Any]) -> dict[str, Any]:
        for _ in range(MAX_CAS_ATTEMPTS):
            current = row.get("participantes_actuales") or 0
            if current >= row["max_participantes"]:
                raise EventFullError(row["id"])
            changes = {"participantes_actuales": current + 1}
            if current + 1 >= row["min_quorum"]:
                changes["estado"] = ESTADO_CONFIRMADO
            params = {"id": f"eq.{row['id']}"}
            # the PATCH only matches while nobody else has changed the count
            if row.get("participantes_actuales") is None:
                params["participantes_actuales"] = "is.null"
            else:
                params["participantes_actuales"] = f"eq.{current}"
            updated = self._rest("PATCH", "eventos", params=params, json=changes)
            if updated:
                return updated[0]
            row = self._event_row(row["id"])
        raise JoinBusyError(row["id"])

    def approve_join_request(self, event_id, request_id) -> JoinOutcome:
        row = self._event_row(event_id)
        match = {"id": f"eq.{request_id}", "evento_id": f"eq.{row['id']}"}
        requests = self._rest("GET", "solicitudes", params={**match, "select": "*"})
        if not requests:
            raise JoinRequestNotFoundError(request_id)
        request = requests[0]

        # only the call that moves the request out of pendiente may admit it
        claimed = self._rest(
            "PATCH",
            "solicitudes",
            params={**match, "estado": f"eq.{JoinRequestStatus.PENDIENTE.value}"},
            json={"estado": JoinRequestStatus.ACEPTADA.value},
        )
        if claimed:
            try:
                row = self._admit(row)
            except Exception:
                logger.warning("Could not admit join request %s, returning it to pending", request["id"])
                self._rest("PATCH", "solicitudes", params=match, json={"estado": JoinRequestStatus.PENDIENTE.value})
                raise
        return JoinOutcome(
            event_id=row["id"],
            requires_approval=True,
            request_id=request["id"],
            event=row_to_event(row),
        )

    def mark_request_notified(self, request_id) -> Optional[dict]:
        rows = self._rest(
            "PATCH",
            "solicitudes",
            params={"id": f"eq.{request_id}"},
            json={"notificado_en": datetime.now(timezone.utc).isoformat()},
        )
        if not rows:
            return None
        event = self._event_row(rows[0]["evento_id"])
        return {
            "request_id": rows[0]["id"],
            "event_id": event["id"],
            "event_title": event["titulo"],
            "host_name": event.get("anfitrion"),
        }

    # ---------- users ----------
    def register(self, email: str, password: str, full_name: str) -> UserOut:
        response = self._request(
            "POST",
            "/auth/v1/signup",
            json={"email": email, "password": password, "data": {"full_name": full_name}},
        )
        if response.status_code >= 400:
            raise ValidationError(_error_message(response))
        body = _json(response)
        # depending on email confirmation settings the user is nested or top level
        return _user_to_out(body.get("user") or body)

    def authenticate(self, email: str, password: str) -> AuthResult:
        response = self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if response.status_code >= 400:
            logger.info("Failed login for %s: %s", email, _error_message(response))
            raise AuthenticationError()
        body = _json(response)
        return AuthResult(user=_user_to_out(body["user"]), token=body["access_token"])
