"""
Translation between the storage vocabulary and the API vocabulary.

Both storage backends persist Spanish column names; the API and the client
speak English field names. Every crossing goes through this module.
"""

from typing import Any, Mapping

from petu.schemas.events import EventCreate, EventOut
from petu.schemas.users import UserOut
from petu.services.quorum import (
    DEFAULT_MIN_QUORUM,
    EventStatus,
    event_status,
    quorum_for_event,
)

# storage column -> API field
EVENT_FIELDS = {
    "id": "id",
    "titulo": "title",
    "descripcion": "description",
    "categoria": "category",
    "fecha": "date",
    "ubicacion": "location",
    "max_participantes": "maxPlayers",
    "min_quorum": "minQuorum",
    "participantes_actuales": "currentPlayers",
    "estado": "status",
    "requiere_aprobacion": "requiresApproval",
    "anfitrion": "hostName",
    "creado_en": "createdAt",
}

STATUS_TO_API = {"pendiente": "pending", "confirmado": "confirmed"}
STATUS_FROM_API = {api: stored for stored, api in STATUS_TO_API.items()}

LEVEL_TO_API = {
    "principiante": "beginner",
    "intermedio": "intermediate",
    "avanzado": "advanced",
}


def status_to_api(estado: str | None) -> str:
    if estado is None:
        return "pending"
    return STATUS_TO_API.get(estado, estado)


def status_from_api(status: str) -> str:
    return STATUS_FROM_API.get(status, status)


def row_to_event(row: Mapping[str, Any]) -> EventOut:
    """Build the API event from a storage row (a dict of Spanish columns)."""
    data = {api: row.get(column) for column, api in EVENT_FIELDS.items()}
    data["description"] = data["description"] or ""
    data["currentPlayers"] = data["currentPlayers"] or 0
    if data["minQuorum"] is None:
        data["minQuorum"] = DEFAULT_MIN_QUORUM
    data["requiresApproval"] = bool(data["requiresApproval"])
    # confirmed never reverts; pending is re-derived from the count
    if event_status(data["currentPlayers"], data["minQuorum"]) is EventStatus.CONFIRMED:
        data["status"] = EventStatus.CONFIRMED.value
    else:
        data["status"] = status_to_api(data["status"])

    percentage, bucket = quorum_for_event(
        data["currentPlayers"], data["maxPlayers"], data["minQuorum"]
    )
    data["quorumPercentage"] = percentage
    data["quorumStatus"] = bucket.value
    return EventOut.model_validate(data)


def event_to_row(payload: EventCreate, default_host: str) -> dict[str, Any]:
    """Storage row for a new event; server-side columns are left out."""
    return {
        "titulo": payload.title,
        "descripcion": payload.description,
        "categoria": payload.category,
        "fecha": payload.date,
        "ubicacion": payload.location,
        "max_participantes": payload.max_players,
        "min_quorum": payload.min_quorum,
        "participantes_actuales": 0,
        "requiere_aprobacion": payload.requires_approval,
        "estado": status_from_api("pending"),
        "anfitrion": payload.host_name or default_host,
    }


def row_to_user(row: Mapping[str, Any]) -> UserOut:
    return UserOut(
        id=row["id"],
        email=row["email"],
        full_name=row.get("nombre") or "",
        lives=3 if row.get("vidas") is None else row["vidas"],
        reputation=row.get("reputacion") or 0,
        level=LEVEL_TO_API.get(row.get("nivel") or "principiante", row.get("nivel")),
    )
