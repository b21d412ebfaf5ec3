"""
Event card view model.

Everything the event grid shows for one event, computed from the API
representation: category badge, status badge, quorum bar and the label of
the join button.
"""

from dataclasses import dataclass
from datetime import datetime

from petu.schemas.events import EventOut
from petu.services.quorum import EventStatus, QuorumBucket, quorum_for_event

CATEGORIES = {
    "sports": ("Deportes", "futbol"),
    "outdoor": ("Aire libre", "tree"),
    "cultural": ("Cultural", "masks-theater"),
    "games": ("Juegos", "dice"),
    "minga": ("Minga", "hands-helping"),
    "other": ("Otro", "star"),
}
FALLBACK_CATEGORY = ("Evento", "calendar")

BUCKET_COLORS = {
    QuorumBucket.LOW: "#e74c3c",
    QuorumBucket.MEDIUM: "#f39c12",
    QuorumBucket.HIGH: "#27ae60",
    QuorumBucket.FULL: "#2980b9",
}

WEEKDAYS = ["lun", "mar", "mié", "jue", "vie", "sáb", "dom"]
MONTHS = ["ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept", "oct", "nov", "dic"]


@dataclass(frozen=True)
class EventCard:
    event_id: int | str
    title: str
    description: str
    category_label: str
    category_icon: str
    status_label: str
    date_label: str
    location: str
    players_label: str
    quorum_label: str | None
    quorum_percentage: int
    quorum_bucket: QuorumBucket
    badge_color: str
    is_full: bool
    join_label: str


def category_badge(category: str | None) -> tuple[str, str]:
    """Label and icon for a category; unknown categories get a generic badge."""
    return CATEGORIES.get(category or "", FALLBACK_CATEGORY)


def format_date(value: str | None) -> str:
    if not value:
        return "Fecha no especificada"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        # free-form display strings such as "Hoy, 20:00"
        return value
    return (
        f"{WEEKDAYS[parsed.weekday()]}, {parsed.day} {MONTHS[parsed.month - 1]}, "
        f"{parsed.hour:02d}:{parsed.minute:02d}"
    )


def build_event_card(event: EventOut) -> EventCard:
    percentage, bucket = quorum_for_event(event.current_players, event.max_players, event.min_quorum)
    label, icon = category_badge(event.category)
    is_full = bucket is QuorumBucket.FULL

    if event.status == EventStatus.CONFIRMED.value:
        status_label = "✅ Confirmado"
    else:
        status_label = "⏳ Pendiente"

    if is_full:
        join_label = "Evento completo"
    elif event.requires_approval:
        join_label = "Solicitar Unirse"
    else:
        join_label = "Unirse al Evento"

    return EventCard(
        event_id=event.id,
        title=event.title,
        description=event.description,
        category_label=label,
        category_icon=icon,
        status_label=status_label,
        date_label=format_date(event.date),
        location=event.location,
        players_label=f"{event.current_players}/{event.max_players} jugadores",
        quorum_label=f"Quórum mínimo: {event.min_quorum}" if event.min_quorum else None,
        quorum_percentage=percentage,
        quorum_bucket=bucket,
        badge_color=BUCKET_COLORS[bucket],
        is_full=is_full,
        join_label=join_label,
    )
