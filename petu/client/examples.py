from petu.schemas.events import EventOut

# Placeholder content shown only when the caller opts into it
EXAMPLE_EVENTS = [
    EventOut(
        id=1,
        title="Fútbol 5 - Ejemplo",
        description="Partido amistoso (datos de ejemplo)",
        category="sports",
        date="Hoy, 20:00",
        location="Cancha Central",
        current_players=8,
        max_players=10,
        min_quorum=6,
        status="confirmed",
        requires_approval=False,
        quorum_percentage=50,
        quorum_status="medium",
    ),
]


def example_events() -> list[EventOut]:
    return [event.model_copy() for event in EXAMPLE_EVENTS]
