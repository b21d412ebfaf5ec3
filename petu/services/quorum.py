"""
Quorum evaluation for events.

An event has a quorum floor (``min``) and a capacity ceiling (``max``). The
fill percentage interpolates linearly between the two: nothing counts below
the floor, and a full event is always 100%.
"""

import enum

DEFAULT_MIN_QUORUM = 2

LOW_THRESHOLD = 50
MEDIUM_THRESHOLD = 80


class QuorumBucket(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    FULL = "full"


class EventStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"


def quorum_percentage(current: int, maximum: int, minimum: int) -> int:
    """Return the quorum fill of an event as an integer in ``[0, 100]``.

    Raises ``ValueError`` when the arguments are outside
    ``current >= 0, maximum > 0, 0 <= minimum <= maximum``.
    """
    if current < 0:
        raise ValueError(f"current must be >= 0, got {current}")
    if maximum <= 0:
        raise ValueError(f"maximum must be > 0, got {maximum}")
    if not 0 <= minimum <= maximum:
        raise ValueError(f"minimum must be within [0, {maximum}], got {minimum}")

    # checked first so that maximum == minimum never reaches the division
    if current >= maximum:
        return 100
    if current <= minimum:
        return 0

    span = maximum - minimum
    # round half up on integers
    return (200 * (current - minimum) + span) // (2 * span)


def status_bucket(percentage: int) -> QuorumBucket:
    if not 0 <= percentage <= 100:
        raise ValueError(f"percentage must be within [0, 100], got {percentage}")
    if percentage < LOW_THRESHOLD:
        return QuorumBucket.LOW
    if percentage < MEDIUM_THRESHOLD:
        return QuorumBucket.MEDIUM
    if percentage < 100:
        return QuorumBucket.HIGH
    return QuorumBucket.FULL


def event_status(current: int, minimum: int) -> EventStatus:
    """Lifecycle status derived from the participant count."""
    if current >= minimum:
        return EventStatus.CONFIRMED
    return EventStatus.PENDING


def quorum_for_event(current: int | None, maximum: int, minimum: int | None) -> tuple[int, QuorumBucket]:
    """Percentage and bucket for an event, filling in missing counts."""
    current = current or 0
    minimum = DEFAULT_MIN_QUORUM if minimum is None else minimum
    # rows where the quorum exceeds capacity are evaluated against capacity
    percentage = quorum_percentage(current, maximum, min(minimum, maximum))
    return percentage, status_bucket(percentage)
