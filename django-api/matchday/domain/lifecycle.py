"""Event status transitions.

Upcoming -> In Progress -> Completed, and Upcoming -> Cancelled.
Completed and Cancelled are terminal.
"""

from dataclasses import replace

from matchday.domain.errors import InvalidStateTransitionError
from matchday.domain.models import Event
from matchday.domain.value_objects import EventStatus

TRANSITIONS: dict[EventStatus, frozenset[EventStatus]] = {
    EventStatus.UPCOMING: frozenset({EventStatus.IN_PROGRESS, EventStatus.CANCELLED}),
    EventStatus.IN_PROGRESS: frozenset({EventStatus.COMPLETED}),
    EventStatus.COMPLETED: frozenset(),
    EventStatus.CANCELLED: frozenset(),
}


def can_transition(current: EventStatus, target: EventStatus) -> bool:
    return target in TRANSITIONS[current]


def ensure_status(event: Event, *allowed: EventStatus, action: str) -> None:
    """Fail fast unless the event is in one of the allowed statuses."""
    if event.status not in allowed:
        raise InvalidStateTransitionError(event.status, action)


def transition(event: Event, target: EventStatus, **changes) -> Event:
    """Move the event to ``target``, applying ``changes`` in the same step."""
    if not can_transition(event.status, target):
        raise InvalidStateTransitionError(event.status, f"move to {target}")
    return replace(event, status=target, **changes)


def cancel_event(event: Event) -> Event:
    ensure_status(event, EventStatus.UPCOMING, action="cancel")
    return transition(event, EventStatus.CANCELLED)
