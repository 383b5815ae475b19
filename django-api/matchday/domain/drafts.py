"""Create and edit requests for events.

A draft targets either a new event or an existing one; the details carry
every schedulable field so nothing required can be silently missing.
"""

from dataclasses import dataclass, field, fields, replace
from datetime import date, time

from matchday.domain.errors import ValidationError
from matchday.domain.lifecycle import ensure_status
from matchday.domain.models import Event
from matchday.domain.value_objects import EventId, EventStatus, EventType, ItemId, Money


@dataclass(frozen=True)
class NewEvent:
    pass


@dataclass(frozen=True)
class ExistingEvent:
    event_id: EventId


EventTarget = NewEvent | ExistingEvent


@dataclass(frozen=True)
class EventDetails:
    title: str
    date: date
    game_fee: Money
    participation_xp: int
    event_type: EventType = EventType.MISSION
    start_time: time | None = None
    location: str = ""
    description: str = ""
    theme: str = ""
    rules: str = ""
    xp_overrides: dict[str, int] = field(default_factory=dict)
    gear_for_rent: tuple[ItemId, ...] = ()

    def __post_init__(self) -> None:
        if not self.title.strip():
            raise ValidationError("Event title is required")
        if self.participation_xp < 0:
            raise ValidationError("Participation XP cannot be negative")


@dataclass(frozen=True)
class EventDraft:
    target: EventTarget
    details: EventDetails


def _fields(details: EventDetails) -> dict:
    values = {f.name: getattr(details, f.name) for f in fields(details)}
    values["xp_overrides"] = dict(details.xp_overrides)
    values["gear_for_rent"] = tuple(details.gear_for_rent)
    return values


def apply_draft(draft: EventDraft, existing: Event | None = None) -> Event:
    """Build the event a draft describes.

    ``existing`` must be the stored event when the draft targets one.
    """
    match draft.target:
        case NewEvent():
            return Event(id=EventId.generate(), **_fields(draft.details))
        case ExistingEvent(event_id=event_id):
            if existing is None or existing.id != event_id:
                raise ValidationError("Draft does not match the stored event")
            ensure_status(existing, EventStatus.UPCOMING, action="edit")
            kept = set(draft.details.gear_for_rent)
            claimed = {gear for s in existing.rental_signups for gear in s.requested_gear_ids}
            claimed |= {gear for a in existing.attendees for gear in a.rented_gear_ids}
            if claimed - kept:
                raise ValidationError("Cannot withdraw gear that players have already requested")
            return replace(existing, **_fields(draft.details))
