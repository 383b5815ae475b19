"""Team assignment and live stat tracking while an event is in play."""

import math
import random
from dataclasses import dataclass, replace

from matchday.domain.errors import NotEnoughAttendeesError, ValidationError
from matchday.domain.lifecycle import ensure_status, transition
from matchday.domain.models import Event, StatLine, Teams
from matchday.domain.value_objects import EventStatus, PlayerId, StatKind

MIN_ATTENDEES = 2


def split_teams(player_ids: list[PlayerId], rng: random.Random | None = None) -> Teams:
    """Shuffle and split into two sides; side A gets the odd player out."""
    shuffled = list(player_ids)
    (rng or random).shuffle(shuffled)
    midpoint = math.ceil(len(shuffled) / 2)
    return Teams(side_a=tuple(shuffled[:midpoint]), side_b=tuple(shuffled[midpoint:]))


def start_event(event: Event, rng: random.Random | None = None) -> Event:
    """Close registration and put the event in play.

    Players still waiting for confirmation are marked absent and pending
    rental requests are dropped.
    """
    ensure_status(event, EventStatus.UPCOMING, action="start")
    if len(event.attendees) < MIN_ATTENDEES:
        raise NotEnoughAttendeesError(len(event.attendees))
    teams = split_teams([a.player_id for a in event.attendees], rng)
    return transition(
        event,
        EventStatus.IN_PROGRESS,
        teams=teams,
        absent_players=event.absent_players + event.signed_up_players,
        signed_up_players=(),
        rental_signups=(),
    )


def record_stat(event: Event, player_id: PlayerId, stat_kind: StatKind, delta: int) -> Event:
    """Apply a +1/-1 correction to one attendee's live counter, floored at zero."""
    ensure_status(event, EventStatus.IN_PROGRESS, action="record stats for")
    if delta not in (1, -1):
        raise ValidationError("Stat delta must be +1 or -1")
    if event.attendee(player_id) is None:
        raise ValidationError("Player is not an attendee of this event")
    current = event.live_stats.get(player_id, StatLine())
    value = max(0, current.get(stat_kind) + delta)
    live_stats = dict(event.live_stats)
    live_stats[player_id] = replace(current, **{stat_kind.value: value})
    return replace(event, live_stats=live_stats)


def record_clock(event: Event, elapsed_seconds: int) -> Event:
    ensure_status(event, EventStatus.IN_PROGRESS, action="record the clock for")
    if elapsed_seconds < 0:
        raise ValidationError("Elapsed time cannot be negative")
    return replace(event, game_duration_seconds=elapsed_seconds)


@dataclass
class GameClock:
    """Wall-clock game timer driven by a once-per-second tick.

    Pausing stops accrual and keeps the elapsed time; only ``reset`` zeroes it.
    """

    elapsed_seconds: int = 0
    running: bool = False

    def start(self) -> None:
        self.running = True

    def pause(self) -> None:
        self.running = False

    def toggle(self) -> bool:
        self.running = not self.running
        return self.running

    def tick(self, seconds: int = 1) -> int:
        if self.running:
            self.elapsed_seconds += seconds
        return self.elapsed_seconds

    def reset(self) -> None:
        self.running = False
        self.elapsed_seconds = 0

    def __str__(self) -> str:
        hours, rest = divmod(self.elapsed_seconds, 3600)
        minutes, seconds = divmod(rest, 60)
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
