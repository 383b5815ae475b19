"""Settlement of a finished event.

Converts live performance into XP and match history and bills every
attendee. Settlement is the terminal transition of the event: once the
event is Completed a second settlement is rejected by the state machine,
so stats and ledger entries are produced exactly once per event.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace

from matchday.domain.lifecycle import ensure_status, transition
from matchday.domain.models import (
    Attendee,
    Event,
    GamificationRule,
    InventoryItem,
    MatchRecord,
    Player,
    PlayerStats,
    StatLine,
    Transaction,
)
from matchday.domain.value_objects import EventStatus, Money, PlayerId, TransactionType

KILL = "g_kill"
HEADSHOT = "g_headshot"
DEATH = "g_death"

DEFAULT_RULE_XP: dict[str, int] = {
    KILL: 10,
    HEADSHOT: 25,
    DEATH: -5,
}


@dataclass(frozen=True)
class XpRules:
    kill: int
    headshot: int
    death: int

    def earned(self, participation_xp: int, line: StatLine) -> int:
        return (
            participation_xp
            + line.kills * self.kill
            + line.headshots * self.headshot
            + line.deaths * self.death
        )


@dataclass(frozen=True)
class Settlement:
    event: Event
    players: tuple[Player, ...]
    transactions: tuple[Transaction, ...]
    earned_xp: dict[PlayerId, int]


def resolve_rule_xp(
    rule_id: str,
    event: Event,
    rules: Sequence[GamificationRule],
    defaults: Mapping[str, int] = DEFAULT_RULE_XP,
) -> int:
    """Per-event override, then the global rule, then the built-in default."""
    if rule_id in event.xp_overrides:
        return event.xp_overrides[rule_id]
    rule = next((r for r in rules if r.id == rule_id), None)
    if rule is not None:
        return rule.xp
    return defaults[rule_id]


def resolve_xp_rules(
    event: Event,
    rules: Sequence[GamificationRule],
    defaults: Mapping[str, int] = DEFAULT_RULE_XP,
) -> XpRules:
    return XpRules(
        kill=resolve_rule_xp(KILL, event, rules, defaults),
        headshot=resolve_rule_xp(HEADSHOT, event, rules, defaults),
        death=resolve_rule_xp(DEATH, event, rules, defaults),
    )


def _apply_match(player: Player, event: Event, line: StatLine, earned: int) -> Player:
    stats = player.stats
    return replace(
        player,
        stats=PlayerStats(
            kills=stats.kills + line.kills,
            deaths=stats.deaths + line.deaths,
            headshots=stats.headshots + line.headshots,
            games_played=stats.games_played + 1,
            xp=stats.xp + earned,
        ),
        match_history=player.match_history + (MatchRecord(event_id=event.id, player_stats=line),),
    )


def _bill(event: Event, attendee: Attendee, items: Mapping) -> list[Transaction]:
    transactions = []
    net = event.game_fee.amount - attendee.total_discount.amount
    if net > 0:
        description = f"Event Fee: {event.title}"
        if attendee.discount_reason:
            description += f" (Discount: {attendee.discount_reason})"
        transactions.append(
            Transaction(
                id=f"txn-rev-event-{event.id}-{attendee.player_id}",
                date=event.date,
                type=TransactionType.EVENT_REVENUE,
                description=description,
                amount=Money(net),
                related_event_id=event.id,
                related_player_id=attendee.player_id,
                payment_status=attendee.payment_status,
            )
        )
    for index, gear_id in enumerate(attendee.rented_gear_ids):
        item = items.get(gear_id)
        if item is None:
            continue
        txn_id = f"txn-rev-rental-{event.id}-{attendee.player_id}-{gear_id}"
        if index != attendee.rented_gear_ids.index(gear_id):
            txn_id += f"-{index}"
        transactions.append(
            Transaction(
                id=txn_id,
                date=event.date,
                type=TransactionType.RENTAL_REVENUE,
                description=f"Rental: {item.name}",
                amount=item.sale_price,
                related_event_id=event.id,
                related_player_id=attendee.player_id,
                related_inventory_id=gear_id,
                payment_status=attendee.payment_status,
            )
        )
    return transactions


def finish_event(
    event: Event,
    live_stats: Mapping[PlayerId, StatLine],
    elapsed_seconds: int,
    players: Sequence[Player],
    inventory: Sequence[InventoryItem],
    rules: Sequence[GamificationRule],
    defaults: Mapping[str, int] = DEFAULT_RULE_XP,
) -> Settlement:
    """Settle an in-progress event.

    Returns the Completed event, the updated player record of every
    attendee and the new ledger transactions. Participation XP is the
    event's own ``participation_xp``; the stored ``g_game`` rule only labels
    that amount in the catalog. Aggregate XP is not floored, so death
    penalties may push it below zero.

    Raises:
        InvalidStateTransitionError: If the event is not In Progress.
    """
    ensure_status(event, EventStatus.IN_PROGRESS, action="finish")
    xp_rules = resolve_xp_rules(event, rules, defaults)
    items = {item.id: item for item in inventory}
    attendees = {a.player_id: a for a in event.attendees}

    transactions: list[Transaction] = []
    for attendee in event.attendees:
        transactions.extend(_bill(event, attendee, items))

    earned_xp: dict[PlayerId, int] = {}
    updated_players = []
    for player in players:
        if player.id not in attendees:
            continue
        line = live_stats.get(player.id, StatLine())
        earned = xp_rules.earned(event.participation_xp, line)
        earned_xp[player.id] = earned
        updated_players.append(_apply_match(player, event, line, earned))

    completed = transition(
        event,
        EventStatus.COMPLETED,
        live_stats=dict(live_stats),
        game_duration_seconds=elapsed_seconds,
    )
    return Settlement(
        event=completed,
        players=tuple(updated_players),
        transactions=tuple(transactions),
        earned_xp=earned_xp,
    )
