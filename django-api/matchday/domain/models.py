"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in matchday/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal

from matchday.domain.value_objects import (
    BadgeCriteria,
    Capacity,
    DiscountType,
    EventId,
    EventStatus,
    EventType,
    ItemId,
    Money,
    PaymentStatus,
    PlayerId,
    StatKind,
    TransactionType,
    VoucherStatus,
)


@dataclass(frozen=True)
class StatLine:
    """Per-match kill/death/headshot counters."""

    kills: int = 0
    deaths: int = 0
    headshots: int = 0

    def get(self, kind: StatKind) -> int:
        return getattr(self, kind.value)


@dataclass(frozen=True)
class RentalSignup:
    """Pending gear request made by a signed-up player."""

    player_id: PlayerId
    requested_gear_ids: tuple[ItemId, ...] = ()
    note: str | None = None


@dataclass(frozen=True)
class Attendee:
    """A player whose attendance and payment have been confirmed."""

    player_id: PlayerId
    payment_status: PaymentStatus
    voucher_code: str | None = None
    rented_gear_ids: tuple[ItemId, ...] = ()
    note: str | None = None
    discount_amount: Money = field(default_factory=Money.zero)
    discount_reason: str | None = None
    voucher_discount: Money = field(default_factory=Money.zero)

    @property
    def total_discount(self) -> Money:
        return self.discount_amount + self.voucher_discount


@dataclass(frozen=True)
class Teams:
    side_a: tuple[PlayerId, ...]
    side_b: tuple[PlayerId, ...]

    @property
    def members(self) -> tuple[PlayerId, ...]:
        return self.side_a + self.side_b


@dataclass(frozen=True)
class Event:
    """Domain representation of a scheduled game event."""

    id: EventId
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
    status: EventStatus = EventStatus.UPCOMING
    xp_overrides: dict[str, int] = field(default_factory=dict)
    gear_for_rent: tuple[ItemId, ...] = ()
    signed_up_players: tuple[PlayerId, ...] = ()
    rental_signups: tuple[RentalSignup, ...] = ()
    attendees: tuple[Attendee, ...] = ()
    absent_players: tuple[PlayerId, ...] = ()
    teams: Teams | None = None
    live_stats: dict[PlayerId, StatLine] = field(default_factory=dict)
    game_duration_seconds: int = 0
    version: int = 0

    def attendee(self, player_id: PlayerId) -> Attendee | None:
        return next((a for a in self.attendees if a.player_id == player_id), None)

    def rental_signup(self, player_id: PlayerId) -> RentalSignup | None:
        return next((s for s in self.rental_signups if s.player_id == player_id), None)

    def is_registered(self, player_id: PlayerId) -> bool:
        """Whether the player is pending, confirmed or marked absent."""
        return (
            player_id in self.signed_up_players
            or player_id in self.absent_players
            or self.attendee(player_id) is not None
        )


@dataclass(frozen=True)
class Redemption:
    player_id: PlayerId
    event_id: EventId
    date: datetime


@dataclass(frozen=True)
class Voucher:
    """A discount code owned by the voucher store."""

    code: str
    discount_value: Decimal
    discount_type: DiscountType
    status: VoucherStatus = VoucherStatus.ACTIVE
    description: str = ""
    assigned_to_player_id: PlayerId | None = None
    usage_limit: int | None = None
    per_user_limit: int | None = None
    redemptions: tuple[Redemption, ...] = ()
    version: int = 0

    def redemptions_by(self, player_id: PlayerId) -> int:
        return sum(1 for r in self.redemptions if r.player_id == player_id)


@dataclass(frozen=True)
class InventoryItem:
    """Stock-keeping record for sale or rental gear."""

    id: ItemId
    name: str
    sale_price: Money
    stock: Capacity
    is_rental: bool = False
    category: str = "Other"
    description: str = ""


@dataclass(frozen=True)
class PlayerStats:
    kills: int = 0
    deaths: int = 0
    headshots: int = 0
    games_played: int = 0
    xp: int = 0


@dataclass(frozen=True)
class MatchRecord:
    event_id: EventId
    player_stats: StatLine


@dataclass(frozen=True)
class XpAdjustment:
    amount: int
    reason: str
    date: datetime


@dataclass(frozen=True)
class Player:
    """Aggregate player profile with lifetime stats."""

    id: PlayerId
    name: str
    callsign: str = ""
    stats: PlayerStats = field(default_factory=PlayerStats)
    match_history: tuple[MatchRecord, ...] = ()
    xp_adjustments: tuple[XpAdjustment, ...] = ()
    badge_ids: tuple[str, ...] = ()
    version: int = 0


@dataclass(frozen=True)
class Transaction:
    """Immutable ledger entry."""

    id: str
    date: date
    type: TransactionType
    description: str
    amount: Money
    related_event_id: EventId | None = None
    related_player_id: PlayerId | None = None
    related_inventory_id: ItemId | None = None
    payment_status: PaymentStatus | None = None


@dataclass(frozen=True)
class GamificationRule:
    id: str
    name: str
    xp: int
    description: str = ""


@dataclass(frozen=True)
class Rank:
    name: str
    tier: str
    min_xp: int
    unlocks: tuple[str, ...] = ()
    badge_awarded: str | None = None


@dataclass(frozen=True)
class Badge:
    id: str
    name: str
    criteria_type: BadgeCriteria
    criteria_value: int | str
    description: str = ""
