from matchday.domain.models import (
    Attendee,
    Badge,
    Event,
    GamificationRule,
    InventoryItem,
    MatchRecord,
    Player,
    PlayerStats,
    Rank,
    Redemption,
    RentalSignup,
    StatLine,
    Teams,
    Transaction,
    Voucher,
    XpAdjustment,
)
from matchday.domain.value_objects import (
    BadgeCriteria,
    Capacity,
    DiscountType,
    EventId,
    EventStatus,
    ItemId,
    Money,
    PaymentStatus,
    PlayerId,
    StatKind,
    TransactionType,
    VoucherStatus,
)

__all__ = [
    "Attendee",
    "Badge",
    "Event",
    "GamificationRule",
    "InventoryItem",
    "MatchRecord",
    "Player",
    "PlayerStats",
    "Rank",
    "Redemption",
    "RentalSignup",
    "StatLine",
    "Teams",
    "Transaction",
    "Voucher",
    "XpAdjustment",
    "BadgeCriteria",
    "Capacity",
    "DiscountType",
    "EventId",
    "EventStatus",
    "ItemId",
    "Money",
    "PaymentStatus",
    "PlayerId",
    "StatKind",
    "TransactionType",
    "VoucherStatus",
]
