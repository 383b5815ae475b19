"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum
from typing import Self
from uuid import UUID, uuid4


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def generate(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class PlayerId:
    """Unique identifier for a Player."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def generate(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ItemId:
    """Unique identifier for an InventoryItem."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def generate(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    @classmethod
    def zero(cls) -> Self:
        return cls(amount=Decimal("0"))

    def __add__(self, other: "Money") -> "Money":
        return Money(self.amount + other.amount)

    def __bool__(self) -> bool:
        return self.amount > 0

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing stock on hand."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")


class EventStatus(StrEnum):
    UPCOMING = "Upcoming"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class EventType(StrEnum):
    TRAINING = "Training"
    MISSION = "Mission"
    BRIEFING = "Briefing"
    MAINTENANCE = "Maintenance"


class PaymentStatus(StrEnum):
    PAID_CARD = "Paid (Card)"
    PAID_CASH = "Paid (Cash)"
    UNPAID = "Unpaid"


class VoucherStatus(StrEnum):
    ACTIVE = "Active"
    EXPIRED = "Expired"
    DEPLETED = "Depleted"


class DiscountType(StrEnum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


class TransactionType(StrEnum):
    EVENT_REVENUE = "Event Revenue"
    RENTAL_REVENUE = "Rental Revenue"
    RETAIL_REVENUE = "Retail Revenue"
    EXPENSE = "Expense"


class StatKind(StrEnum):
    KILLS = "kills"
    DEATHS = "deaths"
    HEADSHOTS = "headshots"


class BadgeCriteria(StrEnum):
    KILLS = "kills"
    HEADSHOTS = "headshots"
    GAMES_PLAYED = "gamesPlayed"
    RANK = "rank"
    CUSTOM = "custom"
