"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
Versioned records (events, vouchers) are written with compare-and-swap:
a save raises ConcurrentModificationError when the stored version is not
``expected_version``.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from matchday.domain import (
    Badge,
    Event,
    EventId,
    GamificationRule,
    InventoryItem,
    ItemId,
    Player,
    PlayerId,
    Rank,
    Transaction,
    Voucher,
)


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def list_events(self) -> list[Event]:
        """Return all events ordered by date descending."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def save_event(self, event: Event, expected_version: int | None) -> Event:
        """Insert (expected_version None) or update an event.

        Returns the event carrying its new version.
        """
        ...


class PlayerStore(ABC):
    """Interface for player profiles."""

    @abstractmethod
    def list_players(self) -> list[Player]:
        ...

    @abstractmethod
    def get_player(self, player_id: PlayerId) -> Player | None:
        ...

    @abstractmethod
    def save_players(self, players: list[Player]) -> list[Player]:
        """Update every given player in one call.

        Each player must carry the version it was read at. If any of them
        changed since, nothing is written.

        Raises:
            ConcurrentModificationError: If a player is missing or stale.
        """
        ...


class VoucherStore(ABC):
    """Interface for voucher persistence."""

    @abstractmethod
    def list_vouchers(self) -> list[Voucher]:
        ...

    @abstractmethod
    def get_voucher(self, code: str) -> Voucher | None:
        """Case-insensitive lookup by code."""
        ...

    @abstractmethod
    def save_voucher(self, voucher: Voucher, expected_version: int | None) -> Voucher:
        ...


class InventoryStore(ABC):
    """Read-only view of the inventory."""

    @abstractmethod
    def list_items(self) -> list[InventoryItem]:
        ...

    @abstractmethod
    def get_item(self, item_id: ItemId) -> InventoryItem | None:
        ...


class TransactionLedger(ABC):
    """Append-only financial ledger."""

    @abstractmethod
    def append(self, transactions: list[Transaction]) -> None:
        """Record new transactions.

        Raises:
            DuplicateTransactionError: If any id is already recorded.
        """
        ...

    @abstractmethod
    def list_transactions(self, event_id: EventId | None = None) -> list[Transaction]:
        ...


class GamificationStore(ABC):
    """Global XP rules, ranks and badges."""

    @abstractmethod
    def rules(self) -> list[GamificationRule]:
        ...

    @abstractmethod
    def ranks(self) -> list[Rank]:
        ...

    @abstractmethod
    def badges(self) -> list[Badge]:
        ...


class UnitOfWork(ABC):
    """Groups store writes so they commit together or not at all."""

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        ...
