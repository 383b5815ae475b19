"""In-memory implementation of the stores.

Used by the test suite and for local runs without a database. Domain
records are immutable, so a shallow copy of each table is a full snapshot.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field, replace

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
from matchday.domain.errors import ConcurrentModificationError, DuplicateTransactionError
from matchday.stores import Stores
from matchday.stores.interfaces import (
    EventStore,
    GamificationStore,
    InventoryStore,
    PlayerStore,
    TransactionLedger,
    UnitOfWork,
    VoucherStore,
)


@dataclass
class MemoryDatabase:
    events: dict[EventId, Event] = field(default_factory=dict)
    players: dict[PlayerId, Player] = field(default_factory=dict)
    vouchers: dict[str, Voucher] = field(default_factory=dict)
    items: dict[ItemId, InventoryItem] = field(default_factory=dict)
    transactions: dict[str, Transaction] = field(default_factory=dict)
    rules: list[GamificationRule] = field(default_factory=list)
    ranks: list[Rank] = field(default_factory=list)
    badges: list[Badge] = field(default_factory=list)

    def snapshot(self) -> "MemoryDatabase":
        return MemoryDatabase(
            events=dict(self.events),
            players=dict(self.players),
            vouchers=dict(self.vouchers),
            items=dict(self.items),
            transactions=dict(self.transactions),
            rules=list(self.rules),
            ranks=list(self.ranks),
            badges=list(self.badges),
        )

    def restore(self, snapshot: "MemoryDatabase") -> None:
        self.__dict__.update(snapshot.__dict__)


def _check_version(kind: str, stored_version: int | None, expected_version: int | None) -> None:
    if stored_version != expected_version:
        raise ConcurrentModificationError(kind, expected_version)


class MemoryEventStore(EventStore):
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    def list_events(self) -> list[Event]:
        return sorted(self._db.events.values(), key=lambda e: e.date, reverse=True)

    def get_event(self, event_id: EventId) -> Event | None:
        return self._db.events.get(event_id)

    def save_event(self, event: Event, expected_version: int | None) -> Event:
        stored = self._db.events.get(event.id)
        _check_version("Event", stored.version if stored else None, expected_version)
        saved = replace(event, version=(expected_version or 0) + 1)
        self._db.events[event.id] = saved
        return saved


class MemoryPlayerStore(PlayerStore):
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    def list_players(self) -> list[Player]:
        return list(self._db.players.values())

    def get_player(self, player_id: PlayerId) -> Player | None:
        return self._db.players.get(player_id)

    def save_players(self, players: list[Player]) -> list[Player]:
        for player in players:
            stored = self._db.players.get(player.id)
            _check_version("Player", stored.version if stored else None, player.version)
        saved = [replace(player, version=player.version + 1) for player in players]
        for player in saved:
            self._db.players[player.id] = player
        return saved


class MemoryVoucherStore(VoucherStore):
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    def list_vouchers(self) -> list[Voucher]:
        return list(self._db.vouchers.values())

    def get_voucher(self, code: str) -> Voucher | None:
        return self._db.vouchers.get(code.strip().lower())

    def save_voucher(self, voucher: Voucher, expected_version: int | None) -> Voucher:
        key = voucher.code.lower()
        stored = self._db.vouchers.get(key)
        _check_version("Voucher", stored.version if stored else None, expected_version)
        saved = replace(voucher, version=(expected_version or 0) + 1)
        self._db.vouchers[key] = saved
        return saved


class MemoryInventoryStore(InventoryStore):
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    def list_items(self) -> list[InventoryItem]:
        return list(self._db.items.values())

    def get_item(self, item_id: ItemId) -> InventoryItem | None:
        return self._db.items.get(item_id)


class MemoryTransactionLedger(TransactionLedger):
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    def append(self, transactions: list[Transaction]) -> None:
        seen = set(self._db.transactions)
        for txn in transactions:
            if txn.id in seen:
                raise DuplicateTransactionError(txn.id)
            seen.add(txn.id)
        for txn in transactions:
            self._db.transactions[txn.id] = txn

    def list_transactions(self, event_id: EventId | None = None) -> list[Transaction]:
        return [
            t for t in self._db.transactions.values()
            if event_id is None or t.related_event_id == event_id
        ]


class MemoryGamificationStore(GamificationStore):
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    def rules(self) -> list[GamificationRule]:
        return list(self._db.rules)

    def ranks(self) -> list[Rank]:
        return list(self._db.ranks)

    def badges(self) -> list[Badge]:
        return list(self._db.badges)


class MemoryUnitOfWork(UnitOfWork):
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    @contextmanager
    def atomic(self) -> Iterator[None]:
        snapshot = self._db.snapshot()
        try:
            yield
        except BaseException:
            self._db.restore(snapshot)
            raise


def memory_stores(db: MemoryDatabase | None = None) -> Stores:
    db = db or MemoryDatabase()
    return Stores(
        events=MemoryEventStore(db),
        players=MemoryPlayerStore(db),
        vouchers=MemoryVoucherStore(db),
        inventory=MemoryInventoryStore(db),
        ledger=MemoryTransactionLedger(db),
        gamification=MemoryGamificationStore(db),
        unit_of_work=MemoryUnitOfWork(db),
    )
