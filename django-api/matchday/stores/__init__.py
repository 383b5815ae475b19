from dataclasses import dataclass

from matchday.stores.interfaces import (
    EventStore,
    GamificationStore,
    InventoryStore,
    PlayerStore,
    TransactionLedger,
    UnitOfWork,
    VoucherStore,
)


@dataclass(frozen=True)
class Stores:
    """Every collaborator the services need, injected together."""

    events: EventStore
    players: PlayerStore
    vouchers: VoucherStore
    inventory: InventoryStore
    ledger: TransactionLedger
    gamification: GamificationStore
    unit_of_work: UnitOfWork


__all__ = [
    "Stores",
    "EventStore",
    "GamificationStore",
    "InventoryStore",
    "PlayerStore",
    "TransactionLedger",
    "UnitOfWork",
    "VoucherStore",
]
