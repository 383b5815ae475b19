"""Aggregation over ledger transactions."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from matchday.domain.models import Transaction
from matchday.domain.value_objects import EventId, PaymentStatus, TransactionType

REVENUE_TYPES = (
    TransactionType.EVENT_REVENUE,
    TransactionType.RENTAL_REVENUE,
    TransactionType.RETAIL_REVENUE,
)


@dataclass(frozen=True)
class LedgerSummary:
    revenue_by_type: dict[TransactionType, Decimal] = field(default_factory=dict)
    expenses: Decimal = Decimal("0")
    outstanding: Decimal = Decimal("0")

    @property
    def total_revenue(self) -> Decimal:
        return sum(self.revenue_by_type.values(), Decimal("0"))

    @property
    def net_profit(self) -> Decimal:
        return self.total_revenue - self.expenses


def summarize(transactions: Iterable[Transaction], event_id: EventId | None = None) -> LedgerSummary:
    """Revenue per type, expenses and unpaid revenue, optionally for one event."""
    revenue = {kind: Decimal("0") for kind in REVENUE_TYPES}
    expenses = Decimal("0")
    outstanding = Decimal("0")
    for txn in transactions:
        if event_id is not None and txn.related_event_id != event_id:
            continue
        if txn.type == TransactionType.EXPENSE:
            expenses += txn.amount.amount
            continue
        revenue[txn.type] += txn.amount.amount
        if txn.payment_status == PaymentStatus.UNPAID:
            outstanding += txn.amount.amount
    return LedgerSummary(revenue_by_type=revenue, expenses=expenses, outstanding=outstanding)
