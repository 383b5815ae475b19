"""Read-only reporting over the transaction ledger."""

from matchday.domain import EventId
from matchday.domain.ledger import LedgerSummary, summarize
from matchday.stores import Stores


class FinanceService:
    def __init__(self, stores: Stores) -> None:
        self._stores = stores

    def summary(self, event_id: EventId | None = None) -> LedgerSummary:
        return summarize(self._stores.ledger.list_transactions(event_id))
