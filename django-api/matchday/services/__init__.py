from matchday.services.event_service import EventService
from matchday.services.finance_service import FinanceService
from matchday.services.player_service import PlayerService

__all__ = ["EventService", "FinanceService", "PlayerService"]
