"""Player progression service."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

import structlog

from matchday.domain import Badge, Player, PlayerId, Rank
from matchday.domain.errors import UnknownPlayerError
from matchday.domain.progression import BadgeProgress, adjust_xp, badge_progress, next_rank, rank_for_xp
from matchday.stores import Stores

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Progression:
    player: Player
    rank: Rank
    next_rank: Rank | None
    badges: list[tuple[Badge, BadgeProgress]]


class PlayerService:
    def __init__(self, stores: Stores, *, now: Callable[[], datetime] | None = None) -> None:
        self._stores = stores
        self._now = now or (lambda: datetime.now(timezone.utc))

    def get_player(self, player_id: PlayerId) -> Player:
        player = self._stores.players.get_player(player_id)
        if player is None:
            raise UnknownPlayerError(player_id)
        return player

    def adjust_xp(self, player_id: PlayerId, amount: int, reason: str) -> Player:
        """Award or deduct XP outside of an event, keeping an audit entry."""
        player = adjust_xp(self.get_player(player_id), amount, reason, self._now())
        with self._stores.unit_of_work.atomic():
            (player,) = self._stores.players.save_players([player])
        logger.info("xp_adjusted", player_id=str(player_id), amount=amount, xp=player.stats.xp)
        return player

    def progression(self, player_id: PlayerId) -> Progression:
        player = self.get_player(player_id)
        ranks = self._stores.gamification.ranks()
        return Progression(
            player=player,
            rank=rank_for_xp(player.stats.xp, ranks),
            next_rank=next_rank(player.stats.xp, ranks),
            badges=[(b, badge_progress(b, player, ranks)) for b in self._stores.gamification.badges()],
        )
