"""Ranks, badges and manual XP adjustments."""

from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import datetime

from matchday.domain.errors import ValidationError
from matchday.domain.models import Badge, Player, Rank, XpAdjustment
from matchday.domain.value_objects import BadgeCriteria

UNRANKED = Rank(name="Unranked", tier="Unranked", min_xp=0)


@dataclass(frozen=True)
class BadgeProgress:
    current: int
    max: int
    is_earned: bool
    text: str

    @property
    def percentage(self) -> float:
        if self.is_earned:
            return 100.0
        if self.max <= 0:
            return 0.0
        return min(self.current / self.max * 100, 100.0)


def rank_for_xp(xp: int, ranks: Sequence[Rank]) -> Rank:
    """Highest rank whose threshold the XP meets; the lowest rank otherwise."""
    if not ranks:
        return UNRANKED
    ordered = sorted(ranks, key=lambda r: r.min_xp)
    reached = [r for r in ordered if xp >= r.min_xp]
    return reached[-1] if reached else ordered[0]


def next_rank(xp: int, ranks: Sequence[Rank]) -> Rank | None:
    return next((r for r in sorted(ranks, key=lambda r: r.min_xp) if r.min_xp > xp), None)


def badge_progress(badge: Badge, player: Player, ranks: Sequence[Rank]) -> BadgeProgress:
    if badge.id in player.badge_ids:
        return BadgeProgress(current=1, max=1, is_earned=True, text="Unlocked")

    match badge.criteria_type:
        case BadgeCriteria.RANK:
            if rank_for_xp(player.stats.xp, ranks).name == badge.criteria_value:
                return BadgeProgress(current=1, max=1, is_earned=True, text="Unlocked")
            return BadgeProgress(current=0, max=1, is_earned=False, text=f"Reach {badge.criteria_value} Rank")
        case BadgeCriteria.CUSTOM:
            return BadgeProgress(current=0, max=1, is_earned=False, text="Admin Awarded")
        case BadgeCriteria.KILLS:
            current = player.stats.kills
        case BadgeCriteria.HEADSHOTS:
            current = player.stats.headshots
        case BadgeCriteria.GAMES_PLAYED:
            current = player.stats.games_played

    target = int(badge.criteria_value)
    return BadgeProgress(
        current=current,
        max=target,
        is_earned=current >= target,
        text=f"{min(current, target)} / {target}",
    )


def adjust_xp(player: Player, amount: int, reason: str, now: datetime) -> Player:
    """Manually award (or deduct) XP with an audit entry."""
    if amount == 0:
        raise ValidationError("XP adjustment cannot be zero")
    if not reason.strip():
        raise ValidationError("A reason is required for an XP adjustment")
    adjustment = XpAdjustment(amount=amount, reason=reason.strip(), date=now)
    return replace(
        player,
        stats=replace(player.stats, xp=player.stats.xp + amount),
        xp_adjustments=player.xp_adjustments + (adjustment,),
    )
