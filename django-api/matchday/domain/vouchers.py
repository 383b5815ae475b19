"""Voucher redemption rules."""

from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from matchday.domain.errors import VoucherRejectedError, VoucherRejection
from matchday.domain.models import Redemption, Voucher
from matchday.domain.value_objects import (
    DiscountType,
    EventId,
    Money,
    PlayerId,
    VoucherStatus,
)


def find_voucher(vouchers: Iterable[Voucher], code: str) -> Voucher | None:
    """Case-insensitive lookup by code."""
    wanted = code.strip().lower()
    return next((v for v in vouchers if v.code.lower() == wanted), None)


def _limit_reached(voucher: Voucher) -> bool:
    return voucher.usage_limit is not None and len(voucher.redemptions) >= voucher.usage_limit


def validate_redemption(voucher: Voucher | None, player_id: PlayerId) -> Voucher:
    """Check a voucher can be redeemed by ``player_id``.

    Checks run in a fixed order and stop at the first failure.

    Returns:
        The voucher, narrowed to non-None.

    Raises:
        VoucherRejectedError: With the first failing reason.
    """
    if voucher is None:
        raise VoucherRejectedError(VoucherRejection.NOT_FOUND)
    if voucher.status != VoucherStatus.ACTIVE:
        # Depleted by its own redemptions reads as exhausted, not switched off.
        if voucher.status == VoucherStatus.DEPLETED and _limit_reached(voucher):
            raise VoucherRejectedError(VoucherRejection.GLOBALLY_DEPLETED)
        raise VoucherRejectedError(VoucherRejection.INACTIVE)
    if voucher.assigned_to_player_id is not None and voucher.assigned_to_player_id != player_id:
        raise VoucherRejectedError(VoucherRejection.WRONG_OWNER)
    if _limit_reached(voucher):
        raise VoucherRejectedError(VoucherRejection.GLOBALLY_DEPLETED)
    if voucher.per_user_limit is not None and voucher.redemptions_by(player_id) >= voucher.per_user_limit:
        raise VoucherRejectedError(VoucherRejection.PER_USER_LIMIT_REACHED)
    return voucher


def redeem(
    voucher: Voucher | None, player_id: PlayerId, event_id: EventId, now: datetime
) -> Voucher:
    """Validate and record one use of the voucher.

    The returned voucher is Depleted once its redemptions reach the usage limit.
    """
    voucher = validate_redemption(voucher, player_id)
    redemptions = voucher.redemptions + (Redemption(player_id=player_id, event_id=event_id, date=now),)
    status = voucher.status
    if voucher.usage_limit is not None and len(redemptions) >= voucher.usage_limit:
        status = VoucherStatus.DEPLETED
    return replace(voucher, redemptions=redemptions, status=status)


def voucher_discount(voucher: Voucher, fee: Money) -> Money:
    """Discount the voucher grants against ``fee``, never more than the fee."""
    value = voucher.discount_value
    if voucher.discount_type == DiscountType.PERCENTAGE:
        value = (fee.amount * value / Decimal(100)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return Money(max(Decimal(0), min(value, fee.amount)))
