"""Registration and on-site admission of players.

A player moves from ``signed_up_players`` to exactly one of ``attendees``
(confirm_attendance) or ``absent_players`` (mark_absent). All functions are
pure: they return new records and leave their inputs untouched, so a
rejected operation never leaves partial state behind.
"""

from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime

from matchday.domain.errors import (
    MissingDiscountReasonError,
    OutOfStockError,
    PlayerNotSignedUpError,
    ValidationError,
)
from matchday.domain.inventory import available_stock, unrented_stock
from matchday.domain.lifecycle import ensure_status
from matchday.domain.models import Attendee, Event, InventoryItem, RentalSignup, Voucher
from matchday.domain.value_objects import EventStatus, ItemId, Money, PaymentStatus, PlayerId
from matchday.domain.vouchers import redeem, voucher_discount

# Longest reason that still fits the event fee ledger description.
MAX_DISCOUNT_REASON_LENGTH = 200


@dataclass(frozen=True)
class Admission:
    """Result of confirming attendance."""

    event: Event
    attendee: Attendee
    voucher: Voucher | None = None


def _check_stock(
    gear_ids: Sequence[ItemId],
    inventory: Sequence[InventoryItem],
    remaining: Callable[[InventoryItem], int],
) -> None:
    items = {item.id: item for item in inventory}
    for gear_id, wanted in Counter(gear_ids).items():
        item = items.get(gear_id)
        if item is None:
            raise ValidationError(f"Unknown rental item {gear_id}")
        if remaining(item) < wanted:
            raise OutOfStockError(gear_id, item.name)


def _without_pending(event: Event, player_id: PlayerId) -> Event:
    return replace(
        event,
        signed_up_players=tuple(p for p in event.signed_up_players if p != player_id),
        rental_signups=tuple(s for s in event.rental_signups if s.player_id != player_id),
    )


def sign_up(
    event: Event,
    player_id: PlayerId,
    inventory: Sequence[InventoryItem],
    requested_gear_ids: Sequence[ItemId] = (),
    note: str | None = None,
) -> Event:
    """Register a player for an upcoming event, optionally requesting rental gear."""
    ensure_status(event, EventStatus.UPCOMING, action="sign up for")
    if event.is_registered(player_id):
        raise ValidationError("Player is already registered for this event")
    offered = set(event.gear_for_rent)
    for gear_id in requested_gear_ids:
        if gear_id not in offered:
            raise ValidationError(f"Item {gear_id} is not offered for rent at this event")
    _check_stock(requested_gear_ids, inventory, lambda item: available_stock(item, event))

    signups = event.rental_signups
    if requested_gear_ids or note:
        signups += (
            RentalSignup(player_id=player_id, requested_gear_ids=tuple(requested_gear_ids), note=note or None),
        )
    return replace(
        event,
        signed_up_players=event.signed_up_players + (player_id,),
        rental_signups=signups,
    )


def withdraw(event: Event, player_id: PlayerId) -> Event:
    """Cancel a pending sign-up together with its rental request."""
    ensure_status(event, EventStatus.UPCOMING, action="withdraw from")
    if player_id not in event.signed_up_players:
        raise PlayerNotSignedUpError(player_id)
    return _without_pending(event, player_id)


def confirm_attendance(
    event: Event,
    player_id: PlayerId,
    payment_status: PaymentStatus,
    inventory: Sequence[InventoryItem],
    *,
    now: datetime,
    voucher_code: str | None = None,
    voucher: Voucher | None = None,
    requested_gear_ids: Sequence[ItemId] = (),
    note: str | None = None,
    manual_discount: Money | None = None,
    discount_reason: str | None = None,
) -> Admission:
    """Turn a signed-up player into a confirmed attendee.

    ``voucher`` is the record the caller resolved for ``voucher_code``
    (None when the code matched nothing).

    Raises:
        InvalidStateTransitionError: If the event is not Upcoming.
        PlayerNotSignedUpError: If the player has no pending sign-up.
        OutOfStockError: If confirmed attendees already hold every unit
            of a requested item.
        MissingDiscountReasonError: If a manual discount has no reason.
        ValidationError: If the discount reason is too long.
        VoucherRejectedError: If the voucher code cannot be redeemed.
    """
    ensure_status(event, EventStatus.UPCOMING, action="confirm attendance for")
    if player_id not in event.signed_up_players:
        raise PlayerNotSignedUpError(player_id)

    _check_stock(requested_gear_ids, inventory, lambda item: unrented_stock(item, event))

    discount = manual_discount or Money.zero()
    reason = (discount_reason or "").strip() or None
    if discount and reason is None:
        raise MissingDiscountReasonError()
    if reason and len(reason) > MAX_DISCOUNT_REASON_LENGTH:
        raise ValidationError(f"Discount reason must be at most {MAX_DISCOUNT_REASON_LENGTH} characters")

    redeemed = None
    code = (voucher_code or "").strip()
    granted = Money.zero()
    if code:
        redeemed = redeem(voucher, player_id, event.id, now)
        granted = voucher_discount(redeemed, event.game_fee)

    if note is None:
        pending = event.rental_signup(player_id)
        note = pending.note if pending else None

    attendee = Attendee(
        player_id=player_id,
        payment_status=payment_status,
        voucher_code=redeemed.code if redeemed else None,
        rented_gear_ids=tuple(requested_gear_ids),
        note=note or None,
        discount_amount=discount,
        discount_reason=reason,
        voucher_discount=granted,
    )
    updated = _without_pending(event, player_id)
    updated = replace(updated, attendees=updated.attendees + (attendee,))
    return Admission(event=updated, attendee=attendee, voucher=redeemed)


def mark_absent(event: Event, player_id: PlayerId) -> Event:
    """Record a signed-up player as a no-show. No financial or stock effect."""
    ensure_status(event, EventStatus.UPCOMING, action="mark absence for")
    if player_id not in event.signed_up_players:
        raise PlayerNotSignedUpError(player_id)
    updated = _without_pending(event, player_id)
    return replace(updated, absent_players=updated.absent_players + (player_id,))
