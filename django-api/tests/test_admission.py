"""Sign-up, withdrawal and on-site admission."""

import pytest

from matchday.domain import EventStatus, PaymentStatus, VoucherStatus
from matchday.domain.admission import (
    MAX_DISCOUNT_REASON_LENGTH,
    confirm_attendance,
    mark_absent,
    sign_up,
    withdraw,
)
from matchday.domain.errors import (
    InvalidStateTransitionError,
    MissingDiscountReasonError,
    OutOfStockError,
    PlayerNotSignedUpError,
    ValidationError,
    VoucherRejectedError,
    VoucherRejection,
)
from tests.builders import (
    NOW,
    make_attendee,
    make_event,
    make_item,
    make_player,
    make_signup,
    make_voucher,
    money,
)


def _disjoint(event) -> bool:
    pending = set(event.signed_up_players)
    confirmed = {a.player_id for a in event.attendees}
    absent = set(event.absent_players)
    return not (pending & confirmed or pending & absent or confirmed & absent)


def _confirm(event, player_id, inventory=(), **kwargs):
    kwargs.setdefault("now", NOW)
    return confirm_attendance(event, player_id, PaymentStatus.PAID_CARD, inventory, **kwargs)


class TestSignUp:
    def test_adds_player_to_pending(self):
        player = make_player()
        event = sign_up(make_event(), player.id, [])
        assert event.signed_up_players == (player.id,)
        assert event.rental_signups == ()

    def test_records_rental_request(self):
        rifle = make_item()
        player = make_player()
        event = sign_up(make_event(gear_for_rent=(rifle.id,)), player.id, [rifle], [rifle.id], "Left-handed")
        assert event.rental_signups == (make_signup(player.id, gear=(rifle.id,), note="Left-handed"),)

    def test_rejects_duplicate_registration(self):
        player = make_player()
        event = make_event(absent_players=(player.id,))
        with pytest.raises(ValidationError):
            sign_up(event, player.id, [])

    def test_rejects_gear_not_offered(self):
        rifle = make_item()
        with pytest.raises(ValidationError):
            sign_up(make_event(), make_player().id, [rifle], [rifle.id])

    def test_pending_request_blocks_next_player(self):
        """A pending rental request holds the unit before admission."""
        rifle = make_item(stock=1)
        event = make_event(gear_for_rent=(rifle.id,))
        event = sign_up(event, make_player().id, [rifle], [rifle.id])
        with pytest.raises(OutOfStockError):
            sign_up(event, make_player().id, [rifle], [rifle.id])

    def test_rejected_once_event_started(self):
        with pytest.raises(InvalidStateTransitionError):
            sign_up(make_event(status=EventStatus.IN_PROGRESS), make_player().id, [])


class TestWithdraw:
    def test_removes_pending_signup_and_request(self):
        rifle = make_item()
        player = make_player()
        event = make_event(
            gear_for_rent=(rifle.id,),
            signed_up_players=(player.id,),
            rental_signups=(make_signup(player.id, gear=(rifle.id,)),),
        )
        event = withdraw(event, player.id)
        assert event.signed_up_players == ()
        assert event.rental_signups == ()

    def test_requires_pending_signup(self):
        with pytest.raises(PlayerNotSignedUpError):
            withdraw(make_event(), make_player().id)


class TestConfirmAttendance:
    def test_moves_player_to_attendees(self):
        player = make_player()
        event = make_event(signed_up_players=(player.id,))
        admission = _confirm(event, player.id)
        assert admission.event.signed_up_players == ()
        assert admission.event.attendee(player.id) == admission.attendee
        assert admission.attendee.payment_status is PaymentStatus.PAID_CARD
        assert _disjoint(admission.event)

    def test_requires_pending_signup(self):
        with pytest.raises(PlayerNotSignedUpError):
            _confirm(make_event(), make_player().id)

    def test_second_player_out_of_stock(self):
        """With one rifle, the second player is rejected and state is unchanged."""
        rifle = make_item(stock=1)
        player_a, player_b = make_player(), make_player()
        event = make_event(gear_for_rent=(rifle.id,), signed_up_players=(player_a.id, player_b.id))
        event = _confirm(event, player_a.id, [rifle], requested_gear_ids=[rifle.id]).event

        with pytest.raises(OutOfStockError) as exc_info:
            _confirm(event, player_b.id, [rifle], requested_gear_ids=[rifle.id])

        assert exc_info.value.item_id == rifle.id
        assert event.signed_up_players == (player_b.id,)
        assert len(event.attendees) == 1

    def test_pending_requests_do_not_block_admission(self):
        """Both players asked for the only rifle; first admitted gets it."""
        rifle = make_item(stock=1)
        player_a, player_b = make_player(), make_player()
        event = make_event(
            gear_for_rent=(rifle.id,),
            signed_up_players=(player_a.id, player_b.id),
            rental_signups=(
                make_signup(player_a.id, gear=(rifle.id,)),
                make_signup(player_b.id, gear=(rifle.id,)),
            ),
        )

        event = _confirm(event, player_a.id, [rifle], requested_gear_ids=[rifle.id]).event
        assert event.attendee(player_a.id).rented_gear_ids == (rifle.id,)

        with pytest.raises(OutOfStockError):
            _confirm(event, player_b.id, [rifle], requested_gear_ids=[rifle.id])

    def test_own_pending_request_does_not_block(self):
        rifle = make_item(stock=1)
        player = make_player()
        event = make_event(
            gear_for_rent=(rifle.id,),
            signed_up_players=(player.id,),
            rental_signups=(make_signup(player.id, gear=(rifle.id,), note="Bring spare mag"),),
        )
        admission = _confirm(event, player.id, [rifle], requested_gear_ids=[rifle.id])
        assert admission.attendee.rented_gear_ids == (rifle.id,)
        assert admission.attendee.note == "Bring spare mag"
        assert admission.event.rental_signups == ()

    def test_duplicate_gear_needs_that_many_units(self):
        rifle = make_item(stock=1)
        player = make_player()
        event = make_event(gear_for_rent=(rifle.id,), signed_up_players=(player.id,))
        with pytest.raises(OutOfStockError):
            _confirm(event, player.id, [rifle], requested_gear_ids=[rifle.id, rifle.id])

    def test_unknown_item_is_rejected(self):
        player = make_player()
        event = make_event(signed_up_players=(player.id,))
        with pytest.raises(ValidationError):
            _confirm(event, player.id, [], requested_gear_ids=[make_item().id])

    def test_manual_discount_requires_reason(self):
        player = make_player()
        event = make_event(signed_up_players=(player.id,))
        with pytest.raises(MissingDiscountReasonError):
            _confirm(event, player.id, manual_discount=money(50), discount_reason="  ")

    def test_manual_discount_with_reason(self):
        player = make_player()
        event = make_event(signed_up_players=(player.id,))
        attendee = _confirm(event, player.id, manual_discount=money(50), discount_reason="Marshal").attendee
        assert attendee.discount_amount == money(50)
        assert attendee.discount_reason == "Marshal"

    def test_overlong_discount_reason_is_rejected(self):
        player = make_player()
        event = make_event(signed_up_players=(player.id,))
        reason = "x" * (MAX_DISCOUNT_REASON_LENGTH + 1)
        with pytest.raises(ValidationError):
            _confirm(event, player.id, manual_discount=money(50), discount_reason=reason)

    def test_voucher_is_redeemed(self):
        player = make_player()
        event = make_event(signed_up_players=(player.id,))
        voucher = make_voucher(usage_limit=1)
        admission = _confirm(event, player.id, voucher_code="welcome50", voucher=voucher)
        assert admission.attendee.voucher_code == "WELCOME50"
        assert admission.attendee.voucher_discount == money(50)
        assert admission.voucher.status is VoucherStatus.DEPLETED
        assert admission.voucher.redemptions[0].event_id == event.id

    def test_unknown_voucher_code_is_rejected(self):
        player = make_player()
        event = make_event(signed_up_players=(player.id,))
        with pytest.raises(VoucherRejectedError) as exc_info:
            _confirm(event, player.id, voucher_code="BOGUS", voucher=None)
        assert exc_info.value.reason is VoucherRejection.NOT_FOUND

    def test_stock_is_checked_before_voucher(self):
        rifle = make_item(stock=0)
        player = make_player()
        event = make_event(gear_for_rent=(rifle.id,), signed_up_players=(player.id,))
        with pytest.raises(OutOfStockError):
            _confirm(event, player.id, [rifle], requested_gear_ids=[rifle.id], voucher_code="BOGUS")


class TestMarkAbsent:
    def test_moves_player_to_absent(self):
        player = make_player()
        event = mark_absent(make_event(signed_up_players=(player.id,)), player.id)
        assert event.absent_players == (player.id,)
        assert event.signed_up_players == ()
        assert _disjoint(event)

    def test_attendee_cannot_be_marked_absent(self):
        player = make_player()
        event = make_event(attendees=(make_attendee(player.id),))
        with pytest.raises(PlayerNotSignedUpError):
            mark_absent(event, player.id)
