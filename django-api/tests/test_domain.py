"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

from dataclasses import replace
from decimal import Decimal
from uuid import UUID

import pytest

from matchday.domain import Capacity, EventId, Money, StatLine, StatKind
from matchday.domain.errors import (
    ErrorCode,
    InvalidStateTransitionError,
    OutOfStockError,
    VoucherRejectedError,
    VoucherRejection,
)
from tests.builders import make_attendee, make_event, make_player, money


class TestMoney:
    """Tests for Money value object."""

    def test_money_accepts_positive_amount(self):
        """Money can be created with positive amount."""
        assert Money(Decimal("12.50")).amount == Decimal("12.50")

    def test_money_accepts_zero(self):
        """Money can be created with zero."""
        assert Money.zero().amount == Decimal("0")
        assert not Money.zero()

    def test_money_rejects_negative_amount(self):
        """Money raises ValueError for negative amount."""
        with pytest.raises(ValueError):
            Money(Decimal("-0.01"))

    def test_money_str_format(self):
        """Money string representation is formatted to 2 decimal places."""
        assert str(Money(Decimal("250"))) == "250.00"

    def test_money_coerces_numbers_to_decimal(self):
        """Plain numbers are converted without float noise."""
        assert Money(0.1).amount == Decimal("0.1")

    def test_money_addition(self):
        assert money(50) + money("12.5") == money("62.5")


class TestCapacity:
    """Tests for Capacity value object."""

    def test_capacity_accepts_positive_value(self):
        """Capacity can be created with positive value."""
        assert Capacity(3).value == 3

    def test_capacity_accepts_zero(self):
        """Capacity can be created with zero."""
        assert Capacity(0).value == 0

    def test_capacity_rejects_negative_value(self):
        """Capacity raises ValueError for negative value."""
        with pytest.raises(ValueError):
            Capacity(-1)


class TestEventId:
    """Tests for EventId value object."""

    def test_from_string_valid_uuid(self):
        """EventId.from_string parses valid UUID."""
        raw = "6f1c2a56-2d0b-4e39-9d5e-1b7f0f7f9a10"
        assert EventId.from_string(raw).value == UUID(raw)
        assert str(EventId.from_string(raw)) == raw

    def test_from_string_invalid_uuid(self):
        """EventId.from_string raises ValueError for invalid UUID."""
        with pytest.raises(ValueError):
            EventId.from_string("not-a-uuid")


class TestRecords:
    """Tests for helpers on the aggregate records."""

    def test_stat_line_get_by_kind(self):
        line = StatLine(kills=8, deaths=3, headshots=2)
        assert line.get(StatKind.KILLS) == 8
        assert line.get(StatKind.DEATHS) == 3
        assert line.get(StatKind.HEADSHOTS) == 2

    def test_attendee_total_discount_adds_voucher_discount(self):
        attendee = make_attendee(make_player().id, discount="50")
        attendee = replace(attendee, voucher_discount=money(25))
        assert attendee.total_discount == money(75)

    def test_event_is_registered_covers_all_three_sets(self):
        pending, confirmed, absent, stranger = (make_player() for _ in range(4))
        event = make_event(
            signed_up_players=(pending.id,),
            attendees=(make_attendee(confirmed.id),),
            absent_players=(absent.id,),
        )
        assert event.is_registered(pending.id)
        assert event.is_registered(confirmed.id)
        assert event.is_registered(absent.id)
        assert not event.is_registered(stranger.id)


class TestErrors:
    """Tests for domain error formatting."""

    def test_error_str_includes_code(self):
        error = OutOfStockError("item-1", "M4 AEG Rifle")
        assert str(error) == 'OUT_OF_STOCK: No stock available for rental "M4 AEG Rifle"'
        assert error.item_id == "item-1"

    def test_voucher_rejection_carries_reason(self):
        error = VoucherRejectedError(VoucherRejection.WRONG_OWNER)
        assert error.code is ErrorCode.VOUCHER_REJECTED
        assert error.reason is VoucherRejection.WRONG_OWNER

    def test_invalid_transition_message_names_status(self):
        error = InvalidStateTransitionError("Completed", "finish")
        assert error.message == "Cannot finish an event that is Completed"
