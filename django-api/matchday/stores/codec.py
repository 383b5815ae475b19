"""Conversion between domain records and JSON documents.

The Django store keeps aggregate collections (attendees, sign-ups, live
stats, redemptions, match history) as JSON documents on the row.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from matchday.domain import (
    Attendee,
    EventId,
    ItemId,
    MatchRecord,
    Money,
    PaymentStatus,
    PlayerId,
    Redemption,
    RentalSignup,
    StatLine,
    Teams,
    XpAdjustment,
)


def money_to_str(money: Money) -> str:
    return str(money.amount)


def money_from(value: Any) -> Money:
    return Money(Decimal(str(value)))


def stat_line_to_dict(line: StatLine) -> dict[str, int]:
    return {"kills": line.kills, "deaths": line.deaths, "headshots": line.headshots}


def stat_line_from_dict(data: dict[str, Any]) -> StatLine:
    return StatLine(
        kills=int(data.get("kills", 0)),
        deaths=int(data.get("deaths", 0)),
        headshots=int(data.get("headshots", 0)),
    )


def live_stats_to_dict(live_stats: dict[PlayerId, StatLine]) -> dict[str, dict[str, int]]:
    return {str(pid): stat_line_to_dict(line) for pid, line in live_stats.items()}


def live_stats_from_dict(data: dict[str, Any]) -> dict[PlayerId, StatLine]:
    return {PlayerId.from_string(pid): stat_line_from_dict(line) for pid, line in (data or {}).items()}


def ids_to_list(ids: tuple) -> list[str]:
    return [str(i) for i in ids]


def player_ids_from(values: list[str]) -> tuple[PlayerId, ...]:
    return tuple(PlayerId.from_string(v) for v in values or [])


def item_ids_from(values: list[str]) -> tuple[ItemId, ...]:
    return tuple(ItemId.from_string(v) for v in values or [])


def rental_signup_to_dict(signup: RentalSignup) -> dict[str, Any]:
    return {
        "playerId": str(signup.player_id),
        "requestedGearIds": ids_to_list(signup.requested_gear_ids),
        "note": signup.note,
    }


def rental_signup_from_dict(data: dict[str, Any]) -> RentalSignup:
    return RentalSignup(
        player_id=PlayerId.from_string(data["playerId"]),
        requested_gear_ids=item_ids_from(data.get("requestedGearIds")),
        note=data.get("note"),
    )


def attendee_to_dict(attendee: Attendee) -> dict[str, Any]:
    return {
        "playerId": str(attendee.player_id),
        "paymentStatus": attendee.payment_status.value,
        "voucherCode": attendee.voucher_code,
        "rentedGearIds": ids_to_list(attendee.rented_gear_ids),
        "note": attendee.note,
        "discountAmount": money_to_str(attendee.discount_amount),
        "discountReason": attendee.discount_reason,
        "voucherDiscount": money_to_str(attendee.voucher_discount),
    }


def attendee_from_dict(data: dict[str, Any]) -> Attendee:
    return Attendee(
        player_id=PlayerId.from_string(data["playerId"]),
        payment_status=PaymentStatus(data["paymentStatus"]),
        voucher_code=data.get("voucherCode"),
        rented_gear_ids=item_ids_from(data.get("rentedGearIds")),
        note=data.get("note"),
        discount_amount=money_from(data.get("discountAmount", "0")),
        discount_reason=data.get("discountReason"),
        voucher_discount=money_from(data.get("voucherDiscount", "0")),
    )


def teams_to_dict(teams: Teams | None) -> dict[str, list[str]] | None:
    if teams is None:
        return None
    return {"sideA": ids_to_list(teams.side_a), "sideB": ids_to_list(teams.side_b)}


def teams_from_dict(data: dict[str, Any] | None) -> Teams | None:
    if not data:
        return None
    return Teams(side_a=player_ids_from(data["sideA"]), side_b=player_ids_from(data["sideB"]))


def redemption_to_dict(redemption: Redemption) -> dict[str, str]:
    return {
        "playerId": str(redemption.player_id),
        "eventId": str(redemption.event_id),
        "date": redemption.date.isoformat(),
    }


def redemption_from_dict(data: dict[str, Any]) -> Redemption:
    return Redemption(
        player_id=PlayerId.from_string(data["playerId"]),
        event_id=EventId.from_string(data["eventId"]),
        date=datetime.fromisoformat(data["date"]),
    )


def match_record_to_dict(record: MatchRecord) -> dict[str, Any]:
    return {"eventId": str(record.event_id), "playerStats": stat_line_to_dict(record.player_stats)}


def match_record_from_dict(data: dict[str, Any]) -> MatchRecord:
    return MatchRecord(
        event_id=EventId.from_string(data["eventId"]),
        player_stats=stat_line_from_dict(data["playerStats"]),
    )


def xp_adjustment_to_dict(adjustment: XpAdjustment) -> dict[str, Any]:
    return {"amount": adjustment.amount, "reason": adjustment.reason, "date": adjustment.date.isoformat()}


def xp_adjustment_from_dict(data: dict[str, Any]) -> XpAdjustment:
    return XpAdjustment(
        amount=int(data["amount"]),
        reason=data["reason"],
        date=datetime.fromisoformat(data["date"]),
    )
