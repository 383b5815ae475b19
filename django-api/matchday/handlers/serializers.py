"""Serializers for parsing requests and rendering domain models.

Input serializers only check shape; every business rule is enforced by the
services.
"""

from decimal import Decimal

from rest_framework import serializers

from matchday.domain import ItemId, Money, PaymentStatus, PlayerId, StatKind
from matchday.domain.admission import MAX_DISCOUNT_REASON_LENGTH
from matchday.domain.drafts import EventDetails
from matchday.domain.value_objects import EventType


class MoneyField(serializers.Field):
    def to_representation(self, value: Money) -> str:
        return str(value)


class IdField(serializers.Field):
    def to_representation(self, value) -> str:
        return str(value)


class IdListField(serializers.Field):
    def to_representation(self, value) -> list[str]:
        return [str(v) for v in value]


def _values(enum) -> list[str]:
    return [member.value for member in enum]


# Output


class AttendeeSerializer(serializers.Serializer):
    player_id = IdField()
    payment_status = serializers.CharField()
    voucher_code = serializers.CharField(allow_null=True)
    rented_gear_ids = IdListField()
    note = serializers.CharField(allow_null=True)
    discount_amount = MoneyField()
    discount_reason = serializers.CharField(allow_null=True)
    voucher_discount = MoneyField()


class RentalSignupSerializer(serializers.Serializer):
    player_id = IdField()
    requested_gear_ids = IdListField()
    note = serializers.CharField(allow_null=True)


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = IdField()
    title = serializers.CharField()
    event_type = serializers.CharField()
    date = serializers.DateField()
    start_time = serializers.TimeField(allow_null=True)
    location = serializers.CharField()
    description = serializers.CharField()
    theme = serializers.CharField()
    rules = serializers.CharField()
    status = serializers.CharField()
    game_fee = MoneyField()
    participation_xp = serializers.IntegerField()
    xp_overrides = serializers.DictField(child=serializers.IntegerField())
    gear_for_rent = IdListField()
    signed_up_players = IdListField()
    rental_signups = RentalSignupSerializer(many=True)
    attendees = AttendeeSerializer(many=True)
    absent_players = IdListField()
    teams = serializers.SerializerMethodField()
    live_stats = serializers.SerializerMethodField()
    game_duration_seconds = serializers.IntegerField()
    version = serializers.IntegerField()

    def get_teams(self, event) -> dict | None:
        if event.teams is None:
            return None
        return {
            "side_a": [str(p) for p in event.teams.side_a],
            "side_b": [str(p) for p in event.teams.side_b],
        }

    def get_live_stats(self, event) -> dict:
        return {
            str(pid): {"kills": line.kills, "deaths": line.deaths, "headshots": line.headshots}
            for pid, line in event.live_stats.items()
        }


class TransactionSerializer(serializers.Serializer):
    id = serializers.CharField()
    date = serializers.DateField()
    type = serializers.CharField()
    description = serializers.CharField()
    amount = MoneyField()
    related_event_id = IdField(allow_null=True)
    related_player_id = IdField(allow_null=True)
    related_inventory_id = IdField(allow_null=True)
    payment_status = serializers.CharField(allow_null=True)


class SettlementSerializer(serializers.Serializer):
    event = EventSerializer()
    transactions = TransactionSerializer(many=True)
    earned_xp = serializers.SerializerMethodField()

    def get_earned_xp(self, result) -> dict[str, int]:
        return {str(pid): xp for pid, xp in result.earned_xp.items()}


class PlayerStatsSerializer(serializers.Serializer):
    kills = serializers.IntegerField()
    deaths = serializers.IntegerField()
    headshots = serializers.IntegerField()
    games_played = serializers.IntegerField()
    xp = serializers.IntegerField()


class PlayerSerializer(serializers.Serializer):
    id = IdField()
    name = serializers.CharField()
    callsign = serializers.CharField()
    stats = PlayerStatsSerializer()


class RankSerializer(serializers.Serializer):
    name = serializers.CharField()
    tier = serializers.CharField()
    min_xp = serializers.IntegerField()
    unlocks = serializers.ListField(child=serializers.CharField())


# Input


class EventDetailsSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    date = serializers.DateField()
    game_fee = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"))
    participation_xp = serializers.IntegerField(min_value=0)
    event_type = serializers.ChoiceField(choices=_values(EventType), default=EventType.MISSION.value)
    start_time = serializers.TimeField(required=False, allow_null=True, default=None)
    location = serializers.CharField(required=False, allow_blank=True, default="")
    description = serializers.CharField(required=False, allow_blank=True, default="")
    theme = serializers.CharField(required=False, allow_blank=True, default="")
    rules = serializers.CharField(required=False, allow_blank=True, default="")
    xp_overrides = serializers.DictField(child=serializers.IntegerField(), required=False, default=dict)
    gear_for_rent = serializers.ListField(child=serializers.UUIDField(), required=False, default=list)

    def to_details(self) -> EventDetails:
        data = self.validated_data
        return EventDetails(
            title=data["title"],
            date=data["date"],
            game_fee=Money(data["game_fee"]),
            participation_xp=data["participation_xp"],
            event_type=EventType(data["event_type"]),
            start_time=data["start_time"],
            location=data["location"],
            description=data["description"],
            theme=data["theme"],
            rules=data["rules"],
            xp_overrides=dict(data["xp_overrides"]),
            gear_for_rent=tuple(ItemId(v) for v in data["gear_for_rent"]),
        )


class SignUpSerializer(serializers.Serializer):
    player_id = serializers.UUIDField()
    gear_ids = serializers.ListField(child=serializers.UUIDField(), required=False, default=list)
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)


class ConfirmAttendanceSerializer(serializers.Serializer):
    player_id = serializers.UUIDField()
    payment_status = serializers.ChoiceField(choices=_values(PaymentStatus))
    voucher_code = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    gear_ids = serializers.ListField(child=serializers.UUIDField(), required=False, default=list)
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    manual_discount = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False, default=Decimal("0")
    )
    discount_reason = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=None, max_length=MAX_DISCOUNT_REASON_LENGTH
    )


class PlayerRefSerializer(serializers.Serializer):
    player_id = serializers.UUIDField()


class StatSerializer(serializers.Serializer):
    player_id = serializers.UUIDField()
    stat = serializers.ChoiceField(choices=_values(StatKind))
    delta = serializers.ChoiceField(choices=[1, -1])


class ClockSerializer(serializers.Serializer):
    elapsed_seconds = serializers.IntegerField(min_value=0)


class FinishSerializer(serializers.Serializer):
    elapsed_seconds = serializers.IntegerField(min_value=0, required=False, allow_null=True, default=None)


class XpAdjustmentSerializer(serializers.Serializer):
    amount = serializers.IntegerField()
    reason = serializers.CharField(max_length=255)


def player_id_of(data) -> PlayerId:
    return PlayerId(data["player_id"])


def gear_ids_of(data) -> tuple[ItemId, ...]:
    return tuple(ItemId(v) for v in data.get("gear_ids", []))


