"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
Aggregate collections are stored as JSON documents on the owning row.
"""

import uuid

from django.db import models

from matchday.domain.value_objects import (
    BadgeCriteria,
    DiscountType,
    EventStatus,
    EventType,
    PaymentStatus,
    TransactionType,
    VoucherStatus,
)


def _choices(enum) -> list[tuple[str, str]]:
    return [(member.value, member.value) for member in enum]


class EventRecord(models.Model):
    """Persistence model for game events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    event_type = models.CharField(max_length=20, choices=_choices(EventType), default=EventType.MISSION.value)
    date = models.DateField()
    start_time = models.TimeField(blank=True, null=True)
    location = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    theme = models.CharField(max_length=100, blank=True)
    rules = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=_choices(EventStatus), default=EventStatus.UPCOMING.value)
    game_fee = models.DecimalField(max_digits=10, decimal_places=2)
    participation_xp = models.IntegerField(default=0)
    xp_overrides = models.JSONField(default=dict, blank=True)
    gear_for_rent = models.JSONField(default=list, blank=True)
    signed_up_players = models.JSONField(default=list, blank=True)
    rental_signups = models.JSONField(default=list, blank=True)
    attendees = models.JSONField(default=list, blank=True)
    absent_players = models.JSONField(default=list, blank=True)
    teams = models.JSONField(blank=True, null=True)
    live_stats = models.JSONField(default=dict, blank=True)
    game_duration_seconds = models.PositiveIntegerField(default=0)
    version = models.PositiveIntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date"]
        indexes = [
            models.Index(fields=["-date"]),
            models.Index(fields=["status"]),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.date})"


class PlayerRecord(models.Model):
    """Persistence model for player profiles and lifetime stats."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    callsign = models.CharField(max_length=100, blank=True)
    kills = models.PositiveIntegerField(default=0)
    deaths = models.PositiveIntegerField(default=0)
    headshots = models.PositiveIntegerField(default=0)
    games_played = models.PositiveIntegerField(default=0)
    xp = models.IntegerField(default=0)
    match_history = models.JSONField(default=list, blank=True)
    xp_adjustments = models.JSONField(default=list, blank=True)
    badge_ids = models.JSONField(default=list, blank=True)
    version = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.callsign or self.name


class VoucherRecord(models.Model):
    """Persistence model for voucher codes."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=50)
    code_lower = models.CharField(max_length=50, unique=True, editable=False)
    description = models.CharField(max_length=255, blank=True)
    discount_value = models.DecimalField(max_digits=10, decimal_places=2)
    discount_type = models.CharField(max_length=20, choices=_choices(DiscountType))
    status = models.CharField(max_length=20, choices=_choices(VoucherStatus), default=VoucherStatus.ACTIVE.value)
    assigned_to_player = models.UUIDField(blank=True, null=True)
    usage_limit = models.PositiveIntegerField(blank=True, null=True)
    per_user_limit = models.PositiveIntegerField(blank=True, null=True)
    redemptions = models.JSONField(default=list, blank=True)
    version = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["code"]

    def save(self, *args, **kwargs):
        self.code_lower = self.code.lower()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.code


class InventoryItemRecord(models.Model):
    """Persistence model for inventory items."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=50, default="Other")
    sale_price = models.DecimalField(max_digits=10, decimal_places=2)
    stock = models.PositiveIntegerField(default=0)
    is_rental = models.BooleanField(default=False)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name} - {self.sale_price}"


class TransactionRecord(models.Model):
    """Append-only ledger entry."""

    id = models.CharField(primary_key=True, max_length=255)
    date = models.DateField()
    type = models.CharField(max_length=20, choices=_choices(TransactionType))
    description = models.CharField(max_length=500)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    related_event_id = models.UUIDField(blank=True, null=True)
    related_player_id = models.UUIDField(blank=True, null=True)
    related_inventory_id = models.UUIDField(blank=True, null=True)
    payment_status = models.CharField(max_length=20, choices=_choices(PaymentStatus), blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date", "id"]
        indexes = [
            models.Index(fields=["related_event_id"]),
        ]

    def __str__(self) -> str:
        return f"{self.type}: {self.amount}"


class GamificationRuleRecord(models.Model):
    id = models.CharField(primary_key=True, max_length=50)
    name = models.CharField(max_length=100)
    description = models.CharField(max_length=255, blank=True)
    xp = models.IntegerField()

    def __str__(self) -> str:
        return f"{self.name} ({self.xp} XP)"


class RankRecord(models.Model):
    name = models.CharField(max_length=100, unique=True)
    tier = models.CharField(max_length=100)
    min_xp = models.IntegerField()
    unlocks = models.JSONField(default=list, blank=True)
    badge_awarded = models.CharField(max_length=50, blank=True, null=True)

    class Meta:
        ordering = ["min_xp"]

    def __str__(self) -> str:
        return self.name


class BadgeRecord(models.Model):
    id = models.CharField(primary_key=True, max_length=50)
    name = models.CharField(max_length=100)
    description = models.CharField(max_length=255, blank=True)
    criteria_type = models.CharField(max_length=20, choices=_choices(BadgeCriteria))
    criteria_value = models.CharField(max_length=100, blank=True)

    def __str__(self) -> str:
        return self.name
