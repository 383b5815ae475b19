"""Django ORM implementation of the stores.

Versioned writes use a conditional UPDATE (``filter(id, version).update``)
so a stale writer updates zero rows and is rejected.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace

from django.db import IntegrityError, transaction
from django.utils import timezone

from matchday.domain import (
    Badge,
    Capacity,
    DiscountType,
    Event,
    EventId,
    EventStatus,
    GamificationRule,
    InventoryItem,
    ItemId,
    Player,
    PlayerId,
    PlayerStats,
    Rank,
    Transaction,
    TransactionType,
    Voucher,
    VoucherStatus,
)
from matchday.domain.errors import ConcurrentModificationError, DuplicateTransactionError
from matchday.domain.value_objects import BadgeCriteria, EventType, PaymentStatus
from matchday.models import (
    BadgeRecord,
    EventRecord,
    GamificationRuleRecord,
    InventoryItemRecord,
    PlayerRecord,
    RankRecord,
    TransactionRecord,
    VoucherRecord,
)
from matchday.stores import Stores, codec
from matchday.stores.interfaces import (
    EventStore,
    GamificationStore,
    InventoryStore,
    PlayerStore,
    TransactionLedger,
    UnitOfWork,
    VoucherStore,
)


def _event_from_record(record: EventRecord) -> Event:
    return Event(
        id=EventId(record.id),
        title=record.title,
        event_type=EventType(record.event_type),
        date=record.date,
        start_time=record.start_time,
        location=record.location,
        description=record.description,
        theme=record.theme,
        rules=record.rules,
        status=EventStatus(record.status),
        game_fee=codec.money_from(record.game_fee),
        participation_xp=record.participation_xp,
        xp_overrides={k: int(v) for k, v in (record.xp_overrides or {}).items()},
        gear_for_rent=codec.item_ids_from(record.gear_for_rent),
        signed_up_players=codec.player_ids_from(record.signed_up_players),
        rental_signups=tuple(codec.rental_signup_from_dict(s) for s in record.rental_signups or []),
        attendees=tuple(codec.attendee_from_dict(a) for a in record.attendees or []),
        absent_players=codec.player_ids_from(record.absent_players),
        teams=codec.teams_from_dict(record.teams),
        live_stats=codec.live_stats_from_dict(record.live_stats),
        game_duration_seconds=record.game_duration_seconds,
        version=record.version,
    )


def _event_fields(event: Event) -> dict:
    return {
        "title": event.title,
        "event_type": event.event_type.value,
        "date": event.date,
        "start_time": event.start_time,
        "location": event.location,
        "description": event.description,
        "theme": event.theme,
        "rules": event.rules,
        "status": event.status.value,
        "game_fee": event.game_fee.amount,
        "participation_xp": event.participation_xp,
        "xp_overrides": dict(event.xp_overrides),
        "gear_for_rent": codec.ids_to_list(event.gear_for_rent),
        "signed_up_players": codec.ids_to_list(event.signed_up_players),
        "rental_signups": [codec.rental_signup_to_dict(s) for s in event.rental_signups],
        "attendees": [codec.attendee_to_dict(a) for a in event.attendees],
        "absent_players": codec.ids_to_list(event.absent_players),
        "teams": codec.teams_to_dict(event.teams),
        "live_stats": codec.live_stats_to_dict(event.live_stats),
        "game_duration_seconds": event.game_duration_seconds,
    }


class DjangoEventStore(EventStore):
    """Relational event store using Django ORM."""

    def list_events(self) -> list[Event]:
        return [_event_from_record(r) for r in EventRecord.objects.all()]

    def get_event(self, event_id: EventId) -> Event | None:
        record = EventRecord.objects.filter(id=event_id.value).first()
        return _event_from_record(record) if record else None

    def save_event(self, event: Event, expected_version: int | None) -> Event:
        fields = _event_fields(event)
        if expected_version is None:
            try:
                with transaction.atomic():
                    EventRecord.objects.create(id=event.id.value, version=1, **fields)
            except IntegrityError as exc:
                raise ConcurrentModificationError("Event", expected_version) from exc
            return replace(event, version=1)
        updated = EventRecord.objects.filter(id=event.id.value, version=expected_version).update(
            version=expected_version + 1, updated_at=timezone.now(), **fields
        )
        if updated != 1:
            raise ConcurrentModificationError("Event", expected_version)
        return replace(event, version=expected_version + 1)


def _player_from_record(record: PlayerRecord) -> Player:
    return Player(
        id=PlayerId(record.id),
        name=record.name,
        callsign=record.callsign,
        stats=PlayerStats(
            kills=record.kills,
            deaths=record.deaths,
            headshots=record.headshots,
            games_played=record.games_played,
            xp=record.xp,
        ),
        match_history=tuple(codec.match_record_from_dict(m) for m in record.match_history or []),
        xp_adjustments=tuple(codec.xp_adjustment_from_dict(a) for a in record.xp_adjustments or []),
        badge_ids=tuple(record.badge_ids or []),
        version=record.version,
    )


class DjangoPlayerStore(PlayerStore):
    def list_players(self) -> list[Player]:
        return [_player_from_record(r) for r in PlayerRecord.objects.all()]

    def get_player(self, player_id: PlayerId) -> Player | None:
        record = PlayerRecord.objects.filter(id=player_id.value).first()
        return _player_from_record(record) if record else None

    def save_players(self, players: list[Player]) -> list[Player]:
        with transaction.atomic():
            for player in players:
                updated = PlayerRecord.objects.filter(id=player.id.value, version=player.version).update(
                    version=player.version + 1,
                    name=player.name,
                    callsign=player.callsign,
                    kills=player.stats.kills,
                    deaths=player.stats.deaths,
                    headshots=player.stats.headshots,
                    games_played=player.stats.games_played,
                    xp=player.stats.xp,
                    match_history=[codec.match_record_to_dict(m) for m in player.match_history],
                    xp_adjustments=[codec.xp_adjustment_to_dict(a) for a in player.xp_adjustments],
                    badge_ids=list(player.badge_ids),
                )
                if updated != 1:
                    raise ConcurrentModificationError("Player", player.version)
        return [replace(player, version=player.version + 1) for player in players]


def _voucher_from_record(record: VoucherRecord) -> Voucher:
    return Voucher(
        code=record.code,
        description=record.description,
        discount_value=record.discount_value,
        discount_type=DiscountType(record.discount_type),
        status=VoucherStatus(record.status),
        assigned_to_player_id=PlayerId(record.assigned_to_player) if record.assigned_to_player else None,
        usage_limit=record.usage_limit,
        per_user_limit=record.per_user_limit,
        redemptions=tuple(codec.redemption_from_dict(r) for r in record.redemptions or []),
        version=record.version,
    )


class DjangoVoucherStore(VoucherStore):
    def list_vouchers(self) -> list[Voucher]:
        return [_voucher_from_record(r) for r in VoucherRecord.objects.all()]

    def get_voucher(self, code: str) -> Voucher | None:
        record = VoucherRecord.objects.filter(code_lower=code.strip().lower()).first()
        return _voucher_from_record(record) if record else None

    def save_voucher(self, voucher: Voucher, expected_version: int | None) -> Voucher:
        fields = {
            "code": voucher.code,
            "description": voucher.description,
            "discount_value": voucher.discount_value,
            "discount_type": voucher.discount_type.value,
            "status": voucher.status.value,
            "assigned_to_player": voucher.assigned_to_player_id.value if voucher.assigned_to_player_id else None,
            "usage_limit": voucher.usage_limit,
            "per_user_limit": voucher.per_user_limit,
            "redemptions": [codec.redemption_to_dict(r) for r in voucher.redemptions],
        }
        if expected_version is None:
            try:
                with transaction.atomic():
                    VoucherRecord.objects.create(version=1, **fields)
            except IntegrityError as exc:
                raise ConcurrentModificationError("Voucher", expected_version) from exc
            return replace(voucher, version=1)
        updated = VoucherRecord.objects.filter(
            code_lower=voucher.code.lower(), version=expected_version
        ).update(version=expected_version + 1, **fields)
        if updated != 1:
            raise ConcurrentModificationError("Voucher", expected_version)
        return replace(voucher, version=expected_version + 1)


def _item_from_record(record: InventoryItemRecord) -> InventoryItem:
    return InventoryItem(
        id=ItemId(record.id),
        name=record.name,
        description=record.description,
        category=record.category,
        sale_price=codec.money_from(record.sale_price),
        stock=Capacity(record.stock),
        is_rental=record.is_rental,
    )


class DjangoInventoryStore(InventoryStore):
    def list_items(self) -> list[InventoryItem]:
        return [_item_from_record(r) for r in InventoryItemRecord.objects.all()]

    def get_item(self, item_id: ItemId) -> InventoryItem | None:
        record = InventoryItemRecord.objects.filter(id=item_id.value).first()
        return _item_from_record(record) if record else None


def _transaction_from_record(record: TransactionRecord) -> Transaction:
    return Transaction(
        id=record.id,
        date=record.date,
        type=TransactionType(record.type),
        description=record.description,
        amount=codec.money_from(record.amount),
        related_event_id=EventId(record.related_event_id) if record.related_event_id else None,
        related_player_id=PlayerId(record.related_player_id) if record.related_player_id else None,
        related_inventory_id=ItemId(record.related_inventory_id) if record.related_inventory_id else None,
        payment_status=PaymentStatus(record.payment_status) if record.payment_status else None,
    )


class DjangoTransactionLedger(TransactionLedger):
    def append(self, transactions: list[Transaction]) -> None:
        ids = [t.id for t in transactions]
        existing = TransactionRecord.objects.filter(id__in=ids).values_list("id", flat=True).first()
        if existing is not None:
            raise DuplicateTransactionError(existing)
        TransactionRecord.objects.bulk_create(
            TransactionRecord(
                id=t.id,
                date=t.date,
                type=t.type.value,
                description=t.description,
                amount=t.amount.amount,
                related_event_id=t.related_event_id.value if t.related_event_id else None,
                related_player_id=t.related_player_id.value if t.related_player_id else None,
                related_inventory_id=t.related_inventory_id.value if t.related_inventory_id else None,
                payment_status=t.payment_status.value if t.payment_status else None,
            )
            for t in transactions
        )

    def list_transactions(self, event_id: EventId | None = None) -> list[Transaction]:
        records = TransactionRecord.objects.all()
        if event_id is not None:
            records = records.filter(related_event_id=event_id.value)
        return [_transaction_from_record(r) for r in records]


class DjangoGamificationStore(GamificationStore):
    def rules(self) -> list[GamificationRule]:
        return [
            GamificationRule(id=r.id, name=r.name, description=r.description, xp=r.xp)
            for r in GamificationRuleRecord.objects.all()
        ]

    def ranks(self) -> list[Rank]:
        return [
            Rank(
                name=r.name,
                tier=r.tier,
                min_xp=r.min_xp,
                unlocks=tuple(r.unlocks or []),
                badge_awarded=r.badge_awarded or None,
            )
            for r in RankRecord.objects.all()
        ]

    def badges(self) -> list[Badge]:
        badges = []
        for r in BadgeRecord.objects.all():
            value = r.criteria_value
            badges.append(
                Badge(
                    id=r.id,
                    name=r.name,
                    description=r.description,
                    criteria_type=BadgeCriteria(r.criteria_type),
                    criteria_value=int(value) if value.lstrip("-").isdigit() else value,
                )
            )
        return badges


class DjangoUnitOfWork(UnitOfWork):
    @contextmanager
    def atomic(self) -> Iterator[None]:
        with transaction.atomic():
            yield


def django_stores() -> Stores:
    return Stores(
        events=DjangoEventStore(),
        players=DjangoPlayerStore(),
        vouchers=DjangoVoucherStore(),
        inventory=DjangoInventoryStore(),
        ledger=DjangoTransactionLedger(),
        gamification=DjangoGamificationStore(),
        unit_of_work=DjangoUnitOfWork(),
    )
