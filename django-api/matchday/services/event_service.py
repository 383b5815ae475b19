"""Event service - all business logic orchestration lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants by delegating to the pure domain functions
- Commit every state change inside a unit of work
- Return domain models or raise domain errors

Nothing is written until the whole operation has been computed, and all
writes of one operation share a unit of work, so a rejected or failed
operation leaves every store unchanged and can be retried as a whole.
"""

import random
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timezone
from uuid import UUID

import structlog

from matchday.domain import Event, EventId, ItemId, Money, PaymentStatus, PlayerId, StatKind, StatLine
from matchday.domain import admission, inventory, lifecycle, live, settlement
from matchday.domain.drafts import EventDraft, ExistingEvent, apply_draft
from matchday.domain.errors import (
    DomainError,
    EventNotFoundError,
    InvalidEventIdError,
    UnknownPlayerError,
)
from matchday.domain.settlement import DEFAULT_RULE_XP, Settlement
from matchday.stores import Stores

logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EventService:
    """Service for the event lifecycle: registration, play and settlement."""

    def __init__(
        self,
        stores: Stores,
        *,
        xp_defaults: Mapping[str, int] = DEFAULT_RULE_XP,
        rng: random.Random | None = None,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._stores = stores
        self._xp_defaults = xp_defaults
        self._rng = rng
        self._now = now

    def list_events(self) -> list[Event]:
        """Return all events."""
        return self._stores.events.list_events()

    def get_event(self, event_id: str) -> Event:
        """Return an event by ID.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        try:
            parsed = EventId(UUID(str(event_id)))
        except ValueError as exc:
            raise InvalidEventIdError() from exc
        event = self._stores.events.get_event(parsed)
        if event is None:
            raise EventNotFoundError(str(event_id))
        return event

    def save_event(self, draft: EventDraft) -> Event:
        """Create a new event or edit an upcoming one."""
        existing = None
        if isinstance(draft.target, ExistingEvent):
            existing = self.get_event(str(draft.target.event_id))
        event = apply_draft(draft, existing)
        with self._stores.unit_of_work.atomic():
            saved = self._stores.events.save_event(event, existing.version if existing else None)
        logger.info(
            "event_saved",
            event_id=str(saved.id),
            created=existing is None,
            title=saved.title,
        )
        return saved

    def availability(self, event_id: str, exclude_player_id: PlayerId | None = None) -> dict[ItemId, int]:
        event = self.get_event(event_id)
        return inventory.availability(event, self._stores.inventory.list_items(), exclude_player_id)

    def sign_up(
        self,
        event_id: str,
        player_id: PlayerId,
        requested_gear_ids: Sequence[ItemId] = (),
        note: str | None = None,
    ) -> Event:
        event = self.get_event(event_id)
        if self._stores.players.get_player(player_id) is None:
            raise UnknownPlayerError(player_id)
        return self._apply(
            "player_signed_up",
            event,
            lambda e: admission.sign_up(e, player_id, self._stores.inventory.list_items(), requested_gear_ids, note),
            player_id=str(player_id),
            gear=len(requested_gear_ids),
        )

    def withdraw(self, event_id: str, player_id: PlayerId) -> Event:
        event = self.get_event(event_id)
        return self._apply(
            "player_withdrew",
            event,
            lambda e: admission.withdraw(e, player_id),
            player_id=str(player_id),
        )

    def confirm_attendance(
        self,
        event_id: str,
        player_id: PlayerId,
        payment_status: PaymentStatus,
        *,
        voucher_code: str | None = None,
        requested_gear_ids: Sequence[ItemId] = (),
        note: str | None = None,
        manual_discount: Money | None = None,
        discount_reason: str | None = None,
    ) -> Event:
        """Admit a signed-up player, committing any voucher redemption with the event."""
        event = self.get_event(event_id)
        voucher = None
        if voucher_code and voucher_code.strip():
            voucher = self._stores.vouchers.get_voucher(voucher_code)

        try:
            result = admission.confirm_attendance(
                event,
                player_id,
                payment_status,
                self._stores.inventory.list_items(),
                now=self._now(),
                voucher_code=voucher_code,
                voucher=voucher,
                requested_gear_ids=requested_gear_ids,
                note=note,
                manual_discount=manual_discount,
                discount_reason=discount_reason,
            )
        except DomainError as exc:
            self._rejected("confirm_attendance", event, exc, player_id=str(player_id))
            raise

        with self._stores.unit_of_work.atomic():
            if result.voucher is not None:
                self._stores.vouchers.save_voucher(result.voucher, voucher.version)
            saved = self._stores.events.save_event(result.event, event.version)

        logger.info(
            "attendance_confirmed",
            event_id=str(event.id),
            player_id=str(player_id),
            payment_status=payment_status.value,
            voucher_code=result.attendee.voucher_code,
            rented=len(result.attendee.rented_gear_ids),
            discount=str(result.attendee.total_discount),
        )
        return saved

    def mark_absent(self, event_id: str, player_id: PlayerId) -> Event:
        event = self.get_event(event_id)
        return self._apply(
            "player_marked_absent",
            event,
            lambda e: admission.mark_absent(e, player_id),
            player_id=str(player_id),
        )

    def start_event(self, event_id: str) -> Event:
        event = self.get_event(event_id)
        return self._apply(
            "event_started",
            event,
            lambda e: live.start_event(e, self._rng),
            dropped=len(event.signed_up_players),
            attendees=len(event.attendees),
        )

    def record_stat(self, event_id: str, player_id: PlayerId, stat_kind: StatKind, delta: int) -> Event:
        event = self.get_event(event_id)
        return self._apply(
            "stat_recorded",
            event,
            lambda e: live.record_stat(e, player_id, stat_kind, delta),
            level="debug",
            player_id=str(player_id),
            stat=stat_kind.value,
            delta=delta,
        )

    def record_clock(self, event_id: str, elapsed_seconds: int) -> Event:
        event = self.get_event(event_id)
        return self._apply(
            "clock_recorded",
            event,
            lambda e: live.record_clock(e, elapsed_seconds),
            level="debug",
            elapsed_seconds=elapsed_seconds,
        )

    def cancel_event(self, event_id: str) -> Event:
        event = self.get_event(event_id)
        return self._apply("event_cancelled", event, lifecycle.cancel_event)

    def finish_event(
        self,
        event_id: str,
        live_stats: Mapping[PlayerId, StatLine] | None = None,
        elapsed_seconds: int | None = None,
    ) -> Settlement:
        """Settle the event: award XP, update players and write the ledger.

        Live stats and elapsed time default to what was recorded on the event.
        The completed event, player updates and transactions commit together.

        Raises:
            InvalidStateTransitionError: If the event is not In Progress,
                including when it has already been finished.
            ConcurrentModificationError: If the event or an attendee changed
                while the settlement was being computed.
        """
        event = self.get_event(event_id)
        try:
            result = settlement.finish_event(
                event,
                event.live_stats if live_stats is None else live_stats,
                event.game_duration_seconds if elapsed_seconds is None else elapsed_seconds,
                self._stores.players.list_players(),
                self._stores.inventory.list_items(),
                self._stores.gamification.rules(),
                self._xp_defaults,
            )
        except DomainError as exc:
            self._rejected("finish_event", event, exc)
            raise

        missing = [str(a.player_id) for a in event.attendees if a.player_id not in result.earned_xp]
        if missing:
            logger.warning("settlement_players_missing", event_id=str(event.id), player_ids=missing)

        with self._stores.unit_of_work.atomic():
            completed = self._stores.events.save_event(result.event, event.version)
            players = self._stores.players.save_players(list(result.players))
            self._stores.ledger.append(list(result.transactions))

        logger.info(
            "event_finished",
            event_id=str(event.id),
            attendees=len(event.attendees),
            transactions=len(result.transactions),
            revenue=str(sum((t.amount.amount for t in result.transactions), 0)),
            xp_awarded=sum(result.earned_xp.values()),
        )
        return Settlement(
            event=completed,
            players=tuple(players),
            transactions=result.transactions,
            earned_xp=result.earned_xp,
        )

    def _apply(
        self,
        log_event: str,
        event: Event,
        change: Callable[[Event], Event],
        level: str = "info",
        **context,
    ) -> Event:
        """Compute a single-record change and persist it with compare-and-swap."""
        try:
            updated = change(event)
        except DomainError as exc:
            self._rejected(log_event, event, exc, **context)
            raise
        with self._stores.unit_of_work.atomic():
            saved = self._stores.events.save_event(updated, event.version)
        getattr(logger, level)(log_event, event_id=str(event.id), **context)
        return saved

    @staticmethod
    def _rejected(operation: str, event: Event, exc: DomainError, **context) -> None:
        logger.warning(
            "operation_rejected",
            operation=operation,
            event_id=str(event.id),
            status=event.status.value,
            code=exc.code.value,
            reason=exc.message,
            **context,
        )
