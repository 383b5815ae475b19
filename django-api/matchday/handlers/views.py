"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from functools import wraps
from uuid import UUID

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from matchday import conf
from matchday.domain import Money, PaymentStatus, PlayerId, StatKind
from matchday.domain.drafts import EventDraft, ExistingEvent, NewEvent
from matchday.domain.errors import DomainError, ErrorCode
from matchday.handlers import serializers as s
from matchday.services import EventService, FinanceService, PlayerService
from matchday.stores import Stores
from matchday.stores.django_store import django_stores

STATUS_BY_CODE = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.MISSING_DISCOUNT_REASON: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.PLAYER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.OUT_OF_STOCK: status.HTTP_409_CONFLICT,
    ErrorCode.VOUCHER_REJECTED: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_STATE_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.CONCURRENT_MODIFICATION: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_TRANSACTION: status.HTTP_409_CONFLICT,
}


def error_response(exc: DomainError) -> Response:
    body = {"code": exc.code.value, "message": exc.message}
    reason = getattr(exc, "reason", None)
    if reason is not None:
        body["reason"] = reason.value
    return Response(body, status=STATUS_BY_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST))


def domain_errors(handler):
    """Translate domain errors raised by a handler into JSON responses."""

    @wraps(handler)
    def wrapper(*args, **kwargs):
        try:
            return handler(*args, **kwargs)
        except DomainError as exc:
            return error_response(exc)

    return wrapper


def _parse(serializer_class, request: Request):
    serializer = serializer_class(data=request.data)
    serializer.is_valid(raise_exception=True)
    return serializer


class MatchdayView(APIView):
    """Base view wiring services to the configured stores."""

    def stores(self) -> Stores:
        return django_stores()

    def events(self) -> EventService:
        return EventService(self.stores(), xp_defaults=conf.DEFAULT_XP)

    def event_response(self, event, code: int = status.HTTP_200_OK) -> Response:
        return Response(s.EventSerializer(event).data, status=code)


class EventListView(MatchdayView):
    """Handler for GET/POST /api/events"""

    def get(self, request: Request) -> Response:
        return Response(s.EventSerializer(self.events().list_events(), many=True).data)

    @domain_errors
    def post(self, request: Request) -> Response:
        details = _parse(s.EventDetailsSerializer, request).to_details()
        event = self.events().save_event(EventDraft(target=NewEvent(), details=details))
        return self.event_response(event, status.HTTP_201_CREATED)


class EventDetailView(MatchdayView):
    """Handler for GET/PUT /api/events/{event_id}"""

    @domain_errors
    def get(self, request: Request, event_id: str) -> Response:
        return self.event_response(self.events().get_event(event_id))

    @domain_errors
    def put(self, request: Request, event_id: str) -> Response:
        service = self.events()
        current = service.get_event(event_id)
        details = _parse(s.EventDetailsSerializer, request).to_details()
        event = service.save_event(EventDraft(target=ExistingEvent(current.id), details=details))
        return self.event_response(event)


class SignupListView(MatchdayView):
    """Handler for POST /api/events/{event_id}/signups"""

    @domain_errors
    def post(self, request: Request, event_id: str) -> Response:
        data = _parse(s.SignUpSerializer, request).validated_data
        event = self.events().sign_up(event_id, s.player_id_of(data), s.gear_ids_of(data), data["note"])
        return self.event_response(event, status.HTTP_201_CREATED)


class SignupDetailView(MatchdayView):
    """Handler for DELETE /api/events/{event_id}/signups/{player_id}"""

    @domain_errors
    def delete(self, request: Request, event_id: str, player_id: UUID) -> Response:
        return self.event_response(self.events().withdraw(event_id, PlayerId(player_id)))


class AttendeeListView(MatchdayView):
    """Handler for POST /api/events/{event_id}/attendees"""

    @domain_errors
    def post(self, request: Request, event_id: str) -> Response:
        data = _parse(s.ConfirmAttendanceSerializer, request).validated_data
        event = self.events().confirm_attendance(
            event_id,
            s.player_id_of(data),
            PaymentStatus(data["payment_status"]),
            voucher_code=data["voucher_code"],
            requested_gear_ids=s.gear_ids_of(data),
            note=data["note"],
            manual_discount=Money(data["manual_discount"]),
            discount_reason=data["discount_reason"],
        )
        return self.event_response(event, status.HTTP_201_CREATED)


class AbsenceListView(MatchdayView):
    """Handler for POST /api/events/{event_id}/absences"""

    @domain_errors
    def post(self, request: Request, event_id: str) -> Response:
        data = _parse(s.PlayerRefSerializer, request).validated_data
        return self.event_response(self.events().mark_absent(event_id, s.player_id_of(data)))


class EventStartView(MatchdayView):
    """Handler for POST /api/events/{event_id}/start"""

    @domain_errors
    def post(self, request: Request, event_id: str) -> Response:
        return self.event_response(self.events().start_event(event_id))


class LiveStatView(MatchdayView):
    """Handler for POST /api/events/{event_id}/stats"""

    @domain_errors
    def post(self, request: Request, event_id: str) -> Response:
        data = _parse(s.StatSerializer, request).validated_data
        event = self.events().record_stat(
            event_id, s.player_id_of(data), StatKind(data["stat"]), data["delta"]
        )
        return self.event_response(event)


class ClockView(MatchdayView):
    """Handler for POST /api/events/{event_id}/clock"""

    @domain_errors
    def post(self, request: Request, event_id: str) -> Response:
        data = _parse(s.ClockSerializer, request).validated_data
        return self.event_response(self.events().record_clock(event_id, data["elapsed_seconds"]))


class EventFinishView(MatchdayView):
    """Handler for POST /api/events/{event_id}/finish"""

    @domain_errors
    def post(self, request: Request, event_id: str) -> Response:
        data = _parse(s.FinishSerializer, request).validated_data
        result = self.events().finish_event(event_id, elapsed_seconds=data["elapsed_seconds"])
        return Response(s.SettlementSerializer(result).data)


class EventCancelView(MatchdayView):
    """Handler for POST /api/events/{event_id}/cancel"""

    @domain_errors
    def post(self, request: Request, event_id: str) -> Response:
        return self.event_response(self.events().cancel_event(event_id))


class AvailabilityView(MatchdayView):
    """Handler for GET /api/events/{event_id}/availability[?player=<id>]"""

    @domain_errors
    def get(self, request: Request, event_id: str) -> Response:
        player = request.query_params.get("player")
        try:
            exclude = PlayerId.from_string(player) if player else None
        except ValueError:
            return Response({"code": ErrorCode.VALIDATION_ERROR.value, "message": "Invalid player ID"}, status=400)
        stock = self.events().availability(event_id, exclude)
        return Response({str(item_id): units for item_id, units in stock.items()})


class XpAdjustmentView(MatchdayView):
    """Handler for POST /api/players/{player_id}/xp-adjustments"""

    @domain_errors
    def post(self, request: Request, player_id: UUID) -> Response:
        data = _parse(s.XpAdjustmentSerializer, request).validated_data
        player = PlayerService(self.stores()).adjust_xp(PlayerId(player_id), data["amount"], data["reason"])
        return Response(s.PlayerSerializer(player).data, status=status.HTTP_201_CREATED)


class ProgressionView(MatchdayView):
    """Handler for GET /api/players/{player_id}/progression"""

    @domain_errors
    def get(self, request: Request, player_id: UUID) -> Response:
        progression = PlayerService(self.stores()).progression(PlayerId(player_id))
        return Response(
            {
                "player": s.PlayerSerializer(progression.player).data,
                "rank": s.RankSerializer(progression.rank).data,
                "next_rank": s.RankSerializer(progression.next_rank).data if progression.next_rank else None,
                "badges": [
                    {
                        "id": badge.id,
                        "name": badge.name,
                        "earned": progress.is_earned,
                        "percentage": round(progress.percentage, 1),
                        "text": progress.text,
                    }
                    for badge, progress in progression.badges
                ],
            }
        )


class FinanceSummaryView(MatchdayView):
    """Handler for GET /api/finance/summary[?event=<id>]"""

    @domain_errors
    def get(self, request: Request) -> Response:
        event_id = None
        if request.query_params.get("event"):
            event_id = self.events().get_event(request.query_params["event"]).id
        summary = FinanceService(self.stores()).summary(event_id)
        return Response(
            {
                "revenue": {kind.value: str(amount) for kind, amount in summary.revenue_by_type.items()},
                "total_revenue": str(summary.total_revenue),
                "expenses": str(summary.expenses),
                "net_profit": str(summary.net_profit),
                "outstanding": str(summary.outstanding),
            }
        )
