"""Integration tests for the HTTP API backed by the Django stores.

Run with: pytest tests/test_api.py -v
"""

from dataclasses import replace
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from matchday.domain import PlayerId
from matchday.domain.errors import ConcurrentModificationError
from matchday.models import (
    EventRecord,
    InventoryItemRecord,
    PlayerRecord,
    RankRecord,
    TransactionRecord,
    VoucherRecord,
)
from matchday.stores.django_store import DjangoPlayerStore, DjangoVoucherStore

EVENT_PAYLOAD = {
    "title": "Operation Nightfall",
    "date": "2026-11-07",
    "game_fee": "300.00",
    "participation_xp": 100,
    "location": "Quarry Site B",
}


@pytest.fixture
def rifle(db) -> InventoryItemRecord:
    return InventoryItemRecord.objects.create(name="M4 AEG Rifle", sale_price=Decimal("150"), stock=1, is_rental=True)


@pytest.fixture
def players(db) -> list[PlayerRecord]:
    return [
        PlayerRecord.objects.create(name="John Price", callsign="Bravo-6"),
        PlayerRecord.objects.create(name="Kyle Garrick", callsign="Gaz"),
        PlayerRecord.objects.create(name="Simon Riley", callsign="Ghost"),
    ]


@pytest.fixture
def event_id(api_client: APIClient, rifle) -> str:
    response = api_client.post("/api/events", {**EVENT_PAYLOAD, "gear_for_rent": [str(rifle.id)]})
    assert response.status_code == 201
    return response.data["id"]


def _sign_up(api_client, event_id, player, gear=()):
    return api_client.post(
        f"/api/events/{event_id}/signups",
        {"player_id": str(player.id), "gear_ids": [str(g.id) for g in gear]},
    )


def _confirm(api_client, event_id, player, **extra):
    payload = {"player_id": str(player.id), "payment_status": "Paid (Card)", **extra}
    return api_client.post(f"/api/events/{event_id}/attendees", payload)


@pytest.mark.django_db
class TestEventList:
    """Tests for GET/POST /api/events"""

    def test_list_events_empty_catalog(self, api_client: APIClient):
        """Given no events, returns empty list."""
        response = api_client.get("/api/events")
        assert response.status_code == 200
        assert response.data == []

    def test_create_event(self, api_client: APIClient):
        """Creating an event stores it as Upcoming."""
        response = api_client.post("/api/events", EVENT_PAYLOAD)

        assert response.status_code == 201
        assert response.data["status"] == "Upcoming"
        assert response.data["game_fee"] == "300.00"
        assert response.data["version"] == 1
        assert EventRecord.objects.filter(id=response.data["id"]).exists()

    def test_create_event_rejects_negative_fee(self, api_client: APIClient):
        response = api_client.post("/api/events", {**EVENT_PAYLOAD, "game_fee": "-5"})
        assert response.status_code == 400

    def test_list_events_newest_first(self, api_client: APIClient):
        api_client.post("/api/events", {**EVENT_PAYLOAD, "title": "Early", "date": "2026-10-01"})
        api_client.post("/api/events", {**EVENT_PAYLOAD, "title": "Late", "date": "2026-12-01"})
        titles = [e["title"] for e in api_client.get("/api/events").data]
        assert titles == ["Late", "Early"]


@pytest.mark.django_db
class TestEventDetail:
    """Tests for GET/PUT /api/events/{id}"""

    def test_get_event_returns_details(self, api_client: APIClient, event_id):
        """Given event exists, returns event details."""
        response = api_client.get(f"/api/events/{event_id}")
        assert response.status_code == 200
        assert response.data["title"] == "Operation Nightfall"
        assert response.data["location"] == "Quarry Site B"

    def test_get_event_not_found(self, api_client: APIClient):
        """Given event does not exist, returns 404."""
        response = api_client.get("/api/events/6f1c2a56-2d0b-4e39-9d5e-1b7f0f7f9a10")
        assert response.status_code == 404
        assert response.data["code"] == "EVENT_NOT_FOUND"

    def test_get_event_invalid_id_format(self, api_client: APIClient):
        """Given invalid UUID, returns 400."""
        response = api_client.get("/api/events/not-a-uuid")
        assert response.status_code == 400
        assert response.data["code"] == "INVALID_EVENT_ID"

    def test_edit_event(self, api_client: APIClient, event_id, rifle):
        payload = {**EVENT_PAYLOAD, "title": "Night Raid", "gear_for_rent": [str(rifle.id)]}
        response = api_client.put(f"/api/events/{event_id}", payload)
        assert response.status_code == 200
        assert response.data["title"] == "Night Raid"
        assert response.data["version"] == 2

    def test_edit_bumps_updated_at(self, api_client: APIClient, event_id, rifle):
        before = EventRecord.objects.get(id=event_id).updated_at
        payload = {**EVENT_PAYLOAD, "title": "Night Raid", "gear_for_rent": [str(rifle.id)]}
        assert api_client.put(f"/api/events/{event_id}", payload).status_code == 200
        assert EventRecord.objects.get(id=event_id).updated_at > before


@pytest.mark.django_db
class TestRegistration:
    """Tests for sign-ups, admission and absences."""

    def test_unknown_player_cannot_sign_up(self, api_client: APIClient, event_id):
        response = api_client.post(
            f"/api/events/{event_id}/signups", {"player_id": "6f1c2a56-2d0b-4e39-9d5e-1b7f0f7f9a10"}
        )
        assert response.status_code == 404
        assert response.data["code"] == "PLAYER_NOT_FOUND"

    def test_withdraw_sign_up(self, api_client: APIClient, event_id, players):
        _sign_up(api_client, event_id, players[0])
        response = api_client.delete(f"/api/events/{event_id}/signups/{players[0].id}")
        assert response.status_code == 200
        assert response.data["signed_up_players"] == []

    def test_second_rental_is_out_of_stock(self, api_client: APIClient, event_id, players, rifle):
        _sign_up(api_client, event_id, players[0], gear=[rifle])
        _sign_up(api_client, event_id, players[1])
        assert _confirm(api_client, event_id, players[0], gear_ids=[str(rifle.id)]).status_code == 201

        response = _confirm(api_client, event_id, players[1], gear_ids=[str(rifle.id)])

        assert response.status_code == 409
        assert response.data["code"] == "OUT_OF_STOCK"
        stored = api_client.get(f"/api/events/{event_id}").data
        assert stored["signed_up_players"] == [str(players[1].id)]

    def test_availability(self, api_client: APIClient, event_id, players, rifle):
        _sign_up(api_client, event_id, players[0], gear=[rifle])
        response = api_client.get(f"/api/events/{event_id}/availability")
        assert response.data == {str(rifle.id): 0}
        response = api_client.get(f"/api/events/{event_id}/availability?player={players[0].id}")
        assert response.data == {str(rifle.id): 1}

    def test_manual_discount_requires_reason(self, api_client: APIClient, event_id, players):
        _sign_up(api_client, event_id, players[0])
        response = _confirm(api_client, event_id, players[0], manual_discount="50.00")
        assert response.status_code == 400
        assert response.data["code"] == "MISSING_DISCOUNT_REASON"

    def test_overlong_discount_reason_is_rejected(self, api_client: APIClient, event_id, players):
        _sign_up(api_client, event_id, players[0])
        response = _confirm(api_client, event_id, players[0], manual_discount="50.00", discount_reason="x" * 201)
        assert response.status_code == 400
        assert api_client.get(f"/api/events/{event_id}").data["attendees"] == []

    def test_voucher_value_keeps_cents(self, api_client: APIClient, event_id, players):
        VoucherRecord.objects.create(code="CENTS", discount_value=Decimal("12.35"), discount_type="fixed")
        assert DjangoVoucherStore().get_voucher("cents").discount_value == Decimal("12.35")
        _sign_up(api_client, event_id, players[0])

        response = _confirm(api_client, event_id, players[0], voucher_code="CENTS")

        assert response.status_code == 201
        assert VoucherRecord.objects.get(code_lower="cents").discount_value == Decimal("12.35")
        attendee = api_client.get(f"/api/events/{event_id}").data["attendees"][0]
        assert Decimal(attendee["voucher_discount"]) == Decimal("12.35")

    def test_voucher_rejection_reason(self, api_client: APIClient, event_id, players):
        VoucherRecord.objects.create(code="WELCOME50", discount_value=Decimal("50"), discount_type="fixed", usage_limit=1)
        for player in players[:2]:
            _sign_up(api_client, event_id, player)
        assert _confirm(api_client, event_id, players[0], voucher_code="welcome50").status_code == 201

        response = _confirm(api_client, event_id, players[1], voucher_code="WELCOME50")

        assert response.status_code == 409
        assert response.data["reason"] == "GloballyDepleted"
        voucher = VoucherRecord.objects.get(code_lower="welcome50")
        assert voucher.status == "Depleted"
        assert len(voucher.redemptions) == 1

    def test_mark_absent(self, api_client: APIClient, event_id, players):
        _sign_up(api_client, event_id, players[0])
        response = api_client.post(f"/api/events/{event_id}/absences", {"player_id": str(players[0].id)})
        assert response.data["absent_players"] == [str(players[0].id)]


@pytest.mark.django_db
class TestGameDay:
    """Tests for start, live stats and settlement."""

    @pytest.fixture
    def started(self, api_client: APIClient, event_id, players, rifle):
        VoucherRecord.objects.create(code="WELCOME50", discount_value=Decimal("50"), discount_type="fixed")
        for player in players:
            _sign_up(api_client, event_id, player)
        _confirm(api_client, event_id, players[0], gear_ids=[str(rifle.id)])
        _confirm(api_client, event_id, players[1], voucher_code="WELCOME50", payment_status="Unpaid")
        response = api_client.post(f"/api/events/{event_id}/start")
        assert response.status_code == 200
        return event_id

    def test_start_requires_two_attendees(self, api_client: APIClient, event_id, players):
        _sign_up(api_client, event_id, players[0])
        _confirm(api_client, event_id, players[0])
        response = api_client.post(f"/api/events/{event_id}/start")
        assert response.status_code == 400

    def test_start_splits_teams(self, api_client: APIClient, started, players):
        event = api_client.get(f"/api/events/{started}").data
        assert event["status"] == "In Progress"
        assert len(event["teams"]["side_a"]) == 1
        assert len(event["teams"]["side_b"]) == 1
        assert event["absent_players"] == [str(players[2].id)]

    def test_finish_settles_event(self, api_client: APIClient, started, players):
        for _ in range(2):
            api_client.post(
                f"/api/events/{started}/stats",
                {"player_id": str(players[0].id), "stat": "kills", "delta": 1},
            )
        api_client.post(f"/api/events/{started}/clock", {"elapsed_seconds": 1800})

        response = api_client.post(f"/api/events/{started}/finish", {})

        assert response.status_code == 200
        assert response.data["event"]["status"] == "Completed"
        assert response.data["event"]["game_duration_seconds"] == 1800
        assert response.data["earned_xp"][str(players[0].id)] == 120
        assert PlayerRecord.objects.get(id=players[0].id).xp == 120
        assert PlayerRecord.objects.get(id=players[2].id).games_played == 0
        amounts = sorted(TransactionRecord.objects.values_list("amount", flat=True))
        assert amounts == [Decimal("150"), Decimal("250"), Decimal("300")]

        summary = api_client.get(f"/api/finance/summary?event={started}").data
        assert Decimal(summary["total_revenue"]) == Decimal("700")
        assert Decimal(summary["outstanding"]) == Decimal("250")

    def test_finish_twice_is_rejected(self, api_client: APIClient, started):
        assert api_client.post(f"/api/events/{started}/finish", {}).status_code == 200
        response = api_client.post(f"/api/events/{started}/finish", {})
        assert response.status_code == 409
        assert response.data["code"] == "INVALID_STATE_TRANSITION"
        assert TransactionRecord.objects.count() == 3

    def test_stat_delta_must_be_one(self, api_client: APIClient, started, players):
        response = api_client.post(
            f"/api/events/{started}/stats",
            {"player_id": str(players[0].id), "stat": "kills", "delta": 3},
        )
        assert response.status_code == 400

    def test_cancel_started_event_is_rejected(self, api_client: APIClient, started):
        assert api_client.post(f"/api/events/{started}/cancel").status_code == 409

    def test_longest_title_and_reason_settle(self, api_client: APIClient, players):
        """The fee description for the longest allowed inputs fits the ledger."""
        event_id = api_client.post("/api/events", {**EVENT_PAYLOAD, "title": "T" * 255}).data["id"]
        for player in players[:2]:
            _sign_up(api_client, event_id, player)
            _confirm(api_client, event_id, player, manual_discount="50.00", discount_reason="r" * 200)
        assert api_client.post(f"/api/events/{event_id}/start").status_code == 200

        response = api_client.post(f"/api/events/{event_id}/finish", {})

        assert response.status_code == 200
        assert TransactionRecord.objects.count() == 2


@pytest.mark.django_db
class TestPlayers:
    def test_xp_adjustment_and_progression(self, api_client: APIClient, players):
        RankRecord.objects.create(name="Private", tier="Enlisted", min_xp=0)
        RankRecord.objects.create(name="Corporal", tier="Enlisted", min_xp=1000)

        response = api_client.post(
            f"/api/players/{players[0].id}/xp-adjustments", {"amount": 1200, "reason": "Tournament win"}
        )
        assert response.status_code == 201
        assert response.data["stats"]["xp"] == 1200

        progression = api_client.get(f"/api/players/{players[0].id}/progression").data
        assert progression["rank"]["name"] == "Corporal"
        assert progression["next_rank"] is None

    def test_zero_adjustment_is_rejected(self, api_client: APIClient, players):
        response = api_client.post(
            f"/api/players/{players[0].id}/xp-adjustments", {"amount": 0, "reason": "Nothing"}
        )
        assert response.status_code == 400
        assert response.data["code"] == "VALIDATION_ERROR"

    def test_stale_player_write_is_rejected(self, players):
        """A write based on an outdated read leaves the newer record in place."""
        store = DjangoPlayerStore()
        player = store.get_player(PlayerId(players[0].id))
        store.save_players([replace(player, callsign="Captain")])

        with pytest.raises(ConcurrentModificationError):
            store.save_players([replace(player, callsign="Stale")])

        record = PlayerRecord.objects.get(id=players[0].id)
        assert record.callsign == "Captain"
        assert record.version == player.version + 1
