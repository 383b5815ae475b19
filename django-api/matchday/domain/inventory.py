"""Rental stock availability.

Availability is derived from the event on every call: confirmed attendees'
rented gear plus pending rental requests are counted against the item's
static stock. Nothing is ever decremented in place.
"""

from matchday.domain.models import Event, InventoryItem
from matchday.domain.value_objects import ItemId, PlayerId


def allocated_count(
    item: InventoryItem, event: Event, exclude_player_id: PlayerId | None = None
) -> int:
    """Units of ``item`` claimed by attendees and pending rental requests.

    The pending request of ``exclude_player_id`` is not counted, so a player
    re-opening their own request does not block themselves.
    """
    confirmed = rented_count(item, event)
    pending = sum(
        s.requested_gear_ids.count(item.id)
        for s in event.rental_signups
        if s.player_id != exclude_player_id
    )
    return confirmed + pending


def available_stock(
    item: InventoryItem, event: Event, exclude_player_id: PlayerId | None = None
) -> int:
    return max(0, item.stock.value - allocated_count(item, event, exclude_player_id))


def availability(
    event: Event, inventory: list[InventoryItem], exclude_player_id: PlayerId | None = None
) -> dict[ItemId, int]:
    """Remaining units for every rental item offered at the event."""
    offered = set(event.gear_for_rent)
    return {
        item.id: available_stock(item, event, exclude_player_id)
        for item in inventory
        if item.id in offered
    }


def rented_count(item: InventoryItem, event: Event) -> int:
    """Units of ``item`` handed out to confirmed attendees."""
    return sum(a.rented_gear_ids.count(item.id) for a in event.attendees)


def unrented_stock(item: InventoryItem, event: Event) -> int:
    """Units still on the shelf at check-in.

    Pending requests are a claim made at registration, not a handover, so
    admission only competes with players already confirmed.
    """
    return max(0, item.stock.value - rented_count(item, event))
