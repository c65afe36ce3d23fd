"""Wire event names and publishers for the shared game session.

Two dialects exist. ``standard`` uses the ``snapshot:``/``mutate:``/
``event:``/``update:`` names. ``legacy`` speaks the event names the existing
React client already listens to (``letters:init``, ``letter:found``, ...), so
that client can connect without changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import Any
from typing import Protocol

from escape_game.session.mutations import ItemSorted
from escape_game.session.mutations import MarkerRevealed
from escape_game.session.mutations import MutationKind
from escape_game.session.mutations import PositionFound
from escape_game.session.mutations import TreasureUnlock

if TYPE_CHECKING:  # import for type checking only
    from escape_game.session.mutations import Mutation
    from escape_game.session.store import StateStore
    from escape_game.session.store import StoreSnapshot


class Broadcaster(Protocol):
    async def send(self, client_id: str, event: str, payload: Any = None) -> None:
        """Deliver to one client."""

    async def subscribe(self, client_id: str) -> None:
        """Start delivering broadcasts to a client."""

    async def broadcast(self, event: str, payload: Any = None) -> None:
        """Deliver to every subscribed client, the originator included."""


@dataclass(frozen=True)
class WireEvents:
    name: str

    snapshot_positions: str
    snapshot_items: str
    snapshot_markers: str
    # None: only tell a joining client about the treasure once it is unlocked,
    # reusing the unlock point event.
    snapshot_treasure: str | None

    mutate_position: str
    mutate_item: str
    mutate_marker: str
    mutate_unlock: str
    handshake: str

    position_found: str
    item_sorted: str
    marker_revealed: str
    treasure_unlocked: str

    update_positions: str
    update_items: str
    update_markers: str

    # Handshake answers with update events instead of snapshot events.
    handshake_uses_updates: bool = False

    def inbound(self) -> dict[str, MutationKind]:
        """Map inbound mutation event names to mutation kinds."""

        return {
            self.mutate_position: MutationKind.POSITION_FOUND,
            self.mutate_item: MutationKind.ITEM_SORTED,
            self.mutate_marker: MutationKind.MARKER_REVEALED,
            self.mutate_unlock: MutationKind.TREASURE_UNLOCK,
        }


STANDARD = WireEvents(
    name="standard",
    snapshot_positions="snapshot:positions",
    snapshot_items="snapshot:items",
    snapshot_markers="snapshot:markers",
    snapshot_treasure="snapshot:treasure",
    mutate_position="mutate:position-found",
    mutate_item="mutate:item-sorted",
    mutate_marker="mutate:marker-revealed",
    mutate_unlock="mutate:treasure-unlock",
    handshake="handshake:request",
    position_found="event:position-found",
    item_sorted="event:item-sorted",
    marker_revealed="event:marker-revealed",
    treasure_unlocked="event:treasure-unlocked",
    update_positions="update:positions",
    update_items="update:items",
    update_markers="update:markers",
)

LEGACY = WireEvents(
    name="legacy",
    snapshot_positions="letters:init",
    snapshot_items="items:init",
    snapshot_markers="bins:init",
    snapshot_treasure=None,
    mutate_position="letter:found",
    mutate_item="item:sorted",
    mutate_marker="bin:revealed",
    mutate_unlock="treasure:unlock",
    handshake="letters:hello",
    position_found="letter:found",
    item_sorted="item:sorted",
    marker_revealed="bin:revealed",
    treasure_unlocked="treasure:unlock",
    update_positions="letters:update",
    update_items="items:update",
    update_markers="bins:update",
    handshake_uses_updates=True,
)

DIALECTS = {dialect.name: dialect for dialect in (STANDARD, LEGACY)}


def build_snapshot_messages(
    events: WireEvents,
    snapshot: StoreSnapshot,
    *,
    handshake: bool = False,
) -> list[tuple[str, Any]]:
    """Return the (event, payload) pairs that bring one client up to date."""

    use_updates = handshake and events.handshake_uses_updates
    messages: list[tuple[str, Any]] = [
        (
            events.update_positions if use_updates else events.snapshot_positions,
            list(snapshot.positions),
        ),
        (
            events.update_items if use_updates else events.snapshot_items,
            list(snapshot.items),
        ),
        (
            events.update_markers if use_updates else events.snapshot_markers,
            list(snapshot.markers),
        ),
    ]
    if events.snapshot_treasure is not None:
        messages.append((events.snapshot_treasure, snapshot.treasure_unlocked))
    elif snapshot.treasure_unlocked:
        messages.append((events.treasure_unlocked, None))
    return messages


def build_change_messages(
    events: WireEvents,
    mutation: Mutation,
    store: StateStore,
) -> list[tuple[str, Any]]:
    """Return the point event and the collection update for an accepted change."""

    match mutation:
        case PositionFound(position=position):
            return [
                (events.position_found, position),
                (events.update_positions, store.positions()),
            ]
        case ItemSorted(item_id=item_id):
            return [
                (events.item_sorted, item_id),
                (events.update_items, store.items()),
            ]
        case MarkerRevealed(marker_id=marker_id):
            return [
                (events.marker_revealed, marker_id),
                (events.update_markers, store.markers()),
            ]
        case TreasureUnlock():
            return [(events.treasure_unlocked, None)]
    msg = f"Unsupported mutation: {mutation!r}"
    raise TypeError(msg)


async def publish_snapshot(
    broadcaster: Broadcaster,
    events: WireEvents,
    client_id: str,
    snapshot: StoreSnapshot,
    *,
    handshake: bool = False,
) -> None:
    """Send the full session state to one client only."""

    for event, payload in build_snapshot_messages(
        events,
        snapshot,
        handshake=handshake,
    ):
        await broadcaster.send(client_id, event, payload)


async def publish_change(
    broadcaster: Broadcaster,
    events: WireEvents,
    mutation: Mutation,
    store: StateStore,
) -> None:
    """Broadcast an accepted change to every client, the originator included."""

    for event, payload in build_change_messages(events, mutation, store):
        await broadcaster.broadcast(event, payload)
