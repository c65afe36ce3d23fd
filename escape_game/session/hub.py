"""Session hub: the single owner of the shared game state.

The hub applies mutations to its injected :class:`StateStore` and fans every
real change out to all connected clients. Duplicate or invalid mutations are
dropped without any traffic, so a fact can be resent any number of times by
any number of clients.

The hub never decides *whether* a fact is true. In particular a bin's code
digit is revealed by the client as soon as one correct item of an accepted
type lands in it, not once every item of that type is sorted; the hub stores
whichever marker the client reports.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING
from typing import Any

from escape_game.realtime.events.session import STANDARD
from escape_game.realtime.events.session import publish_change
from escape_game.realtime.events.session import publish_snapshot

from .mutations import ItemSorted
from .mutations import MarkerRevealed
from .mutations import PositionFound
from .mutations import TreasureUnlock
from .mutations import parse_mutation

if TYPE_CHECKING:  # import for type checking only
    from escape_game.realtime.events.session import Broadcaster
    from escape_game.realtime.events.session import WireEvents

    from .mutations import Mutation
    from .store import StateStore

logger = logging.getLogger(__name__)


class SessionHub:
    def __init__(
        self,
        store: StateStore,
        broadcaster: Broadcaster,
        events: WireEvents = STANDARD,
    ) -> None:
        self.store = store
        self.broadcaster = broadcaster
        self.events = events
        self._clients: set[str] = set()
        # Apply + broadcast is one unit: updates leave in acceptance order.
        self._lock = asyncio.Lock()

    @property
    def connected_clients(self) -> frozenset[str]:
        return frozenset(self._clients)

    async def client_connected(self, client_id: str) -> None:
        """Register a client and send it the full current state."""

        async with self._lock:
            self._clients.add(client_id)
            logger.info(
                "Client connected: %s (%d connected)",
                client_id,
                len(self._clients),
            )
            await publish_snapshot(
                self.broadcaster,
                self.events,
                client_id,
                self.store.snapshot(),
            )
            # Only now may broadcasts reach it: nothing can precede the snapshot.
            await self.broadcaster.subscribe(client_id)

    async def handshake(self, client_id: str) -> None:
        """Resend the full state to a client that asked for a re-sync."""

        async with self._lock:
            logger.debug("Handshake from %s", client_id)
            await publish_snapshot(
                self.broadcaster,
                self.events,
                client_id,
                self.store.snapshot(),
                handshake=True,
            )

    async def client_disconnected(self, client_id: str) -> None:
        self._clients.discard(client_id)
        logger.info(
            "Client disconnected: %s (%d connected)",
            client_id,
            len(self._clients),
        )

    async def receive(
        self,
        kind: Any,
        payload: Any = None,
        origin: str | None = None,
    ) -> bool:
        """Apply a raw client mutation; invalid input is ignored."""

        mutation = parse_mutation(kind, payload)
        if mutation is None:
            logger.debug("Dropped %r from %s: payload %r", kind, origin, payload)
            return False
        return await self.apply(mutation, origin=origin)

    async def apply(self, mutation: Mutation, origin: str | None = None) -> bool:
        """Apply a typed mutation and broadcast it when the state changed."""

        async with self._lock:
            changed = self._mutate(mutation)
            if not changed:
                logger.debug("No change for %r from %s", mutation, origin)
                return False
            logger.info("Accepted %r from %s", mutation, origin)
            await publish_change(self.broadcaster, self.events, mutation, self.store)
            return True

    def _mutate(self, mutation: Mutation) -> bool:
        match mutation:
            case PositionFound(position=position):
                return self.store.add_position(position)
            case ItemSorted(item_id=item_id):
                return self.store.add_sorted_item(item_id)
            case MarkerRevealed(marker_id=marker_id):
                return self.store.add_revealed_marker(marker_id)
            case TreasureUnlock():
                return self.store.unlock_treasure()
        return False
