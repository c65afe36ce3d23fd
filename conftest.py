from __future__ import annotations

from typing import Any

import pytest

from escape_game.realtime.events.session import STANDARD
from escape_game.session.hub import SessionHub
from escape_game.session.store import StateStore


class RecordingBroadcaster:
    """In-memory fan-out: one inbox per client, broadcasts reach subscribers."""

    def __init__(self) -> None:
        self.inboxes: dict[str, list[tuple[str, Any]]] = {}
        self.subscribers: list[str] = []
        self.broadcasts: list[tuple[str, Any]] = []

    async def send(self, client_id: str, event: str, payload: Any = None) -> None:
        self.inboxes.setdefault(client_id, []).append((event, payload))

    async def subscribe(self, client_id: str) -> None:
        self.inboxes.setdefault(client_id, [])
        if client_id not in self.subscribers:
            self.subscribers.append(client_id)

    async def broadcast(self, event: str, payload: Any = None) -> None:
        self.broadcasts.append((event, payload))
        for client_id in self.subscribers:
            self.inboxes[client_id].append((event, payload))


@pytest.fixture
def store() -> StateStore:
    return StateStore()


@pytest.fixture
def broadcaster() -> RecordingBroadcaster:
    return RecordingBroadcaster()


@pytest.fixture
def hub(store, broadcaster) -> SessionHub:
    return SessionHub(store, broadcaster, events=STANDARD)
