"""Full path through the Socket.IO handlers with a fake fan-out server."""

import asyncio
from typing import Any

import pytest
from asgiref.sync import async_to_sync

from escape_game.realtime import socketio as sio_module
from escape_game.realtime.socketio import SocketIOBroadcaster
from escape_game.session.hub import SessionHub
from escape_game.session.store import StateStore

QUIET_WINDOW = 0.2


class FakeClients:
    """Stands in for connected sockets: one queue per sid, members per room."""

    def __init__(self) -> None:
        self.queues: dict[str, asyncio.Queue] = {}
        self.rooms: dict[str, set[str]] = {}

    async def enter_room(self, sid: str, room: str, **_):
        self.rooms.setdefault(room, set()).add(sid)

    def forget(self, sid: str) -> None:
        self.queues.pop(sid, None)
        for members in self.rooms.values():
            members.discard(sid)

    async def emit(self, event: str, data: Any = None, to=None, room=None, **_):
        targets = [to] if to is not None else sorted(self.rooms.get(room, ()))
        for sid in targets:
            self.queues.setdefault(sid, asyncio.Queue()).put_nowait((event, data))

    def drain(self, sid: str) -> list[tuple[str, Any]]:
        queue = self.queues[sid]
        out = []
        while not queue.empty():
            out.append(queue.get_nowait())
        return out


@pytest.fixture
def clients(monkeypatch):
    fake = FakeClients()
    monkeypatch.setattr(sio_module.sio, "emit", fake.emit)
    monkeypatch.setattr(sio_module.sio, "enter_room", fake.enter_room)
    monkeypatch.setattr(
        sio_module,
        "hub",
        SessionHub(StateStore(), SocketIOBroadcaster(sio_module.sio)),
    )
    return fake


def emit_from(sid: str, event: str, *args):
    return sio_module.sio.handlers["/"][event](sid, *args)


def test_duplicate_position_produces_no_traffic(clients):
    async def scenario():
        await sio_module.connect("A", {})
        await sio_module.connect("B", {})
        clients.drain("A")
        clients.drain("B")

        await emit_from("A", "mutate:position-found", 0)
        expected = [("event:position-found", 0), ("update:positions", [0])]
        assert clients.drain("A") == expected
        assert clients.drain("B") == expected

        await emit_from("B", "mutate:position-found", 0)
        for sid in ("A", "B"):
            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(clients.queues[sid].get(), QUIET_WINDOW)

    async_to_sync(scenario)()


def test_late_joiner_snapshot_comes_first(clients):
    async def scenario():
        await sio_module.connect("A", {})
        await emit_from("A", "mutate:position-found", 3)
        await emit_from("A", "mutate:item-sorted", "i1")
        await emit_from("A", "mutate:marker-revealed", "yellow")

        await sio_module.connect("C", {})
        await emit_from("A", "mutate:treasure-unlock")

        return clients.drain("C")

    assert async_to_sync(scenario)() == [
        ("snapshot:positions", [3]),
        ("snapshot:items", ["i1"]),
        ("snapshot:markers", ["yellow"]),
        ("snapshot:treasure", False),
        ("event:treasure-unlocked", None),
    ]


def test_disconnected_client_stops_receiving(clients):
    async def scenario():
        await sio_module.connect("A", {})
        await sio_module.connect("B", {})
        await sio_module.disconnect("B")
        # The server forgets the socket; the fake mirrors that.
        clients.forget("B")
        await emit_from("A", "mutate:item-sorted", "can")
        return clients.drain("A")[-2:]

    assert async_to_sync(scenario)() == [
        ("event:item-sorted", "can"),
        ("update:items", ["can"]),
    ]
    assert "B" not in clients.queues
