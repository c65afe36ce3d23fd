"""Join ordering on a real python-socketio server, engine.io stubbed out."""

import asyncio
import json

import pytest
import socketio
from asgiref.sync import async_to_sync

from escape_game.realtime import socketio as sio_module
from escape_game.realtime.socketio import SocketIOBroadcaster
from escape_game.session.hub import SessionHub
from escape_game.session.mutations import PositionFound
from escape_game.session.store import StateStore

SNAPSHOT_EVENTS = [
    "snapshot:positions",
    "snapshot:items",
    "snapshot:markers",
    "snapshot:treasure",
]


def decode_events(raw_packets):
    """Socket.IO EVENT packets ("2[...]") as (event, payload) pairs."""

    events = []
    for raw in raw_packets:
        if isinstance(raw, str) and raw.startswith("2"):
            event, *args = json.loads(raw[1:])
            events.append((event, args[0] if args else None))
    return events


@pytest.fixture
def sio_live_server(monkeypatch):
    server = socketio.AsyncServer(
        async_mode="asgi",
        always_connect=True,
        logger=False,
        engineio_logger=False,
    )
    server.on("connect", handler=sio_module.connect)
    hub = SessionHub(StateStore(), SocketIOBroadcaster(server))
    monkeypatch.setattr(sio_module, "hub", hub)

    sent: dict[str, list] = {}

    async def send_packet(eio_sid, pkt):
        sent.setdefault(eio_sid, []).append(pkt.data)
        # Yield like a real socket write would.
        await asyncio.sleep(0)

    monkeypatch.setattr(server.eio, "send_packet", send_packet)
    for eio_sid in ("eioA", "eioC"):
        server.environ[eio_sid] = {}
    return server, hub, sent


def test_joiner_gets_snapshot_before_inflight_broadcast(sio_live_server):
    server, hub, sent = sio_live_server

    async def scenario():
        await server._handle_connect("eioA", "/", None)  # noqa: SLF001
        await asyncio.gather(
            hub.apply(PositionFound(0)),
            server._handle_connect("eioC", "/", None),  # noqa: SLF001
        )

    async_to_sync(scenario)()

    joined = decode_events(sent["eioC"])
    assert [event for event, _ in joined[:4]] == SNAPSHOT_EVENTS
    known = set(joined[0][1])
    for event, payload in joined[4:]:
        if event == "update:positions":
            known = set(payload)
    assert known == {0}

    assert decode_events(sent["eioA"])[-2:] == [
        ("event:position-found", 0),
        ("update:positions", [0]),
    ]


def test_broadcast_reaches_sender_in_session_room(sio_live_server):
    server, hub, sent = sio_live_server

    async def scenario():
        await server._handle_connect("eioA", "/", None)  # noqa: SLF001
        await server._handle_connect("eioC", "/", None)  # noqa: SLF001
        await hub.receive("item-sorted", "can", origin="eioA")

    async_to_sync(scenario)()

    for eio_sid in ("eioA", "eioC"):
        assert decode_events(sent[eio_sid])[-2:] == [
            ("event:item-sorted", "can"),
            ("update:items", ["can"]),
        ]
