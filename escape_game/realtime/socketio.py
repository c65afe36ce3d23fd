"""Global Socket.IO server for the game clients.

One default namespace and one room, ``SESSION_ROOM``. A client enters the
room right after its snapshot is sent, so broadcasts never overtake it.
The process-wide :class:`SessionHub` lives here and is wired to the server
through :class:`SocketIOBroadcaster`.

Frontend convention:
- URL base: http://<host>:3001 (``HUB_PORT``)
- Socket.IO path: ``/socket.io/`` (``SOCKETIO_PATH``)
- No auth: anyone who can reach the server joins the session.
"""

from __future__ import annotations

import logging
from typing import Any

import socketio
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from escape_game.realtime.events.session import DIALECTS
from escape_game.realtime.events.session import WireEvents
from escape_game.session.hub import SessionHub
from escape_game.session.store import StateStore

logger = logging.getLogger(__name__)

SESSION_ROOM = "session"


sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=settings.SOCKETIO_CORS_ALLOWED_ORIGINS,
    # Accept before running `connect` so the snapshot emitted there is
    # delivered after the connection ack.
    always_connect=True,
    logger=False,
    engineio_logger=False,
)


class SocketIOBroadcaster:
    """Broadcaster backed by a python-socketio server."""

    def __init__(self, server: socketio.AsyncServer) -> None:
        self.server = server

    async def send(self, client_id: str, event: str, payload: Any = None) -> None:
        await self.server.emit(event, payload, to=client_id)

    async def subscribe(self, client_id: str) -> None:
        await self.server.enter_room(client_id, SESSION_ROOM)

    async def broadcast(self, event: str, payload: Any = None) -> None:
        # No skip_sid: the client that caused the change gets the same
        # broadcast as everybody else.
        await self.server.emit(event, payload, room=SESSION_ROOM)


def get_wire_events(name: str | None = None) -> WireEvents:
    name = name or settings.ESCAPE_GAME_WIRE_DIALECT
    try:
        return DIALECTS[name]
    except KeyError as exc:
        msg = (
            f"Unknown ESCAPE_GAME_WIRE_DIALECT {name!r}; "
            f"expected one of {sorted(DIALECTS)}"
        )
        raise ImproperlyConfigured(msg) from exc


events = get_wire_events()
hub = SessionHub(StateStore(), SocketIOBroadcaster(sio), events=events)


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
    _ = environ, auth
    await hub.client_connected(sid)


@sio.event
async def disconnect(sid: str, *args: Any):
    # python-socketio >= 5.12 passes the disconnect reason.
    _ = args
    await hub.client_disconnected(sid)


async def handshake(sid: str, *args: Any):
    """Re-sync request: resend the snapshot without reconnecting."""

    _ = args
    await hub.handshake(sid)


def _mutation_handler(kind: str):
    async def handler(sid: str, *args: Any):
        # Clients may emit any number of arguments; only the first counts.
        data = args[0] if args else None
        await hub.receive(kind, data, origin=sid)

    handler.__name__ = f"on_{kind.replace('-', '_')}"
    return handler


sio.on(events.handshake, handler=handshake)
for _event_name, _kind in events.inbound().items():
    sio.on(_event_name, handler=_mutation_handler(_kind))
