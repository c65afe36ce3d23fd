from __future__ import annotations

from typing import Any

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.http import require_GET


def check_hub() -> dict[str, Any]:
    # Resolved per request: always read the process-wide hub.
    from escape_game.realtime.socketio import hub  # noqa: PLC0415

    snapshot = hub.store.snapshot()
    positions = list(snapshot.positions)
    return {
        "positions": positions,
        # Key the original status page used.
        "indices": positions,
        "clients": len(hub.connected_clients),
        "treasure_unlocked": snapshot.treasure_unlocked,
    }


@require_GET
def health(request):
    """Liveness plus the currently found positions. Read-only."""

    return JsonResponse(
        {
            "ok": True,
            "status": "ok",
            "service": settings.ESCAPE_GAME_SERVICE_NAME,
            **check_hub(),
        },
    )
