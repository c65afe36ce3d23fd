from __future__ import annotations

import uvicorn
from django.conf import settings
from django.core.management.base import BaseCommand
from django.core.management.base import CommandParser


class Command(BaseCommand):
    help = "Serve the Socket.IO session hub (and the status endpoint) with uvicorn"

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--host",
            dest="host",
            default=None,
            help="Interface to bind (defaults to HUB_HOST)",
        )
        parser.add_argument(
            "--port",
            dest="port",
            type=int,
            default=None,
            help="Port to bind (defaults to HUB_PORT, env PORT)",
        )

    def handle(self, *args, **options) -> str | None:
        host: str = options.get("host") or settings.HUB_HOST
        port: int = options.get("port") or settings.HUB_PORT

        self.stdout.write(f"[server] Socket.IO listening on :{port}")
        # The hub state lives in this process only: a single worker, no reload.
        uvicorn.run(
            "config.asgi:application",
            host=host,
            port=port,
            workers=1,
            log_level=settings.HUB_LOG_LEVEL,
        )
        return None
