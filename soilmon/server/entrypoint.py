"""Application factory for the web server."""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.routing import BaseRoute, Mount, Route, WebSocketRoute
from starlette.staticfiles import StaticFiles

from soilmon.lib.config import Settings, get_settings
from soilmon.lib.eventbus import SnapshotBroadcaster
from soilmon.lib.store import ReadingStore
from soilmon.logging import configure, get_logger
from soilmon.sensor.reader import create_ingestor

from .api.health import health_check
from .api.moisture import get_moisture
from .api.ports import get_ports
from .api.serial import reconnect_serial
from .sse import sse_moisture
from .websockets import ws_moisture

_logger = get_logger("server.entrypoint")


def _make_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        """Wire the ingestion pipeline and run it for the app's lifetime."""
        store = ReadingStore()
        broadcaster = SnapshotBroadcaster(
            store, queue_size=settings.server.subscriber_queue_size
        )
        ingestor = create_ingestor(store, broadcaster.broadcast, settings)

        app.state.store = store
        app.state.broadcaster = broadcaster
        app.state.ingestor = ingestor

        ingestor.start()
        _logger.info("Serial ingestor started")
        try:
            yield
        finally:
            await ingestor.stop()
            _logger.info("Serial ingestor stopped")

    return lifespan


def create_app(settings: Settings | None = None) -> Starlette:
    """Create and configure the Starlette application.

    The reading store, broadcaster and serial ingestor are created by the
    lifespan and exposed on ``app.state`` next to the settings.

    Returns:
        Configured Starlette application instance.
    """
    settings = settings or get_settings()
    configure(settings.log_level)
    server_cfg = settings.server

    routes: list[BaseRoute] = [
        Route("/health", health_check),
        Route("/api/moisture", get_moisture),
        Route("/api/ports", get_ports),
        Route("/api/serial/reconnect", reconnect_serial, methods=["POST"]),
        WebSocketRoute("/ws/moisture", ws_moisture),
        Route("/sse/moisture", sse_moisture),
    ]
    if os.path.isdir(server_cfg.static_dir):
        routes.append(
            Mount(
                "/",
                app=StaticFiles(directory=server_cfg.static_dir, html=True),
                name="static",
            )
        )
    else:
        _logger.info(
            "Static directory %s not found, not serving static files",
            server_cfg.static_dir,
        )

    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=list(server_cfg.cors_origins),
            allow_methods=["GET", "POST"],
        )
    ]

    app = Starlette(
        routes=routes,
        middleware=middleware,
        lifespan=_make_lifespan(settings),
    )
    app.state.settings = settings
    return app
