"""Health check endpoint for monitoring service status."""

from datetime import UTC, datetime

from starlette.requests import Request
from starlette.responses import JSONResponse

from soilmon.lib.config import ConnectionState
from soilmon.lib.eventbus import SnapshotBroadcaster
from soilmon.lib.store import ReadingStore
from soilmon.sensor.ingestor import SerialIngestor


async def health_check(request: Request) -> JSONResponse:
    """Return health status of the sensor connection and latest reading."""
    ingestor: SerialIngestor = request.app.state.ingestor
    store: ReadingStore = request.app.state.store
    broadcaster: SnapshotBroadcaster = request.app.state.broadcaster

    serial_ok = ingestor.state == ConnectionState.OPEN
    observed_at = store.reading.observed_at

    return JSONResponse(
        {
            "status": "healthy" if serial_ok else "unhealthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "checks": {
                "serial": {
                    "ok": serial_ok,
                    "state": ingestor.state,
                    "port": ingestor.port,
                    "running": ingestor.is_running,
                },
                "reading": {
                    "ok": observed_at is not None,
                    "last_reading": observed_at.isoformat() if observed_at else None,
                },
                "subscribers": broadcaster.subscriber_count,
            },
        },
        status_code=200 if serial_ok else 503,
    )
