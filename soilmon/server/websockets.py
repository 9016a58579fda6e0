"""WebSocket route for real-time moisture readings.

Each client gets its own event bus subscription: the current snapshot is
sent on connect, then every reading the ingestor publishes.
"""
import asyncio
from contextlib import suppress

from starlette.websockets import WebSocket, WebSocketDisconnect

from soilmon.lib.eventbus import SnapshotBroadcaster, Subscription
from soilmon.logging import get_logger

_logger = get_logger("server.websockets")

# Heartbeat interval in seconds (30s is typical for WebSocket keepalive)
_HEARTBEAT_INTERVAL_SEC = 30


async def _send_heartbeat(websocket: WebSocket, client_id: int) -> None:
    """Send periodic heartbeat pings to detect dead connections."""
    while True:
        await asyncio.sleep(_HEARTBEAT_INTERVAL_SEC)
        try:
            await websocket.send_json({"type": "ping"})
        except WebSocketDisconnect:
            raise
        except Exception:
            _logger.debug("Heartbeat failed for client %s", client_id)
            raise WebSocketDisconnect() from None


async def _forward_snapshots(
    websocket: WebSocket, subscription: Subscription
) -> None:
    """Send every snapshot from the subscription to the client."""
    async for snapshot in subscription:
        await websocket.send_json(snapshot.to_dict())


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    """Drain client messages until the client goes away."""
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


async def ws_moisture(websocket: WebSocket) -> None:
    """Stream moisture readings to a WebSocket client."""
    broadcaster: SnapshotBroadcaster = websocket.app.state.broadcaster
    await websocket.accept()
    client_id = id(websocket)

    async with broadcaster.subscribe() as subscription:
        _logger.info(
            "Client %s connected (total: %d)",
            client_id, broadcaster.subscriber_count,
        )
        tasks = [
            asyncio.create_task(_forward_snapshots(websocket, subscription)),
            asyncio.create_task(_send_heartbeat(websocket, client_id)),
            asyncio.create_task(_wait_for_disconnect(websocket)),
        ]
        try:
            done, _ = await asyncio.wait(
                tasks, return_when=asyncio.FIRST_COMPLETED
            )
            for task in done:
                error = task.exception()
                if error is not None and not isinstance(
                    error, WebSocketDisconnect | OSError | RuntimeError
                ):
                    _logger.error("Error streaming to client %s: %s", client_id, error)
        except asyncio.CancelledError:
            _logger.info("Connection to client %s cancelled (shutdown)", client_id)
            raise
        finally:
            for task in tasks:
                task.cancel()
            for task in tasks:
                with suppress(asyncio.CancelledError, Exception):
                    await task
            with suppress(Exception):
                await websocket.close()

    _logger.info(
        "Client %s disconnected (remaining: %d)",
        client_id, broadcaster.subscriber_count,
    )
