"""Server-Sent Events route for real-time moisture readings."""

import json
from collections.abc import AsyncIterator

from starlette.requests import Request
from starlette.responses import StreamingResponse

from soilmon.lib.eventbus import SnapshotBroadcaster
from soilmon.logging import get_logger

_logger = get_logger("server.sse")


def _sse_response(generator: AsyncIterator[str]) -> StreamingResponse:
    """Create an SSE streaming response."""
    return StreamingResponse(
        generator,
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
    )


async def _event_generator(
    request: Request, broadcaster: SnapshotBroadcaster
) -> AsyncIterator[str]:
    """Generate SSE events for a client.

    A new subscription holds the current snapshot, so the client receives
    it first, then every new reading.
    """
    _logger.info("SSE client connected")
    try:
        async with broadcaster.subscribe() as subscription:
            async for snapshot in subscription:
                if await request.is_disconnected():
                    break
                yield f"data: {json.dumps(snapshot.to_dict())}\n\n"
    finally:
        _logger.info("SSE client disconnected")


async def sse_moisture(request: Request) -> StreamingResponse:
    """Stream moisture readings via SSE."""
    broadcaster: SnapshotBroadcaster = request.app.state.broadcaster
    return _sse_response(_event_generator(request, broadcaster))
