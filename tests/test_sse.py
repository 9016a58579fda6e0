"""Tests for the SSE module."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from soilmon.lib.eventbus import SnapshotBroadcaster
from soilmon.sensor.models import Reading, Snapshot
from soilmon.sensor.parser import ParsedLine
from soilmon.server.sse import _event_generator, sse_moisture


@pytest.fixture
def broadcaster(store):
    return SnapshotBroadcaster(store)


@pytest.fixture
def mock_request(broadcaster):
    """Create a mock Request for testing."""
    request = MagicMock()
    request.is_disconnected = AsyncMock(return_value=False)
    request.app.state.broadcaster = broadcaster
    return request


class TestSseMoisture:
    """Tests for the SSE route handler."""

    @pytest.mark.asyncio
    async def test_returns_streaming_response(self, mock_request):
        response = await sse_moisture(mock_request)

        assert response.media_type == "text/event-stream"
        assert response.headers["cache-control"] == "no-cache"

    @pytest.mark.asyncio
    async def test_unstarted_stream_holds_no_subscription(
        self, mock_request, broadcaster
    ):
        response = await sse_moisture(mock_request)

        assert broadcaster.subscriber_count == 0
        await response.body_iterator.aclose()
        assert broadcaster.subscriber_count == 0

    @pytest.mark.asyncio
    async def test_subscribes_once_streaming(self, mock_request, broadcaster):
        gen = _event_generator(mock_request, broadcaster)
        assert broadcaster.subscriber_count == 0

        await gen.__anext__()
        assert broadcaster.subscriber_count == 1

        await gen.aclose()
        assert broadcaster.subscriber_count == 0


class TestEventGenerator:
    """Tests for the _event_generator helper."""

    @pytest.mark.asyncio
    async def test_yields_current_snapshot_first(self, mock_request, broadcaster):
        gen = _event_generator(mock_request, broadcaster)

        event = await gen.__anext__()

        assert event.startswith("data: ")
        assert event.endswith("\n\n")
        assert json.loads(event[6:])["condition"] == "unknown"
        await gen.aclose()

    @pytest.mark.asyncio
    async def test_yields_broadcasts(self, mock_request, broadcaster, frozen_time):
        gen = _event_generator(mock_request, broadcaster)
        await gen.__anext__()

        broadcaster.broadcast(
            Snapshot.of(Reading.from_parsed(ParsedLine(338, 67), frozen_time))
        )
        event = await gen.__anext__()

        assert json.loads(event[6:])["percent"] == 67
        await gen.aclose()
        assert broadcaster.subscriber_count == 0

    @pytest.mark.asyncio
    async def test_stops_when_client_disconnects(
        self, mock_request, broadcaster, caplog
    ):
        mock_request.is_disconnected = AsyncMock(return_value=True)
        gen = _event_generator(mock_request, broadcaster)

        events = [event async for event in gen]

        assert events == []
        assert broadcaster.subscriber_count == 0
        assert "SSE client disconnected" in caplog.text
