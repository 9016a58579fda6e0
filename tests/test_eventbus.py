"""Tests for the in-process snapshot broadcaster."""

import pytest

from soilmon.lib.eventbus import SnapshotBroadcaster
from soilmon.sensor.models import Reading, Snapshot
from soilmon.sensor.parser import ParsedLine


@pytest.fixture
def broadcaster(store):
    return SnapshotBroadcaster(store, queue_size=2)


def _snapshot(raw, percent, when):
    return Snapshot.of(Reading.from_parsed(ParsedLine(raw, percent), when))


class TestSubscribe:
    """Tests for subscriber registration."""

    @pytest.mark.asyncio
    async def test_new_subscriber_gets_current_snapshot(
        self, store, broadcaster, frozen_time
    ):
        store.set(Reading.from_parsed(ParsedLine(523, 49), frozen_time))

        subscription = broadcaster.subscribe()

        snapshot = await subscription.get()
        assert snapshot.reading.raw == 523

    @pytest.mark.asyncio
    async def test_subscriber_before_any_reading_gets_unknown(self, broadcaster):
        subscription = broadcaster.subscribe()

        snapshot = await subscription.get()
        assert snapshot.reading == Reading.unknown()

    @pytest.mark.asyncio
    async def test_context_manager_unsubscribes(self, broadcaster):
        async with broadcaster.subscribe():
            assert broadcaster.subscriber_count == 1
        assert broadcaster.subscriber_count == 0

    def test_unsubscribe_unknown_is_ignored(self, broadcaster, store):
        other = SnapshotBroadcaster(store).subscribe()
        broadcaster.unsubscribe(other)
        assert broadcaster.subscriber_count == 0


class TestBroadcast:
    """Tests for broadcast()."""

    def test_broadcast_without_subscribers(self, broadcaster, frozen_time):
        assert broadcaster.broadcast(_snapshot(523, 49, frozen_time)) == 0

    @pytest.mark.asyncio
    async def test_broadcast_reaches_all_subscribers(
        self, broadcaster, frozen_time
    ):
        first = broadcaster.subscribe()
        second = broadcaster.subscribe()
        await first.get()
        await second.get()

        count = broadcaster.broadcast(_snapshot(523, 49, frozen_time))

        assert count == 2
        assert (await first.get()).reading.raw == 523
        assert (await second.get()).reading.raw == 523

    @pytest.mark.asyncio
    async def test_slow_subscriber_drops_oldest(self, broadcaster, frozen_time):
        subscription = broadcaster.subscribe()  # queue: [unknown]

        broadcaster.broadcast(_snapshot(523, 49, frozen_time))
        broadcaster.broadcast(_snapshot(338, 67, frozen_time))

        assert subscription.pending == 2
        assert subscription.dropped == 1
        assert (await subscription.get()).reading.raw == 523
        assert (await subscription.get()).reading.raw == 338

    @pytest.mark.asyncio
    async def test_async_iteration(self, broadcaster, frozen_time):
        subscription = broadcaster.subscribe()
        broadcaster.broadcast(_snapshot(523, 49, frozen_time))

        received = []
        async for snapshot in subscription:
            received.append(snapshot.reading.raw)
            if len(received) == 2:
                break

        assert received == [None, 523]
