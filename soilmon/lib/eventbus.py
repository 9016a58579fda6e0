"""In-process event bus for real-time reading broadcasts.

Provides pub/sub between the serial ingestor (publisher) and the web
server's WebSocket/SSE endpoints (subscribers). Publishing never waits on
a subscriber: each one owns a bounded queue, and when a slow client falls
behind its oldest pending snapshot is dropped.
"""

import asyncio
from collections.abc import AsyncIterator
from typing import Self

from soilmon.lib.store import ReadingStore
from soilmon.logging import get_logger
from soilmon.sensor.models import Snapshot

logger = get_logger("lib.eventbus")

DEFAULT_QUEUE_SIZE = 16


class Subscription:
    """A subscriber's view of the broadcast stream.

    Use as an async context manager so the subscription is released when
    the client goes away::

        async with broadcaster.subscribe() as subscription:
            async for snapshot in subscription:
                ...
    """

    def __init__(self, broadcaster: "SnapshotBroadcaster", maxsize: int) -> None:
        self._broadcaster = broadcaster
        self._queue: asyncio.Queue[Snapshot] = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0

    def offer(self, snapshot: Snapshot) -> None:
        """Queue a snapshot without blocking, evicting the oldest if full."""
        if self._queue.full():
            self._queue.get_nowait()
            self.dropped += 1
        self._queue.put_nowait(snapshot)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    async def get(self) -> Snapshot:
        """Wait for the next snapshot."""
        return await self._queue.get()

    async def __aiter__(self) -> AsyncIterator[Snapshot]:
        while True:
            yield await self._queue.get()

    def close(self) -> None:
        """Stop receiving broadcasts."""
        self._broadcaster.unsubscribe(self)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *_: object) -> None:
        self.close()


class SnapshotBroadcaster:
    """Fans reading snapshots out to every connected subscriber."""

    def __init__(
        self, store: ReadingStore, queue_size: int = DEFAULT_QUEUE_SIZE
    ) -> None:
        self._store = store
        self._queue_size = queue_size
        self._subscriptions: set[Subscription] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self) -> Subscription:
        """Register a subscriber, primed with the current snapshot.

        New clients see the latest reading straight away instead of waiting
        for the next line from the sensor.
        """
        subscription = Subscription(self, self._queue_size)
        subscription.offer(self._store.get())
        self._subscriptions.add(subscription)
        logger.debug("Subscriber added (total: %d)", len(self._subscriptions))
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscriber. Unknown subscriptions are ignored."""
        self._subscriptions.discard(subscription)
        logger.debug(
            "Subscriber removed (remaining: %d)", len(self._subscriptions)
        )

    def broadcast(self, snapshot: Snapshot) -> int:
        """Queue a snapshot for every subscriber.

        Returns:
            The number of subscribers the snapshot was queued for.
        """
        for subscription in self._subscriptions:
            subscription.offer(snapshot)
        count = len(self._subscriptions)
        logger.debug("Broadcast %s to %d subscribers", snapshot.reading, count)
        return count
