"""
In-Process Publish/Subscribe

Fans catalog events out to GraphQL subscription clients.

Every subscriber gets its own bounded asyncio.Queue. Publishing never
blocks: when a subscriber's queue is full, its oldest pending event is
dropped to make room for the new one. Subscribers only see events
published after they connected; nothing is replayed.

All access happens on the event loop thread, so the registry needs no
locking.

Usage:
    from library_api.services.pubsub import Topic, get_pubsub

    pubsub = get_pubsub()
    pubsub.publish(Topic.BOOK_ADDED, book)

    async for book in pubsub.subscribe(Topic.BOOK_ADDED):
        ...
"""

import asyncio
import logging
from collections.abc import AsyncGenerator
from enum import StrEnum
from typing import Any

from library_api.config import get_settings

logger = logging.getLogger(__name__)


class Topic(StrEnum):
    """Topics that can be published and subscribed to."""

    BOOK_ADDED = "BOOK_ADDED"


class PubSub:
    """
    Registry of subscriber queues per topic.

    Args:
        max_queue_size: Events buffered per subscriber before the oldest
            one is dropped
    """

    def __init__(self, max_queue_size: int = 100):
        if max_queue_size < 1:
            raise ValueError("max_queue_size must be at least 1")
        self.max_queue_size = max_queue_size
        self._topics: dict[str, list[asyncio.Queue]] = {}

    def publish(self, topic: str, payload: Any) -> int:
        """
        Deliver a payload to every current subscriber of a topic.

        Returns:
            Number of subscribers the payload was queued for
        """
        queues = self._topics.get(topic, [])
        for queue in queues:
            if queue.full():
                queue.get_nowait()
                logger.warning(f"Subscriber queue full on '{topic}', dropped oldest event")
            queue.put_nowait(payload)

        logger.debug(f"Published to '{topic}': {len(queues)} subscribers")
        return len(queues)

    async def subscribe(self, topic: str) -> AsyncGenerator[Any, None]:
        """
        Yield payloads published to a topic, indefinitely.

        The subscriber is registered when iteration starts and removed when
        the generator is closed (client disconnect or cancellation).
        """
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.max_queue_size)
        self._topics.setdefault(topic, []).append(queue)
        logger.debug(f"Subscriber joined '{topic}'")
        try:
            while True:
                yield await queue.get()
        finally:
            self._topics[topic].remove(queue)
            if not self._topics[topic]:
                del self._topics[topic]
            logger.debug(f"Subscriber left '{topic}'")

    def subscriber_count(self, topic: str) -> int:
        """Number of active subscribers on a topic."""
        return len(self._topics.get(topic, []))

    def get_stats(self) -> dict[str, int]:
        """Active subscribers per topic."""
        return {topic: len(queues) for topic, queues in self._topics.items()}


# =============================================================================
# Global PubSub Instance
# =============================================================================

pubsub = PubSub(max_queue_size=get_settings().subscription_queue_size)


def get_pubsub() -> PubSub:
    """Get the process-wide pubsub instance."""
    return pubsub
