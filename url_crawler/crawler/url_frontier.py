"""
URL Frontier implementation for managing URLs to crawl.
Implements a FIFO work queue with a fixed politeness delay.
"""

import asyncio
import logging
from collections import deque
from typing import Deque, Iterable, Optional


class Queue:
    """Abstract base class for frontier queues."""

    def enqueue(self, value: str):
        """Append a URL to the tail of the queue."""
        raise NotImplementedError

    async def dequeue(self) -> Optional[str]:
        """Pop the URL at the head of the queue, or None if empty."""
        raise NotImplementedError


class URLFrontier(Queue):
    """
    Unbounded FIFO of pending URLs.

    The frontier does not deduplicate: the same URL may be enqueued several
    times. Callers are expected to consult the data store's visited flag
    before processing a dequeued URL.
    """

    def __init__(self, values: Optional[Iterable[str]] = None, delay_s: Optional[float] = None):
        self.queue: Deque[str] = deque(values or [])
        self.delay_s = delay_s
        self.logger = logging.getLogger(__name__)

    def enqueue(self, value: str):
        self.queue.append(value)
        self.logger.debug(f"Added URL to frontier: {value}")

    async def dequeue(self) -> Optional[str]:
        """
        Get the next URL to crawl.

        Sleeps for the politeness delay first when one is configured, then
        returns the head of the queue or None if nothing is pending.
        """
        if self.delay_s:
            await asyncio.sleep(self.delay_s)

        if not self.queue:
            return None

        return self.queue.popleft()

    def __len__(self) -> int:
        return len(self.queue)


class URLFrontierBuilder:
    """Builds a URLFrontier pre-seeded with values."""

    def __init__(self):
        self.values: Deque[str] = deque()
        self.delay: Optional[float] = None

    def value(self, value: str) -> 'URLFrontierBuilder':
        self.values.append(value)
        return self

    def delay_s(self, delay_s: float) -> 'URLFrontierBuilder':
        # 0 disables the politeness wait entirely
        if delay_s > 0:
            self.delay = delay_s
        return self

    def build(self) -> URLFrontier:
        return URLFrontier(self.values, self.delay)
