"""
Worker task loop that pulls URLs from the frontier, fetches them, records
what was found and feeds in-scope links back into the frontier.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .fetcher import Fetcher
from .link import UrlParts, filter_url, process_url
from .parser import LinkExtractor
from .url_frontier import Queue
from ..storage.data_store import DataStore
from ..utils.logger import get_crawler_logger


# When True a worker keeps the frontier locked from dequeue until it has
# finished processing that URL, which serializes URL processing across
# workers. Set to False to lock the frontier only around dequeue/enqueue.
HOLD_FRONTIER_LOCK_FOR_ITERATION = True

SEPARATOR = '-' * 44


class WorkerState(Enum):
    """States of the worker task loop."""
    ACQUIRE_WORK = 'acquire_work'
    CHECK_VISITED = 'check_visited'
    FETCH = 'fetch'
    RECORD_AND_EXTRACT = 'record_and_extract'
    ENQUEUE_DISCOVERIES = 'enqueue_discoveries'
    DONE = 'done'


@dataclass
class Dependencies:
    """Frontier and store shared by every worker, each with its own lock."""
    url_frontier: Queue
    data_store: DataStore
    frontier_lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    store_lock: asyncio.Lock = field(default_factory=asyncio.Lock)


@dataclass
class WorkerStats:
    """Per-worker counters."""
    pages_visited: int = 0
    links_found: int = 0
    links_enqueued: int = 0
    fetch_errors: int = 0
    skipped_visited: int = 0


class CrawlWorker:
    """
    Runs the crawl loop for a single worker.

    The worker exits as soon as it sees an empty frontier, even if another
    worker is still processing a page that may enqueue more URLs.
    """

    def __init__(self, worker_id: str, dependencies: Dependencies, fetcher: Fetcher,
                 url_parts: UrlParts, link_extractor: Optional[LinkExtractor] = None,
                 hold_frontier_lock: bool = HOLD_FRONTIER_LOCK_FOR_ITERATION):
        self.worker_id = worker_id
        self.deps = dependencies
        self.fetcher = fetcher
        self.url_parts = url_parts
        self.link_extractor = link_extractor or LinkExtractor()
        self.hold_frontier_lock = hold_frontier_lock

        self.state = WorkerState.ACQUIRE_WORK
        self.stats = WorkerStats()
        self.logger = get_crawler_logger(__name__, worker_id=worker_id)

    async def run(self):
        """Process URLs until the frontier is observed empty."""
        self.logger.debug(f"Worker {self.worker_id} started")
        frontier_lock = self.deps.frontier_lock

        while True:
            self.state = WorkerState.ACQUIRE_WORK
            await frontier_lock.acquire()
            locked = True
            try:
                current_url = await self.deps.url_frontier.dequeue()
                if current_url is None:
                    self.state = WorkerState.DONE
                    self.logger.debug(f"Worker {self.worker_id} finished")
                    return

                if not self.hold_frontier_lock:
                    frontier_lock.release()
                    locked = False

                await self._process_url(current_url)
            finally:
                if locked:
                    frontier_lock.release()

    async def _process_url(self, current_url: str):
        """Fetch one URL and record its links."""
        store = self.deps.data_store

        self.state = WorkerState.CHECK_VISITED
        async with self.deps.store_lock:
            if store.has_visited(current_url):
                self.stats.skipped_visited += 1
                return

        self.state = WorkerState.FETCH
        result = await self.fetcher.fetch(current_url)
        if result.error is not None:
            self.stats.fetch_errors += 1
            self.logger.warning(f"Error requesting URL {current_url} - {result.error}")
            return

        pending = []
        async with self.deps.store_lock:
            self.state = WorkerState.RECORD_AND_EXTRACT
            store.add(current_url, None)
            store.visited(current_url)
            self.stats.pages_visited += 1

            links = self.link_extractor.extract(result.content or '')
            self.logger.info(f"Visited URL: {current_url}")

            self.state = WorkerState.ENQUEUE_DISCOVERIES
            for href in links:
                url = process_url(href, current_url)
                self.logger.info(f"Found URL: {url}")
                self.stats.links_found += 1

                store.add(current_url, url)

                in_scope = filter_url(url, self.url_parts)
                if in_scope is not None and not store.has_visited(in_scope):
                    if self.hold_frontier_lock:
                        self._enqueue(in_scope)
                    else:
                        pending.append(in_scope)

        # Taken only after the store lock is released: lock order is frontier then store
        if pending:
            async with self.deps.frontier_lock:
                for url in pending:
                    self._enqueue(url)

        self.logger.info(SEPARATOR)

    def _enqueue(self, url: str):
        self.deps.url_frontier.enqueue(url)
        self.stats.links_enqueued += 1
