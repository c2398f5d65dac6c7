"""
Crawler scheduler that spawns the worker pool and manages the overall crawl process.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from .fetcher import Fetcher, WebFetcher
from .link import url_parts, normalize_url
from .parser import LinkExtractor
from .url_frontier import URLFrontierBuilder
from .worker import CrawlWorker, Dependencies, HOLD_FRONTIER_LOCK_FOR_ITERATION
from ..storage.data_store import CrawlStore, DataStore
from ..utils.config import CrawlerConfig, validate_crawler_config


FetcherFactory = Callable[[], Fetcher]


@dataclass
class CrawlStats:
    """Statistics for crawl operations."""
    start_time: float
    workers: int = 0
    pages_visited: int = 0
    links_found: int = 0
    links_enqueued: int = 0
    fetch_errors: int = 0
    worker_failures: int = 0

    @property
    def elapsed_time(self) -> float:
        return time.time() - self.start_time


class CrawlerScheduler:
    """
    Coordinates a pool of crawl workers sharing one frontier and one store.

    Every worker gets its own fetcher so that no connection pool is shared
    between workers.
    """

    def __init__(self, config: CrawlerConfig, fetcher_factory: Optional[FetcherFactory] = None,
                 link_extractor: Optional[LinkExtractor] = None,
                 hold_frontier_lock: bool = HOLD_FRONTIER_LOCK_FOR_ITERATION):
        validate_crawler_config(config)
        self.config = config
        self.fetcher_factory = fetcher_factory or self._default_fetcher
        self.link_extractor = link_extractor or LinkExtractor()
        self.hold_frontier_lock = hold_frontier_lock
        self.logger = logging.getLogger(__name__)

        self.stats = CrawlStats(start_time=time.time())
        self.workers: List[CrawlWorker] = []

    def _default_fetcher(self) -> Fetcher:
        return WebFetcher(
            user_agent=self.config.user_agent,
            request_timeout=self.config.request_timeout,
            max_content_size=self.config.max_content_size
        )

    def build_dependencies(self) -> Dependencies:
        """Create an empty frontier and store for a crawl."""
        url_frontier = URLFrontierBuilder().delay_s(self.config.politeness_delay).build()
        return Dependencies(url_frontier=url_frontier, data_store=CrawlStore())

    async def execute(self, seed_url: str, dependencies: Optional[Dependencies] = None) -> DataStore:
        """
        Crawl from seed_url until every worker has found the frontier empty.

        Args:
            seed_url: URL to start crawling from
            dependencies: Shared frontier and store (new ones are built if None)

        Returns:
            The populated data store

        Raises:
            MalformedUrlError: if seed_url is not an absolute URL
        """
        origin = url_parts(seed_url)
        seed_url = normalize_url(seed_url.strip())

        if dependencies is None:
            dependencies = self.build_dependencies()

        dependencies.url_frontier.enqueue(seed_url)

        self.stats = CrawlStats(start_time=time.time(), workers=self.config.workers_n)
        self.workers = [
            CrawlWorker(
                f"worker-{i}",
                dependencies,
                self.fetcher_factory(),
                origin,
                link_extractor=self.link_extractor,
                hold_frontier_lock=self.hold_frontier_lock
            )
            for i in range(self.config.workers_n)
        ]

        self.logger.debug(f"Started crawling {seed_url} with {len(self.workers)} workers")

        tasks = [asyncio.create_task(self._run_worker(worker)) for worker in self.workers]
        for completed in asyncio.as_completed(tasks):
            try:
                await completed
            except Exception as e:
                self.stats.worker_failures += 1
                self.logger.error(f"Worker failed: {e}", exc_info=True)
            self.logger.info("Worker completed")

        self._collect_stats()
        self._log_final_stats()

        return dependencies.data_store

    async def _run_worker(self, worker: CrawlWorker):
        async with worker.fetcher:
            await worker.run()

    def _collect_stats(self):
        for worker in self.workers:
            self.stats.pages_visited += worker.stats.pages_visited
            self.stats.links_found += worker.stats.links_found
            self.stats.links_enqueued += worker.stats.links_enqueued
            self.stats.fetch_errors += worker.stats.fetch_errors

    def _log_final_stats(self):
        """Log final crawl statistics."""
        self.logger.debug(
            f"Crawl finished: "
            f"Workers={self.stats.workers}, "
            f"Visited={self.stats.pages_visited}, "
            f"Found={self.stats.links_found}, "
            f"Enqueued={self.stats.links_enqueued}, "
            f"Errors={self.stats.fetch_errors}, "
            f"Time={self.stats.elapsed_time:.2f}s"
        )


async def run(seed_url: str, workers_n: int = 1, politeness_delay: float = 0,
              fetcher_factory: Optional[FetcherFactory] = None,
              config: Optional[CrawlerConfig] = None) -> DataStore:
    """
    Crawl the origin of seed_url with a pool of workers.

    Raises:
        MalformedUrlError: if seed_url is not an absolute URL
    """
    if config is None:
        config = CrawlerConfig()
    config = config.with_overrides(seed_url=seed_url, workers_n=workers_n,
                                   politeness_delay=politeness_delay)

    scheduler = CrawlerScheduler(config, fetcher_factory=fetcher_factory)
    return await scheduler.execute(seed_url)
