"""
Web crawler core components.
"""

from .url_frontier import URLFrontier, URLFrontierBuilder, Queue
from .fetcher import Fetcher, WebFetcher, FetchResult
from .parser import LinkExtractor
from .link import UrlParts, MalformedUrlError, url_parts, process_url, filter_url
from .worker import CrawlWorker, Dependencies, WorkerState, HOLD_FRONTIER_LOCK_FOR_ITERATION
from .scheduler import CrawlerScheduler, run

__all__ = [
    'URLFrontier', 'URLFrontierBuilder', 'Queue',
    'Fetcher', 'WebFetcher', 'FetchResult',
    'LinkExtractor',
    'UrlParts', 'MalformedUrlError', 'url_parts', 'process_url', 'filter_url',
    'CrawlWorker', 'Dependencies', 'WorkerState', 'HOLD_FRONTIER_LOCK_FOR_ITERATION',
    'CrawlerScheduler', 'run'
]
