"""
Test configuration and fixtures for crawler tests
"""

import asyncio
import logging
from contextlib import contextmanager
from typing import Dict, List, Optional

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from url_crawler.crawler.fetcher import Fetcher, FetchResult
from url_crawler.crawler.url_frontier import Queue


def make_hrefs(base_url: str) -> List[str]:
    base_url = base_url.rstrip('/')
    return [f"{base_url}/about", f"{base_url}/contact", "http://google.com"]


def make_anchors(urls: List[str]) -> str:
    return ''.join(f'<a href="{url}">{url}</a>' for url in urls)


class ScriptedFetcher(Fetcher):
    """Fetcher serving canned bodies; unknown URLs fail like a refused connection."""

    def __init__(self, pages: Dict[str, str], delays: Optional[Dict[str, float]] = None):
        self.pages = pages
        self.delays = delays or {}
        self.fetched: List[str] = []
        self.started = False
        self.closed = False

    async def start(self):
        self.started = True

    async def close(self):
        self.closed = True

    async def fetch(self, url: str) -> FetchResult:
        self.fetched.append(url)
        if url in self.delays:
            await asyncio.sleep(self.delays[url])

        if url not in self.pages:
            return FetchResult(url=url, status_code=0, error="Client error: connection refused")

        return FetchResult(url=url, status_code=200, content=self.pages[url])


class ScriptedFrontier(Queue):
    """Frontier that replays a fixed dequeue script and records every call."""

    def __init__(self, script: List[Optional[str]], calls: list):
        self.script = list(script)
        self.calls = calls
        self.enqueued: List[str] = []

    def enqueue(self, value: str):
        self.calls.append(('enqueue', value))
        self.enqueued.append(value)

    async def dequeue(self) -> Optional[str]:
        value = self.script.pop(0) if self.script else None
        self.calls.append(('dequeue', value))
        return value


@pytest.fixture
def site_pages():
    """Canned pages for a seed with two same-origin links and one external link."""
    seed = "http://site.test/"
    hrefs = make_hrefs(seed)
    return {
        seed: make_anchors(hrefs),
        hrefs[0]: "",
        hrefs[1]: "",
    }


@contextmanager
def isolated_root_logger():
    """Undo handler and level changes made to the root logger."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    try:
        yield root_logger
    finally:
        root_logger.handlers[:] = handlers
        root_logger.setLevel(level)


@pytest_asyncio.fixture
async def live_site():
    """Local HTTP server serving /, /about and /contact; yields (seed_url, hit counts)."""
    hits: Dict[str, int] = {}

    async def index(request: web.Request) -> web.Response:
        hits['/'] = hits.get('/', 0) + 1
        origin = str(request.url.origin())
        return web.Response(text=make_anchors(make_hrefs(origin)), content_type='text/html')

    async def empty(request: web.Request) -> web.Response:
        hits[request.path] = hits.get(request.path, 0) + 1
        return web.Response(text="", content_type='text/html')

    async def image(request: web.Request) -> web.Response:
        return web.Response(body=b'\x89PNG', content_type='image/png')

    app = web.Application()
    app.router.add_get('/', index)
    app.router.add_get('/about', empty)
    app.router.add_get('/contact', empty)
    app.router.add_get('/logo.png', image)

    server = TestServer(app)
    await server.start_server()
    try:
        yield str(server.make_url('/')), hits
    finally:
        await server.close()
