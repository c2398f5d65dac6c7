"""
URL Crawler

A bounded-scope web crawler: a pool of workers crawls the origin of a single
seed URL and records which pages were visited and what each page linked to.
"""

__version__ = "1.0.0"
__description__ = "A same-origin web crawler with a shared URL frontier and crawl store"
