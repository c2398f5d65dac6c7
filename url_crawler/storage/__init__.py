"""
Storage layer for the URL crawler.
"""

from .data_store import DataStore, CrawlStore, CrawlRecord

__all__ = ['DataStore', 'CrawlStore', 'CrawlRecord']
