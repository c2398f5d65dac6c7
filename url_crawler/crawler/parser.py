"""
HTML link extraction.
"""

import logging
from typing import Iterator

from bs4 import BeautifulSoup


class LinkExtractor:
    """
    Extracts raw href values from HTML pages.

    Links are yielded in document order. Duplicates are kept and nothing is
    resolved or filtered here: that is the job of the link module.
    """

    def __init__(self, features: str = 'lxml'):
        self.features = features
        self.logger = logging.getLogger(__name__)

    def extract(self, html_content: str) -> Iterator[str]:
        """
        Parse HTML content and yield every anchor href.

        Args:
            html_content: Raw HTML content

        Returns:
            Iterator over raw href strings
        """
        if not html_content:
            return iter(())

        try:
            soup = BeautifulSoup(html_content, self.features)
        except Exception as e:
            self.logger.error(f"Error parsing HTML content: {e}")
            return iter(())

        return self._hrefs(soup)

    def _hrefs(self, soup: BeautifulSoup) -> Iterator[str]:
        for link in soup.find_all('a', href=True):
            href = link['href'].strip()
            if href:
                yield href

