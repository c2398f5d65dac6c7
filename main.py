#!/usr/bin/env python3
"""
Main entry point for the URL crawler.
"""

import asyncio
import argparse
import json
import logging
import sys
from typing import List, Optional

from url_crawler import __version__
from url_crawler.crawler.link import MalformedUrlError
from url_crawler.crawler.scheduler import CrawlerScheduler
from url_crawler.storage.data_store import DataStore
from url_crawler.utils.config import Config, load_config, validate_crawler_config
from url_crawler.utils.logger import setup_logging


class CrawlerApp:
    """Main application class for the URL crawler."""

    def __init__(self):
        self.scheduler: Optional[CrawlerScheduler] = None
        self.logger = logging.getLogger('url_crawler')

    async def run(self, config: Config, print_results: bool = False) -> int:
        """Run the crawler and return the process exit status."""
        crawler_config = config.crawler
        self.logger.debug(f"Seed URL: {crawler_config.seed_url}")
        self.logger.debug(f"Workers: {crawler_config.workers_n}")
        self.logger.debug(f"Politeness delay: {crawler_config.politeness_delay}s")

        try:
            self.scheduler = CrawlerScheduler(crawler_config)
            data_store = await self.scheduler.execute(crawler_config.seed_url)
        except MalformedUrlError as e:
            self.logger.warning(f"There's been an error: {e}")
            return 1

        self.logger.info("Done!")

        if print_results:
            print(format_data_store(data_store))

        return 0


def format_data_store(data_store: DataStore) -> str:
    """Render the data store as JSON."""
    return json.dumps(data_store.to_dict(), indent=2)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Same-origin URL crawler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --url http://localhost:8080/             # Crawl with defaults
  python main.py --url http://localhost:8080/ -w 4 -d 0   # 4 workers, no delay
  python main.py --url http://localhost:8080/ --print     # Print the crawl store
  python main.py --config config.yaml                     # Settings from a file
        """
    )

    parser.add_argument('-u', '--url', help='URL to crawl')
    parser.add_argument('-w', '--workers-n', type=int, help='Number of workers (default: 1)')
    parser.add_argument('-d', '--delay', type=float,
                        help='Politeness delay (in seconds) between requests (default: 2)')
    parser.add_argument('-p', '--print', action='store_true', dest='print_results',
                        help='Print data store at the end of the crawl')
    parser.add_argument('-c', '--config', help='Path to a YAML configuration file')
    parser.add_argument('--log-level', help='Logging level (default: INFO)')
    parser.add_argument('--json-logs', action='store_true', help='Emit JSON formatted logs')
    parser.add_argument('--version', action='version', version=f'url-crawler {__version__}')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        config.crawler = config.crawler.with_overrides(
            seed_url=args.url,
            workers_n=args.workers_n,
            politeness_delay=args.delay
        )
        if args.log_level:
            config.logging.level = args.log_level
        if args.json_logs:
            config.logging.json = True
        validate_crawler_config(config.crawler)
        if not isinstance(getattr(logging, config.logging.level.upper(), None), int):
            raise ValueError(f"Unknown log level: {config.logging.level}")
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not config.crawler.seed_url:
        parser.error("a seed URL is required (--url or crawler.seed_url in the config file)")

    setup_logging(config.logging)

    app = CrawlerApp()
    try:
        return asyncio.run(app.run(config, print_results=args.print_results))
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
