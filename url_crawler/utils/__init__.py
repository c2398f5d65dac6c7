"""
Utility modules for the URL crawler.
"""

from .config import Config, ConfigManager, CrawlerConfig, LoggingConfig, load_config
from .logger import setup_logging, get_crawler_logger

__all__ = [
    'Config', 'ConfigManager', 'CrawlerConfig', 'LoggingConfig', 'load_config',
    'setup_logging', 'get_crawler_logger'
]
