"""
Configuration management for the URL crawler.
"""

import yaml
import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Dict, Any, Optional, Type, TypeVar, Union, get_args, get_origin, get_type_hints


T = TypeVar('T')


@dataclass
class CrawlerConfig:
    """Configuration for crawler behavior."""
    seed_url: Optional[str] = None
    workers_n: int = 1
    politeness_delay: float = 2
    user_agent: str = 'url-crawler/1.0'
    request_timeout: int = 30
    max_content_size: int = 10 * 1024 * 1024  # 10MB

    def with_overrides(self, **overrides: Any) -> 'CrawlerConfig':
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = 'INFO'
    format: str = '[%(levelname)-5s %(name)s] %(message)s'
    file: Optional[str] = None
    json: bool = False


@dataclass
class Config:
    """Main configuration class."""
    crawler: CrawlerConfig = field(default_factory=CrawlerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _build_section(cls: Type[T], name: str, data: Optional[Dict[str, Any]]) -> T:
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ValueError(f"Configuration section '{name}' must be a mapping")

    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown keys in '{name}' section: {', '.join(unknown)}")

    hints = get_type_hints(cls)
    for key, value in data.items():
        _check_type(name, key, value, hints[key])

    return cls(**data)


def _check_type(section: str, key: str, value: Any, hint: Any):
    """Raise ValueError if a YAML value does not match the field's type."""
    allowed = get_args(hint) if get_origin(hint) is Union else (hint,)

    if value is None:
        if type(None) in allowed:
            return
    elif isinstance(value, bool):
        if bool in allowed:
            return
    elif isinstance(value, int):
        if int in allowed or float in allowed:
            return
    elif type(value) in allowed:
        return

    expected = ' or '.join('null' if t is type(None) else t.__name__ for t in allowed)
    raise ValueError(f"Invalid value for '{section}.{key}': expected {expected}, got {value!r}")


class ConfigManager:
    """Manages configuration loading and validation."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else None
        self._config: Optional[Config] = None

    def load_config(self) -> Config:
        """Load configuration from YAML file, or defaults when no path is set."""
        if self.config_path is None:
            self._config = Config()
            self._validate_config()
            return self._config

        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r') as file:
            try:
                config_data = yaml.safe_load(file) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {self.config_path}: {e}") from e

        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a mapping")

        unknown = sorted(set(config_data) - {'crawler', 'logging'})
        if unknown:
            raise ValueError(f"Unknown configuration sections: {', '.join(unknown)}")

        self._config = Config(
            crawler=_build_section(CrawlerConfig, 'crawler', config_data.get('crawler')),
            logging=_build_section(LoggingConfig, 'logging', config_data.get('logging'))
        )

        self._validate_config()
        return self._config

    def _validate_config(self):
        """Validate configuration values."""
        if not self._config:
            raise ValueError("Configuration not loaded")

        validate_crawler_config(self._config.crawler)

        level = self._config.logging.level
        if not isinstance(getattr(logging, str(level).upper(), None), int):
            raise ValueError(f"Unknown log level: {level}")

    @property
    def config(self) -> Config:
        """Get the loaded configuration."""
        if not self._config:
            raise ValueError("Configuration not loaded. Call load_config() first.")
        return self._config


def validate_crawler_config(crawler: CrawlerConfig):
    """Validate crawler settings, raising ValueError on the first bad value."""
    if crawler.workers_n < 1:
        raise ValueError("workers_n must be at least 1")

    if crawler.politeness_delay < 0:
        raise ValueError("politeness_delay must be non-negative")

    if crawler.request_timeout <= 0:
        raise ValueError("request_timeout must be positive")

    if crawler.max_content_size <= 0:
        raise ValueError("max_content_size must be positive")


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from file."""
    return ConfigManager(config_path).load_config()
