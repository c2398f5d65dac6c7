"""
URL resolution and crawl scope filtering.

All functions here are pure and safe to call from any worker.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import ParseResult, urljoin, urlparse, urlunparse


logger = logging.getLogger(__name__)

DEFAULT_PORTS = {'http': 80, 'https': 443}


class MalformedUrlError(ValueError):
    """Raised when the seed URL cannot be parsed as an absolute URL."""
    pass


@dataclass(frozen=True)
class UrlParts:
    """Scheme and host of the seed URL, defining the crawl scope."""
    scheme: str
    host: str


def url_parts(url: str) -> UrlParts:
    """
    Parse the seed URL into its origin parts.

    Raises:
        MalformedUrlError: if the URL has no scheme or host
    """
    try:
        parsed = urlparse(url.strip())
    except ValueError as e:
        raise MalformedUrlError(f"Invalid URL {url!r}: {e}") from e

    if not parsed.scheme or not parsed.hostname:
        raise MalformedUrlError(f"Invalid URL {url!r}: expected an absolute URL")

    try:
        host = _host_port(parsed)
    except ValueError as e:
        raise MalformedUrlError(f"Invalid URL {url!r}: {e}") from e

    return UrlParts(scheme=parsed.scheme.lower(), host=host)


def _host_port(parsed: ParseResult) -> str:
    """
    Lowercased host, plus the port when it is not the scheme's default.

    User info is not part of the result. Raises ValueError on a bad port.
    """
    host = parsed.hostname or ''
    if ':' in host:
        host = f"[{host}]"

    port = parsed.port
    if port is None or DEFAULT_PORTS.get(parsed.scheme.lower()) == port:
        return host
    return f"{host}:{port}"


def normalize_url(url: str) -> str:
    """
    Normalize URL by removing the fragment, lowercasing scheme and host and
    dropping a default port.
    """
    parsed = urlparse(url)
    netloc = _host_port(parsed)
    userinfo, sep, _ = parsed.netloc.rpartition('@')
    if sep:
        netloc = f"{userinfo}@{netloc}"

    return urlunparse((
        parsed.scheme.lower(),
        netloc,
        parsed.path,
        parsed.params,
        parsed.query,
        ''  # Remove fragment
    ))


def process_url(href: str, current_url: str) -> str:
    """
    Resolve a raw href found on current_url into an absolute URL.

    Handles absolute, path-relative and protocol-relative hrefs. Hrefs that
    cannot be resolved are returned as-is so that a single bad link does not
    stop processing of the rest of the page.
    """
    href = href.strip()
    try:
        return normalize_url(urljoin(current_url, href))
    except ValueError as e:
        logger.debug(f"Could not resolve {href!r} against {current_url}: {e}")
        return href


def filter_url(url: str, parts: UrlParts) -> Optional[str]:
    """Return url unchanged if it belongs to the crawl origin, None otherwise."""
    try:
        host = _host_port(urlparse(url))
    except ValueError:
        return None

    if host != parts.host:
        return None

    return url
