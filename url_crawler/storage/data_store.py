"""
In-memory crawl store recording visited pages and the links found on them.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, List, Optional, Any


@dataclass
class CrawlRecord:
    """Crawl state for a single URL."""
    visited: bool = False
    discovered: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for output."""
        return {
            'visited': self.visited,
            'discovered': list(self.discovered)
        }


class DataStore:
    """Abstract base class for crawl stores."""

    def add(self, key: str, value: Optional[str] = None):
        """Register key, optionally recording value as a URL found on it."""
        raise NotImplementedError

    def visited(self, key: str):
        """Mark key as visited."""
        raise NotImplementedError

    def has_visited(self, key: str) -> bool:
        """Check if key has been visited."""
        raise NotImplementedError

    def exists(self, key: str) -> bool:
        """Check if a record exists for key."""
        raise NotImplementedError

    def get(self, key: str) -> Optional[CrawlRecord]:
        """Retrieve the record for key."""
        raise NotImplementedError


class CrawlStore(DataStore):
    """
    Mapping from URL to its CrawlRecord.

    Records are created on the first add() for a key and are never deleted.
    Missing keys never raise: lookups degrade to False or None and visited()
    on an unknown key does nothing.
    """

    def __init__(self):
        self.data: Dict[str, CrawlRecord] = {}

    def add(self, key: str, value: Optional[str] = None):
        record = self.data.get(key)

        if record is not None:
            if value is not None:
                record.discovered.append(value)
            return

        record = CrawlRecord()
        self.data[key] = record

        if value is not None:
            record.discovered.append(value)

    def visited(self, key: str):
        record = self.data.get(key)
        if record is not None:
            record.visited = True

    def has_visited(self, key: str) -> bool:
        record = self.data.get(key)
        return record is not None and record.visited

    def exists(self, key: str) -> bool:
        return key in self.data

    def get(self, key: str) -> Optional[CrawlRecord]:
        """Return a copy of the record for key, or None."""
        record = self.data.get(key)
        if record is None:
            return None
        return replace(record, discovered=list(record.discovered))

    def keys(self) -> List[str]:
        return list(self.data)

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Convert the whole store to plain dictionaries."""
        return {key: record.to_dict() for key, record in self.data.items()}

    def __contains__(self, key: object) -> bool:
        return key in self.data

    def __iter__(self) -> Iterator[str]:
        return iter(list(self.data))

    def __len__(self) -> int:
        return len(self.data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CrawlStore):
            return NotImplemented
        return self.data == other.data

    def __repr__(self) -> str:
        return f"CrawlStore({self.data!r})"
