# url_inventory/crawler/models.py
"""
Data models for the URL Inventory crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Set, Tuple, Union


class InvalidSeed(ValueError):
    """The seed URL cannot be normalized into an absolute http(s) URL."""

    def __init__(self, raw_url: str) -> None:
        super().__init__(f"Invalid seed URL: {raw_url!r}")
        self.raw_url = raw_url


@dataclass(slots=True, frozen=True)
class CrawlTarget:
    """User-supplied seed, not yet normalized."""

    raw_url: str


@dataclass(slots=True, frozen=True)
class FrontierEntry:
    """A URL awaiting processing and its hop distance from the seed."""

    url: str
    depth: int


# --------------------------------------------------------------------------- #
# Fetch outcomes                                                              #
# --------------------------------------------------------------------------- #


@dataclass(slots=True, frozen=True)
class Html:
    """Successful fetch; *body* is empty for non-HTML content."""

    body: str
    final_url: str


@dataclass(slots=True, frozen=True)
class HttpFailure:
    status_code: int


@dataclass(slots=True, frozen=True)
class NetworkFailure:
    reason: str


FetchOutcome = Union[Html, HttpFailure, NetworkFailure]


# --------------------------------------------------------------------------- #
# Crawl state and result                                                      #
# --------------------------------------------------------------------------- #


class VisitedSet:
    """URLs already enqueued or visited during one crawl, bounded by *limit*.

    :meth:`add_if_absent` never awaits, so under a single event loop the
    membership test and the insert happen atomically.
    """

    def __init__(self, limit: int) -> None:
        if limit < 1:
            raise ValueError("limit must be >= 1")
        self.limit = limit
        self._order: List[str] = []
        self._members: Set[str] = set()

    def add_if_absent(self, url: str) -> bool:
        """Insert *url* unless present or full. Return True if it was inserted."""
        if url in self._members or self.full:
            return False
        self._members.add(url)
        self._order.append(url)
        return True

    @property
    def full(self) -> bool:
        return len(self._order) >= self.limit

    def __contains__(self, url: object) -> bool:
        return url in self._members

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[str]:
        return iter(self._order)


@dataclass(slots=True)
class CrawlResult:
    """Output of one crawl; *urls* are in discovery order."""

    seed: str
    urls: List[str] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)
    external: List[str] = field(default_factory=list)
    timed_out: bool = False

    def __len__(self) -> int:
        return len(self.urls)

    def __iter__(self) -> Iterator[str]:
        return iter(self.urls)

    @property
    def seed_unreachable(self) -> bool:
        """True when the seed itself could not be fetched."""
        return any(url == self.seed for url, _ in self.failures)

    def to_dict(self) -> dict:
        return {
            "seed": self.seed,
            "links": list(self.urls),
            "failures": [{"url": u, "reason": r} for u, r in self.failures],
            "external": list(self.external),
            "timed_out": self.timed_out,
            "seed_unreachable": self.seed_unreachable,
        }
