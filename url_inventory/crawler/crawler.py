# === FILE: url_inventory/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Optional, Protocol, Set, Union

from aiohttp import ClientSession

from url_inventory.config import InventoryConfig
from url_inventory.crawler.fetcher import Fetcher, build_session
from url_inventory.crawler.link_extractor import extract_links
from url_inventory.crawler.models import (
    CrawlResult,
    CrawlTarget,
    FetchOutcome,
    FrontierEntry,
    HttpFailure,
    InvalidSeed,
    NetworkFailure,
    VisitedSet,
)
from url_inventory.crawler.normalizer import Origin, normalize, origin

__all__ = ("AsyncCrawler", "PageFetcher")


class PageFetcher(Protocol):
    async def fetch(self, url: str) -> FetchOutcome: ...


@dataclass
class _CrawlState:
    """Everything one crawl invocation owns; discarded when it returns."""

    seed: str
    seed_origin: Origin
    max_depth: int
    visited: VisitedSet
    result: CrawlResult
    queue: asyncio.Queue = field(default_factory=asyncio.Queue)
    external_seen: Set[str] = field(default_factory=set)


class AsyncCrawler:
    """Асинхронный краулер одного домена: same-origin, ограничение глубины и числа URL.

    Usable as ``async with AsyncCrawler(config) as crawler`` (owns an aiohttp
    session) or with an injected *fetcher* for tests.
    """

    def __init__(self, config: InventoryConfig, fetcher: Optional[PageFetcher] = None) -> None:
        self.config = config
        self.fetcher: Optional[PageFetcher] = fetcher
        self.session: Optional[ClientSession] = None
        self.logger = logging.getLogger("URLInventory")

    async def __aenter__(self) -> AsyncCrawler:
        if self.fetcher is None:
            self.session = build_session(self.config)
            self.fetcher = Fetcher(self.session, self.config)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(
        self,
        seed: Union[CrawlTarget, str],
        max_depth: Optional[int] = None,
        max_urls: Optional[int] = None,
    ) -> CrawlResult:
        """Discover same-origin URLs reachable from *seed*.

        Raises InvalidSeed if the seed cannot be normalized; every other
        per-page problem is recorded in ``CrawlResult.failures``. An
        unreachable seed yields a result holding only the seed.
        """
        if self.fetcher is None:
            raise RuntimeError("Fetcher not initialized, use 'async with AsyncCrawler(...)'")
        raw = seed.raw_url if isinstance(seed, CrawlTarget) else seed
        root = normalize(raw)
        if root is None:
            raise InvalidSeed(raw)

        depth_limit = self.config.max_depth if max_depth is None else max_depth
        url_limit = self.config.max_urls if max_urls is None else max_urls
        if depth_limit < 0:
            raise ValueError("max_depth must be >= 0")
        if url_limit < 1:
            raise ValueError("max_urls must be >= 1")

        state = _CrawlState(
            seed=root,
            seed_origin=origin(root),
            max_depth=depth_limit,
            visited=VisitedSet(url_limit),
            result=CrawlResult(seed=root),
        )
        state.visited.add_if_absent(root)
        state.queue.put_nowait(FrontierEntry(root, 0))

        self.logger.info("Crawl started: %s (depth=%d, max_urls=%d)", root, depth_limit, url_limit)
        start = time.monotonic()
        workers = [asyncio.create_task(self._worker(state)) for _ in range(self.config.concurrency)]
        try:
            if self.config.crawl_timeout is not None:
                await asyncio.wait_for(state.queue.join(), timeout=self.config.crawl_timeout)
            else:
                await state.queue.join()
        except asyncio.TimeoutError:
            state.result.timed_out = True
            self.logger.warning(
                "Crawl of %s stopped after %.1f s, returning partial result",
                root, self.config.crawl_timeout,
            )
        finally:
            for w in workers:
                w.cancel()
            await asyncio.gather(*workers, return_exceptions=True)

        state.result.urls = list(state.visited)
        duration = time.monotonic() - start
        self.logger.info(
            "Crawl finished: %d URLs, %d failures in %.2f s",
            len(state.result.urls), len(state.result.failures), duration,
        )
        if state.visited.full:
            self.logger.info("URL cap of %d reached", url_limit)
        return state.result

    async def _worker(self, state: _CrawlState) -> None:
        while True:
            entry: FrontierEntry = await state.queue.get()
            try:
                await self._process(state, entry)
            except Exception as exc:
                self.logger.exception("Unexpected error while processing %s", entry.url)
                state.result.failures.append((entry.url, f"{type(exc).__name__}: {exc}"))
            finally:
                state.queue.task_done()

    async def _process(self, state: _CrawlState, entry: FrontierEntry) -> None:
        # a full set cannot grow, so fetching more pages is pointless
        if state.visited.full:
            return
        # depth limits expansion only: the entry is already in the result
        if entry.depth >= state.max_depth:
            return

        outcome = await self.fetcher.fetch(entry.url)  # type: ignore[union-attr]
        if isinstance(outcome, HttpFailure):
            self.logger.warning("Failed %s: HTTP %d", entry.url, outcome.status_code)
            state.result.failures.append((entry.url, f"HTTP {outcome.status_code}"))
            return
        if isinstance(outcome, NetworkFailure):
            self.logger.warning("Failed %s: %s", entry.url, outcome.reason)
            state.result.failures.append((entry.url, outcome.reason))
            return

        added = 0
        for href in extract_links(outcome.body):
            link = normalize(href, outcome.final_url)
            if link is None:
                continue
            if origin(link) != state.seed_origin:
                if self.config.record_external and link not in state.external_seen:
                    state.external_seen.add(link)
                    state.result.external.append(link)
                continue
            if state.visited.add_if_absent(link):
                state.queue.put_nowait(FrontierEntry(link, entry.depth + 1))
                added += 1
            elif state.visited.full and not self.config.record_external:
                break
        self.logger.debug("%s (depth %d): %d new links", entry.url, entry.depth, added)
