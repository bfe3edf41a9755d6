# File: url_inventory/engine.py
"""url_inventory.engine: запуск обхода домена и проверки статусов для CLI и API."""

from __future__ import annotations

from typing import Iterable, List, Optional

from url_inventory.config import InventoryConfig
from url_inventory.crawler.crawler import AsyncCrawler
from url_inventory.crawler.models import CrawlResult
from url_inventory.logger import logger
from url_inventory.prober import ProbeResult, probe_all
from url_inventory.utils import remove_duplicates

__all__ = ["start_crawl", "start_probe", "start_inventory"]


async def start_crawl(
    cfg: InventoryConfig,
    seed: str,
    max_depth: Optional[int] = None,
    max_urls: Optional[int] = None,
) -> CrawlResult:
    """
    Запускает AsyncCrawler в контексте и возвращает CrawlResult.

    Raises
    ------
    InvalidSeed
        Если seed не является абсолютным http(s) URL.
    """
    async with AsyncCrawler(cfg) as crawler:
        return await crawler.crawl(seed, max_depth=max_depth, max_urls=max_urls)


async def start_probe(
    cfg: InventoryConfig,
    urls: Iterable[str],
    proxy_prefix: Optional[str] = None,
    concurrency: Optional[int] = None,
) -> List[ProbeResult]:
    """Проверяет статусы URL: один результат на каждый входной URL, в том же порядке."""
    return await probe_all(
        urls,
        concurrency or cfg.probe_concurrency,
        proxy_prefix=proxy_prefix if proxy_prefix is not None else cfg.proxy_prefix,
        timeout=cfg.probe_timeout,
        max_redirects=cfg.max_redirects,
        user_agent=cfg.user_agent,
    )


async def start_inventory(
    cfg: InventoryConfig,
    urls: Iterable[str] = (),
    seed: Optional[str] = None,
    proxy_prefix: Optional[str] = None,
    concurrency: Optional[int] = None,
) -> List[ProbeResult]:
    """
    Ручной список URL плюс (если задан seed) результат обхода, затем проверка статусов.

    Объединённый список проверяется без дубликатов, порядок первого появления сохраняется.
    """
    targets = list(urls)
    if seed is not None:
        result = await start_crawl(cfg, seed)
        logger.info("Crawl of %s found %d URLs, checking status", result.seed, len(result))
        targets.extend(result.urls)
    return await start_probe(
        cfg, remove_duplicates(targets), proxy_prefix=proxy_prefix, concurrency=concurrency
    )
