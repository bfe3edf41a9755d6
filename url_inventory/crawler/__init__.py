"""url_inventory.crawler: same-origin domain crawler (normalizer, fetcher, extractor, engine)."""

from url_inventory.crawler.crawler import AsyncCrawler
from url_inventory.crawler.models import CrawlResult, CrawlTarget, InvalidSeed
from url_inventory.crawler.normalizer import normalize, origin

__all__ = ["AsyncCrawler", "CrawlResult", "CrawlTarget", "InvalidSeed", "normalize", "origin"]
