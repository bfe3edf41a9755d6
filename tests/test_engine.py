# File: tests/test_engine.py
"""engine: start_probe keeps every input, start_inventory merges and dedups."""
import pytest

from url_inventory import engine
from url_inventory.config import InventoryConfig
from url_inventory.crawler.models import CrawlResult
from url_inventory.prober import Ok, ProbeResult


@pytest.fixture()
def probed(monkeypatch):
    """Подменяет probe_all: запоминает аргументы и отвечает 200 на каждый URL."""
    seen = {}

    async def fake_probe_all(urls, concurrency_limit=10, **kwargs):
        seen["urls"] = list(urls)
        seen["concurrency"] = concurrency_limit
        seen.update(kwargs)
        return [ProbeResult(url, Ok(200)) for url in seen["urls"]]

    monkeypatch.setattr(engine, "probe_all", fake_probe_all)
    return seen


@pytest.mark.asyncio()
async def test_start_probe_keeps_duplicates_in_order(probed):
    urls = ["https://a.example/x", "https://a.example/missing", "https://a.example/x"]
    results = await engine.start_probe(InventoryConfig(), urls)

    assert [r.url for r in results] == urls
    assert probed["urls"] == urls


@pytest.mark.asyncio()
async def test_start_probe_uses_config_values(probed):
    cfg = InventoryConfig(probe_concurrency=3, proxy_prefix="https://proxy/?u=")
    await engine.start_probe(cfg, ["https://a.example"])
    assert probed["concurrency"] == 3
    assert probed["proxy_prefix"] == "https://proxy/?u="

    await engine.start_probe(cfg, ["https://a.example"], proxy_prefix="https://other/", concurrency=7)
    assert probed["concurrency"] == 7
    assert probed["proxy_prefix"] == "https://other/"


@pytest.mark.asyncio()
async def test_start_inventory_merges_crawl_without_duplicates(probed, monkeypatch):
    async def fake_crawl(cfg, seed, max_depth=None, max_urls=None):
        return CrawlResult(seed=seed, urls=[seed, f"{seed}/about"])

    monkeypatch.setattr(engine, "start_crawl", fake_crawl)
    results = await engine.start_inventory(
        InventoryConfig(),
        ["https://example.com/about", "https://other.example"],
        seed="https://example.com",
    )

    assert [r.url for r in results] == [
        "https://example.com/about",
        "https://other.example",
        "https://example.com",
    ]
