# File: tests/conftest.py
from __future__ import annotations

from typing import AsyncIterator, Awaitable, Callable, Dict, List, Union

import pytest
import pytest_asyncio
from aiohttp import web

from url_inventory.config import InventoryConfig
from url_inventory.crawler.models import FetchOutcome, Html, HttpFailure, NetworkFailure

ServeFn = Callable[[web.Application, int], Awaitable[str]]


class FakeFetcher:
    """In-memory link graph: URL -> list of hrefs, or a ready FetchOutcome.

    Unknown URLs answer HTTP 404. Every fetched URL is recorded in ``calls``.
    """

    def __init__(self, pages: Dict[str, Union[List[str], FetchOutcome]]) -> None:
        self.pages = pages
        self.calls: List[str] = []

    async def fetch(self, url: str) -> FetchOutcome:
        self.calls.append(url)
        page = self.pages.get(url)
        if page is None:
            return HttpFailure(404)
        if isinstance(page, (Html, HttpFailure, NetworkFailure)):
            return page
        body = "".join(f'<a href="{href}">link</a>' for href in page)
        return Html(f"<html><body>{body}</body></html>", url)


@pytest.fixture()
def basic_config() -> InventoryConfig:
    """
    Return a basic valid InventoryConfig for crawler tests.
    """
    return InventoryConfig(
        max_depth=2,
        max_urls=200,
        timeout=2.0,
        user_agent="TestAgent/1.0",
        concurrency=3,
    )


@pytest_asyncio.fixture
async def serve() -> AsyncIterator[ServeFn]:
    """Start aiohttp apps on local ports; yields ``start(app, port) -> base_url``."""
    runners: List[web.AppRunner] = []

    async def _start(app: web.Application, port: int) -> str:
        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, "127.0.0.1", port)
        await site.start()
        runners.append(runner)
        return f"http://127.0.0.1:{port}"

    yield _start
    for runner in reversed(runners):
        await runner.cleanup()


@pytest.fixture()
def fake_fetcher():
    """Factory for :class:`FakeFetcher` link graphs."""
    return FakeFetcher
