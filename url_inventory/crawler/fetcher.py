# url_inventory/crawler/fetcher.py
"""
Fetcher module: retrieves one HTML page with a hard timeout and a redirect cap.

Transport and status problems come back as values (:class:`HttpFailure`,
:class:`NetworkFailure`); nothing is raised to the caller.
"""
from __future__ import annotations

import asyncio

from aiohttp import ClientError, ClientSession, ClientTimeout, TooManyRedirects

from url_inventory.config import InventoryConfig
from url_inventory.crawler.models import FetchOutcome, Html, HttpFailure, NetworkFailure
from url_inventory.crawler.normalizer import normalize
from url_inventory.logger import logger


def build_session(config: InventoryConfig, timeout: float | None = None) -> ClientSession:
    """Client session carrying the configured User-Agent and total timeout."""
    return ClientSession(
        timeout=ClientTimeout(total=timeout if timeout is not None else config.timeout),
        headers={"User-Agent": config.user_agent},
        raise_for_status=False,
    )


class Fetcher:
    """Fetches pages over a shared :class:`aiohttp.ClientSession`."""

    def __init__(self, session: ClientSession, config: InventoryConfig) -> None:
        self.session = session
        self.config = config
        self._timeout = ClientTimeout(total=config.timeout)

    async def fetch(self, url: str) -> FetchOutcome:
        """
        GET *url* and classify the response.

        Status >= 400 gives HttpFailure without reading the body. A non-HTML
        2xx/3xx response gives Html with an empty body.
        """
        max_redirects = self.config.max_redirects
        try:
            async with self.session.get(
                url,
                allow_redirects=max_redirects > 0,
                max_redirects=max(max_redirects, 1),
                timeout=self._timeout,
            ) as resp:
                if resp.status >= 400:
                    return HttpFailure(resp.status)
                if 300 <= resp.status < 400 and "Location" in resp.headers:
                    # only reachable when redirects are disabled
                    return NetworkFailure(f"redirect not followed ({resp.status})")

                final_url = normalize(str(resp.url)) or url
                mime = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
                if mime and "html" not in mime:
                    logger.debug("Skipping non-HTML body of %s (%s)", url, mime)
                    return Html("", final_url)
                body = await resp.text(errors="replace")
                return Html(body, final_url)
        except TooManyRedirects:
            return NetworkFailure(f"more than {max_redirects} redirects")
        except asyncio.TimeoutError:
            return NetworkFailure(f"timed out after {self.config.timeout}s")
        except ClientError as exc:
            return NetworkFailure(f"{type(exc).__name__}: {exc}")


__all__ = ["Fetcher", "build_session"]
