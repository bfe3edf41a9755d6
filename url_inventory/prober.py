"""Модуль проверки статуса URL (лёгкий HEAD-запрос без загрузки тела)."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from aiohttp import ClientError, ClientSession, ClientTimeout, TooManyRedirects

from url_inventory.config import DEFAULT_USER_AGENT
from url_inventory.logger import logger

# servers that refuse HEAD get a GET whose body is never read
_HEAD_REJECTED = (405, 501)
NETWORK_ERROR_STATUS = "Error"


@dataclass(slots=True, frozen=True)
class Ok:
    status_code: int


@dataclass(slots=True, frozen=True)
class HttpError:
    status_code: int


@dataclass(slots=True, frozen=True)
class NetworkError:
    reason: str


ProbeOutcome = Union[Ok, HttpError, NetworkError]


@dataclass(slots=True, frozen=True)
class ProbeResult:
    """Результат проверки одного URL."""

    url: str
    outcome: ProbeOutcome

    @property
    def status(self) -> Union[int, str]:
        """HTTP-код или ``"Error"`` для сетевых ошибок."""
        if isinstance(self.outcome, NetworkError):
            return NETWORK_ERROR_STATUS
        return self.outcome.status_code

    @property
    def kind(self) -> str:
        if isinstance(self.outcome, Ok):
            return "ok"
        if isinstance(self.outcome, HttpError):
            return "http_error"
        return "network_error"

    def as_row(self) -> Tuple[str, Union[int, str]]:
        return self.url, self.status

    def to_dict(self) -> dict:
        data = {"url": self.url, "status": self.status, "outcome": self.kind}
        if isinstance(self.outcome, NetworkError):
            data["reason"] = self.outcome.reason
        return data


def classify(status: int) -> ProbeOutcome:
    """2xx и 3xx (конечный ответ) — успех, остальное — HTTP-ошибка."""
    if 200 <= status < 400:
        return Ok(status)
    return HttpError(status)


class StatusProber:
    """Проверяет список URL параллельно, не более *concurrency* запросов одновременно."""

    def __init__(
        self,
        session: ClientSession,
        concurrency: int = 10,
        *,
        proxy_prefix: Optional[str] = None,
        timeout: float = 8.0,
        max_redirects: int = 5,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.session = session
        self.proxy_prefix = proxy_prefix or ""
        self.semaphore = asyncio.Semaphore(concurrency)
        self._timeout = ClientTimeout(total=timeout)
        self._max_redirects = max_redirects

    def target_for(self, url: str) -> str:
        """URL, который реально запрашивается (с префиксом прокси, если он задан)."""
        return f"{self.proxy_prefix}{url}"

    async def probe(self, url: str) -> ProbeResult:
        """Проверяет один URL; ошибки возвращаются как данные, а не исключения."""
        target = self.target_for(url)
        async with self.semaphore:
            try:
                status = await self._status(target)
            except TooManyRedirects:
                outcome: ProbeOutcome = NetworkError(f"more than {self._max_redirects} redirects")
            except asyncio.TimeoutError:
                outcome = NetworkError("timeout")
            except (ClientError, ValueError) as exc:
                outcome = NetworkError(f"{type(exc).__name__}: {exc}")
            except Exception as exc:
                logger.exception("Unexpected error while probing %s", url)
                outcome = NetworkError(f"{type(exc).__name__}: {exc}")
            else:
                outcome = classify(status)
        if isinstance(outcome, Ok):
            logger.debug("Probe %s -> %s", url, outcome.status_code)
        else:
            logger.info("Probe %s -> %s", url, outcome)
        return ProbeResult(url, outcome)

    async def _status(self, target: str) -> int:
        options = dict(
            allow_redirects=self._max_redirects > 0,
            max_redirects=max(self._max_redirects, 1),
            timeout=self._timeout,
        )
        async with self.session.head(target, **options) as resp:
            if resp.status not in _HEAD_REJECTED:
                return resp.status
        async with self.session.get(target, **options) as resp:
            return resp.status

    async def run(self, urls: Iterable[str]) -> List[ProbeResult]:
        """Запускает проверки и возвращает результаты в порядке входного списка."""
        tasks = [asyncio.create_task(self.probe(url)) for url in urls]
        return list(await asyncio.gather(*tasks))


async def probe_all(
    urls: Iterable[str],
    concurrency_limit: int = 10,
    *,
    proxy_prefix: Optional[str] = None,
    timeout: float = 8.0,
    max_redirects: int = 5,
    user_agent: str = DEFAULT_USER_AGENT,
) -> List[ProbeResult]:
    """Проверяет все *urls* в собственной сессии aiohttp."""
    url_list = list(urls)
    logger.info("Probing %d URLs (concurrency=%d)", len(url_list), concurrency_limit)
    async with ClientSession(headers={"User-Agent": user_agent}, raise_for_status=False) as session:
        prober = StatusProber(
            session,
            concurrency_limit,
            proxy_prefix=proxy_prefix,
            timeout=timeout,
            max_redirects=max_redirects,
        )
        return await prober.run(url_list)


__all__ = [
    "Ok",
    "HttpError",
    "NetworkError",
    "ProbeOutcome",
    "ProbeResult",
    "StatusProber",
    "classify",
    "probe_all",
]
