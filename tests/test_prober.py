# File: tests/test_prober.py
from __future__ import annotations

import asyncio

import pytest
from aiohttp import ClientSession, web

from url_inventory.prober import (
    HttpError,
    NetworkError,
    Ok,
    ProbeResult,
    StatusProber,
    classify,
    probe_all,
)


def _app(state: dict) -> web.Application:
    app = web.Application()

    async def ok(request):
        state.setdefault("methods", []).append(request.method)
        return web.Response(text="fine")

    async def slow(_):
        await asyncio.sleep(1.0)
        return web.Response(text="late")

    async def server_error(_):
        return web.Response(status=500)

    async def moved(_):
        raise web.HTTPMovedPermanently("/ok")

    async def get_only(request):
        state.setdefault("get_only", []).append(request.method)
        return web.Response(text="body that is never read")

    async def tracked(_):
        state["in_flight"] = state.get("in_flight", 0) + 1
        state["peak"] = max(state.get("peak", 0), state["in_flight"])
        await asyncio.sleep(0.05)
        state["in_flight"] -= 1
        return web.Response(text="tracked")

    async def proxy(request):
        state.setdefault("proxied", []).append(request.match_info["target"])
        return web.Response(status=204)

    app.router.add_get("/ok", ok)
    app.router.add_get("/slow", slow)
    app.router.add_get("/error", server_error)
    app.router.add_get("/moved", moved)
    app.router.add_get("/get-only", get_only, allow_head=False)
    app.router.add_get("/tracked/{n}", tracked)
    app.router.add_route("*", "/proxy/{target:.*}", proxy)
    return app


@pytest.mark.asyncio()
async def test_order_preserved_with_timeout(serve, unused_tcp_port):
    base = await serve(_app({}), unused_tcp_port)
    urls = [f"{base}/ok", f"{base}/slow"]

    results = await probe_all(urls, 2, timeout=0.3)

    assert [r.url for r in results] == urls
    assert results[0].outcome == Ok(200)
    assert isinstance(results[1].outcome, NetworkError)
    assert results[1].outcome.reason == "timeout"


@pytest.mark.asyncio()
async def test_classification(serve, unused_tcp_port, unused_tcp_port_factory):
    base = await serve(_app({}), unused_tcp_port)
    closed = f"http://127.0.0.1:{unused_tcp_port_factory()}/"
    urls = [
        f"{base}/error",
        f"{base}/absent",
        f"{base}/moved",
        closed,
        "not a url",
        f"{base}/ok",
    ]

    results = await probe_all(urls, 3, timeout=2.0)

    assert [r.url for r in results] == urls
    assert results[0].outcome == HttpError(500)
    assert results[1].outcome == HttpError(404)
    assert results[2].outcome == Ok(200)
    assert isinstance(results[3].outcome, NetworkError)
    assert isinstance(results[4].outcome, NetworkError)
    assert results[5].outcome == Ok(200)


@pytest.mark.asyncio()
async def test_head_is_used_and_get_is_fallback(serve, unused_tcp_port):
    state: dict = {}
    base = await serve(_app(state), unused_tcp_port)

    results = await probe_all([f"{base}/ok", f"{base}/get-only"], 2, timeout=2.0)

    assert [r.outcome for r in results] == [Ok(200), Ok(200)]
    assert state["methods"] == ["HEAD"]
    assert state["get_only"] == ["GET"]


@pytest.mark.asyncio()
async def test_concurrency_limit_respected(serve, unused_tcp_port):
    state: dict = {}
    base = await serve(_app(state), unused_tcp_port)
    urls = [f"{base}/tracked/{i}" for i in range(12)]

    results = await probe_all(urls, 3, timeout=2.0)

    assert all(r.outcome == Ok(200) for r in results)
    assert 1 <= state["peak"] <= 3


@pytest.mark.asyncio()
async def test_proxy_prefix_rewrites_target(serve, unused_tcp_port):
    state: dict = {}
    base = await serve(_app(state), unused_tcp_port)
    original = "https://target.example/page"

    results = await probe_all([original], 1, proxy_prefix=f"{base}/proxy/", timeout=2.0)

    assert results == [ProbeResult(original, Ok(204))]
    assert state["proxied"] == [original]


@pytest.mark.asyncio()
async def test_prober_with_shared_session(serve, unused_tcp_port):
    base = await serve(_app({}), unused_tcp_port)
    async with ClientSession() as session:
        prober = StatusProber(session, 2, timeout=2.0)
        assert prober.target_for("x") == "x"
        results = await prober.run(iter([f"{base}/ok"]))
    assert results[0].outcome == Ok(200)


def test_prober_rejects_zero_concurrency():
    with pytest.raises(ValueError):
        StatusProber(None, 0)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "status,expected",
    [(200, Ok(200)), (204, Ok(204)), (304, Ok(304)), (399, Ok(399)),
     (400, HttpError(400)), (404, HttpError(404)), (503, HttpError(503)), (101, HttpError(101))],
)
def test_classify(status, expected):
    assert classify(status) == expected


def test_probe_result_rows():
    assert ProbeResult("https://a", Ok(200)).as_row() == ("https://a", 200)
    assert ProbeResult("https://b", HttpError(404)).as_row() == ("https://b", 404)
    assert ProbeResult("https://c", NetworkError("timeout")).as_row() == ("https://c", "Error")
    assert ProbeResult("https://c", NetworkError("timeout")).to_dict() == {
        "url": "https://c",
        "status": "Error",
        "outcome": "network_error",
        "reason": "timeout",
    }


class _ExplodingProber(StatusProber):
    async def _status(self, target: str) -> int:
        if target.endswith("/boom"):
            raise RuntimeError("handler bug")
        return 200


@pytest.mark.asyncio()
async def test_unexpected_error_stays_with_its_url():
    prober = _ExplodingProber(None, 2)  # type: ignore[arg-type]
    results = await prober.run(["https://a/ok", "https://a/boom", "https://a/also-ok"])

    assert [r.url for r in results] == ["https://a/ok", "https://a/boom", "https://a/also-ok"]
    assert results[0].outcome == Ok(200)
    assert results[1].outcome == NetworkError("RuntimeError: handler bug")
    assert results[2].outcome == Ok(200)
