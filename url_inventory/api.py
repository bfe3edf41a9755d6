# File: url_inventory/api.py
"""url_inventory.api: HTTP-интерфейс (aiohttp.web) для обхода домена и проверки статусов.

Маршруты:
  GET  /api/crawl?url=<seed>[&depth=N][&max_urls=N]
  POST /api/status   {"urls": [...], "proxy": "<prefix>"}
"""

from __future__ import annotations

import json
from typing import List, Optional

from aiohttp import web
from pydantic import BaseModel, ConfigDict, ValidationError

from url_inventory import engine
from url_inventory.config import InventoryConfig
from url_inventory.crawler.models import InvalidSeed
from url_inventory.logger import logger

CONFIG_KEY = web.AppKey("config", InventoryConfig)

routes = web.RouteTableDef()


class StatusRequest(BaseModel):
    """Тело запроса POST /api/status."""
    model_config = ConfigDict(extra="forbid")

    urls: List[str]
    proxy: Optional[str] = None


def _error(message: str, status: int) -> web.Response:
    return web.json_response({"error": message}, status=status)


def _int_param(request: web.Request, name: str, minimum: int) -> Optional[int]:
    raw = request.query.get(name)
    if raw is None or raw == "":
        return None
    value = int(raw)
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@routes.get("/api/crawl")
async def crawl_handler(request: web.Request) -> web.Response:
    cfg = request.app[CONFIG_KEY]
    seed = request.query.get("url", "").strip()
    if not seed:
        return _error("Missing URL", 400)
    try:
        depth = _int_param(request, "depth", 0)
        max_urls = _int_param(request, "max_urls", 1)
    except ValueError as exc:
        return _error(f"Invalid parameter: {exc}", 400)

    try:
        result = await engine.start_crawl(cfg, seed, max_depth=depth, max_urls=max_urls)
    except InvalidSeed as exc:
        return _error(str(exc), 400)
    except Exception:
        logger.exception("Crawl error for %s", seed)
        return _error("Failed to crawl domain", 500)
    return web.json_response(result.to_dict())


@routes.post("/api/status")
async def status_handler(request: web.Request) -> web.Response:
    cfg = request.app[CONFIG_KEY]
    try:
        payload = StatusRequest.model_validate(await request.json())
    except json.JSONDecodeError:
        return _error("Request body must be JSON", 400)
    except ValidationError as exc:
        return _error(f"Invalid request: {exc.errors(include_url=False)}", 400)

    try:
        results = await engine.start_probe(cfg, payload.urls, proxy_prefix=payload.proxy)
    except Exception:
        logger.exception("Status check failed")
        return _error("Failed to check URLs", 500)
    return web.json_response({"results": [r.to_dict() for r in results]})


def create_app(config: Optional[InventoryConfig] = None) -> web.Application:
    """Собирает aiohttp-приложение с заданной конфигурацией."""
    app = web.Application()
    app[CONFIG_KEY] = config or InventoryConfig()
    app.add_routes(routes)
    return app


__all__ = ["create_app", "CONFIG_KEY", "StatusRequest"]
