# File: url_inventory/utils.py
"""url_inventory.utils: чтение списков URL (ручной ввод, TXT/CSV) и удаление дубликатов."""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Collection, Iterable, List, Sequence, Union

from url_inventory.logger import logger

__all__: Sequence[str] = (
    "parse_url_lines",
    "read_url_list",
    "remove_duplicates",
)


def parse_url_lines(text: str) -> List[str]:
    """Разбивает текст на строки, возвращает непустые строки без пробелов."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def _parse_csv(text: str) -> List[str]:
    urls: List[str] = []
    for row in csv.reader(io.StringIO(text)):
        if not row or not row[0].strip():
            continue
        cell = row[0].strip()
        if not urls and cell.lower() == "url":
            continue
        urls.append(cell)
    return urls


def read_url_list(path: Union[str, Path]) -> List[str]:
    """Читает список URL из TXT (по одному в строке) или CSV (первая колонка)."""
    p = Path(path).expanduser()
    if not p.is_file():
        logger.error("URL list not found: %s", p)
        raise FileNotFoundError(f"URL list file not found: {p}")
    text = p.read_text(encoding="utf-8-sig")
    urls = _parse_csv(text) if p.suffix.lower() == ".csv" else parse_url_lines(text)
    logger.debug("Loaded %d URLs from %s", len(urls), p)
    return urls


def remove_duplicates(urls: Union[Collection[str], Iterable[str]]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    items = list(urls)
    unique = list(dict.fromkeys(items))
    removed = len(items) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
