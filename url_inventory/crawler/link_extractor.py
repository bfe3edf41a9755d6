# url_inventory/crawler/link_extractor.py
"""
Anchor href extraction for URL Inventory.
"""
from __future__ import annotations

from typing import Iterator

from bs4 import BeautifulSoup, SoupStrainer
from bs4.element import Tag

from url_inventory.logger import logger

# only <a href> tags are built into the tree
LINK_STRAINER = SoupStrainer("a", href=True)


def extract_links(html: str) -> Iterator[str]:
    """
    Yield the raw ``href`` of every anchor in *html*, verbatim and in document order.

    No normalization or filtering happens here. Broken markup is parsed
    best-effort; if the parser gives up, nothing is yielded.
    """
    if not html:
        return
    try:
        soup = BeautifulSoup(html, "html.parser", parse_only=LINK_STRAINER)
    except Exception as exc:
        logger.warning("HTML parse failed, no links extracted: %s", exc)
        return
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if isinstance(href_val, str):
            yield href_val
