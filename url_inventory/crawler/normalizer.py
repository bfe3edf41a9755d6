# url_inventory/crawler/normalizer.py
"""
URL canonicalisation for the crawler.

A normalized URL is absolute, http(s) only, has a lower-cased scheme and host,
no default port, no fragment, no user-info, and an empty path instead of a bare
``/``. Path and query keep their case. Two URLs are the same page when their
normalized strings are equal.

Input that carries a scheme is parsed on its own and must name a host, so
``https://`` or ``https:/x`` is rejected rather than resolved against the page.
Scheme-less input is resolved with :func:`urllib.parse.urljoin`: this covers
origin-relative (``/x``) hrefs and also, as an extension, document-relative
(``about.html``, ``../x``) and scheme-relative (``//host/x``) ones.
"""
from __future__ import annotations

from typing import Optional, Tuple
from urllib.parse import urljoin, urlsplit, urlunsplit

from url_inventory.logger import logger

__all__ = ("normalize", "origin", "same_origin")

_ALLOWED_SCHEMES = ("http", "https")
_PSEUDO_SCHEMES = ("mailto:", "tel:", "javascript:", "data:")
_DEFAULT_PORTS = {"http": 80, "https": 443}

Origin = Tuple[str, str, int]


def normalize(raw: str, base: Optional[str] = None) -> Optional[str]:
    """
    Canonicalize *raw* (an href or a user-typed URL) relative to *base*.

    Returns None for anything that is not a usable http(s) URL: pseudo-links
    (mailto:, tel:, javascript:, data:), other schemes, relative input
    without a base, and malformed input. Failures are routine, never raised.
    """
    if not isinstance(raw, str):
        return None
    candidate = raw.strip()
    if not candidate or candidate.lower().startswith(_PSEUDO_SCHEMES):
        return None

    try:
        parts = urlsplit(candidate)
        if not parts.scheme and base:
            parts = urlsplit(urljoin(base, candidate))
        scheme = parts.scheme.lower()
        if scheme not in _ALLOWED_SCHEMES:
            return None
        host = parts.hostname
        if not host:
            return None
        port = parts.port
    except ValueError as exc:
        logger.debug("Rejected malformed URL %r: %s", raw, exc)
        return None

    netloc = f"[{host}]" if ":" in host else host
    if port is not None and port != _DEFAULT_PORTS[scheme]:
        netloc = f"{netloc}:{port}"
    path = "" if parts.path == "/" else parts.path
    return urlunsplit((scheme, netloc, path, parts.query, ""))


def origin(url: str) -> Origin:
    """Return the ``(scheme, host, port)`` triple of an absolute URL."""
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    port = parts.port or _DEFAULT_PORTS.get(scheme, 0)
    return scheme, (parts.hostname or ""), port


def same_origin(a: str, b: str) -> bool:
    return origin(a) == origin(b)
