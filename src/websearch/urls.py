"""Address normalization and cache-key derivation."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


def normalize_url(url: str) -> str:
    """Prefix ``https://`` when the address carries no scheme.

    Idempotent: a normalized address is returned unchanged.
    """
    url = url.strip()
    if _SCHEME_RE.match(url):
        return url
    return f"https://{url}"


def hostname(url: str) -> str:
    """Return the lowercase hostname of a normalized URL, or ``''`` if unparseable."""
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""


def cache_key(url: str) -> str:
    """Derive the cache key for a normalized URL.

    ``/api/`` paths keep the full URL so query variants stay distinct.
    Everything else collapses to ``hostname + path``.
    """
    try:
        parts = urlsplit(url)
        host = parts.hostname or ""
    except ValueError:
        # Malformed URL (e.g. bad IPv6 literal); key on the raw string
        return url

    if "/api/" in parts.path:
        return url
    return f"{host}{parts.path}"


def host_matches(host: str, domains: frozenset[str]) -> bool:
    """True if ``host`` equals a listed domain or is a subdomain of one."""
    host = host.rstrip(".").lower()
    if host in domains:
        return True
    return any(host.endswith(f".{domain}") for domain in domains)
