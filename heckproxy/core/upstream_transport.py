"""Per-host HTTPX transport overrides for in-process upstreams.

Tests register an ``httpx.ASGITransport`` (or ``MockTransport``) for the
upstream host; ``UpstreamClient`` picks it up instead of opening a socket.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlparse

import httpx

logger = logging.getLogger("heckproxy")

_TRANSPORTS: dict[str, httpx.AsyncBaseTransport] = {}


def _normalize_host(host: str) -> str:
    return host.strip().lower()


def register_upstream_transport(host: str, transport: httpx.AsyncBaseTransport) -> None:
    """Route requests for ``host`` (a netloc like 'upstream.local:8000') through ``transport``."""
    if not host:
        raise ValueError("host is required")
    normalized = _normalize_host(host)
    _TRANSPORTS[normalized] = transport
    logger.debug("Registered upstream transport for host '%s'", normalized)


def register_upstream_transport_for_url(url: str, transport: httpx.AsyncBaseTransport) -> None:
    register_upstream_transport(urlparse(url).netloc, transport)


def clear_upstream_transports() -> None:
    _TRANSPORTS.clear()


def get_upstream_transport(url: str) -> Optional[httpx.AsyncBaseTransport]:
    """Return the transport registered for the URL's host, if any."""
    host = urlparse(url).netloc if url else ""
    if not host:
        return None
    return _TRANSPORTS.get(_normalize_host(host))
