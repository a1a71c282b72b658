"""Redis client construction with TLS handling for hosted providers."""

from __future__ import annotations

import ssl
from functools import lru_cache
from typing import Any

from redis import Redis

from storefront.core.config import get_settings

TLS_HOSTS = (".upstash.io",)


def _needs_tls(url: str) -> bool:
    return url.startswith("rediss://") or any(host in url for host in TLS_HOSTS)


def create_redis_client(url: str, **kwargs: Any) -> Redis:
    """Build a client from ``url``.

    Hosted providers that require TLS but hand out ``redis://`` URLs are
    upgraded to ``rediss://``; certificate verification is disabled for
    them, as their certificates do not match the pooled host names.
    """
    if _needs_tls(url) and url.startswith("redis://"):
        url = url.replace("redis://", "rediss://", 1)

    client = Redis.from_url(url, **kwargs)

    if _needs_tls(url):
        pool_kwargs = getattr(client.connection_pool, "connection_kwargs", None)
        if pool_kwargs is not None:
            pool_kwargs["ssl_cert_reqs"] = ssl.CERT_NONE

    return client


@lru_cache
def get_redis() -> Redis:
    """Process-wide client used by the request dependencies."""
    settings = get_settings()
    return create_redis_client(
        settings.redis_url,
        decode_responses=True,
        socket_connect_timeout=2,
        socket_timeout=2,
    )
