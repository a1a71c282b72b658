"""Short-TTL Redis cache for the catalogue's highest published price.

Entries are registered under a tag so product mutations can drop every
price-derived entry at once with :func:`invalidate_tag`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import timedelta

from redis import Redis
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

MAX_PRICE_KEY = "catalogue:max-price"
PRODUCTS_TAG = "products"
TAG_PREFIX = "cache-tags:"
DEFAULT_TTL = timedelta(minutes=10)


def _tag_key(tag: str) -> str:
    return f"{TAG_PREFIX}{tag}"


def invalidate_tag(redis_client: Redis, tag: str) -> None:
    """Delete every cache entry registered under ``tag``."""
    try:
        members = redis_client.smembers(_tag_key(tag))
        if members:
            redis_client.delete(*members)
        redis_client.delete(_tag_key(tag))
    except RedisError as e:
        # Stale entries still expire with their TTL.
        logger.warning(f"Failed to invalidate cache tag {tag}: {e}")


class MaxPriceCache:
    """Cached ``max(price)`` over published products, in cents.

    :meth:`get` never raises: Redis trouble skips the cache and a failing
    or empty lookup yields ``default``.
    """

    def __init__(
        self,
        redis_client: Redis,
        lookup: Callable[[], int | None],
        *,
        ttl: timedelta = DEFAULT_TTL,
        default: int = 50000,
    ) -> None:
        self.redis = redis_client
        self.lookup = lookup
        self.ttl = ttl
        self.default = default

    def get(self) -> int:
        cached = self._read()
        if cached is not None:
            return cached

        try:
            value = self.lookup()
        except SQLAlchemyError as e:
            logger.warning(
                f"Max price lookup failed, using default {self.default}: {e}"
            )
            return self.default

        if value is None:
            return self.default

        self._write(value)
        return value

    def invalidate(self) -> None:
        invalidate_tag(self.redis, PRODUCTS_TAG)

    def _read(self) -> int | None:
        try:
            raw = self.redis.get(MAX_PRICE_KEY)
        except RedisError as e:
            logger.warning(f"Max price cache read failed: {e}")
            return None
        if raw is None:
            return None
        try:
            return int(raw)
        except (TypeError, ValueError):
            return None

    def _write(self, value: int) -> None:
        try:
            self.redis.set(
                MAX_PRICE_KEY, value, ex=int(self.ttl.total_seconds())
            )
            self.redis.sadd(_tag_key(PRODUCTS_TAG), MAX_PRICE_KEY)
            self.redis.expire(
                _tag_key(PRODUCTS_TAG), int(self.ttl.total_seconds())
            )
        except RedisError as e:
            logger.warning(f"Max price cache write failed: {e}")
