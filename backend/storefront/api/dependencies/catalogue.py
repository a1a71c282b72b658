"""Request-scoped catalogue collaborators."""

from datetime import timedelta

from fastapi import Depends
from redis import Redis
from sqlalchemy.orm import Session

from storefront.core.config import Settings, get_settings
from storefront.db.session import get_db
from storefront.services.catalogue_store import CatalogueStore
from storefront.services.price_cache import MaxPriceCache
from storefront.utils.redis_client import get_redis


def get_redis_client() -> Redis:
    """FastAPI dependency for the shared Redis client."""
    return get_redis()


def get_catalogue_store(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> CatalogueStore:
    return CatalogueStore(db, fetch_limit=settings.catalogue_fetch_limit)


def get_price_cache(
    store: CatalogueStore = Depends(get_catalogue_store),
    redis_client: Redis = Depends(get_redis_client),
    settings: Settings = Depends(get_settings),
) -> MaxPriceCache:
    return MaxPriceCache(
        redis_client,
        store.max_published_price,
        ttl=timedelta(seconds=settings.max_price_cache_ttl_seconds),
        default=settings.default_max_price,
    )
