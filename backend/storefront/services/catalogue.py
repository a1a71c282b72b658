"""Catalogue listing: resolve filters, fetch, order, paginate."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass

from storefront.db.models.product import ProductVariant
from storefront.services.catalogue_filters import CatalogueCriteria, resolve_query
from storefront.services.catalogue_order import order_variants
from storefront.services.catalogue_store import CatalogueStore
from storefront.services.pagination import PageResult, paginate
from storefront.services.price_cache import MaxPriceCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogueListing:
    page: PageResult[ProductVariant]
    seed: str


def generate_seed() -> str:
    """Fresh opaque seed handed back to clients that did not send one."""
    return secrets.token_urlsafe(8)


def list_catalogue(
    criteria: CatalogueCriteria,
    *,
    page: int,
    seed: str | None,
    page_size: int,
    store: CatalogueStore,
    price_cache: MaxPriceCache,
) -> CatalogueListing:
    """Run one catalogue request end to end.

    The max-price lookup runs first since its ceiling feeds the fetch
    filter. Fetch errors propagate; nothing here is retried.
    """
    if not seed:
        seed = generate_seed()

    query = resolve_query(criteria, price_cache.get())
    variants = store.fetch_variants(query)
    ordered = order_variants(variants, query.sort, seed)
    result = paginate(ordered, page, page_size)

    logger.info(
        f"Catalogue page {result.page}: {len(result.items)}/{result.total_count} "
        f"variants (sort={query.sort}, genders={list(query.genders)}, "
        f"price={query.min_price}-{query.max_price})"
    )
    return CatalogueListing(page=result, seed=seed)
