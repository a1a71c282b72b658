"""Public catalogue listing with filters, seeded ordering and pagination."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError

from storefront.api.dependencies.catalogue import get_catalogue_store, get_price_cache
from storefront.api.schemas.catalogue import (
    CatalogueFiltersResponse,
    CataloguePageResponse,
    FilterOption,
    StyleOption,
    VariantDTO,
)
from storefront.core.config import Settings, get_settings
from storefront.db.models.product import Gender, ProductVariant
from storefront.services.catalogue import list_catalogue
from storefront.services.catalogue_filters import (
    CatalogueCriteria,
    SortMode,
    parse_int,
    price_ceiling,
    split_csv,
)
from storefront.services.catalogue_store import CatalogueStore
from storefront.services.price_cache import MaxPriceCache

logger = logging.getLogger(__name__)

router = APIRouter()

GENDER_OPTIONS = [FilterOption(value=g.value, label=g.value) for g in Gender]
SORT_OPTIONS = [
    FilterOption(value=SortMode.NEWEST, label="Nouveautés"),
    FilterOption(value=SortMode.PRICE_ASC, label="Prix croissant"),
    FilterOption(value=SortMode.PRICE_DESC, label="Prix décroissant"),
]


def to_variant_dto(variant: ProductVariant) -> VariantDTO:
    """Map a variant to its wire shape, keeping only in-stock SKUs."""
    return VariantDTO.model_validate(
        {
            "id": variant.id,
            "images": variant.images,
            "price_override": variant.price_override,
            "product_id": variant.product_id,
            "product": variant.product,
            "skus": [sku for sku in variant.skus if sku.stock > 0],
        },
        from_attributes=True,
    )


@router.get(
    "",
    summary="List catalogue variants",
    response_model=CataloguePageResponse,
)
def get_catalogue(
    style: str | None = Query(None, description="Comma-separated style names"),
    size: str | None = Query(None, description="Comma-separated size labels"),
    gender: str | None = Query(None, description="Comma-separated gender labels"),
    sort: str = Query(
        SortMode.NEWEST, description="newest (seeded shuffle), price_asc, price_desc"
    ),
    page: str | None = Query(None, description="Page number (0-indexed)"),
    seed: str | None = Query(
        None, description="Ordering seed; generated and returned when absent"
    ),
    min_price: str | None = Query(None, alias="minPrice", description="Euros"),
    max_price: str | None = Query(None, alias="maxPrice", description="Euros"),
    store: CatalogueStore = Depends(get_catalogue_store),
    price_cache: MaxPriceCache = Depends(get_price_cache),
    settings: Settings = Depends(get_settings),
) -> CataloguePageResponse:
    """Return one page of the catalogue.

    ``page`` is zero-indexed. Malformed numbers fall back to defaults
    instead of failing. ``totalCount`` counts matches within the capped
    fetch only.
    """
    criteria = CatalogueCriteria(
        styles=split_csv(style),
        sizes=split_csv(size),
        genders=split_csv(gender),
        sort=sort,
        min_price=min_price,
        max_price=max_price,
    )
    try:
        listing = list_catalogue(
            criteria,
            page=max(0, parse_int(page, 0)),
            seed=seed,
            page_size=settings.catalogue_page_size,
            store=store,
            price_cache=price_cache,
        )
    except SQLAlchemyError as e:
        logger.error(f"Database error listing catalogue: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve catalogue",
        ) from e

    result = listing.page
    return CataloguePageResponse(
        variants=[to_variant_dto(v) for v in result.items],
        total_count=result.total_count,
        total_pages=result.total_pages,
        has_more=result.has_more,
        seed=listing.seed,
    )


@router.get(
    "/filters",
    summary="Filter options for the catalogue sidebar",
    response_model=CatalogueFiltersResponse,
)
def get_catalogue_filters(
    store: CatalogueStore = Depends(get_catalogue_store),
    price_cache: MaxPriceCache = Depends(get_price_cache),
) -> CatalogueFiltersResponse:
    """Styles, in-stock sizes, genders, sort modes and the price slider range."""
    try:
        styles = store.list_styles()
        sizes = store.list_sizes()
    except SQLAlchemyError as e:
        logger.error(f"Database error loading catalogue filters: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve catalogue filters",
        ) from e

    return CatalogueFiltersResponse(
        styles=[StyleOption.model_validate(s) for s in styles],
        sizes=sizes,
        genders=GENDER_OPTIONS,
        sort_options=SORT_OPTIONS,
        price_min=0,
        price_max=price_ceiling(price_cache.get()),
    )
