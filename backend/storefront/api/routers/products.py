"""Product status and price mutations that feed the public catalogue."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from redis import Redis
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.api.dependencies.catalogue import get_redis_client
from storefront.api.schemas.product import ProductPriceUpdate, ProductRead
from storefront.db.models.product import Product, ProductStatus
from storefront.db.session import get_db
from storefront.services.price_cache import PRODUCTS_TAG, invalidate_tag

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_product(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


def _publish(product: Product) -> None:
    if product.status == ProductStatus.PUBLISHED.value:
        raise HTTPException(status_code=400, detail="Product is already published")
    product.status = ProductStatus.PUBLISHED.value
    product.published_at = datetime.now(timezone.utc)


def _unpublish(product: Product) -> None:
    if product.status == ProductStatus.DRAFT.value:
        raise HTTPException(status_code=400, detail="Product is already a draft")
    product.status = ProductStatus.DRAFT.value


def _archive(product: Product) -> None:
    if product.status == ProductStatus.ARCHIVED.value:
        raise HTTPException(status_code=400, detail="Product is already archived")
    product.status = ProductStatus.ARCHIVED.value


def _apply(
    product_id: int,
    mutate: Callable[[Product], None],
    action: str,
    db: Session,
    redis_client: Redis,
) -> ProductRead:
    """Run ``mutate`` on a product, commit, and drop product-tagged caches."""
    try:
        product = _get_product(db, product_id)
        mutate(product)
        db.commit()
        db.refresh(product)
    except HTTPException:
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            f"Database error trying to {action} product {product_id}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to {action} product",
        ) from e

    invalidate_tag(redis_client, PRODUCTS_TAG)
    logger.info(f"Product {product_id}: {action} -> status={product.status}")
    return ProductRead.model_validate(product)


@router.get("/{product_id}", summary="Get a product", response_model=ProductRead)
def get_product(product_id: int, db: Session = Depends(get_db)) -> ProductRead:
    try:
        return ProductRead.model_validate(_get_product(db, product_id))
    except SQLAlchemyError as e:
        logger.error(f"Database error reading product {product_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve product",
        ) from e


@router.post(
    "/{product_id}/publish", summary="Publish a product", response_model=ProductRead
)
def publish_product(
    product_id: int,
    db: Session = Depends(get_db),
    redis_client: Redis = Depends(get_redis_client),
) -> ProductRead:
    """Make a draft or archived product visible in the catalogue."""
    return _apply(product_id, _publish, "publish", db, redis_client)


@router.post(
    "/{product_id}/unpublish",
    summary="Move a product back to draft",
    response_model=ProductRead,
)
def unpublish_product(
    product_id: int,
    db: Session = Depends(get_db),
    redis_client: Redis = Depends(get_redis_client),
) -> ProductRead:
    return _apply(product_id, _unpublish, "unpublish", db, redis_client)


@router.post(
    "/{product_id}/archive", summary="Archive a product", response_model=ProductRead
)
def archive_product(
    product_id: int,
    db: Session = Depends(get_db),
    redis_client: Redis = Depends(get_redis_client),
) -> ProductRead:
    return _apply(product_id, _archive, "archive", db, redis_client)


@router.patch(
    "/{product_id}/price", summary="Change a product's price", response_model=ProductRead
)
def update_product_price(
    product_id: int,
    payload: ProductPriceUpdate,
    db: Session = Depends(get_db),
    redis_client: Redis = Depends(get_redis_client),
) -> ProductRead:
    """Update the base price; variants without an override follow it."""

    def set_price(product: Product) -> None:
        product.price = payload.price

    return _apply(product_id, set_price, "update price of", db, redis_client)
