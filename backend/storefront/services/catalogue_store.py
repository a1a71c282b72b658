"""Read-only catalogue queries over the product-variant tables."""

from __future__ import annotations

import logging

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session, contains_eager, selectinload

from storefront.db.models.product import (
    Product,
    ProductStatus,
    ProductVariant,
    Sku,
    Style,
)
from storefront.services.catalogue_filters import NormalizedQuery, SortMode

logger = logging.getLogger(__name__)

SIZE_ORDER = ["XXS", "XS", "S", "M", "L", "XL", "XXL", "XXXL"]


def _size_sort_key(size: str) -> tuple[int, str]:
    upper = size.upper()
    if upper in SIZE_ORDER:
        return (SIZE_ORDER.index(upper), "")
    return (len(SIZE_ORDER), upper)


class CatalogueStore:
    """Catalogue reads bound to one request's session."""

    def __init__(self, db: Session, fetch_limit: int = 200) -> None:
        self.db = db
        self.fetch_limit = fetch_limit

    def fetch_variants(self, query: NormalizedQuery) -> list[ProductVariant]:
        """Return at most ``fetch_limit`` listable variants matching ``query``.

        Database errors propagate to the caller.
        """
        stmt = (
            select(ProductVariant)
            .join(ProductVariant.product)
            .where(Product.status == ProductStatus.PUBLISHED.value)
            .options(
                contains_eager(ProductVariant.product).joinedload(Product.style),
                selectinload(ProductVariant.skus),
            )
        )

        if query.styles:
            stmt = stmt.where(Product.style.has(Style.name.in_(query.styles)))
        if query.genders:
            stmt = stmt.where(Product.gender.in_(query.genders))
        if query.sizes:
            stmt = stmt.where(
                ProductVariant.skus.any(
                    and_(Sku.size.in_(query.sizes), Sku.stock > 0)
                )
            )

        # price_override is nullable, so the range check is split in two
        stmt = stmt.where(
            or_(
                and_(
                    ProductVariant.price_override.is_not(None),
                    ProductVariant.price_override.between(
                        query.min_price, query.max_price
                    ),
                ),
                and_(
                    ProductVariant.price_override.is_(None),
                    Product.price.between(query.min_price, query.max_price),
                ),
            )
        )

        if query.sort == SortMode.PRICE_ASC:
            stmt = stmt.order_by(Product.price.asc(), ProductVariant.id.asc())
        elif query.sort == SortMode.PRICE_DESC:
            stmt = stmt.order_by(Product.price.desc(), ProductVariant.id.asc())
        else:
            stmt = stmt.order_by(
                Product.published_at.desc(), ProductVariant.id.asc()
            )

        variants = list(self.db.scalars(stmt.limit(self.fetch_limit)).unique())
        if len(variants) >= self.fetch_limit:
            logger.info(
                f"Catalogue fetch hit the cap of {self.fetch_limit} variants; "
                "totals will under-report"
            )
        return variants

    def max_published_price(self) -> int | None:
        """Highest product price (cents) among published products."""
        return self.db.scalar(
            select(func.max(Product.price)).where(
                Product.status == ProductStatus.PUBLISHED.value
            )
        )

    def list_styles(self) -> list[Style]:
        return list(self.db.scalars(select(Style).order_by(Style.name)))

    def list_sizes(self) -> list[str]:
        """Distinct in-stock sizes of published products, XXS..XXXL first."""
        stmt = (
            select(Sku.size)
            .join(Sku.variant)
            .join(ProductVariant.product)
            .where(
                Product.status == ProductStatus.PUBLISHED.value,
                Sku.stock > 0,
                Sku.size.is_not(None),
            )
            .distinct()
        )
        return sorted(self.db.scalars(stmt), key=_size_sort_key)
