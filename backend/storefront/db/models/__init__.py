"""Database models package."""
from storefront.db.models.product import (
    Gender,
    Product,
    ProductStatus,
    ProductVariant,
    Sku,
    Style,
)

__all__ = ["Gender", "Product", "ProductStatus", "ProductVariant", "Sku", "Style"]
