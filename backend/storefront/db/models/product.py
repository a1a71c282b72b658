"""SQLAlchemy models for the catalogue: styles, products, variants and SKUs."""

import enum

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import relationship
from sqlalchemy.types import JSON, DateTime

from storefront.db.base import Base


class ProductStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class Gender(str, enum.Enum):
    MALE = "Homme"
    FEMALE = "Femme"
    UNISEX = "Unisexe"
    CHILD = "Enfant"
    BABY = "Bébé"


class Style(Base):
    __tablename__ = "styles"

    id = Column(Integer, primary_key=True)
    name = Column(String(64), nullable=False, unique=True)


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    # Minor units (cents); fallback price for variants without an override
    price = Column(Integer, nullable=False)
    style_id = Column(Integer, ForeignKey("styles.id"), nullable=True)
    gender = Column(String(32), nullable=True)
    category = Column(String(64), nullable=True)
    creator_id = Column(String(64), nullable=False, index=True)
    status = Column(
        String(16), nullable=False, default=ProductStatus.DRAFT.value, index=True
    )
    published_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    style = relationship(Style, lazy="joined")
    variants = relationship(
        "ProductVariant", back_populates="product", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_positive"),
        Index("ix_products_status_price", "status", "price"),
    )


class ProductVariant(Base):
    __tablename__ = "product_variants"

    id = Column(Integer, primary_key=True)
    product_id = Column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    price_override = Column(Integer, nullable=True)
    images = Column(JSON, nullable=False, default=list)

    product = relationship(Product, back_populates="variants")
    skus = relationship(
        "Sku",
        back_populates="variant",
        cascade="all, delete-orphan",
        order_by="Sku.id",
    )

    __table_args__ = (
        CheckConstraint(
            "price_override IS NULL OR price_override >= 0",
            name="ck_variants_price_override_positive",
        ),
    )

    @property
    def creator_id(self) -> str:
        return self.product.creator_id

    @property
    def effective_price(self) -> int:
        if self.price_override is not None:
            return self.price_override
        return self.product.price


class Sku(Base):
    __tablename__ = "skus"

    id = Column(Integer, primary_key=True)
    variant_id = Column(
        Integer,
        ForeignKey("product_variants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    size = Column(String(16), nullable=True)
    stock = Column(Integer, nullable=False, default=0)

    variant = relationship(ProductVariant, back_populates="skus")
