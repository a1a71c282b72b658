"""
Pytest configuration and shared fixtures for the catalogue tests.
"""
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Generator, Iterable, Optional

# Must be set before storefront.db.session builds its engine
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient

from storefront.api.dependencies.catalogue import get_redis_client
from storefront.core.config import Settings, get_settings
from storefront.db.base import Base
from storefront.db.models.product import (
    Product,
    ProductStatus,
    ProductVariant,
    Sku,
    Style,
)
from storefront.db.session import SessionLocal, engine
from storefront.main import app

from fakes import FakeRedis


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


# ============================================================================
# Database
# ============================================================================

@pytest.fixture
def database() -> Generator[None, None, None]:
    """Fresh schema in the shared in-memory SQLite database."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


class CatalogueFactory:
    """Creates styles, products, variants and SKUs and commits immediately."""

    def __init__(self) -> None:
        self._styles: dict[str, int] = {}
        self._clock = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def style(self, name: str) -> int:
        if name not in self._styles:
            with SessionLocal() as session:
                style = Style(name=name)
                session.add(style)
                session.commit()
                self._styles[name] = style.id
        return self._styles[name]

    def product(
        self,
        *,
        name: str = "Produit",
        price: int = 5000,
        creator_id: str = "creator-1",
        gender: Optional[str] = "Unisexe",
        style: Optional[str] = None,
        category: Optional[str] = "T-shirt",
        status: ProductStatus = ProductStatus.PUBLISHED,
        variants: Iterable[dict] = ({},),
    ) -> dict[str, Any]:
        """Create a product and its variants; returns ids.

        Each variant dict may carry ``price_override``, ``images`` and
        ``skus`` (a list of ``(size, stock)`` pairs).
        """
        style_id = self.style(style) if style else None
        self._clock += timedelta(minutes=1)
        with SessionLocal() as session:
            product = Product(
                name=name,
                price=price,
                creator_id=creator_id,
                gender=gender,
                style_id=style_id,
                category=category,
                status=status.value,
                published_at=self._clock if status == ProductStatus.PUBLISHED else None,
            )
            for spec in variants:
                variant = ProductVariant(
                    price_override=spec.get("price_override"),
                    images=spec.get("images", [f"https://img.example.com/{name}.webp"]),
                )
                for size, stock in spec.get("skus", [("M", 3)]):
                    variant.skus.append(Sku(size=size, stock=stock))
                product.variants.append(variant)
            session.add(product)
            session.commit()
            return {
                "product_id": product.id,
                "variant_ids": [v.id for v in product.variants],
            }


@pytest.fixture
def factory(database) -> CatalogueFactory:
    return CatalogueFactory()


# ============================================================================
# API client
# ============================================================================

@pytest.fixture
def settings() -> Settings:
    return Settings(database_url="sqlite://", catalogue_page_size=12)


@pytest.fixture
def client(database, fake_redis, settings) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_redis_client] = lambda: fake_redis
    app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
