"""Pydantic models describing catalogue payloads (camelCase on the wire)."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class StyleSummary(CamelModel):
    name: str


class ProductSummary(CamelModel):
    id: int
    name: str
    price: int = Field(..., description="Price in cents")
    style: StyleSummary | None = None
    category: str | None = None
    gender: str | None = None
    creator_id: str


class SkuRead(CamelModel):
    size: str | None = None
    stock: int


class VariantDTO(CamelModel):
    id: int
    images: Any = None
    price_override: int | None = Field(None, description="Price in cents")
    product_id: int
    product: ProductSummary
    skus: list[SkuRead] = Field(
        default_factory=list, description="Only SKUs with stock > 0"
    )


class CataloguePageResponse(CamelModel):
    variants: list[VariantDTO]
    total_count: int = Field(
        ...,
        description="Matches within the capped fetch; under-reports past the cap",
    )
    total_pages: int
    has_more: bool
    seed: str = Field(..., description="Pin this seed to page through the same order")


class StyleOption(CamelModel):
    id: int
    name: str


class FilterOption(CamelModel):
    value: str
    label: str


class CatalogueFiltersResponse(CamelModel):
    styles: list[StyleOption]
    sizes: list[str]
    genders: list[FilterOption]
    sort_options: list[FilterOption]
    price_min: int = Field(0, description="Lower price bound in euros")
    price_max: int = Field(..., description="Upper price bound in euros")
