"""Pydantic models describing Product payloads."""

from datetime import datetime

from pydantic import BaseModel, Field


class ProductRead(BaseModel):
    id: int
    name: str
    price: int = Field(..., description="Price in cents")
    category: str | None = None
    gender: str | None = None
    creator_id: str
    status: str = Field(..., description="DRAFT|PUBLISHED|ARCHIVED")
    published_at: datetime | None = None

    model_config = {"from_attributes": True}


class ProductPriceUpdate(BaseModel):
    price: int = Field(..., ge=0, description="New price in cents")
