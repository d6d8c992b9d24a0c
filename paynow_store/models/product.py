"""Product models for the storefront"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class Product(BaseModel):
    """Product in the catalogue"""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    price: float = Field(gt=0)
    currency: str = "USD"
    image_url: Optional[str] = None


class ProductListResponse(BaseModel):
    """Response from product listing"""
    products: list[Product]
    total: int
