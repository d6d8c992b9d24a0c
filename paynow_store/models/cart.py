"""Cart models for the storefront"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class CartItem(BaseModel):
    """Item in a shopping cart"""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    price: float = Field(ge=0)
    quantity: int = Field(ge=0)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class CartState(BaseModel):
    """Immutable cart snapshot. Every update yields a new one."""

    model_config = ConfigDict(frozen=True)

    cart_id: str
    items: tuple[CartItem, ...] = ()
    total: float = 0.0

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)


class AddToCartRequest(BaseModel):
    """Request to add item to cart"""
    product_id: str
    quantity: int = Field(default=1, gt=0)


class UpdateCartItemRequest(BaseModel):
    """Request to update cart item quantity"""
    quantity: int = Field(ge=0)


class CartResponse(BaseModel):
    """Cart API response"""
    cart: CartState
    message: Optional[str] = None
