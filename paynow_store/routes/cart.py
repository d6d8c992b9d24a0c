"""Cart API routes for the storefront"""

from fastapi import APIRouter, HTTPException

from ..models.cart import (
    CartState,
    AddToCartRequest,
    UpdateCartItemRequest,
    CartResponse,
)
from ..database.carts import cart_db
from ..database.products import product_db
from ..services import cart as reducers

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def _require_cart(cart_id: str) -> CartState:
    cart = cart_db.get_cart(cart_id)
    if not cart:
        raise HTTPException(status_code=404, detail="Cart not found")
    return cart


@router.post("", response_model=CartResponse)
async def create_cart():
    """Create a new shopping cart"""
    cart = cart_db.create_cart()
    return CartResponse(cart=cart, message="Cart created")


@router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str):
    """Get cart by ID"""
    return CartResponse(cart=_require_cart(cart_id))


@router.post("/{cart_id}/items", response_model=CartResponse)
async def add_to_cart(cart_id: str, request: AddToCartRequest):
    """Add an item to the cart"""
    _require_cart(cart_id)

    product = product_db.get_product(request.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    updated_cart = cart_db.apply(
        cart_id, lambda cart: reducers.add_item(cart, product, request.quantity)
    )
    return CartResponse(
        cart=updated_cart,
        message=f"Added {request.quantity}x {product.name} to cart",
    )


@router.put("/{cart_id}/items/{product_id}", response_model=CartResponse)
async def update_cart_item(cart_id: str, product_id: str, request: UpdateCartItemRequest):
    """Update item quantity in cart"""
    cart = _require_cart(cart_id)
    if not any(item.id == product_id for item in cart.items):
        raise HTTPException(status_code=404, detail="Item not in cart")

    updated_cart = cart_db.apply(
        cart_id, lambda cart: reducers.update_quantity(cart, product_id, request.quantity)
    )
    return CartResponse(cart=updated_cart, message="Cart updated")


@router.delete("/{cart_id}/items/{product_id}", response_model=CartResponse)
async def remove_from_cart(cart_id: str, product_id: str):
    """Remove an item from the cart"""
    _require_cart(cart_id)
    updated_cart = cart_db.apply(cart_id, lambda cart: reducers.remove_item(cart, product_id))
    return CartResponse(cart=updated_cart, message="Item removed")


@router.delete("/{cart_id}", response_model=CartResponse)
async def clear_cart(cart_id: str):
    """Clear all items from cart"""
    _require_cart(cart_id)
    updated_cart = cart_db.apply(cart_id, reducers.clear_cart)
    return CartResponse(cart=updated_cart, message="Cart cleared")
