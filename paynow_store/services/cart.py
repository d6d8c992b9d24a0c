"""
Cart reducers

Pure functions over immutable CartState snapshots. Each one returns a new
snapshot with the total recomputed from its items; the input is never
modified.
"""

from typing import Iterable

from ..models.cart import CartItem, CartState
from ..models.product import Product


def cart_total(items: Iterable[CartItem]) -> float:
    """Sum of price x quantity over all items"""
    return sum(item.price * item.quantity for item in items)


def _with_items(state: CartState, items: Iterable[CartItem]) -> CartState:
    items = tuple(items)
    return CartState(cart_id=state.cart_id, items=items, total=cart_total(items))


def empty_cart(cart_id: str) -> CartState:
    return CartState(cart_id=cart_id)


def add_item(state: CartState, product: Product, quantity: int = 1) -> CartState:
    """Add a product, bumping the quantity if it is already in the cart"""
    if quantity <= 0:
        raise ValueError("quantity must be positive")

    if any(item.id == product.id for item in state.items):
        items = [
            item.model_copy(update={"quantity": item.quantity + quantity})
            if item.id == product.id
            else item
            for item in state.items
        ]
    else:
        items = [
            *state.items,
            CartItem(id=product.id, name=product.name, price=product.price, quantity=quantity),
        ]
    return _with_items(state, items)


def update_quantity(state: CartState, product_id: str, quantity: int) -> CartState:
    """Set an item's quantity. Zero removes the item."""
    if quantity < 0:
        raise ValueError("quantity must not be negative")
    if quantity == 0:
        return remove_item(state, product_id)

    items = [
        item.model_copy(update={"quantity": quantity}) if item.id == product_id else item
        for item in state.items
    ]
    return _with_items(state, items)


def remove_item(state: CartState, product_id: str) -> CartState:
    return _with_items(state, (item for item in state.items if item.id != product_id))


def clear_cart(state: CartState) -> CartState:
    return empty_cart(state.cart_id)
