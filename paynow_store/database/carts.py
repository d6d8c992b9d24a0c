"""Cart storage for the storefront"""

import uuid
from typing import Callable, Optional

from ..models.cart import CartState
from ..services import cart as reducers


class CartDatabase:
    """
    In-memory cart storage.

    Holds one immutable snapshot per cart. Updates go through the cart
    reducers and replace the stored snapshot with the result.
    """

    def __init__(self):
        self.carts: dict[str, CartState] = {}

    def create_cart(self) -> CartState:
        """Create a new cart"""
        cart = reducers.empty_cart(str(uuid.uuid4()))
        self.carts[cart.cart_id] = cart
        return cart

    def get_cart(self, cart_id: str) -> Optional[CartState]:
        """Get a cart by ID"""
        return self.carts.get(cart_id)

    def apply(
        self,
        cart_id: str,
        update: Callable[[CartState], CartState],
    ) -> Optional[CartState]:
        """Run a reducer against the current snapshot and store the result"""
        cart = self.get_cart(cart_id)
        if cart is None:
            return None

        updated = update(cart)
        self.carts[cart_id] = updated
        return updated

    def delete_cart(self, cart_id: str) -> bool:
        """Delete a cart"""
        if cart_id in self.carts:
            del self.carts[cart_id]
            return True
        return False


# Singleton instance
cart_db = CartDatabase()
