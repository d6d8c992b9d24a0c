# API Routes

from .products import router as products_router
from .cart import router as cart_router
from .payment import router as payment_router
from .pages import router as pages_router

__all__ = ["products_router", "cart_router", "payment_router", "pages_router"]
