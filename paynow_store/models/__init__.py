# Storefront Models

from .product import Product, ProductListResponse
from .cart import CartItem, CartState, AddToCartRequest, UpdateCartItemRequest, CartResponse
from .payment import (
    PaymentMethod,
    PaymentStatus,
    TestScenario,
    PaymentRequest,
    PaymentInitiationResult,
    GatewayPollResult,
    StatusUpdateRequest,
    StatusUpdateResponse,
    ErrorResponse,
)

__all__ = [
    "Product",
    "ProductListResponse",
    "CartItem",
    "CartState",
    "AddToCartRequest",
    "UpdateCartItemRequest",
    "CartResponse",
    "PaymentMethod",
    "PaymentStatus",
    "TestScenario",
    "PaymentRequest",
    "PaymentInitiationResult",
    "GatewayPollResult",
    "StatusUpdateRequest",
    "StatusUpdateResponse",
    "ErrorResponse",
]
